from flask import Flask
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
cors = CORS()

def create_app(config_object='roomchoice.config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Inicializar extensiones
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    # The client app is served from its own dev server, so /api is called cross-origin
    cors.init_app(
        app,
        resources={r'/api/*': {'origins': app.config['CORS_ORIGINS']}},
        allow_headers=['Content-Type', 'Authorization'],
        methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']
    )

    with app.app_context():
        from roomchoice import auth, commands, errors, routes

        auth.register_jwt_callbacks(jwt)
        errors.register_error_handlers(app)
        commands.register_commands(app)
        app.url_map.converters['id'] = routes.IdConverter
        app.register_blueprint(routes.api, url_prefix='/api')

        db.create_all()  # Crear tablas si no existen
        app.logger.info('RoomChoice API ready (database backend: %s)', db.engine.url.get_backend_name())

    return app
