from functools import wraps

import bcrypt
from flask import current_app, jsonify
from flask_jwt_extended import create_access_token, current_user, jwt_required
from sqlalchemy.exc import IntegrityError

from roomchoice import db
from roomchoice.database import atomic
from roomchoice.errors import Conflict, Forbidden, ValidationError, require_fields
from roomchoice.models import User

# bcrypt only looks at the first 72 bytes and refuses longer input
MAX_PASSWORD_BYTES = 72


def hash_password(password):
    secret = str(password).encode('utf-8')
    if len(secret) > MAX_PASSWORD_BYTES:
        raise ValidationError(f'Password cannot be longer than {MAX_PASSWORD_BYTES} bytes')

    rounds = current_app.config['BCRYPT_ROUNDS']
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def check_password(password, password_hash):
    secret = str(password).encode('utf-8')
    if len(secret) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(secret, password_hash.encode('utf-8'))


def issue_token(user):
    # The subject is the id only; role and profile are re-read on every request
    return create_access_token(identity=str(user.id))


def find_existing_user(email, username):
    return User.query.filter((User.email == email) | (User.username == username)).first()


def register_user(data):
    require_fields(data, 'username', 'email', 'password')

    password_hash = hash_password(data['password'])

    try:
        with atomic() as session:
            if find_existing_user(data['email'], data['username']):
                raise Conflict('User already exists')

            user = User(
                username=data['username'],
                email=data['email'],
                password_hash=password_hash,
                role='user'
            )
            session.add(user)
    except IntegrityError:
        # A concurrent registration took the email or username first
        raise Conflict('User already exists')

    current_app.logger.info('Registered user %s (%s)', user.id, user.username)
    return user


def authenticate(email, password):
    """Return the user owning ``email`` if ``password`` matches its hash."""
    user = User.query.filter_by(email=email).first()
    if not user or not check_password(password, user.password_hash):
        raise ValidationError('Invalid credentials')
    return user


def admin_required(fn):
    @wraps(fn)
    @jwt_required()
    def wrapper(*args, **kwargs):
        if not current_user.is_admin:
            raise Forbidden()
        return fn(*args, **kwargs)
    return wrapper


def _unauthorized(message):
    return jsonify({'message': message}), 401


def register_jwt_callbacks(jwt):
    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_data):
        try:
            user_id = int(jwt_data['sub'])
        except (TypeError, ValueError):
            return None
        return db.session.get(User, user_id)

    @jwt.user_lookup_error_loader
    def user_lookup_failed(_jwt_header, _jwt_data):
        return _unauthorized('Token is not valid')

    @jwt.unauthorized_loader
    def missing_token(_reason):
        return _unauthorized('No token, authorization denied')

    @jwt.invalid_token_loader
    def invalid_token(_reason):
        return _unauthorized('Token is not valid')

    @jwt.expired_token_loader
    def expired_token(_jwt_header, _jwt_data):
        return _unauthorized('Token has expired')
