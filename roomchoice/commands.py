import click

from roomchoice.auth import hash_password
from roomchoice.database import atomic
from roomchoice.models import User


def register_commands(app):
    @app.cli.command('create-admin')
    @click.option('--username', default='admin', show_default=True)
    @click.option('--email', default='admin@roomchoice.com', show_default=True)
    @click.option('--password', default='admin123', show_default=True)
    def create_admin(username, email, password):
        """Create an admin account unless one with this email exists."""
        if User.query.filter_by(email=email).first():
            click.echo('Admin already exists')
            return

        with atomic() as session:
            session.add(User(
                username=username,
                email=email,
                password_hash=hash_password(password),
                role='admin'
            ))

        app.logger.info('Created admin account %s', email)
        click.echo('Admin created successfully')
        click.echo(f'Email: {email}')
