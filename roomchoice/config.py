import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'secret_key')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET', SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)

    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///roomchoice.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 10))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Cells per side of the floor plan the client renders
    ROOM_GRID_SIZE = int(os.getenv('ROOM_GRID_SIZE', 20))

    # Browser origins allowed to call /api; extra ones come comma-separated from the environment
    CORS_ORIGINS = [
        'http://localhost:3000',
        'http://localhost:5173',
    ] + [origin.strip() for origin in os.getenv('CORS_ORIGINS', '').split(',') if origin.strip()]


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    JWT_SECRET_KEY = 'test-jwt-secret-with-enough-length'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    BCRYPT_ROUNDS = 4
    LOG_LEVEL = 'WARNING'
