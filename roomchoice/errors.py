from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Base class for failures reported to the client as ``{"message": ...}``."""

    status_code = 500
    message = 'Server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class Unauthenticated(ApiError):
    status_code = 401
    message = 'Token is not valid'


class Forbidden(ApiError):
    status_code = 403
    message = 'Admin access required'


class NotFound(ApiError):
    status_code = 404
    message = 'Not found'


class Conflict(ApiError):
    status_code = 400
    message = 'Conflicting request'


class ValidationError(ApiError):
    status_code = 400
    message = 'Invalid request'


def require_fields(data, *names):
    missing = [name for name in names if data.get(name) in (None, '')]
    if missing:
        raise ValidationError('Missing required fields: ' + ', '.join(missing))


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify({'message': error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        current_app.logger.exception('Unhandled error: %s', error)
        return jsonify({'message': 'Server error'}), 500
