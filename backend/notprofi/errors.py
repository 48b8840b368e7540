import logging

from flask import jsonify
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .extensions import db

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    message = 'Internal Server Error'

    def __init__(self, message=None, field=None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.field = field

    def to_dict(self):
        data = {'message': self.message}
        if self.field:
            data['field'] = self.field
        return data


class NotFound(ApiError):
    status_code = 404
    message = 'Not Found'


class ValidationFailure(ApiError):
    status_code = 400
    message = 'Invalid input'


class Conflict(ApiError):
    status_code = 409
    message = 'Conflict'


def get_or_404(model, ident):
    obj = db.session.get(model, ident)
    if obj is None:
        raise NotFound()
    return obj


def validation_failure(err: ValidationError) -> ValidationFailure:
    """First problem of a pydantic error, named by its camelCase field."""
    first = err.errors()[0]
    field = '.'.join(str(part) for part in first['loc']) or None
    if first['type'] == 'missing':
        return ValidationFailure(f'{field} is required', field=field)
    return ValidationFailure(f"{field}: {first['msg']}" if field else first['msg'], field=field)


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def handle_validation_error(err):
        failure = validation_failure(err)
        return jsonify(failure.to_dict()), failure.status_code

    @app.errorhandler(ApiError)
    def handle_api_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        message = 'Not Found' if err.code == 404 else err.description
        return jsonify(message=message), err.code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err):
        db.session.rollback()
        logger.exception("Database error: %s", err)
        return jsonify(message='Internal Server Error'), 500
