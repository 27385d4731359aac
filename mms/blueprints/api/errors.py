"""Map exceptions raised anywhere in a request to the JSON envelope."""

from __future__ import annotations

import re

from flask import current_app, request
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from mms.extensions import db
from mms.responses import error_response
from mms.services.errors import ServiceError

_UNIQUE_PATTERNS = (
    re.compile(r'UNIQUE constraint failed: \w+\.(\w+)'),
    re.compile(r'Key \((\w+)\)'),
    re.compile(r"Duplicate entry .* for key '(?:\w+\.)?(\w+)'"),
)

HTTP_MESSAGES = {
    413: 'Request payload too large',
    429: 'Too many requests from this IP, please try again later',
}


def _camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def duplicate_field(exc: IntegrityError) -> str | None:
    message = str(exc.orig)
    for pattern in _UNIQUE_PATTERNS:
        match = pattern.search(message)
        if match:
            return _camel(match.group(1))
    return None


def register_error_handlers(app):
    """Install the JSON error handlers on the app."""

    @app.errorhandler(ServiceError)
    def handle_service_error(error: ServiceError):
        if error.status_code >= 500:
            current_app.logger.error(f"{request.method} {request.path} failed: {error.message}")
        return error_response(error.message, error.status_code)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error: IntegrityError):
        db.session.rollback()
        field = duplicate_field(error)
        current_app.logger.warning(f"Integrity error on {request.method} {request.path}: {error.orig}")
        if field:
            return error_response(f"{field} already exists", 409)
        return error_response('Resource conflicts with existing data', 409)

    @app.errorhandler(ExpiredSignatureError)
    def handle_expired_token(error):
        return error_response('Token expired', 401)

    @app.errorhandler(JWTError)
    def handle_invalid_token(error):
        return error_response('Invalid token', 401)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        if error.code == 404:
            return error_response(f"API endpoint {request.path} not found", 404)
        message = HTTP_MESSAGES.get(error.code, error.description or error.name)
        return error_response(message, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        db.session.rollback()
        current_app.logger.exception(f"Unhandled error on {request.method} {request.path}")
        return error_response('Server Error', 500)

    return app


__all__ = ['register_error_handlers', 'duplicate_field']
