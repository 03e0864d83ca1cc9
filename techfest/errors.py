"""Error taxonomy shared by services and blueprints."""

from __future__ import annotations

from typing import Any

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


class TechFestError(Exception):
    """Base class for errors that map onto a JSON error response."""

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {'error': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class AuthError(TechFestError):
    """Bad credentials, duplicate account, invalid federated token."""

    status_code = 401


class PermissionDenied(TechFestError):
    status_code = 403


class NotFound(TechFestError):
    status_code = 404


class ValidationError(TechFestError):
    """Bad form input or an upload outside the accepted types/sizes."""

    status_code = 400


class ConflictError(TechFestError):
    """The write would break a uniqueness or capacity rule."""

    status_code = 409


class UploadError(TechFestError):
    status_code = 502


class BackendError(TechFestError):
    """A read or write against the store failed."""

    status_code = 500


def register_error_handlers(app) -> None:
    """Render the taxonomy (and stray HTTP errors) as JSON."""

    @app.errorhandler(TechFestError)
    def handle_techfest_error(error: TechFestError):
        if error.status_code >= 500:
            current_app.logger.error(f"{type(error).__name__}: {error.message}")
        else:
            current_app.logger.warning(f"{type(error).__name__}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(500)
    def internal_error(error):
        current_app.logger.error(f"Unhandled error: {error}")
        return jsonify({'error': 'Internal server error'}), 500


__all__ = [
    'TechFestError',
    'AuthError',
    'PermissionDenied',
    'NotFound',
    'ValidationError',
    'ConflictError',
    'UploadError',
    'BackendError',
    'register_error_handlers',
]
