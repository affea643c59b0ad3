from flask import jsonify, current_app
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from werkzeug.exceptions import RequestEntityTooLarge

from challenge_coach.extensions import db

# PostgreSQL SQLSTATE for a statement cancelled by statement_timeout
QUERY_CANCELED = "57014"


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {"error": self.message}


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid request"


class InvalidReferenceError(ServiceError):
    status_code = 400
    default_message = "Referenced user does not exist"


class ReferentialIntegrityError(ServiceError):
    status_code = 500
    default_message = "Referential integrity violation"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class AuthenticationError(ServiceError):
    status_code = 401
    default_message = "Invalid credentials"


class StoreError(ServiceError):
    status_code = 500
    default_message = "Database error"


class StoreTimeoutError(StoreError):
    status_code = 504
    default_message = "Database query timed out"


class UploadError(ServiceError):
    status_code = 400
    default_message = "Upload failed"


def translate_store_error(error):
    """Map a raw SQLAlchemy exception onto the service taxonomy."""
    if isinstance(error, IntegrityError):
        return ReferentialIntegrityError(f"Referential integrity violation: {error.orig}")
    if isinstance(error, OperationalError):
        if getattr(error.orig, "pgcode", None) == QUERY_CANCELED:
            return StoreTimeoutError()
    return StoreError()


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        if error.status_code >= 500:
            current_app.logger.error(f"{type(error).__name__}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(error):
        return jsonify({"error": "Invalid request body", "fields": error.messages}), 400

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error):
        db.session.rollback()
        current_app.logger.error(f"Store failure: {error}")
        translated = translate_store_error(error)
        return jsonify(translated.to_dict()), translated.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        limit_mb = current_app.config["MAX_CONTENT_LENGTH"] // (1024 * 1024)
        current_app.logger.warning("Rejected upload above size limit")
        return jsonify(UploadError(f"File too large. Maximum size is {limit_mb}MB").to_dict()), 400

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({"error": "Method not allowed"}), 405
