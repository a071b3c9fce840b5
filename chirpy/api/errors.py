import logging
import os

from flask import jsonify
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from chirpy.models.db_storage import is_unique_violation
from chirpy.utils.errors import (
    AuthError,
    EntropyError,
    Forbidden,
    InputMalformed,
    NotFound,
    Unauthenticated,
)

logger = logging.getLogger(__name__)

# exit status used when the random source fails
EX_SOFTWARE = 70


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def _terminate():
    os._exit(EX_SOFTWARE)


def register_error_handlers(app):
    # 400 Bad Request (generic)
    @app.errorhandler(400)
    def bad_request(e):
        message = getattr(e, "description", "Bad request")
        return error_response("BAD_REQUEST", message, 400)

    # 404 Not Found
    @app.errorhandler(404)
    def not_found(e):
        return error_response("NOT_FOUND", "Resource not found", 404)

    # 405 Method Not Allowed
    @app.errorhandler(405)
    def method_not_allowed(e):
        return error_response("METHOD_NOT_ALLOWED", "Method not allowed", 405)

    # 409 Conflict
    @app.errorhandler(409)
    def conflict(e):
        message = getattr(e, "description", "Conflict")
        return error_response("CONFLICT", message, 409)

    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        return error_response("VALIDATION_ERROR", "Invalid input", 422, details=err.messages)

    # Integrity errors: the database text stays in the server log
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        logger.warning("integrity error: %s", getattr(err, "orig", err))
        if is_unique_violation(err):
            return error_response("CONFLICT", "Unique constraint violated.", 409)
        return error_response("BAD_REQUEST", "Integrity error.", 400)

    # Auth core errors. Every Unauthenticated cause gets the same body.
    @app.errorhandler(InputMalformed)
    def handle_input_malformed(err: InputMalformed):
        logger.warning("rejected request: %s", err.__class__.__name__)
        return error_response("BAD_REQUEST", "Malformed request", 400)

    @app.errorhandler(Unauthenticated)
    def handle_unauthenticated(err: Unauthenticated):
        logger.warning("authentication failed: %s", err.__class__.__name__)
        return error_response("UNAUTHORIZED", "Authentication required", 401)

    @app.errorhandler(Forbidden)
    def handle_forbidden(err: Forbidden):
        logger.warning("forbidden: %s", err)
        return error_response("FORBIDDEN", "Not allowed", 403)

    @app.errorhandler(NotFound)
    def handle_not_found(err: NotFound):
        return error_response("NOT_FOUND", "Resource not found", 404)

    @app.errorhandler(EntropyError)
    def handle_entropy_error(err: EntropyError):
        logger.critical("secure random source failed, terminating", exc_info=err)
        _terminate()
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500)

    # StorageError, HashingError, ConfigError at request time
    @app.errorhandler(AuthError)
    def handle_auth_error(err: AuthError):
        logger.error("%s: %s", err.__class__.__name__, err, exc_info=err)
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = (err.name or "Bad Request").upper().replace(" ", "_")
        return error_response(code, err.description, err.code or 400)

    # 500 Internal Error (catch-all); never echo the exception text
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500)
