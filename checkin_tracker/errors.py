"""Centralised error handling and custom exceptions.

The service layer signals failures by raising the exceptions defined
here; it never builds HTTP responses itself. The application factory
registers Flask error handlers that serialise each exception into a
JSON body of the form ``{"error": {"code": ..., "message": ...}}``.
"""
from __future__ import annotations

import logging

from flask import jsonify
from marshmallow import ValidationError as SchemaValidationError

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, fields: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or {}

    def to_response(self, status_code: int = 400):
        response = {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": self.message,
                "fields": self.fields,
            }
        }
        return jsonify(response), status_code


class AuthenticationError(Exception):
    """Raised when credentials are missing or wrong."""

    def __init__(self, message: str = "Invalid email or password.") -> None:
        super().__init__(message)
        self.message = message

    def to_response(self, status_code: int = 401):
        response = {
            "error": {
                "code": "UNAUTHORIZED",
                "message": self.message,
            }
        }
        return jsonify(response), status_code


class ForbiddenError(Exception):
    """Raised when the caller does not own the requested organization."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)
        self.message = message

    def to_response(self, status_code: int = 403):
        response = {
            "error": {
                "code": "FORBIDDEN",
                "message": self.message,
            }
        }
        return jsonify(response), status_code


class NotFoundError(Exception):
    """Raised when a requested resource cannot be found."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self, status_code: int = 404):
        response = {
            "error": {
                "code": "NOT_FOUND",
                "message": self.message,
            }
        }
        return jsonify(response), status_code


class ConflictError(Exception):
    """Raised when a uniqueness or resource conflict occurs."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self, status_code: int = 409):
        response = {
            "error": {
                "code": "CONFLICT",
                "message": self.message,
            }
        }
        return jsonify(response), status_code


class TokenError(Exception):
    """Raised when a check-in link token cannot be used.

    ``reason`` is one of ``invalid``, ``used``, ``expired`` or
    ``employee_inactive``.
    """

    MESSAGES = {
        "invalid": "Invalid token",
        "used": "Token already used",
        "expired": "Token expired",
        "employee_inactive": "Employee not found",
    }

    def __init__(self, reason: str) -> None:
        message = self.MESSAGES.get(reason, "Invalid token")
        super().__init__(message)
        self.reason = reason
        self.message = message

    def to_response(self, status_code: int = 400):
        response = {
            "error": {
                "code": "INVALID_TOKEN",
                "reason": self.reason,
                "message": self.message,
            }
        }
        return jsonify(response), status_code


class EmailDeliveryError(Exception):
    """Raised when the email provider rejects a message."""


def register_error_handlers(app) -> None:
    """Register custom error handlers on the given Flask app."""
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return err.to_response(400)

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(err: SchemaValidationError):
        fields = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
        return ValidationError("Invalid request body.", fields).to_response(400)

    @app.errorhandler(AuthenticationError)
    def handle_authentication_error(err: AuthenticationError):
        return err.to_response(401)

    @app.errorhandler(ForbiddenError)
    def handle_forbidden_error(err: ForbiddenError):
        return err.to_response(403)

    @app.errorhandler(NotFoundError)
    def handle_not_found_error(err: NotFoundError):
        return err.to_response(404)

    @app.errorhandler(ConflictError)
    def handle_conflict_error(err: ConflictError):
        return err.to_response(409)

    @app.errorhandler(TokenError)
    def handle_token_error(err: TokenError):
        logger.info("Rejected check-in token: %s", err.reason)
        return err.to_response(400)
