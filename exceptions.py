"""
Travel Booking API - Application Exceptions
============================================

Domain exceptions raised by services and repositories. Each one carries the
HTTP status the API layer answers with, so handlers in ``api/main.py`` can map
them without knowing every subclass.
"""

from typing import Optional


class ApplicationError(Exception):
    """Base exception for all application errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class ValidationAppError(ApplicationError):
    """Raised when input passes schema validation but breaks a business rule."""

    status_code = 400

    def __init__(self, message: str, invalid_fields: Optional[dict] = None):
        details = {"invalid_fields": invalid_fields} if invalid_fields else {}
        super().__init__(message, details)


class DuplicatedEmailError(ApplicationError):
    """Raised when an email is already registered."""

    status_code = 409


class DuplicatedUsernameError(ApplicationError):
    """Raised when a username is already taken."""

    status_code = 409


class InvalidCredentialsError(ApplicationError):
    """Raised when a token or credential cannot be trusted."""

    status_code = 401


class ForbiddenError(ApplicationError):
    """Raised when the caller's role may not use an endpoint."""

    status_code = 403


class EmailNotConfirmedError(ApplicationError):
    """Raised when an unconfirmed account tries to log in."""

    status_code = 403


class InvalidOtpError(ApplicationError):
    """Raised when no OTP record matches the given email and code."""

    status_code = 400


class ExpiredOtpError(ApplicationError):
    """Raised when the matching OTP record is past its expiration."""

    status_code = 400


class PreconditionFailedError(ApplicationError):
    """Raised when If-Match does not carry the current ETag."""

    status_code = 412


class NotificationError(ApplicationError):
    """Raised when an OTP delivery channel rejects the message."""

    status_code = 502

    def __init__(self, channel: str, message: str):
        super().__init__(message, {"channel": channel})
