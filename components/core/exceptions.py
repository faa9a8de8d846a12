"""
Domain exceptions for the payments service.

Every error carries the HTTP status it is rendered with and a default
message. Server faults also carry the underlying error text, which is
returned to the caller in the ``error`` field.
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for service errors."""
    status_code = 500
    default_message = "internal server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class AuthenticationRequired(ServiceError):
    """No bearer token was presented."""
    status_code = 403
    default_message = "token required"


class InvalidToken(ServiceError):
    """Token signature, expiry or claims could not be verified."""
    status_code = 403
    default_message = "invalid token"


class Forbidden(ServiceError):
    """Caller role is not permitted for the operation.

    Rendered as 401 for compatibility with existing clients.
    """
    status_code = 401
    default_message = "not authorized"


class DuplicateIdentifier(ServiceError):
    """A user with this email already exists."""
    status_code = 409
    default_message = "email already exist"


class InvalidCredentials(ServiceError):
    """Unknown email or wrong password."""
    status_code = 401
    default_message = "wrong email or password"


class NotFound(ServiceError):
    """Payment not found."""
    status_code = 404
    default_message = "payment not found"


class DeactivationFailed(ServiceError):
    """The audit record could not be written, payment left untouched."""
    status_code = 500
    default_message = "disablePayment error"


class StorageError(ServiceError):
    """Persistence layer failure."""
    status_code = 500
    default_message = "storage error"
