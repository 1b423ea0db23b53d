"""
Service-layer exceptions.

Services raise these instead of returning error values. The API layer maps
them to HTTP responses in `apps.core.exception_handlers`.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    default_message = "Request could not be completed."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Input was malformed and rejected before reaching storage."""

    default_message = "Invalid input."


class DuplicateEmailError(ServiceError):
    """An account with this email already exists."""

    default_message = "This email is already in use."


class NotFoundError(ServiceError):
    """The referenced entity does not exist."""

    default_message = "Not found."


class ForbiddenError(ServiceError):
    """The principal is authenticated but may not act on this resource."""

    default_message = "You do not have permission to modify this resource."


class AuthenticationFailedError(ServiceError):
    """Credentials did not match, or no principal was supplied."""

    default_message = "Invalid credentials."


class StorageError(ServiceError):
    """The database failed in a way the caller cannot recover from."""

    default_message = "An unexpected error occurred. Please try again later."
