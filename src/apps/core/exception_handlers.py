"""
DRF exception handler for service-layer errors.

Registered as `REST_FRAMEWORK["EXCEPTION_HANDLER"]`. DRF's own exceptions
fall through to the stock handler.
"""

import logging
from typing import Any, Optional

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import (
    AuthenticationFailedError,
    DuplicateEmailError,
    ForbiddenError,
    NotFoundError,
    ServiceError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_NOT_FOUND = NotFoundError.default_message


def service_exception_handler(exc: Exception, context: dict[str, Any]) -> Optional[Response]:
    """Translate a `ServiceError` into a response; defer everything else to DRF."""
    if not isinstance(exc, ServiceError):
        return exception_handler(exc, context)

    if isinstance(exc, (ValidationError, DuplicateEmailError)):
        return Response({"error": exc.message}, status=status.HTTP_400_BAD_REQUEST)

    # Non-owners get the same answer as for a missing post.
    if isinstance(exc, (NotFoundError, ForbiddenError)):
        return Response({"error": GENERIC_NOT_FOUND}, status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, AuthenticationFailedError):
        return Response(
            {"error": exc.message},
            status=status.HTTP_401_UNAUTHORIZED,
        )

    if not isinstance(exc, StorageError):
        view = context.get("view")
        logger.error(
            "Unhandled service error in %s: %s",
            type(view).__name__ if view else "unknown view",
            exc,
        )
    return Response(
        {"error": StorageError.default_message},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
