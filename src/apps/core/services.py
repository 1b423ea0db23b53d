"""
Helpers shared by the service layers of every app.

Services own the business rules and transaction boundaries; repositories
own the ORM queries. Database failures that a caller cannot act on are
logged here once and re-raised as `StorageError`, so internal driver
messages never reach an API response.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from django.db import DatabaseError

from .exceptions import StorageError

logger = logging.getLogger(__name__)


@contextmanager
def translate_storage_errors(operation: str) -> Iterator[None]:
    """
    Re-raise database errors from the wrapped block as `StorageError`.

    Args:
        operation: Short name of the operation, used in the log record.
    """
    try:
        yield
    except DatabaseError as exc:
        logger.exception(
            "Storage failure during %s.", operation, extra={"operation": operation}
        )
        raise StorageError() from exc
