"""MongoDB adapter – driver error translation."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from pymongo.errors import PyMongoError

from social_services.kernel.errors import StorageError

__all__ = ["storage_errors"]


@contextmanager
def storage_errors(operation: str, collection: str) -> Iterator[None]:
    """Re-raise any :class:`pymongo.errors.PyMongoError` as :class:`StorageError`."""
    try:
        yield
    except PyMongoError as exc:
        raise StorageError(
            f"MongoDB {operation} on '{collection}' failed: {exc}",
            operation=operation,
            collection=collection,
            cause=exc,
        ) from exc
