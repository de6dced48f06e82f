"""Infrastructure errors – storage and third-party failures."""

from __future__ import annotations

from typing import Any

from social_services.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"
    http_status = 503


class StorageError(InfrastructureError):
    """The document store rejected or failed a read or write.

    ``operation`` names the collection call that failed (``find``,
    ``count_documents``, ...). The driver exception is kept as ``cause``.
    """

    default_code = "storage_error"

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.operation = operation
        self.collection = collection


class TimeoutError(InfrastructureError):  # noqa: A001
    """An I/O operation exceeded its deadline."""

    default_code = "infrastructure_timeout"
    http_status = 504


class ExternalServiceError(InfrastructureError):
    """An external service returned an unexpected response."""

    default_code = "external_service_error"

    def __init__(
        self,
        service: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"External service '{service}' error", **kwargs)
        self.service = service
        self.status_code = status_code


__all__ = [
    "ExternalServiceError",
    "InfrastructureError",
    "StorageError",
    "TimeoutError",
]
