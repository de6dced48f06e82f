"""Application-layer errors – access rules enforced by the services."""

from __future__ import annotations

from typing import Any

from social_services.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"
    http_status = 400


class UnauthorizedError(ApplicationError):
    """Missing or invalid credentials."""

    default_code = "unauthorized"
    http_status = 401


class ForbiddenError(ApplicationError):
    """The caller may not perform the requested change."""

    default_code = "forbidden"
    http_status = 403

    def __init__(self, message: str = "Access denied", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


__all__ = [
    "ApplicationError",
    "ForbiddenError",
    "UnauthorizedError",
]
