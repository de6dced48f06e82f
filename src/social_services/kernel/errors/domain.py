"""Domain errors – rejected input and missing records."""

from __future__ import annotations

from typing import Any

from social_services.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a business rule is violated."""

    default_code = "domain_error"
    http_status = 422


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"
    http_status = 400

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class InvalidQueryError(ValidationError):
    """A list query (pagination, filter operator, sort or projection) is malformed.

    ``parameter`` names the offending query-string key when known.
    """

    default_code = "invalid_query"

    def __init__(self, message: str, *, parameter: str | None = None, **kwargs: Any) -> None:
        errors = kwargs.pop("errors", None)
        if errors is None and parameter is not None:
            errors = [{"parameter": parameter, "message": message}]
        super().__init__(message, errors=errors, **kwargs)
        self.parameter = parameter


class NotFoundError(DomainError):
    """The requested resource does not exist."""

    default_code = "not_found"
    http_status = 404

    def __init__(
        self,
        resource: str,
        identifier: Any = None,
        **kwargs: Any,
    ) -> None:
        msg = f"{resource} not found"
        if identifier is not None:
            msg = f"{resource} '{identifier}' not found"
        super().__init__(msg, **kwargs)
        self.resource = resource
        self.identifier = identifier


class ConflictError(DomainError):
    """The operation conflicts with existing state."""

    default_code = "conflict"
    http_status = 409


__all__ = [
    "ConflictError",
    "DomainError",
    "InvalidQueryError",
    "NotFoundError",
    "ValidationError",
]
