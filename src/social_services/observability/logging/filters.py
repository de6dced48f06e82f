"""Observability – SensitiveFieldsFilter."""
from __future__ import annotations

from typing import Any

# matched case-insensitively against log event keys
DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {"password", "onetimecode", "authentication", "token", "api_key", "authorization"}
)


class SensitiveFieldsFilter:
    """Replace values of sensitive keys with ``[REDACTED]``, at any depth."""

    REDACTED = "[REDACTED]"

    def __init__(self, sensitive_fields: frozenset[str] | None = None) -> None:
        fields = sensitive_fields or DEFAULT_SENSITIVE_FIELDS
        self._fields = frozenset(f.lower() for f in fields)

    def redact(self, data: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for k, v in data.items():
            if k.lower() in self._fields:
                result[k] = self.REDACTED
            elif isinstance(v, dict):
                result[k] = self.redact(v)
            elif isinstance(v, list):
                result[k] = [self.redact(i) if isinstance(i, dict) else i for i in v]
            else:
                result[k] = v
        return result

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG002
        """structlog processor interface."""
        return self.redact(event_dict)


__all__ = ["DEFAULT_SENSITIVE_FIELDS", "SensitiveFieldsFilter"]
