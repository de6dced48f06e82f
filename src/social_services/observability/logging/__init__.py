"""Observability – structured logging helpers."""
from social_services.observability.logging.factory import JsonLoggerFactory, get_logger
from social_services.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter

__all__ = ["DEFAULT_SENSITIVE_FIELDS", "JsonLoggerFactory", "SensitiveFieldsFilter", "get_logger"]
