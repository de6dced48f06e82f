"""Observability – JsonLoggerFactory and get_logger."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from social_services.observability.logging.filters import SensitiveFieldsFilter


class JsonLoggerFactory:
    """Configure structlog + stdlib logging for JSON output on stderr."""

    @staticmethod
    def configure(level: int | str = logging.INFO, sensitive_fields: frozenset[str] | None = None) -> None:
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
        shared_processors: list[Any] = [
            structlog.contextvars.merge_contextvars,
            SensitiveFieldsFilter(sensitive_fields),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]
        structlog.configure(
            processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(default=str),
            ],
        )
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(level)


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger, optionally with *initial_values* bound."""
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["JsonLoggerFactory", "get_logger"]
