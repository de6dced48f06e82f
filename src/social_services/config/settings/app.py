"""Config settings – AppSettings for the social services."""
from __future__ import annotations

import dataclasses
import logging

from social_services.application.query import QuerySettings
from social_services.config.settings.base import Settings
from social_services.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class AppSettings(Settings):
    """Everything the services read from the environment (``SOCIAL_*``)."""

    _prefix = "SOCIAL"

    mongo_uri: str = "mongodb://localhost:27017"
    database_name: str = "social"
    default_page_limit: int = 10
    max_page_limit: int = 1000
    default_sort: str = "-createdAt"
    otp_ttl_seconds: int = 180
    stripe_api_key: str = ""
    stripe_base_url: str = "https://api.stripe.com"
    log_level: str = "INFO"

    def _validate(self) -> None:
        if not self.mongo_uri.startswith(("mongodb://", "mongodb+srv://")):
            raise InvalidSettingValueError("mongo_uri", self.mongo_uri, "must be a mongodb:// URI")
        if not self.database_name:
            raise InvalidSettingValueError("database_name", self.database_name, "must not be empty")
        if self.default_page_limit < 1:
            raise InvalidSettingValueError("default_page_limit", self.default_page_limit, "must be >= 1")
        if self.max_page_limit < self.default_page_limit:
            raise InvalidSettingValueError(
                "max_page_limit", self.max_page_limit, "must be >= default_page_limit"
            )
        if not self.default_sort.strip():
            raise InvalidSettingValueError("default_sort", self.default_sort, "must not be empty")
        if self.otp_ttl_seconds < 1:
            raise InvalidSettingValueError("otp_ttl_seconds", self.otp_ttl_seconds, "must be >= 1")
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise InvalidSettingValueError("log_level", self.log_level, "unknown log level")

    def query_settings(self) -> QuerySettings:
        return QuerySettings(
            default_limit=self.default_page_limit,
            max_limit=self.max_page_limit,
            default_sort=self.default_sort,
        )


__all__ = ["AppSettings"]
