"""Unit tests for config settings & validation."""

from dataclasses import dataclass, field
from typing import ClassVar

import pytest

from social_services.application.query import QuerySettings
from social_services.config import (
    AppSettings,
    ConfigError,
    EnvSettingsLoader,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    Settings,
)


# ---------------------------------------------------------------------------
# Settings classes used across tests
# ---------------------------------------------------------------------------


@dataclass
class ServerSettings(Settings):
    _prefix: ClassVar[str] = "SRV"

    host: str = "localhost"
    port: int = 8080
    ratio: float = 0.5
    debug: bool = False
    allowed_origins: list[str] = field(default_factory=list)


@dataclass
class RequiredSettings(Settings):
    _prefix: ClassVar[str] = "REQ"

    token: str


# ---------------------------------------------------------------------------
# EnvSettingsLoader
# ---------------------------------------------------------------------------


class TestEnvSettingsLoader:
    def test_defaults_when_unset(self) -> None:
        settings = EnvSettingsLoader({}).load(ServerSettings)
        assert settings == ServerSettings()

    def test_coerces_types(self) -> None:
        env = {
            "SRV_HOST": "example.com",
            "SRV_PORT": "9000",
            "SRV_RATIO": "0.25",
            "SRV_DEBUG": "yes",
            "SRV_ALLOWED_ORIGINS": "a.com, b.com,",
        }
        settings = EnvSettingsLoader(env).load(ServerSettings)
        assert settings.host == "example.com"
        assert settings.port == 9000
        assert settings.ratio == 0.25
        assert settings.debug is True
        assert settings.allowed_origins == ["a.com", "b.com"]

    def test_bool_false_values(self) -> None:
        for falsy in ("false", "0", "no", "off", "FALSE"):
            assert EnvSettingsLoader({"SRV_DEBUG": falsy}).load(ServerSettings).debug is False

    def test_bad_int_raises_invalid_value(self) -> None:
        with pytest.raises(InvalidSettingValueError) as info:
            EnvSettingsLoader({"SRV_PORT": "eighty"}).load(ServerSettings)
        assert info.value.setting_name == "SRV_PORT"

    def test_bad_bool_raises_invalid_value(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader({"SRV_DEBUG": "maybe"}).load(ServerSettings)

    def test_missing_required(self) -> None:
        with pytest.raises(MissingRequiredSettingError) as info:
            EnvSettingsLoader({}).load(RequiredSettings)
        assert info.value.setting_name == "REQ_TOKEN"

    def test_reads_os_environ_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REQ_TOKEN", "abc")
        assert EnvSettingsLoader().load(RequiredSettings).token == "abc"


# ---------------------------------------------------------------------------
# AppSettings
# ---------------------------------------------------------------------------


class TestAppSettings:
    def test_defaults(self) -> None:
        settings = AppSettings()
        assert settings.default_page_limit == 10
        assert settings.max_page_limit == 1000
        assert settings.default_sort == "-createdAt"
        assert settings.otp_ttl_seconds == 180

    def test_loaded_from_prefixed_env(self) -> None:
        env = {
            "SOCIAL_MONGO_URI": "mongodb://db:27017",
            "SOCIAL_DATABASE_NAME": "social_test",
            "SOCIAL_DEFAULT_PAGE_LIMIT": "20",
            "SOCIAL_LOG_LEVEL": "debug",
        }
        settings = EnvSettingsLoader(env).load(AppSettings)
        assert settings.mongo_uri == "mongodb://db:27017"
        assert settings.database_name == "social_test"
        assert settings.default_page_limit == 20
        assert settings.log_level == "DEBUG"

    def test_query_settings(self) -> None:
        settings = AppSettings(default_page_limit=25, max_page_limit=100, default_sort="name")
        assert settings.query_settings() == QuerySettings(default_limit=25, max_limit=100, default_sort="name")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"mongo_uri": "postgres://x"},
            {"database_name": ""},
            {"default_page_limit": 0},
            {"default_page_limit": 50, "max_page_limit": 10},
            {"default_sort": " "},
            {"otp_ttl_seconds": 0},
            {"log_level": "LOUD"},
        ],
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        with pytest.raises(InvalidSettingValueError):
            AppSettings(**kwargs)

    def test_invalid_env_value_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            EnvSettingsLoader({"SOCIAL_MAX_PAGE_LIMIT": "1"}).load(AppSettings)
