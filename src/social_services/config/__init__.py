"""Config – settings and their validation errors."""
from social_services.config.settings import AppSettings, EnvSettingsLoader, Settings, SettingsLoader
from social_services.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "AppSettings",
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
