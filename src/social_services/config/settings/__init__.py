"""Config settings – 12-factor env-based configuration."""
from social_services.config.settings.app import AppSettings
from social_services.config.settings.base import Settings
from social_services.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["AppSettings", "EnvSettingsLoader", "Settings", "SettingsLoader"]
