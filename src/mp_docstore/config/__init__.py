"""Config – 12-factor settings and loaders."""

from mp_docstore.config.settings import EnvSettingsLoader, RepositorySettings, Settings, SettingsLoader
from mp_docstore.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "RepositorySettings",
    "Settings",
    "SettingsLoader",
]
