"""Config settings – 12-factor env-based configuration."""
from mp_docstore.config.settings.base import Settings
from mp_docstore.config.settings.loaders import EnvSettingsLoader, SettingsLoader
from mp_docstore.config.settings.repository import RepositorySettings

__all__ = ["EnvSettingsLoader", "RepositorySettings", "Settings", "SettingsLoader"]
