"""Module de configuration."""

from cred_lock.config.loader import ConfigLoader, FileConfigLoader
from cred_lock.config.settings import (
    DEFAULT_CONTAINER_NAME,
    CredLockSettings,
    LoggingSettings,
    StoreSettings,
    find_config_file,
    load_settings,
)

__all__ = [
    "ConfigLoader",
    "FileConfigLoader",
    "DEFAULT_CONTAINER_NAME",
    "CredLockSettings",
    "LoggingSettings",
    "StoreSettings",
    "find_config_file",
    "load_settings",
]
