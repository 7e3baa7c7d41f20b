"""Config – 12-factor settings and loaders."""

from journal_query.config.settings import (
    EnvSettingsLoader,
    ReadJournalSettings,
    Settings,
    SettingsLoader,
)
from journal_query.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "ReadJournalSettings",
    "Settings",
    "SettingsLoader",
]
