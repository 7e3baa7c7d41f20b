"""Config settings – 12-factor env-based configuration."""
from journal_query.config.settings.base import Settings
from journal_query.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from journal_query.config.settings.read_journal import ReadJournalSettings

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "ReadJournalSettings",
    "Settings",
    "SettingsLoader",
]
