"""Workspace validation settings."""

from doiuse_ls.settings.models import MessageLevel, RunTrigger, Severity, ValidationSettings
from doiuse_ls.settings.store import SettingsStore

__all__ = [
    "MessageLevel",
    "RunTrigger",
    "SettingsStore",
    "Severity",
    "ValidationSettings",
]
