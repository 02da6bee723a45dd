"""Holder for the single live ValidationSettings instance."""

from __future__ import annotations

import logging
from typing import Callable

from doiuse_ls.errors import NotInitialized
from doiuse_ls.settings.models import ValidationSettings

logger = logging.getLogger(__name__)


class SettingsStore:
    """Stores the current settings and notifies listeners on replacement."""

    def __init__(self) -> None:
        self._settings: ValidationSettings | None = None
        self._listeners: list[Callable[[], None]] = []

    @property
    def initialized(self) -> bool:
        return self._settings is not None

    def on_change(self, listener: Callable[[], None]) -> None:
        """Register a callback run after every replacement."""
        self._listeners.append(listener)

    def set_settings(self, settings: ValidationSettings) -> None:
        self._settings = settings
        logger.debug(
            "Settings replaced: enabled=%s, run=%s, messageLevel=%s",
            settings.enabled,
            settings.trigger.value,
            settings.message_level.value,
        )
        for listener in self._listeners:
            listener()

    def current(self) -> ValidationSettings:
        if self._settings is None:
            raise NotInitialized("No configuration has been received yet")
        return self._settings
