"""Workspace validation settings."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Severity(IntEnum):
    """LSP diagnostic severity; lower values are more urgent."""

    Error = 1
    Warning = 2
    Information = 3


class MessageLevel(str, Enum):
    Information = "Information"
    Warning = "Warning"
    Error = "Error"

    @property
    def severity(self) -> Severity:
        return Severity[self.value]


class RunTrigger(str, Enum):
    on_type = "onType"
    on_save = "onSave"


class ValidationSettings(BaseModel):
    """The ``doiuse`` configuration section, replaced wholesale on every change."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    enabled: bool = Field(default=False, alias="enable")
    message_level: MessageLevel = Field(default=MessageLevel.Warning, alias="messageLevel")
    browsers: tuple[str, ...] = ()
    ignore_features: frozenset[str] = Field(default_factory=frozenset, alias="ignore")
    ignore_file_globs: tuple[str, ...] = Field(default=(), alias="ignoreFiles")
    trigger: RunTrigger = Field(default=RunTrigger.on_type, alias="run")

    @classmethod
    def from_client(cls, payload: dict[str, Any] | None) -> ValidationSettings:
        """Build settings from a client payload.

        Accepts either the bare section or the whole settings object with a
        ``doiuse`` key, as sent with configuration-change notifications.
        """
        if not payload:
            return cls()
        section = payload.get("doiuse", payload)
        if not isinstance(section, dict):
            return cls()
        return cls.model_validate(section)
