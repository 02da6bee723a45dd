"""Validation data models."""

from __future__ import annotations

from enum import Enum
from urllib.parse import urlparse
from urllib.request import url2pathname

from pydantic import BaseModel, ConfigDict, Field

from doiuse_ls.settings.models import Severity

DIAGNOSTIC_SOURCE = "doiuse"


class TextDocument(BaseModel):
    """Immutable snapshot of an open document for one validation pass."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    uri: str
    language_id: str = Field(default="css", alias="languageId")
    text: str = ""
    version: int = 0

    @property
    def fs_path(self) -> str | None:
        """Filesystem path for ``file:`` URIs, None for anything else."""
        parsed = urlparse(self.uri)
        if parsed.scheme != "file":
            return None
        path = url2pathname(parsed.path)
        if parsed.netloc:
            return f"//{parsed.netloc}{path}"
        return path


class SourcePosition(BaseModel):
    """1-based start/end of a feature use, as reported by the engine."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int


class FeatureFinding(BaseModel):
    """One reported use of a feature that is not fully supported."""

    feature_id: str
    missing: bool = False
    partial: bool = False
    message: str = ""
    position: SourcePosition


class Position(BaseModel):
    line: int
    character: int


class Range(BaseModel):
    start: Position
    end: Position


class Diagnostic(BaseModel):
    """Protocol-shaped diagnostic record."""

    severity: Severity
    message: str
    range: Range
    code: str
    source: str = DIAGNOSTIC_SOURCE


class PipelineStage(str, Enum):
    idle = "Idle"
    ignore_check = "IgnoreCheck"
    resolving_target = "ResolvingTarget"
    scanning = "Scanning"
    building_diagnostics = "BuildingDiagnostics"
    publishing = "Publishing"
    done = "Done"
    aborted = "Aborted"


class PipelineOutcome(BaseModel):
    """What a single document pass ended up doing."""

    uri: str
    stage: PipelineStage
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    published: bool = False
    reason: str = ""


class BatchReport(BaseModel):
    """Summary of one validation batch."""

    validated: int = 0
    superseded: int = 0
    outcomes: list[PipelineOutcome] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
