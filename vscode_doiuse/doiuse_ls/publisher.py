"""Outbound side of the transport boundary."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from doiuse_ls.validator.models import Diagnostic

logger = logging.getLogger(__name__)


class DiagnosticPublisher(ABC):
    """Receives diagnostic sets and aggregated error reports."""

    @abstractmethod
    async def publish_diagnostics(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        """Replace the full diagnostic set for ``uri``."""
        ...

    @abstractmethod
    async def report_errors(self, messages: Sequence[str]) -> None:
        """Show one batch of unexpected failures to the user."""
        ...


class PublishedSet(BaseModel):
    uri: str
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    published_at: datetime
    revision: int = 0


class ErrorReport(BaseModel):
    messages: list[str]
    reported_at: datetime


class DiagnosticStore(DiagnosticPublisher):
    """In-memory publisher backing the HTTP diagnostics routes."""

    def __init__(self, max_error_reports: int = 50) -> None:
        self._sets: dict[str, PublishedSet] = {}
        self._errors: list[ErrorReport] = []
        self._max_error_reports = max_error_reports
        self._revision = 0

    async def publish_diagnostics(self, uri: str, diagnostics: Sequence[Diagnostic]) -> None:
        self._revision += 1
        self._sets[uri] = PublishedSet(
            uri=uri,
            diagnostics=list(diagnostics),
            published_at=datetime.now(timezone.utc),
            revision=self._revision,
        )
        logger.debug("Published %d diagnostic(s) for %s", len(diagnostics), uri)

    async def report_errors(self, messages: Sequence[str]) -> None:
        if not messages:
            return
        self._errors.append(
            ErrorReport(messages=list(messages), reported_at=datetime.now(timezone.utc))
        )
        del self._errors[: -self._max_error_reports]
        for message in messages:
            logger.error(message)

    def discard(self, uri: str) -> None:
        """Forget a closed document's entry."""
        self._sets.pop(uri, None)

    def get(self, uri: str) -> PublishedSet | None:
        return self._sets.get(uri)

    def all(self) -> list[PublishedSet]:
        return list(self._sets.values())

    @property
    def error_reports(self) -> list[ErrorReport]:
        return list(self._errors)
