"""Validation orchestrator: runs document pipelines and applies revalidation triggers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Any, Protocol

from doiuse_ls.context import ValidationContext
from doiuse_ls.engine.base import ScanEngine
from doiuse_ls.engine.locate import locate_engine
from doiuse_ls.engine.node import NodeDoiuseEngine
from doiuse_ls.errors import EngineError, EngineNotFound, NotInitialized, ScanParseFailure
from doiuse_ls.publisher import DiagnosticPublisher
from doiuse_ls.settings.models import RunTrigger, ValidationSettings
from doiuse_ls.validator.diagnostics import build_all
from doiuse_ls.validator.ignore import is_ignored, relative_path
from doiuse_ls.validator.models import (
    BatchReport,
    Diagnostic,
    FeatureFinding,
    PipelineOutcome,
    PipelineStage,
    TextDocument,
)
from doiuse_ls.validator.syntax import syntax_for
from doiuse_ls.validator.tracker import ErrorMessageTracker, error_message

logger = logging.getLogger(__name__)


class OpenDocuments(Protocol):
    def all(self) -> list[TextDocument]: ...


class ValidationOrchestrator:
    """Sequences ignore-check, target resolution, scan, build and publish.

    At most one pass runs per uri: a new trigger for a document cancels the
    pass still in flight for it, and the cancelled pass publishes nothing.
    """

    def __init__(
        self,
        context: ValidationContext,
        publisher: DiagnosticPublisher,
        documents: OpenDocuments,
    ) -> None:
        self._context = context
        self._publisher = publisher
        self._documents = documents
        self._inflight: dict[str, asyncio.Task[PipelineOutcome]] = {}

    @property
    def context(self) -> ValidationContext:
        return self._context

    # -- lifecycle --

    async def initialize(
        self,
        workspace_root: str | None,
        initial_settings: dict[str, Any] | None = None,
    ) -> ScanEngine | None:
        """Resolve the engine for ``workspace_root``.

        A missing engine is only an error when the client sent doiuse
        settings; otherwise the service runs without one.
        """
        self._context.set_workspace_root(workspace_root)
        if initial_settings and not self._context.settings.initialized:
            self._context.settings.set_settings(ValidationSettings.from_client(initial_settings))

        try:
            location = await locate_engine(workspace_root, self._context.options.node_executable)
        except EngineNotFound as e:
            if initial_settings:
                logger.warning("doiuse unavailable for %s: %s", workspace_root, e.detail)
                raise
            logger.info("doiuse not found (%s); validation stays inactive", e.detail)
            return None
        except Exception:
            logger.exception("Unexpected error while resolving doiuse")
            return None

        if self._context.engine is not None:
            await self._context.engine.close()
        self._context.engine = NodeDoiuseEngine(location, workspace_root)
        return self._context.engine

    async def shutdown(self) -> None:
        for task in list(self._inflight.values()):
            task.cancel()
        if self._inflight:
            await asyncio.gather(*self._inflight.values(), return_exceptions=True)
        if self._context.engine is not None:
            await self._context.engine.close()

    # -- triggers --

    async def on_configuration_changed(self, settings: ValidationSettings) -> BatchReport:
        self._context.settings.set_settings(settings)
        return await self.validate_many(self._documents.all())

    async def on_watched_files_changed(self) -> BatchReport:
        self._context.resolver.clear()
        return await self.validate_many(self._documents.all())

    async def on_document_changed(self, document: TextDocument) -> BatchReport:
        if self._trigger() is RunTrigger.on_type:
            return await self.validate_many([document])
        return BatchReport()

    async def on_document_saved(self, document: TextDocument) -> BatchReport:
        if self._trigger() is RunTrigger.on_save:
            return await self.validate_many([document])
        return BatchReport()

    async def on_document_closed(self, uri: str) -> None:
        task = self._inflight.pop(uri, None)
        if task is not None:
            task.cancel()
        await self._publisher.publish_diagnostics(uri, [])

    def _trigger(self) -> RunTrigger | None:
        try:
            return self._context.settings.current().trigger
        except NotInitialized:
            return None

    # -- batches --

    async def validate_many(self, documents: Iterable[TextDocument]) -> BatchReport:
        """Validate documents concurrently and report failures once."""
        documents = list(documents)
        report = BatchReport()
        if not documents:
            return report

        tasks = [self._start(document) for document in documents]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        tracker = ErrorMessageTracker()
        for document, result in zip(documents, results):
            if isinstance(result, asyncio.CancelledError):
                report.superseded += 1
            elif isinstance(result, Exception):
                logger.warning("Validation of %s failed: %s", document.uri, result)
                tracker.add(error_message(result, document))
            else:
                report.validated += 1
                report.outcomes.append(result)

        if len(tracker):
            report.errors = tracker.messages
            await self._publisher.report_errors(tracker.messages)

        logger.debug(
            "Batch of %d done: %d validated, %d superseded, %d failed",
            len(documents),
            report.validated,
            report.superseded,
            len(report.errors),
        )
        return report

    def _start(self, document: TextDocument) -> asyncio.Task[PipelineOutcome]:
        uri = document.uri
        previous = self._inflight.get(uri)
        if previous is not None and not previous.done():
            logger.debug("Superseding in-flight validation of %s", uri)
            previous.cancel()

        task = asyncio.create_task(self.validate(document), name=f"doiuse:{uri}")
        self._inflight[uri] = task
        task.add_done_callback(lambda done: self._forget(uri, done))
        return task

    def _forget(self, uri: str, task: asyncio.Task[PipelineOutcome]) -> None:
        if self._inflight.get(uri) is task:
            del self._inflight[uri]

    # -- single document --

    async def validate(self, document: TextDocument) -> PipelineOutcome:
        """Run one pass for ``document``. Unexpected errors propagate."""
        uri = document.uri
        try:
            settings = self._context.settings.current()
        except NotInitialized:
            return PipelineOutcome(
                uri=uri, stage=PipelineStage.idle, reason="settings not received",
            )
        if not settings.enabled:
            return await self._publish(uri, [], PipelineStage.aborted, "validation disabled")

        fs_path = document.fs_path
        if fs_path and settings.ignore_file_globs:
            path = relative_path(fs_path, self._context.workspace_root)
            if is_ignored(path, settings.ignore_file_globs):
                return await self._publish(uri, [], PipelineStage.aborted, "ignored")

        browsers = await self._context.resolver.resolve(fs_path)
        if not browsers:
            return await self._publish(uri, [], PipelineStage.aborted, "no browser target")

        engine = self._context.engine
        if engine is None:
            return await self._publish(uri, [], PipelineStage.aborted, "engine unavailable")

        try:
            findings = await self._scan(engine, document, browsers, settings)
        except ScanParseFailure as e:
            logger.debug("Skipping %s, stylesheet does not parse: %s", uri, e)
            return PipelineOutcome(uri=uri, stage=PipelineStage.done, reason="parse failure")

        diagnostics = build_all(findings, settings.message_level)
        return await self._publish(uri, diagnostics, PipelineStage.done)

    async def _scan(
        self,
        engine: ScanEngine,
        document: TextDocument,
        browsers: Sequence[str],
        settings: ValidationSettings,
    ) -> list[FeatureFinding]:
        scan = engine.scan(
            document.text,
            browsers,
            settings.ignore_features,
            syntax_for(document.language_id),
        )
        timeout = self._context.options.scan_timeout
        if timeout is None:
            return await scan
        try:
            return await asyncio.wait_for(scan, timeout)
        except asyncio.TimeoutError:
            raise EngineError(f"doiuse scan timed out after {timeout:g}s")

    async def _publish(
        self,
        uri: str,
        diagnostics: list[Diagnostic],
        stage: PipelineStage,
        reason: str = "",
    ) -> PipelineOutcome:
        await self._publisher.publish_diagnostics(uri, diagnostics)
        return PipelineOutcome(
            uri=uri,
            stage=stage,
            diagnostics=diagnostics,
            published=True,
            reason=reason,
        )
