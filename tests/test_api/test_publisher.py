"""Tests for doiuse_ls.publisher -- the in-memory diagnostic store."""

from __future__ import annotations

import pytest

from doiuse_ls.publisher import DiagnosticStore
from doiuse_ls.settings.models import Severity
from doiuse_ls.validator.models import Diagnostic, Position, Range


def _diagnostic(code: str = "flexbox") -> Diagnostic:
    return Diagnostic(
        severity=Severity.Error,
        message=f"{code} not supported",
        range=Range(start=Position(line=0, character=0), end=Position(line=0, character=5)),
        code=code,
    )


class TestDiagnosticStore:
    @pytest.mark.asyncio
    async def test_publish_replaces_previous_set(self) -> None:
        store = DiagnosticStore()
        await store.publish_diagnostics("file:///a.css", [_diagnostic("flexbox")])
        await store.publish_diagnostics("file:///a.css", [_diagnostic("css-grid")])

        published = store.get("file:///a.css")
        assert [d.code for d in published.diagnostics] == ["css-grid"]
        assert published.revision == 2

    @pytest.mark.asyncio
    async def test_discard_drops_closed_entries(self) -> None:
        store = DiagnosticStore()
        for name in ("a", "b", "c"):
            await store.publish_diagnostics(f"file:///{name}.css", [_diagnostic()])
            await store.publish_diagnostics(f"file:///{name}.css", [])
            store.discard(f"file:///{name}.css")

        assert store.all() == []
        assert store.get("file:///a.css") is None

    def test_discard_unknown_uri(self) -> None:
        store = DiagnosticStore()
        store.discard("file:///never-opened.css")
        assert store.all() == []

    @pytest.mark.asyncio
    async def test_error_reports_are_capped(self) -> None:
        store = DiagnosticStore(max_error_reports=2)
        for n in range(3):
            await store.report_errors([f"failure {n}"])
        await store.report_errors([])

        assert [r.messages for r in store.error_reports] == [["failure 1"], ["failure 2"]]
