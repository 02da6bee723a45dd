"""Shared FastAPI dependencies."""

from __future__ import annotations

from doiuse_ls.documents import DocumentStore
from doiuse_ls.publisher import DiagnosticStore
from doiuse_ls.validator.orchestrator import ValidationOrchestrator

_documents: DocumentStore | None = None
_diagnostics: DiagnosticStore | None = None
_orchestrator: ValidationOrchestrator | None = None
_initialized: bool = False


def get_documents() -> DocumentStore:
    """FastAPI dependency: return the shared DocumentStore."""
    assert _documents is not None, "DocumentStore not initialised"
    return _documents


def get_diagnostics() -> DiagnosticStore:
    """FastAPI dependency: return the shared DiagnosticStore."""
    assert _diagnostics is not None, "DiagnosticStore not initialised"
    return _diagnostics


def get_orchestrator() -> ValidationOrchestrator:
    """FastAPI dependency: return the shared ValidationOrchestrator."""
    assert _orchestrator is not None, "ValidationOrchestrator not initialised"
    return _orchestrator
