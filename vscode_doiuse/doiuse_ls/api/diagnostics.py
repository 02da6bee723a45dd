"""Diagnostics API -- read side of published diagnostics and error reports."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from doiuse_ls.deps import get_diagnostics, get_documents, get_orchestrator
from doiuse_ls.documents import DocumentStore
from doiuse_ls.errors import NotInitialized
from doiuse_ls.publisher import DiagnosticStore, ErrorReport, PublishedSet
from doiuse_ls.validator.orchestrator import ValidationOrchestrator

router = APIRouter(prefix="/api", tags=["diagnostics"])


@router.get("/diagnostics", response_model=list[PublishedSet])
async def list_diagnostics(
    uri: str | None = None,
    store: DiagnosticStore = Depends(get_diagnostics),
) -> list[PublishedSet]:
    """Return the latest published set for every uri, or for one uri."""
    if uri is None:
        return store.all()
    published = store.get(uri)
    if published is None:
        raise HTTPException(status_code=404, detail="Nothing published for this uri")
    return [published]


@router.get("/errors", response_model=list[ErrorReport])
async def list_errors(
    store: DiagnosticStore = Depends(get_diagnostics),
) -> list[ErrorReport]:
    """Return aggregated error reports, oldest first."""
    return store.error_reports


@router.get("/health")
async def health(
    documents: DocumentStore = Depends(get_documents),
    orchestrator: ValidationOrchestrator = Depends(get_orchestrator),
) -> dict:
    """Report engine availability and settings state."""
    context = orchestrator.context
    try:
        enabled = context.settings.current().enabled
    except NotInitialized:
        enabled = None
    return {
        "engine": context.engine is not None,
        "settings_received": context.settings.initialized,
        "enabled": enabled,
        "open_documents": len(documents),
        "cached_scopes": len(context.resolver),
    }
