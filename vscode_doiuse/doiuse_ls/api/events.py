"""Events API -- inbound notifications from the editor client."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError

import doiuse_ls.deps as deps
from doiuse_ls.deps import get_diagnostics, get_documents, get_orchestrator
from doiuse_ls.documents import DocumentStore
from doiuse_ls.errors import ConfigurationError
from doiuse_ls.publisher import DiagnosticStore
from doiuse_ls.settings.models import ValidationSettings
from doiuse_ls.validator.models import BatchReport, TextDocument
from doiuse_ls.validator.orchestrator import ValidationOrchestrator
from doiuse_ls.validator.syntax import SUPPORTED_LANGUAGES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["events"])


class InitializeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    root_path: str | None = Field(default=None, alias="rootPath")
    initialization_options: dict[str, Any] | None = Field(
        default=None, alias="initializationOptions",
    )


class InitializeResponse(BaseModel):
    capabilities: dict[str, Any]
    engine: str | None = None
    languages: list[str] = Field(default_factory=list)


class ConfigurationRequest(BaseModel):
    settings: dict[str, Any] = Field(default_factory=dict)


class WatchedFilesRequest(BaseModel):
    changes: list[str] = Field(default_factory=list)


class CloseRequest(BaseModel):
    uri: str


def _require_initialized() -> None:
    if not deps._initialized:
        raise HTTPException(status_code=409, detail="Server not initialized")


@router.post("/initialize", response_model=InitializeResponse)
async def initialize(
    body: InitializeRequest,
    orchestrator: ValidationOrchestrator = Depends(get_orchestrator),
) -> InitializeResponse:
    """Resolve the doiuse engine for the workspace root."""
    try:
        engine = await orchestrator.initialize(body.root_path, body.initialization_options)
    except ConfigurationError as e:
        raise HTTPException(
            status_code=503,
            detail={"code": e.code, "message": e.message, "retry": e.retry},
        )

    deps._initialized = True
    location = getattr(engine, "location", None)
    return InitializeResponse(
        capabilities={"textDocumentSync": "full"},
        engine=str(location.module_dir) if location else None,
        languages=list(SUPPORTED_LANGUAGES),
    )


@router.post("/configuration", response_model=BatchReport)
async def configuration_changed(
    body: ConfigurationRequest,
    orchestrator: ValidationOrchestrator = Depends(get_orchestrator),
) -> BatchReport:
    """Replace the workspace settings and revalidate every open document."""
    _require_initialized()
    try:
        settings = ValidationSettings.from_client(body.settings)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False),
        )
    return await orchestrator.on_configuration_changed(settings)


@router.post("/watched-files", response_model=BatchReport)
async def watched_files_changed(
    body: WatchedFilesRequest,
    orchestrator: ValidationOrchestrator = Depends(get_orchestrator),
) -> BatchReport:
    """A package.json or browserslist file changed on disk."""
    _require_initialized()
    logger.info("Watched files changed: %s", ", ".join(body.changes) or "<unspecified>")
    return await orchestrator.on_watched_files_changed()


@router.post("/documents/open", response_model=BatchReport)
async def document_opened(
    document: TextDocument,
    documents: DocumentStore = Depends(get_documents),
    orchestrator: ValidationOrchestrator = Depends(get_orchestrator),
) -> BatchReport:
    _require_initialized()
    return await orchestrator.on_document_changed(documents.open(document))


@router.post("/documents/change", response_model=BatchReport)
async def document_changed(
    document: TextDocument,
    documents: DocumentStore = Depends(get_documents),
    orchestrator: ValidationOrchestrator = Depends(get_orchestrator),
) -> BatchReport:
    _require_initialized()
    current = documents.change(document)
    if current is not document:
        return BatchReport()
    return await orchestrator.on_document_changed(current)


@router.post("/documents/save", response_model=BatchReport)
async def document_saved(
    document: TextDocument,
    documents: DocumentStore = Depends(get_documents),
    orchestrator: ValidationOrchestrator = Depends(get_orchestrator),
) -> BatchReport:
    _require_initialized()
    return await orchestrator.on_document_saved(documents.change(document))


@router.post("/documents/close")
async def document_closed(
    body: CloseRequest,
    documents: DocumentStore = Depends(get_documents),
    orchestrator: ValidationOrchestrator = Depends(get_orchestrator),
    diagnostics: DiagnosticStore = Depends(get_diagnostics),
) -> dict[str, str]:
    """Clear the document's diagnostics and stop tracking it."""
    _require_initialized()
    documents.close(body.uri)
    await orchestrator.on_document_closed(body.uri)
    diagnostics.discard(body.uri)
    return {"status": "closed"}
