"""FastAPI application -- doiuse language service entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import doiuse_ls.deps as deps
from doiuse_ls.api.diagnostics import router as diagnostics_router
from doiuse_ls.api.events import router as events_router
from doiuse_ls.context import ValidationContext
from doiuse_ls.documents import DocumentStore
from doiuse_ls.options import load_options
from doiuse_ls.publisher import DiagnosticStore
from doiuse_ls.validator.orchestrator import ValidationOrchestrator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: build shared state on startup, drain it on shutdown."""
    options = load_options()
    logging.basicConfig(
        level=logging.DEBUG if options.dev_mode else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("doiuse language service starting with options: %s", options.model_dump())

    deps._documents = DocumentStore()
    deps._diagnostics = DiagnosticStore()
    deps._orchestrator = ValidationOrchestrator(
        ValidationContext(options),
        deps._diagnostics,
        deps._documents,
    )
    deps._initialized = False

    yield

    # Shutdown
    if deps._orchestrator:
        await deps._orchestrator.shutdown()
    deps._documents = None
    deps._diagnostics = None
    deps._orchestrator = None
    deps._initialized = False


app = FastAPI(
    title="doiuse language service",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(events_router)
app.include_router(diagnostics_router)
