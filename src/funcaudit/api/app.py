"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from funcaudit.api.routes import audit, catalog, health
from funcaudit.audit.batch_runner import BatchRunner
from funcaudit.audit.classifier import QueryClassifier
from funcaudit.audit.workspace import AuditWorkspace
from funcaudit.core.config import AppSettings
from funcaudit.core.exceptions import (
    BatchAlreadyRunningError,
    ClassifierError,
    DuplicateFunctionError,
    EmptyQueryError,
    FuncAuditError,
    FunctionNotFoundError,
    ParseError,
    StoreError,
)
from funcaudit.core.ids import RandomIdGenerator
from funcaudit.core.log import configure_logging
from funcaudit.model_providers import create_model_provider
from funcaudit.persistence import create_persistence

ERROR_STATUS: tuple[tuple[type[FuncAuditError], int], ...] = (
    (ParseError, 422),
    (EmptyQueryError, 422),
    (FunctionNotFoundError, 404),
    (DuplicateFunctionError, 409),
    (BatchAlreadyRunningError, 409),
    (ClassifierError, 502),
    (StoreError, 503),
)


def build_workspace(settings: AppSettings) -> AuditWorkspace:
    """Wire repository, provider, classifier and runner from settings, then load state."""
    ids = RandomIdGenerator()
    classifier = QueryClassifier(create_model_provider(settings), catalog_cap=settings.audit.catalog_cap)
    workspace = AuditWorkspace(
        create_persistence(settings),
        classifier,
        id_generator=ids,
        batch_runner=BatchRunner(
            classifier, id_generator=ids, pause_seconds=settings.audit.batch_pause_seconds,
        ),
    )
    workspace.load()
    return workspace


async def funcaudit_error_handler(request: Request, exc: FuncAuditError) -> JSONResponse:
    status = next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 500)
    return JSONResponse(
        status_code=status,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


def create_app(workspace: AuditWorkspace | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    A prebuilt workspace (tests, scripts) skips settings-driven wiring.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings = AppSettings()
        configure_logging(settings.log_level)
        app.state.settings = settings
        app.state.workspace = workspace or build_workspace(settings)
        yield

    app = FastAPI(
        title="App Function Audit",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(FuncAuditError, funcaudit_error_handler)
    app.include_router(health.router)
    app.include_router(catalog.router, prefix="/catalog")
    app.include_router(audit.router, prefix="/audit")
    return app
