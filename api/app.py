from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pdf_navigator.library import (
    DocumentError,
    DocumentLibrary,
    DocumentLoadError,
    DocumentNotFound,
    FetchFailed,
    FetchTimeout,
    InvalidPattern,
    InvalidRange,
    SectionNotFound,
    setup_logging,
)

from api.dependencies import get_config, get_library
from api.routes.documents import router as documents_router

logger = logging.getLogger(__name__)

# Most specific first: FetchFailed and FetchTimeout are load errors too.
ERROR_STATUS = [
    (DocumentNotFound, 404),
    (SectionNotFound, 404),
    (InvalidRange, 400),
    (InvalidPattern, 400),
    (FetchTimeout, 504),
    (FetchFailed, 502),
    (DocumentLoadError, 422),
]


def _status_for(exc: DocumentError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 400


@asynccontextmanager
async def lifespan(app: FastAPI):
    report = await run_in_threadpool(app.state.library.restore)
    if report.restored or report.failed:
        logger.info("Restored %s document(s), %s failed", len(report.restored), len(report.failed))
    yield


def create_app(library: Optional[DocumentLibrary] = None) -> FastAPI:
    setup_logging(get_config().log_level)
    app = FastAPI(title="PDF Navigator API", version="0.1.0", lifespan=lifespan)
    app.state.library = library if library is not None else get_library()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DocumentError)
    async def document_error_handler(request: Request, exc: DocumentError) -> JSONResponse:
        content = {"error": type(exc).__name__, "detail": str(exc)}
        if isinstance(exc, SectionNotFound):
            content["suggestions"] = exc.suggestions
        return JSONResponse(status_code=_status_for(exc), content=content)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "ValueError", "detail": str(exc)})

    app.include_router(documents_router)

    @app.get("/healthz")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
