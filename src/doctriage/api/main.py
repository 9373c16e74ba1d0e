"""
DocTriage HTTP service.

Serves the review store, archive bookkeeping and the relationship graph
session under ``/api/v1``.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from doctriage import __version__
from doctriage.config import get_settings

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Prepare the data directory before serving review requests."""
    settings = get_settings()
    settings.ensure_directories()
    logger.info(
        "doctriage_api_started",
        environment=settings.environment,
        store_path=str(settings.store_path),
        viewport=f"{settings.viewport_width}x{settings.viewport_height}",
    )

    yield

    logger.info("doctriage_api_stopped")


def create_app() -> FastAPI:
    """Build the review API with its document, archive and graph routers."""
    settings = get_settings()

    app = FastAPI(
        title="DocTriage API",
        description="Document review and relationship graph for legal document triage",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # The graph front end may be served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def review_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "review_request_failed",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Document review request failed",
                "detail": str(exc) if settings.debug else None,
            },
        )

    from doctriage.api.routes import archives, documents, graph, relationships

    api_prefix = "/api/v1"
    app.include_router(documents.router, prefix=f"{api_prefix}/documents", tags=["documents"])
    app.include_router(archives.router, prefix=f"{api_prefix}/archives", tags=["archives"])
    app.include_router(relationships.router, prefix=f"{api_prefix}/relationships", tags=["relationships"])
    app.include_router(graph.router, prefix=f"{api_prefix}/graph", tags=["graph"])

    @app.get("/health")
    async def health_check() -> dict:
        """Report whether the document analyzer is usable."""
        from doctriage.services.analysis import get_document_analyzer

        return {
            "status": "healthy",
            "services": {
                "analyzer": get_document_analyzer().health_check(),
            },
        }

    @app.get("/")
    async def root() -> dict:
        return {
            "name": "DocTriage API",
            "version": __version__,
            "docs": "/docs",
        }

    return app


app = create_app()
