"""FastAPI application setup."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..errors import IngestError
from .routes import videos

logger = logging.getLogger(__name__)


async def ingest_error_handler(request: Request, exc: IngestError) -> JSONResponse:
    """Render domain errors; tool and provider diagnostics stay in the logs."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.kind}: {exc.diagnostic or exc.message}")
    elif exc.diagnostic:
        logger.info(f"{request.method} {request.url.path} -> {exc.kind}: {exc.diagnostic}")

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Ingest Service",
        description="Video and thumbnail ingestion service",
        version="1.0.0",
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(IngestError, ingest_error_handler)

    app.include_router(videos.router, prefix="/api", tags=["videos"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
