# src/docxcheck/main.py
"""Main entry point for the DocxCheck application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docxcheck.api import analysis_router, auth_router, history_router
from docxcheck.core.logging import configure_logging
from docxcheck.core.settings import settings
from docxcheck.db.session import create_tables
from docxcheck.services.model_client import build_model_client
from docxcheck.services.notifier import build_notifier

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="DocxCheck API",
    description="Document similarity, web provenance and summary analysis",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Include API routers
app.include_router(auth_router, prefix="/api")
app.include_router(analysis_router, prefix="/api")
app.include_router(history_router, prefix="/api")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    create_tables()
    app.state.model_client = build_model_client(settings)
    app.state.notifier = build_notifier(settings)
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("docxcheck.main:app", host=settings.host, port=settings.port, reload=settings.debug)
