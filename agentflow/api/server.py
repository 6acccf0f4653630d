"""
agentflow API server - FastAPI app wrapping the in-memory compile entry point.

Endpoints:
    POST /api/compile           - Compile a workflow (and virtual fragments)
    GET  /api/compile/engines   - List registered engines
    GET  /api/health            - Health check

Usage:
    uvicorn --factory agentflow.api.server:create_app
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from agentflow import __version__
from agentflow.api.routes import compile_router
from agentflow.engines import build_default_registry

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str
    version: str


def create_app(enable_cors: bool = True) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        enable_cors: Whether to enable CORS middleware (browser callers).

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="agentflow API",
        description="Compile markdown agent workflows into GitHub Actions YAML.",
        version=__version__,
    )
    app.state.registry = build_default_registry()

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )

    app.include_router(compile_router, prefix="/api")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time
        logger.info(
            "%s %s %s %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            duration,
        )
        return response

    @app.get("/api/health", response_model=HealthResponse)
    def health_check():
        """Health check endpoint."""
        return HealthResponse(status="ok", version=__version__)

    return app
