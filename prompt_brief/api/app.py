"""
FastAPI application for Prompt Brief.

Endpoints:
- POST /api/brief      extract a brief and stage progress
- POST /api/readiness  same, but 400 when required stages are insufficient
- GET  /api/health     health check

Run with: python -m prompt_brief.api.app
"""

import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prompt_brief import __version__
from prompt_brief.api import routes
from prompt_brief.config import configure_logging, get_settings

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup."""
    settings = get_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)
    logger.info("api_startup", version=__version__, use_model=settings.use_model)
    yield


def create_app() -> FastAPI:
    """Build the API application."""
    app = FastAPI(
        title="Prompt Brief API",
        description="Structured brief extraction and final-prompt readiness gating",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes.router, prefix="/api", tags=["Brief"])

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 8787))
    uvicorn.run(
        "prompt_brief.api.app:app",
        host="0.0.0.0",
        port=port,
        reload=False,
    )
