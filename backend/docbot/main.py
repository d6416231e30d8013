"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from docbot.config import get_settings
from docbot.infrastructure.dependencies import get_tool_registry
from docbot.infrastructure.logging.log_config import setup_logging
from docbot.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging and load the docs corpus."""
    settings = get_settings()
    setup_logging()

    if not settings.openai_api_key.strip():
        logger.warning("OPENAI_API_KEY is not configured; chat requests will fail upstream.")

    registry = get_tool_registry()
    logger.info("Chat functions ready: %s", ", ".join(registry.tool_names))

    yield


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "docbot.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
