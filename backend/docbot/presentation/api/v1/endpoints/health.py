"""Health check endpoint — no dependencies, always available."""

from fastapi import APIRouter

from docbot.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Returns the application health status and the configured chat model."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "model": settings.chat_model,
    }
