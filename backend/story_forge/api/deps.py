"""Shared FastAPI dependencies."""
from fastapi import HTTPException, Request

from story_forge.services.forge import StoryForgeService


def get_forge_service(request: Request) -> StoryForgeService:
    """FastAPI dependency: retrieve StoryForgeService from app.state.

    Returns HTTP 503 if the service was not initialized at startup.
    """
    svc: StoryForgeService | None = getattr(request.app.state, "forge_service", None)
    if svc is None:
        raise HTTPException(
            status_code=503,
            detail="Story Forge unavailable. Service not initialized.",
        )
    return svc
