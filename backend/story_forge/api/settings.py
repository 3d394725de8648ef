"""Favorite settings and style vocabulary API."""
from fastapi import APIRouter, Depends

from story_forge.api.deps import get_forge_service
from story_forge.models.entities import FavoriteSettings
from story_forge.models.style import StyleParameters, vocabulary
from story_forge.services.forge import StoryForgeService

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/vocabulary")
async def get_vocabulary() -> dict[str, list[str]]:
    """Selectable values for each style field ("none" is always allowed)."""
    return vocabulary()


@router.get("/favorites", response_model=FavoriteSettings)
async def get_favorites(service: StoryForgeService = Depends(get_forge_service)) -> FavoriteSettings:
    return service.favorites.get()


@router.get("/defaults", response_model=StyleParameters)
async def get_form_defaults(service: StoryForgeService = Depends(get_forge_service)) -> StyleParameters:
    """Style values a new character, location or scene form starts from."""
    return service.favorites.default_style()


@router.put("/favorites", response_model=FavoriteSettings)
async def save_favorites(
    body: StyleParameters,
    service: StoryForgeService = Depends(get_forge_service),
) -> FavoriteSettings:
    """Overwrite the favorites; omitted fields are stored as "none"."""
    return service.favorites.save(body)


@router.delete("/favorites", response_model=FavoriteSettings)
async def reset_favorites(service: StoryForgeService = Depends(get_forge_service)) -> FavoriteSettings:
    return service.favorites.reset()
