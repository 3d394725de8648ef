"""Generation API router: one endpoint per creation flow."""
import logging
from typing import Awaitable, TypeVar, Union

from fastapi import APIRouter, Depends, HTTPException

from story_forge.api.deps import get_forge_service
from story_forge.core.errors import GenerationError
from story_forge.models.generation import (
    CharacterGenerationRequest,
    GeneratedCharacter,
    GeneratedCharacterOutfit,
    GeneratedLocation,
    GeneratedOutfit,
    GeneratedScene,
    ImageAnalysisRequest,
    ImageDescription,
    LocationGenerationRequest,
    OutfitGenerationRequest,
    PromptFeedbackRequest,
    PromptSuggestions,
    SceneGenerationRequest,
)
from story_forge.services.forge import StoryForgeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])

R = TypeVar("R")


async def _run(flow: Awaitable[R]) -> R:
    """Await a generation flow, mapping GenerationError to HTTP 502."""
    try:
        return await flow
    except GenerationError as exc:
        logger.error(
            "generation failed",
            exc_info=True,
            extra={"flow": exc.flow, "error_type": type(exc).__name__},
        )
        raise HTTPException(
            status_code=502,
            detail="Generation failed. Please try again.",
        ) from exc


@router.post("/characters/generate", response_model=GeneratedCharacter)
async def generate_character(
    body: CharacterGenerationRequest,
    service: StoryForgeService = Depends(get_forge_service),
) -> GeneratedCharacter:
    """Generate name, appearance description and prompt for a character."""
    return await _run(service.generate_character(body))


@router.post(
    "/outfits/generate",
    response_model=Union[GeneratedCharacterOutfit, GeneratedOutfit],
)
async def generate_outfit(
    body: OutfitGenerationRequest,
    service: StoryForgeService = Depends(get_forge_service),
) -> Union[GeneratedCharacterOutfit, GeneratedOutfit]:
    """Generate a standalone outfit description, or a prompt of a character wearing it.

    The second form is used when ``character_id`` names a saved character.
    """
    return await _run(service.generate_outfit(body))


@router.post("/locations/generate", response_model=GeneratedLocation)
async def generate_location(
    body: LocationGenerationRequest,
    service: StoryForgeService = Depends(get_forge_service),
) -> GeneratedLocation:
    return await _run(service.generate_location(body))


@router.post("/scenes/generate", response_model=GeneratedScene)
async def generate_scene(
    body: SceneGenerationRequest,
    service: StoryForgeService = Depends(get_forge_service),
) -> GeneratedScene:
    return await _run(service.generate_scene(body))


@router.post("/scenes/regenerate", response_model=GeneratedScene)
async def regenerate_scene(
    body: SceneGenerationRequest,
    service: StoryForgeService = Depends(get_forge_service),
) -> GeneratedScene:
    """Regenerate a scene: original description fixed, NEW parameters and adjustments override."""
    return await _run(service.generate_scene(body, regenerate=True))


@router.post("/scenes/analyze-image", response_model=ImageDescription)
async def analyze_image(
    body: ImageAnalysisRequest,
    service: StoryForgeService = Depends(get_forge_service),
) -> ImageDescription:
    """Describe a reference image so it can seed a scene description."""
    return await _run(service.analyze_reference_image(body))


@router.post("/feedback/suggestions", response_model=PromptSuggestions)
async def suggest_improvements(
    body: PromptFeedbackRequest,
    service: StoryForgeService = Depends(get_forge_service),
) -> PromptSuggestions:
    return await _run(service.suggest_improvements(body))
