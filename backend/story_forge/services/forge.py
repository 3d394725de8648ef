"""StoryForgeService: creation flows over the library, composer and gateway."""
from typing import TYPE_CHECKING, Optional, Union, cast

from story_forge.core.logging import setup_logging
from story_forge.models.entities import (
    Character,
    CharacterDraft,
    Location,
    LocationDraft,
    Outfit,
    OutfitDraft,
    Scene,
    SceneDraft,
)
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
from story_forge.services import composer

if TYPE_CHECKING:
    from story_forge.services.favorites import FavoriteSettingsService
    from story_forge.services.gateway import GenerationGateway
    from story_forge.services.store import EntityCollection, EntityStore

logger = setup_logging("forge")


class StoryForgeService:
    """Runs one creation flow per call.

    Responsibilities:
    1. Resolve library references (a missing id counts as "not selected")
    2. Compose the instruction via the composer
    3. Call the generation gateway
    4. Save results into the library on explicit request

    Generated results are returned, never saved implicitly. GenerationError
    from the gateway propagates unchanged.
    """

    def __init__(
        self,
        store: "EntityStore",
        gateway: "GenerationGateway",
        favorites: "FavoriteSettingsService",
    ) -> None:
        self.store = store
        self.gateway = gateway
        self.favorites = favorites

    # ------------------------------------------------------------------
    # Reference resolution
    # ------------------------------------------------------------------

    def _resolve(self, collection: "EntityCollection", record_id: Optional[str]):
        if record_id is None:
            return None
        record = collection.get(record_id)
        if record is None:
            logger.debug("Dangling reference %s/%s treated as absent", collection.key, record_id)
        return record

    def resolve_scene_references(
        self, request: SceneGenerationRequest
    ) -> tuple[Optional[Character], Optional[Outfit], Optional[Location]]:
        return (
            self._resolve(self.store.characters, request.character_id),
            self._resolve(self.store.outfits, request.outfit_id),
            self._resolve(self.store.locations, request.location_id),
        )

    # ------------------------------------------------------------------
    # Generation flows
    # ------------------------------------------------------------------

    async def generate_character(self, request: CharacterGenerationRequest) -> GeneratedCharacter:
        instruction = composer.build_character_instruction(request)
        result = cast(GeneratedCharacter, await self.gateway.generate(instruction))
        leaks = composer.name_leaks(result)
        if leaks:
            # The no-name rule is only requested of the model.
            logger.warning("Character name appears in %s", ", ".join(leaks), extra={"flow": instruction.flow})
        logger.info("character generated: %s", result.name, extra={"flow": instruction.flow})
        return result

    async def generate_outfit(
        self, request: OutfitGenerationRequest
    ) -> Union[GeneratedOutfit, GeneratedCharacterOutfit]:
        character = self._resolve(self.store.characters, request.character_id)
        instruction = composer.build_outfit_instruction(request, character)
        result = await self.gateway.generate(instruction)
        return cast(Union[GeneratedOutfit, GeneratedCharacterOutfit], result)

    async def generate_location(self, request: LocationGenerationRequest) -> GeneratedLocation:
        instruction = composer.build_location_instruction(request)
        return cast(GeneratedLocation, await self.gateway.generate(instruction))

    async def generate_scene(self, request: SceneGenerationRequest, regenerate: bool = False) -> GeneratedScene:
        character, outfit, location = self.resolve_scene_references(request)
        instruction = composer.build_scene_instruction(
            request,
            character=character,
            outfit=outfit,
            location=location,
            regenerate=regenerate,
        )
        return cast(GeneratedScene, await self.gateway.generate(instruction))

    async def analyze_reference_image(self, request: ImageAnalysisRequest) -> ImageDescription:
        instruction = composer.build_image_analysis_instruction(request)
        return cast(ImageDescription, await self.gateway.generate(instruction))

    async def suggest_improvements(self, request: PromptFeedbackRequest) -> PromptSuggestions:
        instruction = composer.build_feedback_instruction(request)
        return cast(PromptSuggestions, await self.gateway.generate(instruction))

    # ------------------------------------------------------------------
    # Library saves
    # ------------------------------------------------------------------

    def save_character(self, draft: CharacterDraft) -> Character:
        return self.store.characters.save(Character(**draft.model_dump()))

    def save_outfit(self, draft: OutfitDraft) -> Outfit:
        """Save an outfit; one saved with a ``character_id`` is bound to that character."""
        record = Outfit(**draft.model_dump())
        if record.character_id is not None:
            record.bound_to_character = True
        return self.store.outfits.save(record)

    def save_location(self, draft: LocationDraft) -> Location:
        return self.store.locations.save(Location(**draft.model_dump()))

    def save_scene(self, draft: SceneDraft, scene_id: Optional[str] = None) -> Scene:
        """Save a new scene, or overwrite the scene being edited.

        When the scene uses both a character and a standalone outfit, the
        outfit is assigned to that character.
        """
        scene: Optional[Scene] = None
        if scene_id is not None:
            scene = self.store.scenes.update(scene_id, draft.model_dump())
        if scene is None:
            scene = self.store.scenes.save(Scene(**draft.model_dump()))

        if draft.character_id and draft.outfit_id:
            outfit = self.store.outfits.get(draft.outfit_id)
            if outfit is not None and not outfit.bound_to_character and self.store.characters.get(draft.character_id):
                self.store.outfits.update(outfit.id, {"character_id": draft.character_id})
        return scene
