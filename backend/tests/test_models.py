"""Tests for style, entity and generation request models."""
import pytest
from pydantic import ValidationError

from story_forge.models.entities import Character, FavoriteSettings, OutfitDraft, SceneDraft
from story_forge.models.generation import (
    CharacterGenerationRequest,
    ImageAnalysisRequest,
    OutfitGenerationRequest,
    PromptFeedbackRequest,
    SceneGenerationRequest,
)
from story_forge.models.style import NONE, CreationType, PromptType, StyleParameters, is_set, vocabulary

IMAGE = "data:image/webp;base64,UklGRg=="


class TestStyleParameters:
    @pytest.mark.parametrize("value", [None, "", "   ", "none", "None", " NONE "])
    def test_unset_values_normalised(self, value: object) -> None:
        assert StyleParameters(art_style=value).art_style == NONE  # type: ignore[arg-type]

    def test_set_value_is_stripped(self) -> None:
        assert StyleParameters(camera=" Leica M6 ").camera == "Leica M6"

    def test_free_text_outside_vocabulary_allowed(self) -> None:
        assert StyleParameters(film_type="Agfa Vista 200").film_type == "Agfa Vista 200"

    def test_non_string_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StyleParameters(camera=5)  # type: ignore[arg-type]

    def test_is_empty(self) -> None:
        assert StyleParameters().is_empty()
        assert not StyleParameters(lighting_style="Golden hour").is_empty()


def test_is_set() -> None:
    assert is_set("Anime")
    assert not is_set(None)
    assert not is_set(" none ")


def test_vocabulary_values_are_copies() -> None:
    vocab = vocabulary()
    vocab["camera"].append("Toy camera")
    assert "Toy camera" not in vocabulary()["camera"]


class TestEntities:
    def test_records_get_fresh_ids(self) -> None:
        a = Character(description="d", name="n", appearance_description="a", prompt="p")
        b = Character(description="d", name="n", appearance_description="a", prompt="p")
        assert a.id != b.id

    def test_character_defaults(self) -> None:
        c = Character(description="d", name="n", appearance_description="a", prompt="p")
        assert c.prompt_type == PromptType.artistic
        assert c.creation_type == CreationType.in_scene

    def test_none_references_normalised(self) -> None:
        assert OutfitDraft(name="n", prompt="p", character_id="none").character_id is None
        scene = SceneDraft(scene_description="x", prompt="p", location_id="", outfit_id="none")
        assert scene.location_id is None
        assert scene.outfit_id is None

    def test_favorite_defaults(self) -> None:
        assert all(v == NONE for v in FavoriteSettings.defaults().model_dump().values())


class TestGenerationRequests:
    def test_character_requires_description(self) -> None:
        with pytest.raises(ValidationError):
            CharacterGenerationRequest(description="")

    def test_creation_type_uses_wire_values(self) -> None:
        assert CharacterGenerationRequest(description="x", creation_type="inScene").creation_type == CreationType.in_scene

    def test_outfit_none_character(self) -> None:
        assert OutfitGenerationRequest(description="x", character_id="none").character_id is None

    def test_scene_needs_description_location_or_image(self) -> None:
        with pytest.raises(ValidationError):
            SceneGenerationRequest(scene_description="  ")
        assert SceneGenerationRequest(location_id="loc1").location_id == "loc1"
        assert SceneGenerationRequest(reference_image=IMAGE).reference_image == IMAGE

    def test_scene_empty_image_is_none(self) -> None:
        assert SceneGenerationRequest(scene_description="x", reference_image="").reference_image is None

    def test_scene_rejects_non_image_uri(self) -> None:
        with pytest.raises(ValidationError):
            SceneGenerationRequest(scene_description="x", reference_image="data:text/plain;base64,aGk=")

    def test_image_analysis_requires_image(self) -> None:
        with pytest.raises(ValidationError):
            ImageAnalysisRequest(reference_image="")

    def test_feedback_requires_prompts(self) -> None:
        with pytest.raises(ValidationError):
            PromptFeedbackRequest(kind="character")
        with pytest.raises(ValidationError):
            PromptFeedbackRequest(kind="location", successful_prompts=["a"])  # type: ignore[arg-type]
