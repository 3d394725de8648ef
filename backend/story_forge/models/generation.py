"""Generation request bodies and the structured outputs declared to the model."""
import re
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from story_forge.models.style import CreationType, PromptType, StyleParameters, is_set

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>image/[\w.+-]+);base64,(?P<data>[A-Za-z0-9+/=\s]+)$")

SCENE_MIN_CHARS = 3000
LOCATION_MIN_CHARS = 3000
OUTFIT_MIN_CHARS = 300


def _optional_ref(value: Optional[str]) -> Optional[str]:
    return value if is_set(value) else None


def _check_data_uri(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not DATA_URI_PATTERN.match(value):
        raise ValueError("reference_image must be a base64 image data URI")
    return value


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CharacterGenerationRequest(StyleParameters):
    """Character creation form."""

    description: str = Field(..., min_length=1, max_length=5000)
    prompt_type: PromptType = PromptType.artistic
    creation_type: CreationType = CreationType.in_scene


class OutfitGenerationRequest(BaseModel):
    """Outfit creation form. With ``character_id`` the outfit is bound to that character."""

    description: str = Field(..., min_length=1, max_length=5000)
    character_id: Optional[str] = None

    @field_validator("character_id", mode="before")
    @classmethod
    def _ref(cls, value: Optional[str]) -> Optional[str]:
        return _optional_ref(value)


class LocationGenerationRequest(StyleParameters):
    """Location creation form."""

    description: str = Field(..., min_length=1, max_length=5000)
    prompt_type: PromptType = PromptType.artistic


class SceneGenerationRequest(StyleParameters):
    """Scene creation form, used for both generation and regeneration.

    ``adjustments`` only matter on regeneration; ``nationality`` only matters
    when no library character is selected.
    """

    scene_description: str = Field("", max_length=20000)
    adjustments: str = Field("", max_length=5000)
    reference_image: Optional[str] = None
    character_id: Optional[str] = None
    outfit_id: Optional[str] = None
    location_id: Optional[str] = None
    nationality: Optional[str] = None
    prompt_type: PromptType = PromptType.artistic

    @field_validator("character_id", "outfit_id", "location_id", "nationality", mode="before")
    @classmethod
    def _ref(cls, value: Optional[str]) -> Optional[str]:
        return _optional_ref(value)

    @field_validator("reference_image", mode="before")
    @classmethod
    def _image(cls, value: Optional[str]) -> Optional[str]:
        return _check_data_uri(value)

    @model_validator(mode="after")
    def _has_subject(self) -> "SceneGenerationRequest":
        if not (self.scene_description.strip() or self.location_id or self.reference_image):
            raise ValueError(
                "scene_description is required when no location or reference image is given"
            )
        return self


class ImageAnalysisRequest(BaseModel):
    reference_image: str

    @field_validator("reference_image", mode="before")
    @classmethod
    def _image(cls, value: str) -> str:
        checked = _check_data_uri(value)
        if checked is None:
            raise ValueError("reference_image is required")
        return checked


class PromptFeedbackRequest(BaseModel):
    """Previous prompts the user judged good or bad, to learn from."""

    kind: Literal["character", "scene"]
    successful_prompts: list[str] = Field(default_factory=list)
    unsuccessful_prompts: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _not_empty(self) -> "PromptFeedbackRequest":
        if not self.successful_prompts and not self.unsuccessful_prompts:
            raise ValueError("at least one prompt is required")
        return self


# ---------------------------------------------------------------------------
# Structured outputs (sent to the model as response_schema)
# ---------------------------------------------------------------------------


class GeneratedCharacter(BaseModel):
    name: str = Field(
        description="The character's name. Use the name from the description, or invent a fitting one."
    )
    appearance_description: str = Field(
        description=(
            "An exhaustive physical description of the character: face, hair, eyes, skin, build, "
            "height, clothing and accessories. It must NOT contain the character's name."
        )
    )
    prompt: str = Field(
        description="The generated image-generation prompt for the character. It must NOT contain the character's name."
    )


class GeneratedOutfit(BaseModel):
    name: str = Field(
        description='A short, descriptive name for the outfit (e.g., "Casual Summer Dress", "Cyberpunk Rebel Gear").'
    )
    description: str = Field(
        description=(
            "The highly detailed description of the outfit. Only clothing items, their materials, fit, cut, "
            f"color, layers, accessories and footwear. It must be at least {OUTFIT_MIN_CHARS} characters long."
        )
    )


class GeneratedCharacterOutfit(BaseModel):
    name: str = Field(description="A short, descriptive name for the outfit.")
    prompt: str = Field(
        description=(
            "An image-generation prompt showing the described character wearing the outfit. "
            "It must not contain any personal name."
        )
    )


class GeneratedLocation(BaseModel):
    name: str = Field(
        description='A short, descriptive name for the location (e.g., "Misty Forest Glade", "Cyberpunk Megacity Alley").'
    )
    prompt: str = Field(
        description=(
            "The highly detailed prompt for creating the location image. "
            f"It must be at least {LOCATION_MIN_CHARS} characters long."
        )
    )


class GeneratedScene(BaseModel):
    prompt: str = Field(
        description=f"The prompt for creating the scene image. It must be at least {SCENE_MIN_CHARS} characters long."
    )


class ImageDescription(BaseModel):
    image_description: str = Field(description="The detailed text description generated from the image.")


class PromptSuggestions(BaseModel):
    suggestions: list[str] = Field(description="Specific, actionable suggestions for improving future prompts.")
