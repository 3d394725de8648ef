"""Library records: characters, outfits, locations, scenes and favorite settings.

Each stored record is a *draft* (the content the user saved) plus the
``id``/``created_at`` pair assigned when it enters the library. References
between records are plain ids and may dangle after a delete.
"""
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from story_forge.models.style import NONE, CreationType, PromptType, StyleParameters, is_set


def new_record_id() -> str:
    return uuid4().hex


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _optional_ref(value: Optional[str]) -> Optional[str]:
    # Forms send "none" for "nothing selected".
    return value if is_set(value) else None


class Record(BaseModel):
    """Identity shared by every library entry."""

    id: str = Field(default_factory=new_record_id)
    created_at: str = Field(default_factory=utc_timestamp)


class CharacterDraft(StyleParameters):
    description: str
    prompt_type: PromptType = PromptType.artistic
    creation_type: CreationType = CreationType.in_scene
    name: str
    appearance_description: str
    prompt: str


class Character(Record, CharacterDraft):
    """A saved character. ``prompt`` and ``appearance_description`` omit the name."""


class OutfitDraft(BaseModel):
    description: str = ""
    name: str
    prompt: str
    character_id: Optional[str] = None
    # True when ``prompt`` shows the character wearing the outfit.
    bound_to_character: bool = False

    @field_validator("character_id", mode="before")
    @classmethod
    def _ref(cls, value: Optional[str]) -> Optional[str]:
        return _optional_ref(value)


class Outfit(Record, OutfitDraft):
    """A saved outfit.

    Standalone outfits keep the clothing-only description in ``prompt``;
    outfits generated for a character keep the "character wearing it" prompt.
    """


class LocationDraft(StyleParameters):
    description: str
    prompt_type: PromptType = PromptType.artistic
    name: str
    prompt: str


class Location(Record, LocationDraft):
    """A saved environment-only location."""


class SceneDraft(StyleParameters):
    scene_description: str = ""
    adjustments: str = ""
    reference_image: Optional[str] = None
    character_id: Optional[str] = None
    outfit_id: Optional[str] = None
    location_id: Optional[str] = None
    nationality: Optional[str] = None
    prompt_type: PromptType = PromptType.artistic
    prompt: str

    @field_validator("character_id", "outfit_id", "location_id", "nationality", mode="before")
    @classmethod
    def _ref(cls, value: Optional[str]) -> Optional[str]:
        return _optional_ref(value)


class Scene(Record, SceneDraft):
    """A saved scene prompt together with the inputs it was composed from."""


class FavoriteSettings(StyleParameters):
    """Singleton of preferred style values used to pre-populate new forms."""

    @classmethod
    def defaults(cls) -> "FavoriteSettings":
        return cls(
            art_style=NONE,
            camera_angle=NONE,
            lighting_style=NONE,
            camera=NONE,
            film_type=NONE,
        )
