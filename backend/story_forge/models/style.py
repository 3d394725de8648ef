"""Style vocabulary and style parameter models."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator

# Sentinel meaning "no preference"; treated the same as an empty value.
NONE = "none"


class PromptType(str, Enum):
    """Instruction template family governing the output shape."""

    artistic = "artistic"
    json = "json"


class CreationType(str, Enum):
    """Whether a character appears within an environment or as a studio portrait."""

    in_scene = "inScene"
    studio = "studio"


ART_STYLES: list[str] = [
    "Photorealistic",
    "Analog film photography",
    "Cinematic still",
    "Street photography",
    "Documentary",
    "Fashion editorial",
    "Lomography",
    "Polaroid snapshot",
    "Black and white film",
    "Oil painting",
    "Watercolor",
    "Anime",
]

CAMERA_ANGLES: list[str] = [
    "Wide shot, full body, front view",
    "Medium shot, waist up, front view",
    "Close-up, portrait shot, front view",
    "Wide shot, full body, profile view",
    "Medium shot, waist up, profile view",
    "Close-up, portrait shot, profile view",
    "Wide shot, three-quarter view",
    "Medium shot, three-quarter view",
    "Close-up, three-quarter view",
    "Top-down view",
    "Low-angle view (Dutch angle)",
    "Ultra-wide lens",
]

LIGHTING_STYLES: list[str] = [
    "Soft natural daylight",
    "Golden hour",
    "Blue hour",
    "Overcast diffused light",
    "Harsh midday sun",
    "Neon night lighting",
    "Window light",
    "Candlelight",
    "Studio softbox",
    "Rembrandt lighting",
    "Backlit silhouette",
]

CAMERAS: list[str] = [
    "Contax T2",
    "Canon AE-1",
    "Nikon FM2",
    "Leica M6",
    "Olympus mju-II",
    "Pentax 67",
    "Mamiya RZ67",
    "Hasselblad 500C/M",
    "Fujifilm Klasse W",
    "Yashica T4",
]

FILM_TYPES: list[str] = [
    "Kodak Portra 400",
    "Kodak Portra 160",
    "Kodak Gold 200",
    "Kodak Ektar 100",
    "Fujifilm Superia 400",
    "Fujifilm Pro 400H",
    "Fujifilm Velvia 50",
    "Ilford HP5 Plus",
    "Kodak Tri-X 400",
    "CineStill 800T",
]

# Field name -> (template placeholder, human label, vocabulary)
STYLE_FIELDS: dict[str, tuple[str, str, list[str]]] = {
    "art_style": ("artStyle", "Art Style", ART_STYLES),
    "camera_angle": ("cameraAngle", "Camera Angle", CAMERA_ANGLES),
    "lighting_style": ("lightingStyle", "Lighting Style", LIGHTING_STYLES),
    "camera": ("camera", "Camera", CAMERAS),
    "film_type": ("filmType", "Film Type", FILM_TYPES),
}


def is_set(value: Optional[str]) -> bool:
    """Return True unless the value is missing, blank or the "none" sentinel."""
    return isinstance(value, str) and bool(value.strip()) and value.strip().lower() != NONE


class StyleParameters(BaseModel):
    """Art style, camera angle, lighting, camera and film choices.

    Values are free text; the vocabularies above are what the UI offers.
    Empty values are normalised to "none".
    """

    art_style: str = NONE
    camera_angle: str = NONE
    lighting_style: str = NONE
    camera: str = NONE
    film_type: str = NONE

    @field_validator("art_style", "camera_angle", "lighting_style", "camera", "film_type", mode="before")
    @classmethod
    def _normalise(cls, value: object) -> object:
        if value is not None and not isinstance(value, str):
            return value
        return value.strip() if is_set(value) else NONE

    def is_empty(self) -> bool:
        return not any(is_set(getattr(self, name)) for name in STYLE_FIELDS)


def vocabulary() -> dict[str, list[str]]:
    """Return the selectable values per style field."""
    return {name: list(values) for name, (_, _, values) in STYLE_FIELDS.items()}
