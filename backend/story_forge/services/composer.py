"""Prompt composition: everything that decides what text goes to the model.

All functions here are pure. Library records are resolved by the caller and
passed in (``None`` when nothing is selected or the id no longer exists), so
the merge rules can be tested without a store or a backend.

Scene merge order is fixed::

    reference-image rules -> character visuals (or nationality hint)
    -> location base + free text -> adjustments -> style lines
"""
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel

from story_forge.models.entities import Character, Location, Outfit
from story_forge.models.generation import (
    LOCATION_MIN_CHARS,
    OUTFIT_MIN_CHARS,
    SCENE_MIN_CHARS,
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
from story_forge.models.style import STYLE_FIELDS, CreationType, PromptType, StyleParameters, is_set
from story_forge.prompts.templates import fill_template, select_template

# Authorization given once for every style parameter the user left open.
AUTO_CHOICE_TEXT = "choose a suitable option yourself"

ADDITIONAL_DETAILS_LABEL = "Additional Scene Details:"


@dataclass
class ComposedInstruction:
    """Final instruction text plus the schema the model must answer with."""

    flow: str
    text: str
    output_schema: type[BaseModel]
    reference_image: Optional[str] = None
    # Requested (not enforced) minimum lengths per output field.
    min_lengths: dict[str, int] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Merge building blocks
# ---------------------------------------------------------------------------


def style_lines(style: StyleParameters, prefix: str = "") -> list[str]:
    """One line per style parameter.

    Set parameters become ``"<prefix><Label>: <value>"``. Unset ones ("none",
    empty or missing) never get a label line; instead the model is told to
    pick the value itself.
    """
    lines = []
    for name, (_, label, _) in STYLE_FIELDS.items():
        value = getattr(style, name)
        if is_set(value):
            lines.append(f"{prefix}{label}: {value}")
        else:
            lines.append(f"For the {label.lower()}, {AUTO_CHOICE_TEXT} based on the overall description.")
    return lines


def compose_character_visuals(
    character: Optional[Character], outfit: Optional[Outfit] = None
) -> Optional[str]:
    """Visual text describing the selected character, never its name.

    An outfit generated for this same character already describes the
    character wearing it, so its prompt replaces the character text verbatim.
    Any other outfit (standalone, or bound to a different character)
    replaces only the character's prompt; the appearance description is kept.
    """
    if character is None:
        return None
    if outfit is not None:
        if outfit.bound_to_character and outfit.character_id == character.id:
            return outfit.prompt
        return f"{character.appearance_description}\n\nOutfit: {outfit.prompt}"
    return f"{character.appearance_description}\n{character.prompt}"


def compose_scene_description(location: Optional[Location], free_text: str) -> str:
    """Base scene text: the saved location prompt first, then the user's details."""
    free_text = free_text.strip()
    if location is None:
        return free_text
    if not free_text:
        return location.prompt
    return f"{location.prompt}\n\n{ADDITIONAL_DETAILS_LABEL} {free_text}"


def _template_block(prompt_type: PromptType, style: StyleParameters, lead: str = "") -> str:
    template = fill_template(select_template(prompt_type), style)
    if prompt_type == PromptType.artistic:
        return f"You must generate an artistic prompt. {lead}\n{template}"
    return f"You must generate a JSON prompt. {lead}\n{template}"


def _join(*sections: Optional[str]) -> str:
    return "\n\n".join(s.strip("\n") for s in sections if s)


def name_leaks(result: GeneratedCharacter) -> list[str]:
    """Fields of a generated character that mention the character's name."""
    name = result.name.strip().lower()
    if not name:
        return []
    return [
        field_name
        for field_name in ("appearance_description", "prompt")
        if name in getattr(result, field_name).lower()
    ]


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------

_CHARACTER_INTRO = """You are an expert prompt engineer specializing in character design for image generation.

From the description below, produce three things:
1. name: the character's name. If the description does not name the character, invent a fitting name.
2. appearance_description: an exhaustive physical description of the character (face, hair, eyes, skin, build, height, posture, clothing, accessories) that can be reused to draw the same person consistently in other images.
3. prompt: a detailed image-generation prompt for the character.

CRITICAL RULE: the appearance_description and the prompt must NEVER contain the character's name. Refer to the character only by visual description."""

_STUDIO_RULE = "This is a studio shot: show the character alone against a plain backdrop, with no environment or location."


def build_character_instruction(request: CharacterGenerationRequest) -> ComposedInstruction:
    studio = request.creation_type == CreationType.studio
    if studio:
        template = _STUDIO_RULE + "\n" + fill_template(select_template(request.prompt_type, request.creation_type), request)
    else:
        template = _template_block(request.prompt_type, request)
    text = _join(
        _CHARACTER_INTRO,
        template,
        f"Character Description: {request.description.strip()}",
        "\n".join(style_lines(request)),
    )
    return ComposedInstruction(flow="character", text=text, output_schema=GeneratedCharacter)


# ---------------------------------------------------------------------------
# Outfits
# ---------------------------------------------------------------------------

_OUTFIT_INTRO = f"""You are a master fashion designer. Design an outfit from a general description and write a highly detailed, verbose and evocative text description of it.

The output must be ONLY a description of the clothing. Do NOT write a prompt for an image model. Do NOT describe a body or a character wearing the outfit.

Be specific about every single item of clothing, including materials, texture, fit, cut, color, layers, accessories and footwear.

Also give the outfit a short, descriptive name.

The description must be at least {OUTFIT_MIN_CHARS} characters long."""

_CHARACTER_OUTFIT_INTRO = """You are a master fashion designer and prompt engineer. Dress the character described below in a new outfit designed from the outfit brief, and write an image-generation prompt showing that character wearing it.

Keep every physical trait of the character exactly as described (face, hair, eyes, skin, build). Replace whatever they were wearing with the new outfit and describe every garment in detail: materials, texture, fit, cut, color, layers, accessories and footwear.

The prompt must never contain a personal name. Also give the outfit a short, descriptive name."""


def build_outfit_instruction(
    request: OutfitGenerationRequest, character: Optional[Character] = None
) -> ComposedInstruction:
    """Standalone outfit description, or a prompt of ``character`` wearing it."""
    if character is None:
        text = _join(
            _OUTFIT_INTRO,
            f"Desired Outfit Style:\n{request.description.strip()}",
            "Generate the outfit name and the detailed text description of the clothes.",
        )
        return ComposedInstruction(
            flow="outfit",
            text=text,
            output_schema=GeneratedOutfit,
            min_lengths={"description": OUTFIT_MIN_CHARS},
        )

    text = _join(
        _CHARACTER_OUTFIT_INTRO,
        f"Character appearance:\n{character.appearance_description}",
        f"Outfit brief:\n{request.description.strip()}",
    )
    return ComposedInstruction(flow="character_outfit", text=text, output_schema=GeneratedCharacterOutfit)


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------

_LOCATION_INTRO = f"""You are an expert prompt engineer specializing in extremely detailed and evocative location and environment prompts.

Take the general description of a location and expand it into a rich, verbose and specific prompt for an image generation model. The prompt must be at least {LOCATION_MIN_CHARS} characters long.

CRITICAL RULE: do NOT include any characters, people or living beings in the prompt. Focus exclusively on the environment, the atmosphere and the objects within it.

Generate a short, descriptive name for the location and the detailed image prompt."""


def build_location_instruction(request: LocationGenerationRequest) -> ComposedInstruction:
    text = _join(
        _LOCATION_INTRO,
        _template_block(request.prompt_type, request, "Leave the subject out: the frame contains only the place."),
        f"Location Description: {request.description.strip()}",
        "\n".join(style_lines(request)),
    )
    return ComposedInstruction(
        flow="location",
        text=text,
        output_schema=GeneratedLocation,
        min_lengths={"prompt": LOCATION_MIN_CHARS},
    )


# ---------------------------------------------------------------------------
# Scenes
# ---------------------------------------------------------------------------

_SCENE_INTRO = f"""You are an expert prompt engineer specializing in detailed, optimized prompts for generating scene images. The final prompt must be at least {SCENE_MIN_CHARS} characters long.

Synthesize the pieces of information below into a single, cohesive and extremely detailed prompt:
1. Scene Description: the foundational blueprint of the composition, pose and mood. Treat it as the primary source of truth for the scene's structure. When it starts with a base location prompt followed by additional scene details, use the location as the foundation and weave the details into it.
2. Adjustments: the user's explicit modifications. Apply them to the scene description; where they conflict with it, the adjustments win.
3. Character: a pre-defined visual description to integrate as-is for consistency. When instead a nationality is given, create a new character of that nationality as the central focus.
4. Stylistic parameters: use every parameter that is listed with a value."""

_REGEN_INTRO = f"""You are an expert prompt engineer. REGENERATE a detailed prompt for an image generation model from an original scene description and a NEW set of parameters. The final prompt must be at least {SCENE_MIN_CHARS} characters long.

Use the original scene description as the core creative brief and keep it fixed. Layer the NEW instructions on top of it: every NEW parameter and every NEW adjustment OVERRIDES the corresponding part of the original.

If a character description is provided, integrate it seamlessly into the scene as its central focus."""

_REFERENCE_IMAGE_RULES = """REFERENCE IMAGE: a reference image is attached. Treat it as a blueprint: replicate its composition, camera angle, subject pose and overall structure exactly. Replace the subject, the location and the atmosphere with the details given in the text below, so the result has the reference's visual structure with the text's content."""


def build_scene_instruction(
    request: SceneGenerationRequest,
    character: Optional[Character] = None,
    outfit: Optional[Outfit] = None,
    location: Optional[Location] = None,
    regenerate: bool = False,
) -> ComposedInstruction:
    """Compose a scene (or scene regeneration) instruction.

    ``character``, ``outfit`` and ``location`` are the already resolved
    library records; ``None`` means not selected or no longer in the library.
    """
    visuals = compose_character_visuals(character, outfit)
    if visuals is not None:
        subject: Optional[str] = f"Visual Character Description to include in scene: {visuals}"
    else:
        hints = []
        if request.nationality:
            hints.append(f"Nationality for a new character to generate for the scene: {request.nationality}")
        if outfit is not None:
            hints.append(f"Outfit to dress the subject in: {outfit.prompt}")
        subject = "\n".join(hints) or None

    description = compose_scene_description(location, request.scene_description)
    adjustments = request.adjustments.strip() or "None"

    if regenerate:
        text = _join(
            _REGEN_INTRO,
            _template_block(request.prompt_type, request, "Fill it in from the original description and the NEW parameters."),
            _REFERENCE_IMAGE_RULES if request.reference_image else None,
            subject,
            f"Original Scene Description: {description}",
            f"NEW adjustments to apply (override the original): {adjustments}",
            "Apply these NEW parameters:\n" + "\n".join(style_lines(request, prefix="New ")),
        )
    else:
        text = _join(
            _SCENE_INTRO,
            _template_block(request.prompt_type, request, "Describe the environment, characters (if any), objects, atmosphere and composition."),
            _REFERENCE_IMAGE_RULES if request.reference_image else None,
            subject,
            f"Scene Description: {description}",
            f"Adjustments to apply: {adjustments}",
            "Stylistic parameters:\n" + "\n".join(style_lines(request)),
        )
    return ComposedInstruction(
        flow="scene_regeneration" if regenerate else "scene",
        text=text,
        output_schema=GeneratedScene,
        reference_image=request.reference_image,
        min_lengths={"prompt": SCENE_MIN_CHARS},
    )


# ---------------------------------------------------------------------------
# Reference image analysis and prompt feedback
# ---------------------------------------------------------------------------

_IMAGE_ANALYSIS = """Analyze the provided image in detail and write a rich, descriptive text that captures its essence.
Cover:
1. Composition & framing: camera angle, shot type (wide shot, close-up, portrait) and how the subject and elements are framed.
2. Pose & subject: if there is a person, their exact pose, posture, gaze and expression.
3. Lighting: the lighting style (soft, dramatic, natural, golden hour).
4. Atmosphere & mood: the overall feeling (calm, mysterious, spontaneous, nostalgic).
5. Environment: the key elements of the background and setting.

Write a single, cohesive text block for the image_description field that can be used as the base of a new prompt."""


def build_image_analysis_instruction(request: ImageAnalysisRequest) -> ComposedInstruction:
    return ComposedInstruction(
        flow="image_analysis",
        text=_IMAGE_ANALYSIS,
        output_schema=ImageDescription,
        reference_image=request.reference_image,
    )


def build_feedback_instruction(request: PromptFeedbackRequest) -> ComposedInstruction:
    def bullets(prompts: list[str]) -> str:
        return "\n".join(f"- {p}" for p in prompts) or "- (none)"

    text = _join(
        f"You are an AI prompt engineer specializing in {request.kind} prompts for image generation.",
        f"Analyze the following successful and unsuccessful {request.kind} prompts.",
        f"Successful Prompts:\n{bullets(request.successful_prompts)}",
        f"Unsuccessful Prompts:\n{bullets(request.unsuccessful_prompts)}",
        (
            f"Give specific, actionable suggestions for improving future {request.kind} prompts based on "
            "the patterns you find. Consider clarity, detail and the use of specific keywords or phrases."
        ),
    )
    return ComposedInstruction(flow=f"{request.kind}_feedback", text=text, output_schema=PromptSuggestions)
