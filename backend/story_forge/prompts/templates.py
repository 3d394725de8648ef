"""Instruction templates that define the literal structure of generated prompts."""
from typing import Optional

from story_forge.models.style import STYLE_FIELDS, CreationType, PromptType, StyleParameters, is_set

ARTISTIC_TEMPLATE = """
You must strictly follow this template to create the prompt. Be extremely descriptive and verbose, elaborating on every detail to create a rich, vivid image. The final prompt should be very long and detailed. Fill in the bracketed sections from the provided description, expanding on each point significantly.

Framing rule: if the angle implies a full-body shot (e.g., "Wide shot, full body"), describe clothing and footwear below the waist in extensive detail. If the angle is a portrait or close-up (e.g., "Close-up, portrait shot"), leave those details out and focus on micro-details of the face, hair and expression instead.

Template:
A soft film photo taken on a {camera} with a {filmType} lens,
shot from a {cameraAngle},
rendered as {artStyle},
the scene shows [main subject: young woman / man / couple / group of people, or the environment itself when there is no subject],
they are [action: an exhaustive description of what they are doing, their posture, where they are looking, the precise position of their hands, the state of their hair, and how their clothes hang or move],
location is [specific place: describe the location in extreme detail, such as a quiet backstreet / riverside / park bench / seaside walk],
lighting is {lightingStyle},
the background includes [environment details: every visible element such as buildings, signs, wires, bicycles, windows, plants, paths, water and shadows, with texture and nuance for each],
colors are [a specific palette, such as cool tones with slightly faded, natural film grain, no digital sharpness, a soft pastel mood, and how the colors interact],
the atmosphere feels [sensations: light wind, specific street sounds, smells of food or nature, distant conversations, the feeling of the air],
extra details: [micro-details: folds and texture of clothing, a single strand of hair moving, the shape of a branch's shadow, reflections on wet asphalt, the weave of fabric, wear on sneakers],
overall: [a comprehensive summary of the feeling: spontaneous, imperfect, deeply calm, authentic, wabi-sabi, an immersive film mood].
"""

JSON_TEMPLATE = """
You are a technical scriptwriter for a photographer. Transform the general description into a highly detailed, structured JSON prompt for generating a film photograph. Every field must contain extensive descriptive text.
This is a technical script, not a "beautiful description". The prompt must consist of exactly the 7 sections below.
Do not use the words "beautiful", "artistic" or "moody".
The light and the frame should be slightly imperfect (wabi-sabi).
Use only the camera and film given in the structure.

### PROMPT STRUCTURE (JSON)

{{
  "type": "Static photo composition | Candid street photo",
  "subject": {{
    "identity": "who is in the frame (or \\"none\\" for an empty environment)",
    "appearance": "clothing, fabric, fit and style described extensively",
    "action": "the motion with precision, including hands and weight shift",
    "details": "micro-details of expression, skin texture and accessories"
  }},
  "environment": {{
    "location": "a specific place with the textures of surfaces and surrounding objects",
    "lighting": "{lightingStyle}; quality, color and direction of light and shadow",
    "time": "time of day and the quality of light it brings",
    "weather": "weather and how it affects light and surfaces"
  }},
  "composition": {{
    "framing": "the framing and the rationale behind it",
    "objects": ["each object with its condition and placement"],
    "background": "dense, realistic background elements",
    "balance": "how the arrangement reads as natural",
    "others_present": false
  }},
  "camera": {{
    "model": "{camera}",
    "lens": "50mm",
    "film": "{filmType}",
    "focus": "what is in and out of focus",
    "angle": "{cameraAngle}"
  }},
  "render": {{
    "style": "{artStyle}",
    "color_tone": "specific hues and their emotional impact",
    "grain": "texture and size of the film grain",
    "exposure": "which parts are over or underexposed",
    "contrast": "the tonal range in detail"
  }},
  "atmosphere": {{
    "mood": "what contributes to the mood",
    "ambient_sound": "specific, subtle sounds",
    "micro_movements": "subtle movements in the scene",
    "notes": "sensory notes on smell, temperature and feeling"
  }}
}}

Framing rule: if the angle implies a full-body shot (e.g., "Wide shot, full body"), describe clothing and footwear below the waist extensively in the "appearance" field. If the angle is a portrait or close-up, leave those details out.
"""

STUDIO_TEMPLATE = """
Create an isolated studio portrait. The subject stands or sits alone against a plain seamless backdrop; there is no environment, no props beyond what the subject wears or holds, and no other people.

Template:
A studio film photo taken on a {camera} with {filmType},
shot from a {cameraAngle},
rendered as {artStyle},
the photo shows [subject: an exhaustive physical description covering face, hair, eyes, skin, build and posture],
wearing [outfit: every garment, its fabric, fit, color, layers, accessories and footwear when visible],
pose and expression: [where they look, the position of their hands, the set of the shoulders, the expression],
backdrop is [a plain seamless paper or cloth backdrop and its exact color],
lighting is {lightingStyle},
colors are [the palette of the subject against the backdrop, film grain, no digital sharpness],
overall: [the feeling of the portrait].

Framing rule: if the angle implies a full-body shot (e.g., "Wide shot, full body"), describe clothing and footwear below the waist. If the angle is a portrait or close-up (e.g., "Close-up, portrait shot"), leave those details out.
"""

_TEMPLATES: dict[PromptType, str] = {
    PromptType.artistic: ARTISTIC_TEMPLATE,
    PromptType.json: JSON_TEMPLATE,
}


def select_template(
    prompt_type: PromptType, creation_type: Optional[CreationType] = None
) -> str:
    """Pick the instruction template.

    The studio creation type always wins over the prompt type.
    """
    if creation_type == CreationType.studio:
        return STUDIO_TEMPLATE
    return _TEMPLATES[prompt_type]


def fill_template(template: str, style: StyleParameters) -> str:
    """Substitute style values into the template placeholders.

    Unset values become a bracketed hint so the model picks the value.
    """
    values = {}
    for field, (placeholder, label, _) in STYLE_FIELDS.items():
        value = getattr(style, field)
        values[placeholder] = value if is_set(value) else f"[{label.lower()} that suits the description]"
    return template.format(**values)
