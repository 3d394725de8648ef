"""Generation gateway: one schema-constrained Gemini call per composed instruction."""
import base64
import binascii
import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from story_forge.core.config import Settings
from story_forge.core.errors import GenerationError
from story_forge.models.generation import DATA_URI_PATTERN
from story_forge.services.composer import ComposedInstruction

logger = logging.getLogger(__name__)


def decode_data_uri(data_uri: str) -> tuple[bytes, str]:
    """Split a base64 image data URI into (bytes, mime_type).

    Raises:
        ValueError: When the URI is not a base64 image data URI.
    """
    match = DATA_URI_PATTERN.match(data_uri)
    if match is None:
        raise ValueError("not a base64 image data URI")
    try:
        data = base64.b64decode("".join(match.group("data").split()), validate=True)
    except binascii.Error as exc:
        raise ValueError("invalid base64 payload") from exc
    return data, match.group("mime")


def missing_fields(result: BaseModel) -> list[str]:
    """Names of fields that came back empty."""
    missing = []
    for name, value in result:
        if isinstance(value, str) and not value.strip():
            missing.append(name)
        elif isinstance(value, list) and not value:
            missing.append(name)
    return missing


class GenerationGateway:
    """Thin wrapper over the google-genai client.

    Picks the vision model when a reference image is inlined and the text
    model otherwise. Every failure (transport, model, unparsable or
    incomplete output) surfaces as GenerationError; nothing is retried.
    """

    def __init__(self, settings: Settings, client: Optional[Any] = None) -> None:
        self.settings = settings
        self.text_model = settings.text_model
        self.vision_model = settings.vision_model
        self._client = client

    @property
    def client(self) -> Any:
        """Create the genai client on first use."""
        if self._client is None:
            from google import genai  # type: ignore[import-untyped]

            if self.settings.use_vertexai:
                self._client = genai.Client(
                    vertexai=True,
                    project=self.settings.gcp_project_id,
                    location=self.settings.vertex_ai_location,
                )
            else:
                self._client = genai.Client(api_key=self.settings.gemini_api_key)
        return self._client

    def select_model(self, instruction: ComposedInstruction) -> str:
        return self.vision_model if instruction.reference_image else self.text_model

    def _build_contents(self, instruction: ComposedInstruction) -> object:
        """Text alone, or [image, text] when a reference image is attached."""
        from google.genai import types  # type: ignore[import-untyped]

        if instruction.reference_image is None:
            return instruction.text
        try:
            image_bytes, mime_type = decode_data_uri(instruction.reference_image)
        except ValueError as exc:
            raise GenerationError(instruction.flow, "invalid reference image", exc) from exc
        return [
            types.Part(inline_data=types.Blob(data=image_bytes, mime_type=mime_type)),
            types.Part(text=instruction.text),
        ]

    async def generate(self, instruction: ComposedInstruction) -> BaseModel:
        """Send the instruction and return the parsed output schema instance.

        Args:
            instruction: Composed instruction with its declared output schema.

        Returns:
            Instance of ``instruction.output_schema`` with every field non-empty.

        Raises:
            GenerationError: On any backend error or incomplete response.
        """
        from google.genai import types  # type: ignore[import-untyped]

        model = self.select_model(instruction)
        contents = self._build_contents(instruction)
        logger.info(
            "generate: flow=%s model=%s chars=%d",
            instruction.flow,
            model,
            len(instruction.text),
            extra={"flow": instruction.flow, "model": model},
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=instruction.output_schema,
                ),
            )
        except Exception as exc:
            logger.error(
                "Generation call failed: %s: %s",
                type(exc).__name__,
                exc,
                extra={"flow": instruction.flow, "model": model, "error_type": type(exc).__name__},
            )
            raise GenerationError(instruction.flow, "backend call failed", exc) from exc

        result = self._parse(instruction, response)
        self._report_short_fields(instruction, result)
        return result

    def _parse(self, instruction: ComposedInstruction, response: Any) -> BaseModel:
        schema = instruction.output_schema
        parsed = getattr(response, "parsed", None)
        if isinstance(parsed, schema):
            result = parsed
        else:
            text = getattr(response, "text", None)
            if not text:
                logger.error("Empty response", extra={"flow": instruction.flow})
                raise GenerationError(instruction.flow, "empty response")
            try:
                result = schema.model_validate_json(text)
            except ValidationError as exc:
                logger.error(
                    "Unparsable response: %.200s",
                    text,
                    extra={"flow": instruction.flow, "error_type": type(exc).__name__},
                )
                raise GenerationError(instruction.flow, "response does not match schema", exc) from exc

        missing = missing_fields(result)
        if missing:
            logger.error("Response missing fields: %s", ", ".join(missing), extra={"flow": instruction.flow})
            raise GenerationError(instruction.flow, f"missing fields: {', '.join(missing)}")
        return result

    def _report_short_fields(self, instruction: ComposedInstruction, result: BaseModel) -> None:
        # Minimum lengths are requested of the model, not enforced.
        for name, minimum in instruction.min_lengths.items():
            length = len(getattr(result, name, "") or "")
            if length < minimum:
                logger.warning(
                    "%s.%s is %d characters, %d requested",
                    instruction.flow,
                    name,
                    length,
                    minimum,
                    extra={"flow": instruction.flow},
                )
