"""Integration tests against the real Gemini API.

Run with: pytest -m integration (requires a real GEMINI_API_KEY in .env).
"""
import pytest

from story_forge.core.config import Settings
from story_forge.models.generation import LOCATION_MIN_CHARS, GeneratedLocation, LocationGenerationRequest
from story_forge.services.composer import build_location_instruction
from story_forge.services.gateway import GenerationGateway

pytestmark = pytest.mark.integration


@pytest.fixture
def real_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    # The autouse fixture installs a dummy key; read the real one from .env.
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    try:
        return Settings()
    except ValueError:
        pytest.skip("GEMINI_API_KEY not configured")


@pytest.mark.timeout(120)
async def test_generate_bookstore_location(real_settings: Settings) -> None:
    gateway = GenerationGateway(real_settings)
    instruction = build_location_instruction(LocationGenerationRequest(description="A cozy bookstore"))

    result = await gateway.generate(instruction)

    assert isinstance(result, GeneratedLocation)
    assert result.name.strip()
    assert len(result.prompt) >= LOCATION_MIN_CHARS
