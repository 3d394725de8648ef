"""Shared test fixtures and configuration."""
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from story_forge.models.entities import Character, Location, Outfit
from story_forge.services.favorites import FavoriteSettingsService
from story_forge.services.forge import StoryForgeService
from story_forge.services.store import EntityStore, FileBackend


@pytest.fixture(autouse=True)
def set_required_env_vars(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Set required environment variables for all tests."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))


@pytest.fixture
def file_backend(tmp_path: Path) -> FileBackend:
    return FileBackend(tmp_path / "store")


@pytest.fixture
def store(file_backend: FileBackend) -> EntityStore:
    return EntityStore(file_backend)


def make_character(**kwargs: object) -> Character:
    defaults: dict[str, object] = {
        "description": "a tall courier with a shaved head",
        "name": "Mika",
        "appearance_description": "tall woman, shaved head, dark brown eyes, olive skin, lean build",
        "prompt": "a courier in a grey windbreaker leaning on a bicycle",
    }
    defaults.update(kwargs)
    return Character(**defaults)  # type: ignore[arg-type]


def make_outfit(**kwargs: object) -> Outfit:
    defaults: dict[str, object] = {
        "description": "rainy day streetwear",
        "name": "Monsoon Layers",
        "prompt": "a waxed olive parka over a cream knit, wide charcoal trousers, black rubber boots",
    }
    defaults.update(kwargs)
    return Outfit(**defaults)  # type: ignore[arg-type]


def make_location(**kwargs: object) -> Location:
    defaults: dict[str, object] = {
        "description": "A cozy bookstore",
        "name": "Lamplit Bookshop",
        "prompt": "narrow aisles of oak shelves, brass reading lamps, a worn Persian rug",
    }
    defaults.update(kwargs)
    return Location(**defaults)  # type: ignore[arg-type]


@pytest.fixture
def gateway() -> MagicMock:
    """Gateway double; set ``gateway.generate.return_value`` per test."""
    mock = MagicMock()
    mock.generate = AsyncMock()
    return mock


@pytest.fixture
def forge(store: EntityStore, gateway: MagicMock) -> StoryForgeService:
    return StoryForgeService(store=store, gateway=gateway, favorites=FavoriteSettingsService(store.backend))


@pytest.fixture
def client(forge: StoryForgeService):
    from story_forge.main import app

    app.state.forge_service = forge
    with TestClient(app) as c:
        yield c
    # cleanup
    if hasattr(app.state, "forge_service"):
        del app.state.forge_service
