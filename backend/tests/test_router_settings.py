"""Tests for the settings router."""
from fastapi.testclient import TestClient

from story_forge.models.style import STYLE_FIELDS


def test_vocabulary_lists_every_style_field(client: TestClient) -> None:
    data = client.get("/api/settings/vocabulary").json()
    assert set(data) == set(STYLE_FIELDS)
    assert "Kodak Portra 400" in data["film_type"]


def test_favorites_default_to_none(client: TestClient) -> None:
    data = client.get("/api/settings/favorites").json()
    assert set(data.values()) == {"none"}


def test_put_overwrites_favorites(client: TestClient) -> None:
    client.put("/api/settings/favorites", json={"art_style": "Anime", "camera": "Leica M6"})
    resp = client.put("/api/settings/favorites", json={"lighting_style": "Golden hour"})
    assert resp.status_code == 200
    data = client.get("/api/settings/favorites").json()
    assert data["lighting_style"] == "Golden hour"
    assert data["art_style"] == "none"
    assert data["camera"] == "none"


def test_delete_resets_favorites(client: TestClient) -> None:
    client.put("/api/settings/favorites", json={"art_style": "Anime"})
    resp = client.delete("/api/settings/favorites")
    assert resp.status_code == 200
    assert resp.json()["art_style"] == "none"


def test_form_defaults_follow_favorites(client: TestClient) -> None:
    client.put("/api/settings/favorites", json={"camera": "Leica M6"})
    data = client.get("/api/settings/defaults").json()
    assert data["camera"] == "Leica M6"
    assert data["art_style"] == "none"
