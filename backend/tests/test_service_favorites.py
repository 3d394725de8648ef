"""Tests for FavoriteSettingsService."""
from unittest.mock import MagicMock

from story_forge.models.entities import FavoriteSettings
from story_forge.models.style import NONE, StyleParameters
from story_forge.services.favorites import FAVORITES_KEY, FavoriteSettingsService
from story_forge.services.store import FileBackend


def test_defaults_when_nothing_saved(file_backend: FileBackend) -> None:
    svc = FavoriteSettingsService(file_backend)
    assert svc.get() == FavoriteSettings.defaults()
    assert all(value == NONE for value in svc.get().model_dump().values())


def test_save_overwrites_wholesale(file_backend: FileBackend) -> None:
    svc = FavoriteSettingsService(file_backend)
    svc.save(StyleParameters(art_style="Anime", camera="Leica M6"))
    svc.save(StyleParameters(film_type="Kodak Gold 200"))
    current = svc.get()
    assert current.film_type == "Kodak Gold 200"
    assert current.art_style == NONE
    assert current.camera == NONE


def test_empty_values_stored_as_none(file_backend: FileBackend) -> None:
    svc = FavoriteSettingsService(file_backend)
    saved = svc.save(StyleParameters(art_style="", lighting_style="Golden hour"))
    assert saved.art_style == NONE
    assert file_backend.read(FAVORITES_KEY)["art_style"] == NONE


def test_persisted_across_instances(file_backend: FileBackend) -> None:
    FavoriteSettingsService(file_backend).save(StyleParameters(camera_angle="Top-down view"))
    assert FavoriteSettingsService(file_backend).get().camera_angle == "Top-down view"


def test_reset_restores_defaults(file_backend: FileBackend) -> None:
    svc = FavoriteSettingsService(file_backend)
    svc.save(StyleParameters(art_style="Anime"))
    assert svc.reset() == FavoriteSettings.defaults()
    assert FavoriteSettingsService(file_backend).get() == FavoriteSettings.defaults()


def test_subscribers_notified_on_save_and_reset(file_backend: FileBackend) -> None:
    svc = FavoriteSettingsService(file_backend)
    listener = MagicMock()
    svc.subscribe(listener)
    saved = svc.save(StyleParameters(art_style="Anime"))
    svc.reset()
    assert listener.call_count == 2
    assert listener.call_args_list[0].args[0] == saved
    assert listener.call_args_list[1].args[0] == FavoriteSettings.defaults()


def test_unsubscribe(file_backend: FileBackend) -> None:
    svc = FavoriteSettingsService(file_backend)
    listener = MagicMock()
    unsubscribe = svc.subscribe(listener)
    unsubscribe()
    svc.reset()
    listener.assert_not_called()


def test_malformed_record_falls_back_to_defaults(file_backend: FileBackend) -> None:
    file_backend.write(FAVORITES_KEY, {"art_style": 42})
    assert FavoriteSettingsService(file_backend).get() == FavoriteSettings.defaults()


def test_unsubscribe_twice_is_harmless(file_backend: FileBackend) -> None:
    svc = FavoriteSettingsService(file_backend)
    unsubscribe = svc.subscribe(MagicMock())
    unsubscribe()
    unsubscribe()
    svc.reset()


def test_default_style_follows_favorites(file_backend: FileBackend) -> None:
    svc = FavoriteSettingsService(file_backend)
    svc.save(StyleParameters(art_style="Anime", film_type="Kodak Portra 400"))
    defaults = svc.default_style()
    assert type(defaults) is StyleParameters
    assert defaults.art_style == "Anime"
    assert defaults.film_type == "Kodak Portra 400"

    svc.reset()
    assert svc.default_style() == StyleParameters()
