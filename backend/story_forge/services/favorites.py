"""Favorite style settings: a persisted singleton with change notification."""
import logging
from typing import Callable, Optional

from pydantic import ValidationError

from story_forge.models.entities import FavoriteSettings
from story_forge.models.style import StyleParameters
from story_forge.services.store import KeyValueBackend

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorite-settings"

Listener = Callable[[FavoriteSettings], None]


class FavoriteSettingsService:
    """Owns the favorite-settings record.

    Forms read ``get()`` to pre-populate new creations. Subscribers are
    called after every save or reset with the new value.
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        self.backend = backend
        self._current: Optional[FavoriteSettings] = None
        self._listeners: list[Listener] = []

    def get(self) -> FavoriteSettings:
        if self._current is None:
            raw = self.backend.read(FAVORITES_KEY)
            try:
                self._current = FavoriteSettings.model_validate(raw) if raw else FavoriteSettings.defaults()
            except ValidationError:
                logger.warning("Ignoring malformed favorite settings")
                self._current = FavoriteSettings.defaults()
        return self._current

    def save(self, settings: StyleParameters) -> FavoriteSettings:
        """Overwrite the favorites wholesale; unset values become "none"."""
        return self._store(FavoriteSettings.model_validate(settings.model_dump()))

    def default_style(self) -> StyleParameters:
        """Style values used to pre-populate a new creation form."""
        return StyleParameters(**self.get().model_dump())

    def reset(self) -> FavoriteSettings:
        return self._store(FavoriteSettings.defaults())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _store(self, settings: FavoriteSettings) -> FavoriteSettings:
        self.backend.write(FAVORITES_KEY, settings.model_dump(mode="json"))
        self._current = settings
        logger.info("favorite settings updated")
        for listener in list(self._listeners):
            listener(settings)
        return settings
