"""Entity store: named collections persisted whole in a key/value backend.

Every mutation rewrites the complete collection under its key; there are
no partial writes, no locking and no conflict resolution (last write wins).
Lists are kept newest first.
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generic, Optional, Protocol, TypeVar

from pydantic import ValidationError

from story_forge.core.config import Settings
from story_forge.core.errors import RecordNotFoundError
from story_forge.models.entities import Character, Location, Outfit, Record, Scene

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Record)

CHARACTERS = "characters"
OUTFITS = "outfits"
LOCATIONS = "locations"
SCENES = "scenes"
COLLECTIONS = (CHARACTERS, OUTFITS, LOCATIONS, SCENES)


class KeyValueBackend(Protocol):
    """Whole-value persistence keyed by caller-chosen strings."""

    def read(self, key: str) -> Optional[Any]:
        """Return the stored JSON value, or None when the key is unset."""

    def write(self, key: str, value: Any) -> None:
        """Replace the stored value."""


class FileBackend:
    """One ``<key>.json`` file per key under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def read(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable %s", path, extra={"collection": key})
            return None

    def write(self, key: str, value: Any) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(json.dumps(value, ensure_ascii=False, indent=2), encoding="utf-8")


class FirestoreBackend:
    """One Firestore document per key, value kept under the ``value`` field."""

    def __init__(self, collection: str, client: Optional[Any] = None) -> None:
        if client is None:
            from google.cloud import firestore

            client = firestore.Client()
        self._db = client
        self.collection = collection

    def read(self, key: str) -> Optional[Any]:
        snapshot = self._db.collection(self.collection).document(key).get()
        if not snapshot.exists:
            return None
        return (snapshot.to_dict() or {}).get("value")

    def write(self, key: str, value: Any) -> None:
        self._db.collection(self.collection).document(key).set(
            {"value": value, "updated_at": datetime.now(timezone.utc).isoformat()}
        )


def build_backend(settings: Settings) -> KeyValueBackend:
    if settings.storage_backend == "firestore":
        return FirestoreBackend(settings.firestore_collection)
    return FileBackend(Path(settings.data_dir))


class EntityCollection(Generic[T]):
    """Typed view over one persisted list, with an in-memory mirror.

    The mirror is loaded on first access and replaced on every write, so it
    always equals the last value this process persisted.
    """

    def __init__(self, backend: KeyValueBackend, key: str, model: type[T]) -> None:
        self.backend = backend
        self.key = key
        self.model = model
        self._mirror: Optional[list[T]] = None

    def _records(self) -> list[T]:
        if self._mirror is None:
            self._mirror = self._load()
        return self._mirror

    def _load(self) -> list[T]:
        raw = self.backend.read(self.key)
        if not isinstance(raw, list):
            return []
        records = []
        for entry in raw:
            try:
                records.append(self.model.model_validate(entry))
            except ValidationError:
                logger.warning("Skipping malformed %s entry", self.key, extra={"collection": self.key})
        return records

    def _write(self, records: list[T]) -> None:
        self.backend.write(self.key, [r.model_dump(mode="json") for r in records])
        self._mirror = records

    def refresh(self) -> None:
        """Drop the mirror so the next access re-reads the backend."""
        self._mirror = None

    def list_all(self) -> list[T]:
        return list(self._records())

    def get(self, record_id: str) -> Optional[T]:
        return next((r for r in self._records() if r.id == record_id), None)

    def require(self, record_id: str) -> T:
        """Like get, but a missing record raises RecordNotFoundError."""
        record = self.get(record_id)
        if record is None:
            raise RecordNotFoundError(self.key, record_id)
        return record

    def save(self, record: T) -> T:
        """Prepend ``record``. Saving equal content twice yields two entries."""
        self._write([record, *self._records()])
        logger.info("saved %s/%s", self.key, record.id, extra={"collection": self.key, "record_id": record.id})
        return record

    def delete(self, record_id: str) -> bool:
        """Remove the record with ``record_id``; False when it was not there."""
        records = self._records()
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            return False
        self._write(remaining)
        logger.info("deleted %s/%s", self.key, record_id, extra={"collection": self.key, "record_id": record_id})
        return True

    def update(self, record_id: str, changes: dict[str, Any]) -> Optional[T]:
        """Merge ``changes`` into the matching record, keeping its identity.

        Raises:
            pydantic.ValidationError: When the merged record is invalid.
        """
        records = self._records()
        for index, existing in enumerate(records):
            if existing.id != record_id:
                continue
            merged = self.model.model_validate(
                {**existing.model_dump(), **changes, "id": existing.id, "created_at": existing.created_at}
            )
            updated = [*records[:index], merged, *records[index + 1:]]
            self._write(updated)
            return merged
        return None


class EntityStore:
    """The four library collections over one backend."""

    def __init__(self, backend: KeyValueBackend) -> None:
        self.backend = backend
        self.characters: EntityCollection[Character] = EntityCollection(backend, CHARACTERS, Character)
        self.outfits: EntityCollection[Outfit] = EntityCollection(backend, OUTFITS, Outfit)
        self.locations: EntityCollection[Location] = EntityCollection(backend, LOCATIONS, Location)
        self.scenes: EntityCollection[Scene] = EntityCollection(backend, SCENES, Scene)

    def collection(self, name: str) -> EntityCollection:
        if name not in COLLECTIONS:
            raise KeyError(name)
        return getattr(self, name)
