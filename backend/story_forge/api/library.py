"""Library API: list, get, save, edit and delete for each collection."""
import json
import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from pydantic import BaseModel, ValidationError

from story_forge.api.deps import get_forge_service
from story_forge.core.errors import RecordNotFoundError
from story_forge.models.entities import (
    Character,
    CharacterDraft,
    Location,
    LocationDraft,
    Outfit,
    OutfitDraft,
    Scene,
    SceneDraft,
)
from story_forge.services.forge import StoryForgeService
from story_forge.services.store import CHARACTERS, LOCATIONS, OUTFITS, SCENES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["library"])


def _not_found(exc: RecordNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(exc))


def _register(
    collection: str,
    record_model: type[BaseModel],
    draft_model: type[BaseModel],
    save: Optional[Callable[[StoryForgeService, Any], BaseModel]] = None,
) -> None:
    """Attach the CRUD endpoints of one collection to the router."""

    async def list_records(service: StoryForgeService = Depends(get_forge_service)) -> list:
        """All records, newest first."""
        return service.store.collection(collection).list_all()

    async def get_record(record_id: str, service: StoryForgeService = Depends(get_forge_service)) -> Any:
        try:
            return service.store.collection(collection).require(record_id)
        except RecordNotFoundError as exc:
            raise _not_found(exc) from exc

    async def create_record(
        body: draft_model,  # type: ignore[valid-type]
        service: StoryForgeService = Depends(get_forge_service),
    ) -> Any:
        """Save a generated result. Identical bodies produce distinct records."""
        return save(service, body)

    async def update_record(
        record_id: str,
        changes: dict[str, Any] = Body(...),
        service: StoryForgeService = Depends(get_forge_service),
    ) -> Any:
        try:
            record = service.store.collection(collection).update(record_id, changes)
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=json.loads(exc.json())) from exc
        if record is None:
            raise _not_found(RecordNotFoundError(collection, record_id))
        return record

    async def delete_record(record_id: str, service: StoryForgeService = Depends(get_forge_service)) -> Response:
        """Delete by id. Records referring to it are left alone."""
        service.store.collection(collection).delete(record_id)
        return Response(status_code=204)

    path = f"/{collection}"
    router.add_api_route(path, list_records, methods=["GET"], response_model=list[record_model])  # type: ignore[valid-type]
    if save is not None:
        router.add_api_route(path, create_record, methods=["POST"], response_model=record_model, status_code=201)
    router.add_api_route(path + "/{record_id}", get_record, methods=["GET"], response_model=record_model)
    router.add_api_route(path + "/{record_id}", update_record, methods=["PATCH"], response_model=record_model)
    router.add_api_route(path + "/{record_id}", delete_record, methods=["DELETE"], status_code=204)


_register(CHARACTERS, Character, CharacterDraft, lambda svc, body: svc.save_character(body))
_register(OUTFITS, Outfit, OutfitDraft, lambda svc, body: svc.save_outfit(body))
_register(LOCATIONS, Location, LocationDraft, lambda svc, body: svc.save_location(body))


@router.post("/scenes", response_model=Scene, status_code=201)
async def save_scene(
    body: SceneDraft,
    scene_id: Optional[str] = None,
    service: StoryForgeService = Depends(get_forge_service),
) -> Scene:
    """Save a scene; with ``scene_id`` the edited scene is overwritten instead."""
    return service.save_scene(body, scene_id=scene_id)


# Scenes have their own create endpoint above (it also edits).
_register(SCENES, Scene, SceneDraft)
