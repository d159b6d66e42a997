from __future__ import annotations

from typing import Any, Dict, List, Mapping, Union

from pydantic import ValidationError

from castle_catalog.core.errors import NotFoundError, ValidationFailed
from castle_catalog.core.observability import emit
from castle_catalog.modules.castles.schemas import Castle, CastleCreateIn
from castle_catalog.modules.castles.store import CastleStore

_FIELD_MESSAGES = {
    "name": "Name is required and must be a string",
    "region": "Region is required and must be a string",
    "yearBuilt": "Year built is required and must be a number",
}
_RANGE_MESSAGE = "Year built must be between 1000 and 2100"


def _first_error_message(exc: ValidationError) -> str:
    err = exc.errors()[0]
    field = str(err["loc"][0]) if err.get("loc") else ""
    if field == "yearBuilt" and err.get("type") in ("greater_than_equal", "less_than_equal"):
        return _RANGE_MESSAGE
    return _FIELD_MESSAGES.get(field, err.get("msg", "invalid castle"))


def validate_castle_input(payload: Union[CastleCreateIn, Mapping[str, Any]]) -> CastleCreateIn:
    if isinstance(payload, CastleCreateIn):
        return payload
    try:
        return CastleCreateIn.model_validate(dict(payload))
    except ValidationError as e:
        raise ValidationFailed(_first_error_message(e), details=e.errors(include_url=False))


def list_castles(store: CastleStore) -> List[Castle]:
    return store.list()


def get_castle(store: CastleStore, castle_id: str) -> Castle:
    castle = store.get_by_id(castle_id)
    if castle is None:
        raise NotFoundError("Castle not found", details={"id": castle_id})
    return castle


def create_castle(store: CastleStore, payload: Union[CastleCreateIn, Mapping[str, Any]]) -> Castle:
    data = validate_castle_input(payload)
    castle = store.create(data)
    emit("info", "castle.created", f"created castle {castle.name}", None, __name__, castle_id=castle.id)
    return castle


def delete_castle(store: CastleStore, castle_id: str) -> Dict[str, Any]:
    if not store.delete(castle_id):
        raise NotFoundError("Castle not found", details={"id": castle_id})
    emit("info", "castle.deleted", f"deleted castle {castle_id}", None, __name__, castle_id=castle_id)
    return {"id": castle_id, "deleted": True}
