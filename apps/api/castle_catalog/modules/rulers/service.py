"""
Ruler mutation layer.

Validation happens here, before the store is touched: create needs name,
title, house and an integer reignStart and rejects reignEnd < reignStart;
update only checks the ordering when both years arrive in the same call.
Absent records from the store become NotFoundError.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from castle_catalog.core.errors import NotFoundError, ValidationFailed
from castle_catalog.core.observability import emit
from castle_catalog.modules.rulers.schemas import Ruler, RulerCreateIn, RulerUpdateIn
from castle_catalog.modules.rulers.store import RulerStore

REQUIRED_MESSAGE = "Missing required fields: name, title, house, and reignStart are required"
ORDER_MESSAGE = "reignEnd cannot be before reignStart"


def _normalize(payload: Mapping[str, Any]) -> Dict[str, Any]:
    # accepts wire (camelCase) or attribute (snake_case) keys
    return {to_snake(str(k)): v for k, v in payload.items()}


def _is_year(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _not_found(ruler_id: str) -> NotFoundError:
    return NotFoundError(f"Ruler with ID {ruler_id} not found", details={"id": ruler_id})


def validate_create_input(payload: Mapping[str, Any]) -> RulerCreateIn:
    data = _normalize(payload)

    missing = [f for f in ("name", "title", "house") if not isinstance(data.get(f), str) or not data[f].strip()]
    if not _is_year(data.get("reign_start")):
        missing.append("reignStart")
    if missing:
        raise ValidationFailed(REQUIRED_MESSAGE, details={"missing": missing})

    reign_end = data.get("reign_end")
    if reign_end is not None:
        if not _is_year(reign_end):
            raise ValidationFailed("reignEnd must be an integer year")
        if reign_end < data["reign_start"]:
            raise ValidationFailed(ORDER_MESSAGE)

    try:
        return RulerCreateIn.model_validate(data)
    except ValidationError as e:
        raise ValidationFailed("invalid ruler input", details=e.errors(include_url=False))


def validate_update_input(payload: Mapping[str, Any]) -> Dict[str, Any]:
    data = _normalize(payload)
    # castle associations only move through add/remove
    data.pop("castle_ids", None)
    data.pop("id", None)

    for key, label in (("reign_start", "reignStart"), ("reign_end", "reignEnd")):
        if data.get(key) is not None and not _is_year(data[key]):
            raise ValidationFailed(f"{label} must be an integer year")

    try:
        changes = RulerUpdateIn.model_validate(data).model_dump(exclude_none=True)
    except ValidationError as e:
        raise ValidationFailed("invalid ruler input", details=e.errors(include_url=False))

    if "reign_start" in changes and "reign_end" in changes and changes["reign_end"] < changes["reign_start"]:
        raise ValidationFailed(ORDER_MESSAGE)
    return changes


# --- queries ---
def list_rulers(store: RulerStore) -> List[Ruler]:
    return store.list()


def get_ruler(store: RulerStore, ruler_id: str) -> Ruler:
    ruler = store.get_by_id(ruler_id)
    if ruler is None:
        raise _not_found(ruler_id)
    return ruler


def rulers_by_castle(store: RulerStore, castle_id: str) -> List[Ruler]:
    return store.get_by_castle(castle_id)


def rulers_by_house(store: RulerStore, house: str) -> List[Ruler]:
    return store.get_by_house(house)


def rulers_by_period(store: RulerStore, start_year: int, end_year: int, current_year: Optional[int] = None) -> List[Ruler]:
    return store.get_by_period(start_year, end_year, current_year=current_year)


# --- mutations ---
def create_ruler(store: RulerStore, payload: Mapping[str, Any]) -> Ruler:
    data = validate_create_input(payload)
    ruler = store.create(data)
    emit("info", "ruler.created", f"created ruler {ruler.name}", None, __name__, ruler_id=ruler.id)
    return ruler


def update_ruler(store: RulerStore, ruler_id: str, payload: Mapping[str, Any]) -> Ruler:
    changes = validate_update_input(payload)
    ruler = store.update(ruler_id, changes)
    if ruler is None:
        raise _not_found(ruler_id)
    emit("info", "ruler.updated", f"updated ruler {ruler.name}", None, __name__, ruler_id=ruler.id, fields=sorted(changes))
    return ruler


def delete_ruler(store: RulerStore, ruler_id: str) -> Dict[str, Any]:
    if not store.delete(ruler_id):
        raise _not_found(ruler_id)
    emit("info", "ruler.deleted", f"deleted ruler {ruler_id}", None, __name__, ruler_id=ruler_id)
    return {"success": True, "message": f"Ruler {ruler_id} has been successfully deleted"}


def add_castle(store: RulerStore, ruler_id: str, castle_id: str) -> Ruler:
    ruler = store.add_castle_to_ruler(ruler_id, castle_id)
    if ruler is None:
        raise _not_found(ruler_id)
    emit("info", "ruler.castle_added", f"added castle {castle_id} to ruler {ruler.name}", None, __name__, ruler_id=ruler_id, castle_id=castle_id)
    return ruler


def remove_castle(store: RulerStore, ruler_id: str, castle_id: str) -> Ruler:
    ruler = store.remove_castle_from_ruler(ruler_id, castle_id)
    if ruler is None:
        raise _not_found(ruler_id)
    emit("info", "ruler.castle_removed", f"removed castle {castle_id} from ruler {ruler.name}", None, __name__, ruler_id=ruler_id, castle_id=castle_id)
    return ruler
