"""
Fixture loading for contract verification runs.

The verification harness hands over normalized fixtures grouped by entity
type:

    {"entities": {"Castle": [{"data": {...}, "source": ...}], "Ruler": [...]},
     "metadata": {...}}

Each entity type present is installed with set() on its store (an empty
group installs an empty snapshot); missing types leave their store alone.
Entities without every required field are skipped: recorded update
mutations only carry the fields they touched.

Between scenarios the harness names the operation it is about to replay and
the owning store is reset to the snapshot.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from castle_catalog.core.observability import emit
from castle_catalog.core.stores import Stores
from castle_catalog.modules.castles.schemas import DEFAULT_CASTLE_DESCRIPTION

ENTITY_CASTLE = "Castle"
ENTITY_RULER = "Ruler"

CASTLE_OPERATIONS = frozenset({"listCastles", "getCastle", "createCastle", "deleteCastle"})
RULER_OPERATIONS = frozenset(
    {
        "Query.listRulers",
        "Query.getRuler",
        "Query.getRulersByCastle",
        "Query.getRulersByHouse",
        "Query.getRulersByPeriod",
        "Mutation.createRuler",
        "Mutation.updateRuler",
        "Mutation.deleteRuler",
        "Mutation.addCastleToRuler",
        "Mutation.removeCastleFromRuler",
    }
)


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and bool(v)


def _entity_data(entity: Any) -> Dict[str, Any]:
    if isinstance(entity, Mapping):
        data = entity.get("data", entity)
        if isinstance(data, Mapping):
            return dict(data)
    return {}


def castle_from_fixture(data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    if not (_non_empty_str(data.get("id")) and _non_empty_str(data.get("name")) and isinstance(data.get("region"), str)):
        return None
    if not _is_int(data.get("yearBuilt")):
        return None
    description = data.get("description")
    return {
        "id": data["id"],
        "name": data["name"],
        "region": data["region"],
        "yearBuilt": data["yearBuilt"],
        "description": description if isinstance(description, str) else DEFAULT_CASTLE_DESCRIPTION,
    }


def ruler_from_fixture(data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    required = ("id", "name", "title", "house")
    if not all(_non_empty_str(data.get(k)) for k in required) or not _is_int(data.get("reignStart")):
        return None
    out: Dict[str, Any] = {
        "id": data["id"],
        "name": data["name"],
        "title": data["title"],
        "reignStart": data["reignStart"],
        "house": data["house"],
        "castleIds": list(data["castleIds"]) if isinstance(data.get("castleIds"), list) else [],
        "description": data["description"] if isinstance(data.get("description"), str) else "",
        "achievements": list(data["achievements"]) if isinstance(data.get("achievements"), list) else [],
    }
    if _is_int(data.get("reignEnd")):
        out["reignEnd"] = data["reignEnd"]
    return out


def _collect(entities: List[Any], entity_type: str, convert) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []
    for entity in entities:
        data = _entity_data(entity)
        record = convert(data)
        if record is None:
            source = entity.get("source") if isinstance(entity, Mapping) else None
            emit(
                "warning",
                "fixtures.entity_skipped",
                f"skipping incomplete {entity_type} entity {data.get('id') or 'unknown'}",
                None,
                __name__,
                entity_type=entity_type,
                source=source,
            )
            continue
        records.append(record)
    return records


def load_normalized_fixtures(stores: Stores, fixtures: Mapping[str, Any]) -> Dict[str, int]:
    entities = fixtures.get("entities") or {}
    loaded: Dict[str, int] = {}

    if ENTITY_CASTLE in entities:
        castles = _collect(list(entities[ENTITY_CASTLE] or []), ENTITY_CASTLE, castle_from_fixture)
        stores.castles.set(castles)
        loaded[ENTITY_CASTLE] = len(castles)

    if ENTITY_RULER in entities:
        rulers = _collect(list(entities[ENTITY_RULER] or []), ENTITY_RULER, ruler_from_fixture)
        stores.rulers.set(rulers)
        loaded[ENTITY_RULER] = len(rulers)

    emit(
        "info",
        "fixtures.loaded",
        f"fixtures installed for {', '.join(sorted(loaded)) or 'no entity types'}",
        None,
        __name__,
        counts=loaded,
        metadata=fixtures.get("metadata"),
    )
    return loaded


def reset_for_operation(stores: Stores, operation: str) -> List[str]:
    """Reset the store owning `operation`; unknown operations reset both."""
    if operation in CASTLE_OPERATIONS:
        stores.castles.reset()
        reset = [ENTITY_CASTLE]
    elif operation in RULER_OPERATIONS:
        stores.rulers.reset()
        reset = [ENTITY_RULER]
    else:
        stores.reset()
        reset = [ENTITY_CASTLE, ENTITY_RULER]
    emit("info", "fixtures.state", f"state handler {operation}", None, __name__, reset=reset)
    return reset
