from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from castle_catalog.core.stores import Stores, get_stores
from castle_catalog.modules.castles.schemas import Castle
from castle_catalog.modules.rulers.schemas import Ruler
from .service import ENTITY_CASTLE, ENTITY_RULER, load_normalized_fixtures, reset_for_operation

# only mounted when FIXTURE_HOOKS_ENABLED is on
router = APIRouter(prefix="/_fixtures", tags=["fixtures"])


class FixturesLoadedOut(BaseModel):
    loaded: Dict[str, int]


class ResetOut(BaseModel):
    reset: List[str]


class SnapshotOut(BaseModel):
    castles: List[Castle]
    rulers: List[Ruler]


@router.post("/setup", response_model=FixturesLoadedOut)
def api_setup_fixtures(
    body: Dict[str, Any] = Body(...),
    stores: Stores = Depends(get_stores),
) -> FixturesLoadedOut:
    return FixturesLoadedOut(loaded=load_normalized_fixtures(stores, body))


@router.post("/reset", response_model=ResetOut)
def api_reset(stores: Stores = Depends(get_stores)) -> ResetOut:
    stores.reset()
    return ResetOut(reset=[ENTITY_CASTLE, ENTITY_RULER])


@router.post("/state/{operation}", response_model=ResetOut)
def api_state_handler(operation: str, stores: Stores = Depends(get_stores)) -> ResetOut:
    return ResetOut(reset=reset_for_operation(stores, operation))


@router.get("/snapshot", response_model=SnapshotOut)
def api_snapshot(stores: Stores = Depends(get_stores)) -> SnapshotOut:
    """What reset() would restore, per store."""
    return SnapshotOut(castles=stores.castles.snapshot(), rulers=stores.rulers.snapshot())
