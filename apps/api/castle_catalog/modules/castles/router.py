from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Path, Response

from castle_catalog.core.stores import get_castle_store
from .schemas import Castle, CastleCreateIn
from .service import create_castle, delete_castle, get_castle, list_castles
from .store import CastleStore

router = APIRouter(tags=["castles"])

# body is validated by the service layer so direct callers get the same messages
_CREATE_BODY_DOC = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": CastleCreateIn.model_json_schema(by_alias=True)}},
    }
}


@router.get("/castles", response_model=List[Castle], operation_id="listCastles")
def api_list_castles(store: CastleStore = Depends(get_castle_store)) -> List[Castle]:
    return list_castles(store)


@router.get("/castles/{castle_id}", response_model=Castle, operation_id="getCastle")
def api_get_castle(castle_id: str = Path(...), store: CastleStore = Depends(get_castle_store)) -> Castle:
    return get_castle(store, castle_id)


@router.post(
    "/castles",
    response_model=Castle,
    status_code=201,
    operation_id="createCastle",
    openapi_extra=_CREATE_BODY_DOC,
)
def api_create_castle(
    body: Dict[str, Any] = Body(...),
    store: CastleStore = Depends(get_castle_store),
) -> Castle:
    return create_castle(store, body)


@router.delete("/castles/{castle_id}", status_code=204, operation_id="deleteCastle")
def api_delete_castle(castle_id: str, store: CastleStore = Depends(get_castle_store)) -> Response:
    delete_castle(store, castle_id)
    return Response(status_code=204)
