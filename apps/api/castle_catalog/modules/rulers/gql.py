import dataclasses
from typing import Any, Dict, List, Optional

import strawberry
from fastapi import Depends, Request
from graphql import GraphQLError
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from castle_catalog.core.errors import CatalogError
from castle_catalog.core.observability import emit, request_id_of
from castle_catalog.core.stores import Stores, get_stores
from castle_catalog.modules.rulers import service
from castle_catalog.modules.rulers.schemas import Ruler

HEALTH_MESSAGE = "Rulers GraphQL service is healthy!"


@strawberry.type(name="Ruler")
class RulerType:
    id: strawberry.ID
    name: str
    title: str
    reign_start: int
    reign_end: Optional[int]
    house: str
    castle_ids: List[strawberry.ID]
    description: Optional[str]
    achievements: List[str]

    @classmethod
    def from_record(cls, r: Ruler) -> "RulerType":
        return cls(
            id=strawberry.ID(r.id),
            name=r.name,
            title=r.title,
            reign_start=r.reign_start,
            reign_end=r.reign_end,
            house=r.house,
            castle_ids=[strawberry.ID(c) for c in r.castle_ids],
            description=r.description,
            achievements=list(r.achievements),
        )


@strawberry.type
class DeleteResult:
    success: bool
    message: str


@strawberry.input
class CreateRulerInput:
    name: str
    title: str
    reign_start: int
    house: str
    reign_end: Optional[int] = None
    castle_ids: Optional[List[strawberry.ID]] = None
    description: Optional[str] = None
    achievements: Optional[List[str]] = None


@strawberry.input
class UpdateRulerInput:
    name: Optional[str] = None
    title: Optional[str] = None
    reign_start: Optional[int] = None
    reign_end: Optional[int] = None
    house: Optional[str] = None
    description: Optional[str] = None
    achievements: Optional[List[str]] = None


def _stores(info: Info) -> Stores:
    return info.context["stores"]


def _log(info: Info, event: str, message: str, **extra: Any) -> None:
    emit("info", event, message, request_id_of(info.context.get("request")), __name__, **extra)


def _field_error(exc: CatalogError) -> GraphQLError:
    return GraphQLError(exc.message, extensions={"code": exc.kind})


def _input_dict(data: Any) -> Dict[str, Any]:
    return {k: v for k, v in dataclasses.asdict(data).items() if v is not None}


@strawberry.type
class Query:
    @strawberry.field
    def list_rulers(self, info: Info) -> List[RulerType]:
        _log(info, "graphql.query", "listRulers")
        return [RulerType.from_record(r) for r in service.list_rulers(_stores(info).rulers)]

    @strawberry.field
    def get_ruler(self, info: Info, id: strawberry.ID) -> RulerType:
        _log(info, "graphql.query", f"getRuler({id})")
        try:
            return RulerType.from_record(service.get_ruler(_stores(info).rulers, str(id)))
        except CatalogError as e:
            raise _field_error(e)

    @strawberry.field
    def get_rulers_by_castle(self, info: Info, castle_id: strawberry.ID) -> List[RulerType]:
        _log(info, "graphql.query", f"getRulersByCastle({castle_id})")
        return [RulerType.from_record(r) for r in service.rulers_by_castle(_stores(info).rulers, str(castle_id))]

    @strawberry.field
    def get_rulers_by_house(self, info: Info, house: str) -> List[RulerType]:
        _log(info, "graphql.query", f"getRulersByHouse({house})")
        return [RulerType.from_record(r) for r in service.rulers_by_house(_stores(info).rulers, house)]

    @strawberry.field
    def get_rulers_by_period(self, info: Info, start_year: int, end_year: int) -> List[RulerType]:
        _log(info, "graphql.query", f"getRulersByPeriod({start_year}, {end_year})")
        rulers = service.rulers_by_period(_stores(info).rulers, start_year, end_year)
        return [RulerType.from_record(r) for r in rulers]

    @strawberry.field
    def health(self, info: Info) -> str:
        _log(info, "graphql.query", "health")
        return HEALTH_MESSAGE


@strawberry.type
class Mutation:
    @strawberry.mutation
    def create_ruler(self, info: Info, input: CreateRulerInput) -> RulerType:
        _log(info, "graphql.mutation", "createRuler")
        try:
            ruler = service.create_ruler(_stores(info).rulers, _input_dict(input))
        except CatalogError as e:
            raise _field_error(e)
        return RulerType.from_record(ruler)

    @strawberry.mutation
    def update_ruler(self, info: Info, id: strawberry.ID, input: UpdateRulerInput) -> RulerType:
        _log(info, "graphql.mutation", f"updateRuler({id})")
        try:
            ruler = service.update_ruler(_stores(info).rulers, str(id), _input_dict(input))
        except CatalogError as e:
            raise _field_error(e)
        return RulerType.from_record(ruler)

    @strawberry.mutation
    def delete_ruler(self, info: Info, id: strawberry.ID) -> DeleteResult:
        _log(info, "graphql.mutation", f"deleteRuler({id})")
        try:
            result = service.delete_ruler(_stores(info).rulers, str(id))
        except CatalogError as e:
            raise _field_error(e)
        return DeleteResult(success=result["success"], message=result["message"])

    @strawberry.mutation
    def add_castle_to_ruler(self, info: Info, ruler_id: strawberry.ID, castle_id: strawberry.ID) -> RulerType:
        _log(info, "graphql.mutation", f"addCastleToRuler({ruler_id}, {castle_id})")
        try:
            ruler = service.add_castle(_stores(info).rulers, str(ruler_id), str(castle_id))
        except CatalogError as e:
            raise _field_error(e)
        return RulerType.from_record(ruler)

    @strawberry.mutation
    def remove_castle_from_ruler(self, info: Info, ruler_id: strawberry.ID, castle_id: strawberry.ID) -> RulerType:
        _log(info, "graphql.mutation", f"removeCastleFromRuler({ruler_id}, {castle_id})")
        try:
            ruler = service.remove_castle(_stores(info).rulers, str(ruler_id), str(castle_id))
        except CatalogError as e:
            raise _field_error(e)
        return RulerType.from_record(ruler)


schema = strawberry.Schema(query=Query, mutation=Mutation)


def get_context(request: Request, stores: Stores = Depends(get_stores)) -> Dict[str, Any]:
    return {"request": request, "stores": stores}


def create_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(schema, context_getter=get_context)
