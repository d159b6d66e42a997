from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from castle_catalog.core.errors import ValidationFailed
from castle_catalog.core.stores import Stores, get_stores
from castle_catalog.modules.castles.schemas import Castle
from .schemas import (
    CastleHeritageDetailOut,
    CastleWithRulers,
    HeritageSummaryOut,
    OldestOut,
    RecommendIn,
    RecommendOut,
    RegionOut,
)
from .service import (
    DEFAULT_OLDEST_LIMIT,
    all_castles_with_rulers,
    castle_heritage_detail,
    castle_with_rulers,
    castles_by_region,
    heritage_entry,
    heritage_summary,
    oldest_castles,
    recommend_castles,
    this_year,
)

router = APIRouter(tags=["relations"])


@router.get("/castles-with-rulers", response_model=List[CastleWithRulers])
def api_all_castles_with_rulers(stores: Stores = Depends(get_stores)) -> List[CastleWithRulers]:
    return all_castles_with_rulers(stores.castles, stores.rulers)


@router.get("/castles/{castle_id}/rulers", response_model=CastleWithRulers)
def api_castle_with_rulers(castle_id: str, stores: Stores = Depends(get_stores)) -> CastleWithRulers:
    return castle_with_rulers(stores.castles, stores.rulers, castle_id)


@router.get("/heritage", response_model=HeritageSummaryOut)
def api_heritage(stores: Stores = Depends(get_stores)) -> HeritageSummaryOut:
    return heritage_summary(stores.castles)


@router.get("/heritage/regions/{region}", response_model=RegionOut)
def api_heritage_region(region: str, stores: Stores = Depends(get_stores)) -> RegionOut:
    year = this_year(None)
    castles: List[Castle] = castles_by_region(stores.castles, region)
    return RegionOut(region=region, count=len(castles), castles=[heritage_entry(c, year) for c in castles])


@router.get("/heritage/oldest", response_model=OldestOut)
def api_heritage_oldest(
    limit: int | None = Query(None, description="Max castles to return (default 5)"),
    stores: Stores = Depends(get_stores),
) -> OldestOut:
    lim = DEFAULT_OLDEST_LIMIT if limit is None else limit
    if lim < 1:
        raise ValidationFailed("Limit must be a positive number", details={"limit": lim})
    year = this_year(None)
    return OldestOut(limit=lim, castles=[heritage_entry(c, year) for c in oldest_castles(stores.castles, lim)])


@router.get("/heritage/castle/{castle_id}", response_model=CastleHeritageDetailOut)
def api_heritage_castle(castle_id: str, stores: Stores = Depends(get_stores)) -> CastleHeritageDetailOut:
    return castle_heritage_detail(stores.castles, stores.rulers, castle_id)


@router.post("/heritage/recommend", response_model=RecommendOut)
def api_heritage_recommend(body: RecommendIn, stores: Stores = Depends(get_stores)) -> RecommendOut:
    return recommend_castles(stores.castles, region=body.region, min_age=body.min_age, max_age=body.max_age)
