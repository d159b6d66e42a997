from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from castle_catalog.modules.castles.schemas import CamelModel, Castle
from castle_catalog.modules.rulers.schemas import Ruler


class CastleWithRulers(Castle):
    rulers: List[Ruler] = Field(default_factory=list)


class HeritageSummaryEntryOut(CamelModel):
    id: str
    name: str
    region: str
    age: int


class HeritageCastleOut(HeritageSummaryEntryOut):
    year_built: int


class HeritageSummaryOut(CamelModel):
    total_castles: int
    regions: List[str]
    oldest_castle: Optional[Castle] = None
    average_age: int
    castles: List[HeritageSummaryEntryOut]


class RegionOut(CamelModel):
    region: str
    count: int
    castles: List[HeritageCastleOut]


class OldestOut(CamelModel):
    limit: int
    castles: List[HeritageCastleOut]


class CastleHeritageDetailOut(Castle):
    age: int
    visit_recommendation: str
    rulers: List[Ruler] = Field(default_factory=list)


class RecommendIn(CamelModel):
    region: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None


class RecommendationOut(HeritageCastleOut):
    reason: str


class RecommendOut(CamelModel):
    filters: Dict[str, Any]
    recommendations: List[RecommendationOut]
    total_matching: int
