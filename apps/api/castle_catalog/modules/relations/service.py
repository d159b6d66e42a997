"""
Cross-store queries.

Castle lookups are authoritative: a missing castle raises NotFoundError.
Ruler joins are best effort: if the ruler side fails for a castle, the
castle is still returned with an empty rulers list and a RelationWarning
is issued and logged.
"""
from __future__ import annotations

import random
import warnings
from datetime import date
from typing import Any, Dict, List, Optional, Protocol

from castle_catalog.core.errors import NotFoundError, RelationWarning, ValidationFailed
from castle_catalog.core.observability import emit
from castle_catalog.modules.castles.schemas import Castle
from castle_catalog.modules.castles.store import CastleStore
from castle_catalog.modules.rulers.schemas import Ruler

from .schemas import (
    CastleHeritageDetailOut,
    CastleWithRulers,
    HeritageCastleOut,
    HeritageSummaryEntryOut,
    HeritageSummaryOut,
    RecommendationOut,
    RecommendOut,
)

MAX_RECOMMENDATIONS = 3
DEFAULT_OLDEST_LIMIT = 5


class RulerLookup(Protocol):
    """The part of the ruler side the joins need. RulerStore satisfies it."""

    def get_by_castle(self, castle_id: str) -> List[Ruler]:
        ...


def this_year(current_year: Optional[int]) -> int:
    return current_year if current_year is not None else date.today().year


def _rulers_for(rulers: RulerLookup, castle_id: str) -> List[Ruler]:
    try:
        return list(rulers.get_by_castle(castle_id))
    except Exception as e:
        msg = f"ruler lookup failed for castle {castle_id}: {e}"
        warnings.warn(RelationWarning(msg), stacklevel=3)
        emit("warning", "relation.rulers_failed", msg, None, __name__, castle_id=castle_id, type=type(e).__name__)
        return []


def _require_castle(castles: CastleStore, castle_id: str) -> Castle:
    castle = castles.get_by_id(castle_id)
    if castle is None:
        raise NotFoundError("Castle not found", details={"id": castle_id})
    return castle


# --- joins ---
def castle_with_rulers(castles: CastleStore, rulers: RulerLookup, castle_id: str) -> CastleWithRulers:
    castle = _require_castle(castles, castle_id)
    return CastleWithRulers(**castle.model_dump(), rulers=_rulers_for(rulers, castle.id))


def all_castles_with_rulers(castles: CastleStore, rulers: RulerLookup) -> List[CastleWithRulers]:
    return [CastleWithRulers(**c.model_dump(), rulers=_rulers_for(rulers, c.id)) for c in castles.list()]


# --- castle filters ---
def castles_by_region(castles: CastleStore, region: str) -> List[Castle]:
    needle = region.lower()
    return [c for c in castles.list() if needle in c.region.lower()]


def oldest_castles(castles: CastleStore, limit: int = DEFAULT_OLDEST_LIMIT) -> List[Castle]:
    # sorted() is stable: equal years keep store order
    return sorted(castles.list(), key=lambda c: c.year_built)[: max(limit, 0)]


# --- heritage views ---
def heritage_entry(c: Castle, year: int) -> HeritageCastleOut:
    return HeritageCastleOut(id=c.id, name=c.name, region=c.region, year_built=c.year_built, age=year - c.year_built)


def visit_recommendation(age: int) -> str:
    if age < 200:
        return "Perfect for those interested in more recent architectural styles."
    if age < 500:
        return "Great example of medieval French architecture and history."
    return "A rare glimpse into ancient French heritage and medieval life."


def heritage_summary(castles: CastleStore, current_year: Optional[int] = None) -> HeritageSummaryOut:
    year = this_year(current_year)
    items = castles.list()

    regions: List[str] = []
    for c in items:
        if c.region not in regions:
            regions.append(c.region)

    oldest = min(items, key=lambda c: c.year_built) if items else None
    average_age = sum(year - c.year_built for c in items) // len(items) if items else 0

    return HeritageSummaryOut(
        total_castles=len(items),
        regions=regions,
        oldest_castle=oldest,
        average_age=average_age,
        castles=[HeritageSummaryEntryOut(id=c.id, name=c.name, region=c.region, age=year - c.year_built) for c in items],
    )


def castle_heritage_detail(
    castles: CastleStore,
    rulers: RulerLookup,
    castle_id: str,
    current_year: Optional[int] = None,
) -> CastleHeritageDetailOut:
    year = this_year(current_year)
    castle = _require_castle(castles, castle_id)
    age = year - castle.year_built
    data = castle.model_dump()
    data["description"] = (
        f"The magnificent {castle.name} was built in {castle.year_built} in the {castle.region} region."
    )
    return CastleHeritageDetailOut(
        **data,
        age=age,
        visit_recommendation=visit_recommendation(age),
        rulers=_rulers_for(rulers, castle.id),
    )


def _recommend_reason(c: Castle, age: int, region: Optional[str], min_age: Optional[int], max_age: Optional[int]) -> str:
    reasons: List[str] = []
    if region:
        reasons.append(f"matches your preferred region ({c.region})")
    if min_age is not None and max_age is not None:
        reasons.append(f"perfect age ({age} years old)")
    elif min_age is not None:
        reasons.append(f"historic significance ({age} years old)")
    elif max_age is not None:
        reasons.append(f"relatively recent construction ({age} years old)")
    if not reasons:
        reasons.append("excellent choice for heritage tourism")
    return ", ".join(reasons)


def validate_recommend_filters(min_age: Optional[int], max_age: Optional[int]) -> None:
    if max_age is not None and max_age < 0:
        raise ValidationFailed("Max age must be a positive number")
    if min_age is not None and min_age < 0:
        raise ValidationFailed("Min age must be a positive number")
    if min_age is not None and max_age is not None and min_age > max_age:
        raise ValidationFailed("Min age cannot be greater than max age")


def recommend_castles(
    castles: CastleStore,
    region: Optional[str] = None,
    min_age: Optional[int] = None,
    max_age: Optional[int] = None,
    current_year: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> RecommendOut:
    validate_recommend_filters(min_age, max_age)
    year = this_year(current_year)

    matching = castles_by_region(castles, region) if region else castles.list()
    matching = [
        c
        for c in matching
        if (min_age is None or year - c.year_built >= min_age) and (max_age is None or year - c.year_built <= max_age)
    ]
    (rng or random.Random()).shuffle(matching)

    filters: Dict[str, Any] = {}
    if region:
        filters["region"] = region
    if min_age is not None:
        filters["minAge"] = min_age
    if max_age is not None:
        filters["maxAge"] = max_age

    recommendations = [
        RecommendationOut(
            **heritage_entry(c, year).model_dump(),
            reason=_recommend_reason(c, year - c.year_built, region, min_age, max_age),
        )
        for c in matching[:MAX_RECOMMENDATIONS]
    ]
    return RecommendOut(filters=filters, recommendations=recommendations, total_matching=len(matching))
