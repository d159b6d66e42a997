from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from castle_catalog.core.fixture_store import FixtureStore
from castle_catalog.modules.rulers.schemas import UPDATABLE_FIELDS, Ruler, RulerCreateIn


class RulerStore(FixtureStore[Ruler]):
    record_type = Ruler
    id_prefix = "ruler"

    def create(self, data: RulerCreateIn) -> Ruler:
        ruler = Ruler(
            id=self._new_id(),
            name=data.name,
            title=data.title,
            reign_start=data.reign_start,
            reign_end=data.reign_end,
            house=data.house,
            castle_ids=list(data.castle_ids or []),
            description=data.description or "",
            achievements=list(data.achievements or []),
        )
        return self._append(ruler)

    def update(self, ruler_id: str, partial: Mapping[str, Any]) -> Optional[Ruler]:
        """Merge provided fields; a None value means "not provided" and keeps the old one."""
        i = self._index_of(ruler_id)
        if i == -1:
            return None
        existing = self._current[i]
        changes: Dict[str, Any] = {
            k: v for k, v in partial.items() if k in UPDATABLE_FIELDS and v is not None
        }
        updated = existing.model_copy(update=changes, deep=True)
        self._current[i] = updated
        return updated.model_copy(deep=True)

    # --- relational filters ---
    def get_by_castle(self, castle_id: str) -> List[Ruler]:
        return [r.model_copy(deep=True) for r in self._current if castle_id in r.castle_ids]

    def get_by_house(self, house: str) -> List[Ruler]:
        needle = house.lower()
        return [r.model_copy(deep=True) for r in self._current if needle in r.house.lower()]

    def get_by_period(self, start_year: int, end_year: int, current_year: Optional[int] = None) -> List[Ruler]:
        now = current_year if current_year is not None else date.today().year
        out: List[Ruler] = []
        for r in self._current:
            reign_end = r.reign_end if r.reign_end is not None else now
            if r.reign_start <= end_year and reign_end >= start_year:
                out.append(r.model_copy(deep=True))
        return out

    # --- castle associations ---
    def add_castle_to_ruler(self, ruler_id: str, castle_id: str) -> Optional[Ruler]:
        i = self._index_of(ruler_id)
        if i == -1:
            return None
        ruler = self._current[i]
        if castle_id not in ruler.castle_ids:
            ruler.castle_ids.append(castle_id)
        return ruler.model_copy(deep=True)

    def remove_castle_from_ruler(self, ruler_id: str, castle_id: str) -> Optional[Ruler]:
        i = self._index_of(ruler_id)
        if i == -1:
            return None
        ruler = self._current[i]
        if castle_id in ruler.castle_ids:
            ruler.castle_ids.remove(castle_id)
        return ruler.model_copy(deep=True)
