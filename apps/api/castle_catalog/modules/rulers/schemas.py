from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator

from castle_catalog.modules.castles.schemas import CamelModel

# update() may touch these; castle_ids only changes through the relation operations
UPDATABLE_FIELDS = ("name", "title", "reign_start", "reign_end", "house", "description", "achievements")


def dedupe_ids(ids: List[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for cid in ids:
        if cid in seen:
            continue
        seen.add(cid)
        out.append(cid)
    return out


class Ruler(CamelModel):
    id: str
    name: str
    title: str
    reign_start: int
    reign_end: Optional[int] = None
    house: str
    castle_ids: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    achievements: List[str] = Field(default_factory=list)

    @field_validator("castle_ids")
    @classmethod
    def _unique_castle_ids(cls, v: List[str]) -> List[str]:
        return dedupe_ids(v)


class RulerCreateIn(CamelModel):
    name: str
    title: str
    reign_start: int
    reign_end: Optional[int] = None
    house: str
    castle_ids: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    achievements: List[str] = Field(default_factory=list)


class RulerUpdateIn(CamelModel):
    name: Optional[str] = None
    title: Optional[str] = None
    reign_start: Optional[int] = None
    reign_end: Optional[int] = None
    house: Optional[str] = None
    description: Optional[str] = None
    achievements: Optional[List[str]] = None
