from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_CASTLE_DESCRIPTION = "A beautiful castle"

YEAR_BUILT_MIN = 1000
YEAR_BUILT_MAX = 2100


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Castle(CamelModel):
    id: str
    name: str
    region: str
    year_built: int
    description: str = DEFAULT_CASTLE_DESCRIPTION


class CastleCreateIn(CamelModel):
    name: str = Field(min_length=1)
    region: str = Field(min_length=1)
    year_built: int = Field(strict=True, ge=YEAR_BUILT_MIN, le=YEAR_BUILT_MAX)
    description: Optional[str] = None
