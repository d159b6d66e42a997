from __future__ import annotations

from castle_catalog.core.fixture_store import FixtureStore
from castle_catalog.modules.castles.schemas import DEFAULT_CASTLE_DESCRIPTION, Castle, CastleCreateIn


class CastleStore(FixtureStore[Castle]):
    record_type = Castle
    id_prefix = "castle"

    def create(self, data: CastleCreateIn) -> Castle:
        castle = Castle(
            id=self._new_id(),
            name=data.name,
            region=data.region,
            year_built=data.year_built,
            description=data.description or DEFAULT_CASTLE_DESCRIPTION,
        )
        return self._append(castle)
