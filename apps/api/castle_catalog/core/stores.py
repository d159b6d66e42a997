"""
Store container and FastAPI dependencies.

One Stores instance is built per application (default seed data unless
fixtures are given) and attached to app.state.stores. Routers and the
GraphQL context read it from the request; nothing lives at module level.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import Request

from castle_catalog.core.config import get_castles_seed_path, get_rulers_seed_path
from castle_catalog.core.fixture_store import load_seed
from castle_catalog.modules.castles.store import CastleStore
from castle_catalog.modules.rulers.store import RulerStore


@dataclass
class Stores:
    castles: CastleStore
    rulers: RulerStore

    @classmethod
    def from_seed(cls, castles_path: Optional[Path] = None, rulers_path: Optional[Path] = None) -> "Stores":
        return cls(
            castles=CastleStore(load_seed(castles_path or get_castles_seed_path())),
            rulers=RulerStore(load_seed(rulers_path or get_rulers_seed_path())),
        )

    @classmethod
    def empty(cls) -> "Stores":
        return cls(castles=CastleStore(), rulers=RulerStore())

    def reset(self) -> None:
        self.castles.reset()
        self.rulers.reset()


def get_stores(request: Request) -> Stores:
    return request.app.state.stores


def get_castle_store(request: Request) -> CastleStore:
    return get_stores(request).castles


def get_ruler_store(request: Request) -> RulerStore:
    return get_stores(request).rulers
