"""
Runtime configuration for the castle catalog.

Defaults:
- APP_VERSION: 0.1.0
- LOG_LEVEL: INFO
- CASTLES_SEED_PATH / RULERS_SEED_PATH: packaged JSON under castle_catalog/data
- FIXTURE_HOOKS_ENABLED: off
- HOST/PORT: 0.0.0.0:4001
"""
from __future__ import annotations

import os
from pathlib import Path

DEFAULT_APP_VERSION = "0.1.0"
DEFAULT_PORT = 4001


def _package_root() -> Path:
    # apps/api/castle_catalog/core/config.py -> castle_catalog = parents[1]
    return Path(__file__).resolve().parents[1]


def get_app_version() -> str:
    return os.getenv("APP_VERSION", DEFAULT_APP_VERSION)


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def _seed_path(env_name: str, filename: str) -> Path:
    raw = os.getenv(env_name)
    if not raw:
        return _package_root() / "data" / filename
    p = Path(raw)
    return p if p.is_absolute() else p.resolve()


def get_castles_seed_path() -> Path:
    return _seed_path("CASTLES_SEED_PATH", "castles.json")


def get_rulers_seed_path() -> Path:
    return _seed_path("RULERS_SEED_PATH", "rulers.json")


def is_fixture_hooks_enabled(*, default: bool = False) -> bool:
    """
    Feature flag (rollback-first):
      FIXTURE_HOOKS_ENABLED=0 -> off
      FIXTURE_HOOKS_ENABLED=1 -> on
    Default is OFF unless explicitly enabled.
    """
    v = os.environ.get("FIXTURE_HOOKS_ENABLED")
    if v is None:
        return default
    v = v.strip().lower()
    return v not in ("0", "false", "no", "")


def get_host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def get_port() -> int:
    raw = os.getenv("PORT")
    if raw is None:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        return DEFAULT_PORT
