"""Pytest fixtures shared across store, service and API tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from castle_catalog.core.stores import Stores
from castle_catalog.main import create_app

VERSAILLES_ID = "550e8400-e29b-41d4-a716-446655440000"
LOUVRE_ID = "550e8400-e29b-41d4-a716-446655440001"
FONTAINEBLEAU_ID = "550e8400-e29b-41d4-a716-446655440002"
CHENONCEAU_ID = "550e8400-e29b-41d4-a716-446655440004"


@pytest.fixture
def stores() -> Stores:
    """Return a fresh pair of stores seeded with the default dataset."""

    return Stores.from_seed()


@pytest.fixture
def client(stores: Stores) -> TestClient:
    """Return a test client for an app bound to the `stores` fixture, hooks enabled."""

    return TestClient(create_app(stores=stores, fixture_hooks=True))
