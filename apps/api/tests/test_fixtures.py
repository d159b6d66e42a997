"""Tests for normalized fixture loading and per-operation state handlers."""

from __future__ import annotations

from castle_catalog.modules.castles.schemas import CastleCreateIn
from castle_catalog.modules.fixtures.service import (
    castle_from_fixture,
    load_normalized_fixtures,
    reset_for_operation,
    ruler_from_fixture,
)
from castle_catalog.modules.rulers.schemas import RulerCreateIn

FIXTURES = {
    "entities": {
        "Castle": [
            {"data": {"id": "c1", "name": "Château A", "region": "Alsace", "yearBuilt": 1200}, "source": "consumer"},
            {"data": {"id": "c2", "name": "Château B", "region": "Bourgogne", "yearBuilt": 1300, "description": "B"}},
        ],
        "Ruler": [
            {
                "data": {
                    "id": "r1",
                    "name": "Charlemagne",
                    "title": "Emperor",
                    "reignStart": 768,
                    "reignEnd": 814,
                    "house": "Carolingian",
                    "castleIds": ["c1"],
                },
                "source": "consumer",
            },
            {"data": {"id": "r2", "description": "partial from an update"}, "source": "Mutation.updateRuler"},
        ],
    },
    "metadata": {"interactions": 4},
}


def test_castle_from_fixture_fills_description() -> None:
    """Castle fixtures without a description get the placeholder."""

    record = castle_from_fixture({"id": "c", "name": "N", "region": "R", "yearBuilt": 1400})

    assert record["description"] == "A beautiful castle"
    assert castle_from_fixture({"id": "c", "name": "N", "region": "R"}) is None


def test_ruler_from_fixture_skips_incomplete_and_normalizes() -> None:
    """Complete rulers get list defaults; partial ones are rejected."""

    record = ruler_from_fixture({"id": "r", "name": "N", "title": "T", "house": "H", "reignStart": 1000, "reignEnd": "x"})

    assert record == {
        "id": "r",
        "name": "N",
        "title": "T",
        "reignStart": 1000,
        "house": "H",
        "castleIds": [],
        "description": "",
        "achievements": [],
    }
    assert ruler_from_fixture({"id": "r", "name": "N"}) is None


def test_load_normalized_fixtures_sets_both_stores(stores) -> None:
    """Loading installs the complete entities as each store's snapshot."""

    loaded = load_normalized_fixtures(stores, FIXTURES)

    assert loaded == {"Castle": 2, "Ruler": 1}
    assert [c.id for c in stores.castles.list()] == ["c1", "c2"]
    assert [r.id for r in stores.rulers.list()] == ["r1"]
    assert stores.rulers.get_by_castle("c1")[0].name == "Charlemagne"


def test_reset_after_fixture_load_returns_to_fixtures(stores) -> None:
    """reset() goes back to the loaded fixtures, not the seed data."""

    load_normalized_fixtures(stores, FIXTURES)
    stores.castles.create(CastleCreateIn(name="Extra", region="X", year_built=1500))
    stores.rulers.create(RulerCreateIn(name="Extra", title="T", reign_start=1500, house="H"))
    stores.rulers.delete("r1")

    stores.reset()

    assert [c.id for c in stores.castles.list()] == ["c1", "c2"]
    assert [r.id for r in stores.rulers.list()] == ["r1"]


def test_missing_entity_type_leaves_store_untouched(stores) -> None:
    """Only entity types present in the payload are replaced."""

    loaded = load_normalized_fixtures(stores, {"entities": {"Castle": []}})

    assert loaded == {"Castle": 0}
    assert stores.castles.list() == []
    assert len(stores.rulers) == 4


def test_state_handlers_reset_the_owning_store(stores) -> None:
    """Castle operations reset castles only; ruler operations reset rulers only."""

    stores.castles.delete("550e8400-e29b-41d4-a716-446655440000")
    stores.rulers.delete("ruler-louis-xiv-001")

    assert reset_for_operation(stores, "getCastle") == ["Castle"]
    assert len(stores.castles) == 5
    assert len(stores.rulers) == 3

    assert reset_for_operation(stores, "Mutation.updateRuler") == ["Ruler"]
    assert len(stores.rulers) == 4


def test_unknown_state_handler_resets_everything(stores) -> None:
    """Unknown operation names reset both stores."""

    stores.castles.delete("550e8400-e29b-41d4-a716-446655440000")
    stores.rulers.delete("ruler-louis-xiv-001")

    assert reset_for_operation(stores, "somethingElse") == ["Castle", "Ruler"]
    assert (len(stores.castles), len(stores.rulers)) == (5, 4)
