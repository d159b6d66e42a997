"""HTTP tests for the REST routes, error envelope and fixture hooks."""

from __future__ import annotations

from fastapi.testclient import TestClient

from castle_catalog.core.stores import Stores
from castle_catalog.main import create_app

VERSAILLES_ID = "550e8400-e29b-41d4-a716-446655440000"


def test_health(client) -> None:
    """Health reports store sizes and echoes a request id."""

    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["stores"] == {"castles": 5, "rulers": 4}
    assert response.headers["X-Request-Id"]


def test_request_id_is_echoed(client) -> None:
    """A caller-supplied X-Request-Id comes back unchanged."""

    response = client.get("/castles", headers={"X-Request-Id": "REQ-1"})

    assert response.headers["X-Request-Id"] == "REQ-1"


def test_list_and_get_castle(client) -> None:
    """Castles are served with camelCase fields."""

    listed = client.get("/castles").json()
    assert len(listed) == 5
    assert listed[0]["yearBuilt"] == 1623

    castle = client.get(f"/castles/{VERSAILLES_ID}").json()
    assert castle["name"] == "Château de Versailles"
    assert castle["region"] == "Île-de-France"


def test_get_missing_castle_uses_error_envelope(client) -> None:
    """A missing castle is a 404 not_found envelope."""

    response = client.get("/castles/missing", headers={"X-Request-Id": "REQ-404"})

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "not_found"
    assert body["message"] == "Castle not found"
    assert body["request_id"] == "REQ-404"


def test_create_castle(client, stores) -> None:
    """POST /castles returns 201 and the description default."""

    response = client.post("/castles", json={"name": "Château de Chambord", "region": "Centre-Val de Loire", "yearBuilt": 1519})

    assert response.status_code == 201
    body = response.json()
    assert body["description"] == "A beautiful castle"
    assert stores.castles.get_by_id(body["id"]) is not None


def test_create_castle_year_500_is_validation_error(client, stores) -> None:
    """yearBuilt=500 is rejected with a 400 validation_error and nothing is stored."""

    response = client.post("/castles", json={"name": "Old", "region": "Gaul", "yearBuilt": 500})

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert response.json()["message"] == "Year built must be between 1000 and 2100"
    assert len(stores.castles) == 5


def test_create_castle_with_non_object_body(client) -> None:
    """A body that is not a JSON object is a validation error."""

    response = client.post("/castles", json=["not", "an", "object"])

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_delete_castle(client) -> None:
    """DELETE returns 204 and a second delete is a 404."""

    assert client.delete(f"/castles/{VERSAILLES_ID}").status_code == 204
    assert client.get(f"/castles/{VERSAILLES_ID}").status_code == 404
    assert client.delete(f"/castles/{VERSAILLES_ID}").json()["error"] == "not_found"


def test_castle_with_rulers_route(client) -> None:
    """The relation route embeds the castle's rulers."""

    body = client.get(f"/castles/{VERSAILLES_ID}/rulers").json()

    assert body["id"] == VERSAILLES_ID
    assert [r["id"] for r in body["rulers"]] == ["ruler-louis-xiv-001", "ruler-louis-xiii-001"]
    assert body["rulers"][0]["reignStart"] == 1643


def test_all_castles_with_rulers_route(client) -> None:
    """Every castle appears, including ones without rulers."""

    body = client.get("/castles-with-rulers").json()

    assert len(body) == 5
    assert body[-1]["rulers"] == []


def test_heritage_routes(client) -> None:
    """Heritage summary, region and oldest routes answer from the castle store."""

    summary = client.get("/heritage").json()
    assert summary["totalCastles"] == 5
    assert summary["oldestCastle"]["name"] == "Château de Fontainebleau"
    assert "yearBuilt" not in summary["castles"][0]

    region = client.get("/heritage/regions/loire").json()
    assert region["count"] == 2

    oldest = client.get("/heritage/oldest", params={"limit": 2}).json()
    assert oldest["limit"] == 2
    assert [c["yearBuilt"] for c in oldest["castles"]] == [1137, 1190]

    assert client.get("/heritage/oldest").json()["limit"] == 5


def test_heritage_on_empty_catalog_reports_null_oldest() -> None:
    """An empty catalog still returns oldestCastle, as null."""

    client = TestClient(create_app(stores=Stores.empty(), fixture_hooks=False))

    body = client.get("/heritage").json()

    assert body == {"totalCastles": 0, "regions": [], "oldestCastle": None, "averageAge": 0, "castles": []}


def test_heritage_oldest_rejects_bad_limit(client) -> None:
    """limit below 1 is a validation error."""

    response = client.get("/heritage/oldest", params={"limit": 0})

    assert response.status_code == 400
    assert response.json()["message"] == "Limit must be a positive number"


def test_heritage_castle_detail_and_recommend(client) -> None:
    """Detail and recommend routes return their computed fields."""

    detail = client.get(f"/heritage/castle/{VERSAILLES_ID}").json()
    assert detail["visitRecommendation"]
    assert len(detail["rulers"]) == 2

    rec = client.post("/heritage/recommend", json={"region": "loire"}).json()
    assert rec["totalMatching"] == 2
    assert len(rec["recommendations"]) == 2

    bad = client.post("/heritage/recommend", json={"minAge": 10, "maxAge": 5})
    assert bad.status_code == 400
    assert bad.json()["error"] == "validation_error"


def test_fixture_hooks_setup_and_reset(client) -> None:
    """Fixture hooks install a snapshot and reset back to it."""

    fixtures = {
        "entities": {
            "Castle": [{"data": {"id": "c1", "name": "Château A", "region": "Alsace", "yearBuilt": 1200}}],
        }
    }
    assert client.post("/_fixtures/setup", json=fixtures).json() == {"loaded": {"Castle": 1}}

    client.post("/castles", json={"name": "Extra", "region": "X", "yearBuilt": 1500})
    assert len(client.get("/castles").json()) == 2

    assert client.post("/_fixtures/state/createCastle").json() == {"reset": ["Castle"]}
    assert [c["id"] for c in client.get("/castles").json()] == ["c1"]

    snapshot = client.get("/_fixtures/snapshot").json()
    assert [c["id"] for c in snapshot["castles"]] == ["c1"]
    assert snapshot["castles"][0]["yearBuilt"] == 1200
    assert len(snapshot["rulers"]) == 4

    assert client.post("/_fixtures/reset").json() == {"reset": ["Castle", "Ruler"]}


def test_fixture_hooks_hidden_when_disabled() -> None:
    """Without the flag the fixture routes are not mounted."""

    client = TestClient(create_app(stores=Stores.empty(), fixture_hooks=False))

    assert client.post("/_fixtures/reset").status_code == 404
    assert client.get("/castles").json() == []


def test_root_redirects_to_docs(client) -> None:
    """The root path redirects to the Swagger UI."""

    response = client.get("/", follow_redirects=False)

    assert response.status_code in (302, 307)
    assert response.headers["location"] == "/docs"
