"""
tests/test_api.py — Tests for the FastAPI search service.
"""

import pytest
from fastapi.testclient import TestClient

from remedy import main
from remedy.matching import config
from remedy.matching.datastore import PlantCatalog


@pytest.fixture
def client(sample_plants):
    main.app.dependency_overrides[main.get_catalog] = lambda: PlantCatalog(sample_plants)
    with TestClient(main.app) as c:
        yield c
    main.app.dependency_overrides.clear()


def test_health(client):
    rv = client.get("/api/health")
    assert rv.status_code == 200
    body = rv.json()
    assert body["status"] == "ok"
    assert body["plants_loaded"] == 5
    assert body["plants_with_benefits"] == 5


def test_search_requires_query(client):
    rv = client.get("/api/search")
    assert rv.status_code == 400
    assert rv.json()["detail"] == 'Query parameter "q" is required'

    rv = client.post("/api/search", json={"q": "   "})
    assert rv.status_code == 400


def test_search_get(client):
    rv = client.get("/api/search", params={"q": "my joints hurt with arthritis"})
    assert rv.status_code == 200
    body = rv.json()
    names = [r["plant"]["name"] for r in body["results"]]
    assert names == ["Turmeric", "Ginger", "Chamomile", "Echinacea", "Aloe Vera"]
    assert body["results"][0]["matchedBenefits"] == ["anti-inflammatory"]
    assert body["searchInsights"]["extractedKeywords"] == ["joints", "hurt", "arthritis"]
    assert body["searchInsights"]["suggestions"] == []


def test_search_post(client):
    rv = client.post("/api/search", json={"q": "echinacea tea recipe"})
    assert rv.status_code == 200
    body = rv.json()
    assert [(r["plant"]["name"], r["score"]) for r in body["results"]] == [("Echinacea", 1)]
    assert body["searchInsights"]["suggestions"] == config.FALLBACK_SUGGESTIONS


def test_insights(client):
    rv = client.post("/api/insights", json={"q": "suffering from diabetes"})
    assert rv.status_code == 200
    body = rv.json()
    assert body["extractedKeywords"] == ["suffer", "diabetes"]
    assert body["conditions"] == ["diabetes"]


def test_missing_catalog_file_is_empty_catalog(monkeypatch, tmp_path):
    monkeypatch.setattr(main, "CATALOG_PATH", str(tmp_path / "nope.json"))
    with TestClient(main.app) as c:
        rv = c.get("/api/search", params={"q": "headache"})
    assert rv.status_code == 200
    body = rv.json()
    assert body["results"] == []
    assert body["searchInsights"]["suggestions"] == config.CATALOG_EMPTY_SUGGESTIONS


def test_catalog_failure_returns_500(monkeypatch, tmp_path):
    broken = tmp_path / "plants.json"
    broken.write_text("{broken", encoding="utf-8")
    monkeypatch.setattr(main, "CATALOG_PATH", str(broken))
    with TestClient(main.app) as c:
        rv = c.get("/api/search", params={"q": "headache"})
    assert rv.status_code == 500
    assert rv.json()["detail"] == "Failed to fetch plants data"


def test_catalog_read_from_file(monkeypatch, catalog_path):
    monkeypatch.setattr(main, "CATALOG_PATH", catalog_path)
    with TestClient(main.app) as c:
        rv = c.get("/api/search", params={"q": "nausea"})
    assert rv.status_code == 200
    assert [r["plant"]["name"] for r in rv.json()["results"]] == ["Ginger"]
