"""Tests for the search API endpoints."""

import json

import pytest
from api.services import Services, load_catalog


def test_root_endpoint(client):
    resp = client.get("/")
    assert resp.status_code == 200
    data = resp.json()
    assert data["service"] == "Conversational Search Engine"
    assert "version" in data


def test_health_endpoint(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["services"]["catalog_items"] == 3
    assert data["services"]["indexed"] is True


def test_search_basic(client):
    resp = client.get("/api/v1/search", params={"q": "beli iphone", "session_id": "api-1"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["query"] == "beli iphone"
    assert data["session_id"] == "api-1"
    assert data["intent"] == "sales_beli"
    assert data["results"][0]["title"] == "iPhone 15 Pro"
    assert data["confidence"] == 100
    assert isinstance(data["processing_time_ms"], (int, float))


def test_search_requires_query(client):
    resp = client.get("/api/v1/search")
    assert resp.status_code == 422


def test_search_blocked_input(client):
    resp = client.get("/api/v1/search", params={"q": "<script>alert(1)</script>"})
    assert resp.status_code == 200
    assert resp.json()["intent"] == "blocked"


def test_search_with_compare_flag(client):
    resp = client.get("/api/v1/search", params={"q": "bandingkan iphone vs samsung", "compare": True})
    assert resp.status_code == 200
    data = resp.json()
    assert data["intent"] == "comparison"
    assert data["comparison"]["table_markdown"].startswith("| Fitur |")


def test_compare_by_category(client):
    resp = client.post("/api/v1/compare", json={"category": "produk"})
    assert resp.status_code == 200
    data = resp.json()
    assert len(data["items"]) == 2
    assert data["recommendation"]["item"]["title"] == "iPhone 15 Pro"


def test_compare_requires_query_or_category(client):
    resp = client.post("/api/v1/compare", json={})
    assert resp.status_code == 422


def test_add_catalog_items(client):
    resp = client.post("/api/v1/catalog", json={"items": [{"title": "Xiaomi 14", "category": "Produk"}]})
    assert resp.status_code == 200
    assert resp.json() == {"added": 1, "total": 4}


def test_add_catalog_tolerates_null_fields(client):
    item = {"title": "Xiaomi 14", "description": None, "keywords": None}
    resp = client.post("/api/v1/catalog", json={"items": [item]})
    assert resp.status_code == 200
    assert resp.json()["total"] == 4


def test_add_catalog_rejects_empty(client):
    resp = client.post("/api/v1/catalog", json={"items": []})
    assert resp.status_code == 422


def test_reset_session(client):
    client.get("/api/v1/search", params={"q": "beli iphone", "session_id": "api-2"})
    resp = client.delete("/api/v1/sessions/api-2")
    assert resp.status_code == 200
    assert resp.json()["status"] == "reset"


def test_reset_unknown_session(client):
    resp = client.delete("/api/v1/sessions/does-not-exist")
    assert resp.status_code == 404


def test_debug_setting_enables_debug_mode(monkeypatch):
    from api.main import create_app
    from config.settings import get_settings

    monkeypatch.setenv("ASSISTANT_DEBUG", "true")
    get_settings.cache_clear()
    try:
        assert create_app().debug is True
    finally:
        monkeypatch.delenv("ASSISTANT_DEBUG")
        get_settings.cache_clear()
    assert create_app().debug is False


# ── Services ──────────────────────────────────────────

class TestServices:
    def test_load_catalog_formats(self, tmp_path, catalog_rows):
        listed = tmp_path / "list.json"
        listed.write_text(json.dumps(catalog_rows), encoding="utf-8")
        wrapped = tmp_path / "wrapped.json"
        wrapped.write_text(json.dumps({"items": catalog_rows}), encoding="utf-8")

        assert len(load_catalog(str(listed))) == 3
        assert len(load_catalog(str(wrapped))) == 3

    def test_load_catalog_rejects_scalars(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("42", encoding="utf-8")
        with pytest.raises(ValueError):
            load_catalog(str(path))

    def test_uninitialized_services(self):
        services = Services()
        assert not services.is_ready
        assert services.health() == {"engine": False}
