from __future__ import annotations

from dataclasses import replace

from fastapi.testclient import TestClient

from campus_connect.api import errors
from tests.helpers import API, auth_headers


def test_errors_are_flat_json(client: TestClient):
    resp = client.get(f"{API}/events/missing")
    assert resp.status_code == 404
    assert resp.json() == {
        "error": "Event not found",
        "code": "EVENT_NOT_FOUND",
        "details": "Event not found",
    }


def test_details_hidden_in_production(client: TestClient, monkeypatch):
    monkeypatch.setattr(errors, "settings", replace(errors.settings, env="production"))
    resp = client.get(f"{API}/events/missing")
    assert resp.json() == {"error": "Event not found", "code": "EVENT_NOT_FOUND"}


def test_body_validation_is_400(client: TestClient):
    resp = client.post(
        f"{API}/events",
        json={"title": "x", "capacity": 0},
        headers=auth_headers("u-1"),
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "INVALID_INPUT"
    assert "capacity" in body["details"]


def test_unknown_route_keeps_status(client: TestClient):
    resp = client.get(f"{API}/nothing-here")
    assert resp.status_code == 404
    assert resp.json()["code"] == "HTTP_404"


def test_request_id_and_security_headers(client: TestClient):
    resp = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert resp.status_code == 200
    assert resp.headers["X-Request-ID"] == "req-123"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_cors_allows_any_origin(client: TestClient):
    resp = client.get("/health", headers={"Origin": "https://example.org"})
    assert resp.headers["access-control-allow-origin"] == "*"


def test_unexpected_errors_still_get_flat_json(monkeypatch):
    from campus_connect.main import app
    from campus_connect.services import events_service

    def explode(db, event_id):
        raise RuntimeError("boom")

    monkeypatch.setattr(events_service, "get_event", explode)

    client = TestClient(app, raise_server_exceptions=False)
    resp = client.get(f"{API}/events/anything")
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json() == {
        "error": "Internal server error",
        "code": "INTERNAL",
        "details": "RuntimeError: boom",
    }


def test_bare_errors_carry_matching_codes():
    from campus_connect.services.exceptions import ConflictError, NotFoundError

    assert errors.status_for(NotFoundError()) == 404
    assert NotFoundError().code == "NOT_FOUND"
    assert errors.status_for(ConflictError()) == 409
    assert ConflictError().code == "CONFLICT"


def test_api_responses_are_not_cached(client: TestClient):
    resp = client.get(f"{API}/events")
    assert resp.headers["Cache-Control"] == "no-store"
    assert "Cache-Control" not in client.get("/health").headers
