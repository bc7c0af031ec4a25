from __future__ import annotations

from fastapi.testclient import TestClient

from campus_connect.auth.principal import encode_client_principal

API = "/api"


def auth_headers(
    user_id: str,
    name: str | None = None,
    roles: list[str] | None = None,
    email: str | None = None,
) -> dict[str, str]:
    value = encode_client_principal(
        user_id,
        user_details=name if name is not None else f"{user_id}@campus.edu",
        roles=["authenticated", *(roles or [])],
        email=email,
    )
    return {"x-ms-client-principal": value}


def event_payload(**overrides) -> dict:
    payload = {
        "title": "Intro to Robotics",
        "description": "Hands-on workshop",
        "date": "2030-05-01",
        "time": "18:30",
        "location": "Engineering Hall 101",
    }
    payload.update(overrides)
    return payload


def create_event(client: TestClient, headers: dict[str, str], **overrides):
    return client.post(f"{API}/events", json=event_payload(**overrides), headers=headers)


def register(client: TestClient, event_id: str, headers: dict[str, str], answers=None):
    body = {"registrationData": answers} if answers is not None else None
    return client.post(f"{API}/events/{event_id}/register", json=body, headers=headers)
