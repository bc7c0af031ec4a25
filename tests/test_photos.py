from __future__ import annotations

from dataclasses import replace

from fastapi.testclient import TestClient

from campus_connect.services import photos_service
from tests.helpers import API, auth_headers, create_event, register

CREATOR = auth_headers("creator-1", "Casey")
STUDENT = auth_headers("student-1", "Sam")
OUTSIDER = auth_headers("outsider", "Olly")
ADMIN = auth_headers("admin", "Ada", roles=["admin"])

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _upload(client: TestClient, event_id: str, headers, name="party.png", data=PNG_BYTES, mime="image/png"):
    return client.post(
        f"{API}/events/{event_id}/photos",
        files={"file": (name, data, mime)},
        data={"caption": "Great night"},
        headers=headers,
    )


def test_upload_list_download_delete(client: TestClient):
    event_id = create_event(client, CREATOR).json()["id"]
    register(client, event_id, STUDENT)

    resp = _upload(client, event_id, STUDENT)
    assert resp.status_code == 201
    photo = resp.json()
    assert photo["caption"] == "Great night"
    assert photo["fileName"] == "party.png"
    assert photo["metadata"] == {"size": len(PNG_BYTES), "mimeType": "image/png"}
    assert photo["fileUrl"] == f"{API}/photos/{photo['id']}/file"

    gallery = client.get(f"{API}/events/{event_id}/photos").json()
    assert gallery["eventId"] == event_id
    assert gallery["totalCount"] == 1

    download = client.get(photo["fileUrl"])
    assert download.status_code == 200
    assert download.content == PNG_BYTES
    assert download.headers["content-type"] == "image/png"

    assert client.delete(f"{API}/photos/{photo['id']}", headers=OUTSIDER).status_code == 403
    assert client.delete(f"{API}/photos/{photo['id']}", headers=STUDENT).status_code == 204
    assert client.get(photo["fileUrl"]).status_code == 404
    assert client.delete(f"{API}/photos/{photo['id']}", headers=STUDENT).status_code == 404


def test_admin_can_delete_any_photo(client: TestClient):
    event_id = create_event(client, CREATOR).json()["id"]
    photo_id = _upload(client, event_id, CREATOR).json()["id"]
    assert client.delete(f"{API}/photos/{photo_id}", headers=ADMIN).status_code == 204


def test_only_participants_upload(client: TestClient):
    event_id = create_event(client, CREATOR).json()["id"]
    assert _upload(client, event_id, OUTSIDER).status_code == 403
    assert _upload(client, "missing", CREATOR).status_code == 404


def test_rejects_non_images(client: TestClient):
    event_id = create_event(client, CREATOR).json()["id"]

    wrong_type = _upload(client, event_id, CREATOR, name="notes.txt", data=b"hello", mime="text/plain")
    assert wrong_type.status_code == 400
    assert wrong_type.json()["code"] == "INVALID_FILE"

    wrong_ext = _upload(client, event_id, CREATOR, name="party.exe")
    assert wrong_ext.status_code == 400

    empty = _upload(client, event_id, CREATOR, data=b"")
    assert empty.status_code == 400
    assert empty.json()["code"] == "INVALID_FILE"


def test_rejects_oversized_upload(client: TestClient, monkeypatch):
    monkeypatch.setattr(
        photos_service, "settings", replace(photos_service.settings, photo_max_upload_bytes=16)
    )
    event_id = create_event(client, CREATOR).json()["id"]

    resp = _upload(client, event_id, CREATOR)
    assert resp.status_code == 400
    assert resp.json()["code"] == "FILE_TOO_LARGE"
    assert client.get(f"{API}/events/{event_id}/photos").json()["totalCount"] == 0


def test_deleting_event_removes_photo_files(client: TestClient):
    event_id = create_event(client, CREATOR).json()["id"]
    file_url = _upload(client, event_id, CREATOR).json()["fileUrl"]

    assert client.delete(f"{API}/events/{event_id}", headers=CREATOR).status_code == 204
    assert client.get(file_url).status_code == 404
