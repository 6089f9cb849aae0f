"""Tests for recording upload and catalogue routes."""

from __future__ import annotations

import json
from io import BytesIO
from pathlib import Path

from models.recording import Recording
from models.tag import Tag


def _upload(client, headers, **fields):
    data = {
        "title": "Dawn chorus",
        "description": "Recorded at the river mouth",
        "recording": (BytesIO(b"RIFF....WAVE"), "dawn.wav"),
    }
    data.update(fields)
    return client.post(
        "/recordings",
        data=data,
        headers=headers,
        content_type="multipart/form-data",
    )


def test_admin_creates_recording_with_tags_and_metadata(app, client, admin_headers):
    response = _upload(
        client,
        admin_headers,
        tags=["birds", "river"],
        metadata=json.dumps({"location": "Delta", "duration": 42}),
    )

    assert response.status_code == 201
    payload = response.get_json()
    assert payload["title"] == "Dawn chorus"
    assert payload["metadata"] == {"location": "Delta", "duration": 42}
    assert sorted(tag["name"] for tag in payload["tags"]) == ["birds", "river"]
    assert payload["file_key"].endswith(".wav")

    stored = Path(app.config["UPLOAD_DIR"]) / payload["file_key"]
    assert stored.read_bytes() == b"RIFF....WAVE"

    with app.app_context():
        assert Tag.query.count() == 2


def test_recording_reuses_existing_tags(app, client, admin_headers):
    client.post("/tags", json={"name": "birds"}, headers=admin_headers)

    _upload(client, admin_headers, tags=["birds"])

    with app.app_context():
        assert Tag.query.count() == 1


def test_create_requires_title_and_file(client, admin_headers):
    no_file = client.post(
        "/recordings",
        data={"title": "Only a title"},
        headers=admin_headers,
        content_type="multipart/form-data",
    )
    no_title = _upload(client, admin_headers, title="")

    assert no_file.status_code == 400
    assert no_title.status_code == 400
    assert no_file.get_json()["detail"] == "Title and file are required."


def test_create_rejects_disallowed_file_type(client, admin_headers):
    response = _upload(client, admin_headers, recording=(BytesIO(b"MZ"), "run.exe"))

    assert response.status_code == 400
    assert "File type not allowed" in response.get_json()["detail"]


def test_create_rejects_invalid_metadata(client, admin_headers):
    response = _upload(client, admin_headers, metadata="{not json")

    assert response.status_code == 400


def test_create_without_bucket_is_server_error(make_app):
    app = make_app(STORAGE_BACKEND="s3", AWS_S3_BUCKET_NAME=None)
    client = app.test_client()
    with app.app_context():
        from models import db
        from models.user import User

        admin = User(email="root@example.com", role="ADMIN", is_verified=True)
        admin.set_password("AdminPass123")
        db.session.add(admin)
        db.session.commit()
    login = client.post(
        "/auth/login", json={"email": "root@example.com", "password": "AdminPass123"}
    )
    headers = {"Authorization": f"Bearer {login.get_json()['token']}"}

    response = _upload(client, headers)

    assert response.status_code == 500
    assert response.get_json()["detail"] == "Server error: S3 bucket name not configured."


def test_non_admin_cannot_create(client, create_user, auth_headers):
    user_id = create_user()

    response = _upload(client, auth_headers(user_id))

    assert response.status_code == 403


def test_users_can_list_and_read_recordings(client, admin_headers, create_user, auth_headers):
    first = _upload(client, admin_headers, title="First").get_json()
    second = _upload(client, admin_headers, title="Second", tags=["wind"]).get_json()
    headers = auth_headers(create_user())

    listing = client.get("/recordings", headers=headers)
    detail = client.get(f"/recordings/{second['id']}", headers=headers)

    assert listing.status_code == 200
    assert {item["id"] for item in listing.get_json()} == {first["id"], second["id"]}
    assert detail.status_code == 200
    assert [tag["name"] for tag in detail.get_json()["tags"]] == ["wind"]
    assert client.get("/recordings/missing", headers=headers).status_code == 404


def test_update_replaces_file_and_tags(app, client, admin_headers):
    created = _upload(client, admin_headers, tags=["birds"]).get_json()
    old_file = Path(app.config["UPLOAD_DIR"]) / created["file_key"]

    response = client.put(
        f"/recordings/{created['id']}",
        data={
            "title": "Dusk chorus",
            "tags": ["frogs"],
            "recording": (BytesIO(b"new audio"), "dusk.mp3"),
        },
        headers=admin_headers,
        content_type="multipart/form-data",
    )

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["title"] == "Dusk chorus"
    assert [tag["name"] for tag in payload["tags"]] == ["frogs"]
    assert payload["file_key"] != created["file_key"]
    assert not old_file.exists()
    assert (Path(app.config["UPLOAD_DIR"]) / payload["file_key"]).read_bytes() == b"new audio"


def test_update_without_file_keeps_stored_object(client, admin_headers):
    created = _upload(client, admin_headers).get_json()

    response = client.put(
        f"/recordings/{created['id']}",
        data={"description": "Edited"},
        headers=admin_headers,
        content_type="multipart/form-data",
    )

    assert response.status_code == 200
    assert response.get_json()["description"] == "Edited"
    assert response.get_json()["file_key"] == created["file_key"]


def test_delete_removes_object_and_row(app, client, admin_headers):
    created = _upload(client, admin_headers).get_json()
    stored = Path(app.config["UPLOAD_DIR"]) / created["file_key"]

    response = client.delete(f"/recordings/{created['id']}", headers=admin_headers)

    assert response.status_code == 204
    assert not stored.exists()
    with app.app_context():
        assert Recording.query.count() == 0
