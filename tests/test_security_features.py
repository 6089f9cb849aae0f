"""Tests covering security and hardening features."""

from __future__ import annotations


def test_cors_allows_configured_origin(make_app):
    app = make_app(CORS_ORIGINS=["https://client.example"])
    client = app.test_client()

    response = client.get(
        "/health", headers={"Origin": "https://client.example"}
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == "https://client.example"
    assert response.headers.get("X-Request-ID")


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


def test_rate_limit_exceeded_returns_json(make_app):
    app = make_app(RATE_LIMIT="2 per minute")
    client = app.test_client()

    client.get("/health")
    client.get("/health")
    response = client.get("/health")

    assert response.status_code == 429
    payload = response.get_json()
    assert payload["error"] == "Too Many Requests"
    assert "request_id" in payload


def test_json_error_shape_for_invalid_request(client):
    response = client.post(
        "/auth/register",
        data="not-json",
        content_type="text/plain",
    )

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "Bad Request"
    assert "Request content type" in payload["detail"]
    assert payload["request_id"]


def test_unknown_route_returns_json_not_found(client):
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.get_json()["error"] == "Not Found"


def test_password_hash_is_never_serialized(client, create_user, auth_headers):
    user_id = create_user()

    body = client.get("/users/me", headers=auth_headers(user_id)).get_data(as_text=True)

    assert "password" not in body
    assert "token" not in body


def test_empty_json_object_is_rejected(client):
    response = client.post("/auth/login", json={})

    assert response.status_code == 400
    assert response.get_json()["detail"] == "Request JSON body must not be empty."
