"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402
from services.mailer import EmailDeliveryError, EmailMessage  # noqa: E402


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-jwt-secret-with-at-least-32-bytes!!"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    PUBLIC_BASE_URL = "http://testserver"
    STORAGE_BACKEND = "local"
    RATE_LIMIT = "1000 per minute"
    SMTP_HOST = None
    SMTP_USERNAME = None
    SMTP_PASSWORD = None
    EMAIL_FROM = None


class RecordingMailer:
    """Mailer double that keeps sent messages and can be told to fail."""

    def __init__(self) -> None:
        self.messages: list[EmailMessage] = []
        self.fail = False

    def send(self, message: EmailMessage) -> None:
        if self.fail:
            raise EmailDeliveryError("SMTP relay unavailable")
        self.messages.append(message)

    def last_link(self) -> str:
        text = self.messages[-1].text
        return text.rsplit(" ", 1)[-1]


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def make_app(tmp_path, mailer):
    """Return a factory building an app with optional config overrides."""

    created: list[Flask] = []

    def _make(**overrides) -> Flask:
        upload_dir = tmp_path / "uploads"

        class TestConfig(_BaseTestConfig):
            UPLOAD_DIR = str(upload_dir)

        for key, value in overrides.items():
            setattr(TestConfig, key, value)

        application = create_app(TestConfig, mailer=mailer)
        with application.app_context():
            db.create_all()
        created.append(application)
        return application

    yield _make

    for application in created:
        with application.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture()
def app(make_app) -> Flask:
    """Create a Flask application instance for tests."""

    return make_app()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def create_user(app: Flask):
    """Persist a user and return its id."""

    def _create(
        email: str = "user@example.com",
        password: str = "Password123",
        role: str = "USER",
        *,
        verified: bool = True,
    ) -> str:
        with app.app_context():
            user = User(email=email, role=role, is_verified=verified)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id

    return _create


@pytest.fixture()
def auth_headers(app: Flask):
    """Build an Authorization header carrying a session token for ``user_id``."""

    def _headers(user_id: str, role: str = "USER") -> dict[str, str]:
        with app.app_context():
            token = create_access_token(identity=user_id, additional_claims={"role": role})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def admin_headers(create_user, auth_headers) -> dict[str, str]:
    admin_id = create_user("admin@example.com", "AdminPass123", role="ADMIN")
    return auth_headers(admin_id, role="ADMIN")
