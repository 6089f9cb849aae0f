"""Database initialization and model exports."""

from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, matching stored values."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .tag import Tag  # noqa: E402,F401
from .recording import Recording, recording_tags  # noqa: E402,F401

__all__ = [
    "db",
    "utcnow",
    "User",
    "Tag",
    "Recording",
    "recording_tags",
]
