"""Application configuration module."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

load_dotenv()


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y"}


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_TOKEN_LOCATION = ["headers"]
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5000")

    # Credentials
    SESSION_TOKEN_TTL_SECONDS = int(os.getenv("SESSION_TOKEN_TTL_SECONDS", str(7 * 24 * 3600)))
    EPHEMERAL_TOKEN_TTL_SECONDS = int(os.getenv("EPHEMERAL_TOKEN_TTL_SECONDS", "3600"))
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    # Email
    SMTP_HOST = os.getenv("SMTP_HOST")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", True)
    SMTP_TIMEOUT = float(os.getenv("SMTP_TIMEOUT", "10"))
    EMAIL_FROM = os.getenv("EMAIL_FROM")

    # Storage
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "s3")
    AWS_S3_BUCKET_NAME = os.getenv("AWS_S3_BUCKET_NAME")
    AWS_REGION = os.getenv("AWS_REGION")
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", str(Path("workspace") / "uploads"))
    MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", str(50 * 1024 * 1024)))
    ALLOWED_UPLOAD_TYPES = os.getenv("ALLOWED_UPLOAD_TYPES", "mp3,wav,ogg,flac,m4a,aac")

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Rate limiting
    RATE_LIMIT = os.getenv("RATE_LIMIT", "60 per minute")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_KEY_PREFIX = os.getenv("RATELIMIT_KEY_PREFIX", "")


@dataclass(frozen=True)
class AuthSettings:
    """Credential settings handed to the token issuer and auth service."""

    jwt_secret_key: str | None
    session_token_ttl: timedelta
    ephemeral_token_ttl: timedelta
    password_hash_method: str
    public_base_url: str

    @classmethod
    def from_mapping(cls, config: Mapping) -> "AuthSettings":
        return cls(
            jwt_secret_key=config.get("JWT_SECRET_KEY") or None,
            session_token_ttl=timedelta(seconds=int(config.get("SESSION_TOKEN_TTL_SECONDS", 7 * 24 * 3600))),
            ephemeral_token_ttl=timedelta(seconds=int(config.get("EPHEMERAL_TOKEN_TTL_SECONDS", 3600))),
            password_hash_method=config.get("PASSWORD_HASH_METHOD") or "scrypt",
            public_base_url=(config.get("PUBLIC_BASE_URL") or "").rstrip("/"),
        )


@dataclass(frozen=True)
class MailSettings:
    """SMTP settings for the notification sender."""

    host: str | None
    port: int
    username: str | None
    password: str | None
    sender: str | None
    use_tls: bool = True
    timeout: float = 10.0

    @classmethod
    def from_mapping(cls, config: Mapping) -> "MailSettings":
        return cls(
            host=config.get("SMTP_HOST"),
            port=int(config.get("SMTP_PORT", 587)),
            username=config.get("SMTP_USERNAME"),
            password=config.get("SMTP_PASSWORD"),
            sender=config.get("EMAIL_FROM"),
            use_tls=bool(config.get("SMTP_USE_TLS", True)),
            timeout=float(config.get("SMTP_TIMEOUT", 10.0)),
        )

    def missing(self) -> list[str]:
        """Return the names of required settings that are not configured."""

        required = {
            "SMTP_HOST": self.host,
            "SMTP_USERNAME": self.username,
            "SMTP_PASSWORD": self.password,
            "EMAIL_FROM": self.sender,
        }
        return [name for name, value in required.items() if not value]


@dataclass(frozen=True)
class StorageSettings:
    """Object storage settings for recording uploads."""

    backend: str
    bucket_name: str | None
    region: str | None
    upload_dir: str | None

    @classmethod
    def from_mapping(cls, config: Mapping) -> "StorageSettings":
        return cls(
            backend=(config.get("STORAGE_BACKEND") or "s3").strip().lower(),
            bucket_name=config.get("AWS_S3_BUCKET_NAME") or None,
            region=config.get("AWS_REGION") or None,
            upload_dir=config.get("UPLOAD_DIR"),
        )
