"""Per-application service registry."""

from __future__ import annotations

from dataclasses import dataclass

from flask import Flask, current_app

from config import AuthSettings, MailSettings, StorageSettings
from storage import AbstractStorage, build_storage

from .auth_service import AuthService
from .mailer import Mailer, SmtpMailer
from .passwords import PasswordHasher
from .tokens import TokenIssuer

EXTENSION_KEY = "voces_services"


@dataclass
class ServiceContainer:
    """Collaborators built once per application from its configuration."""

    auth_settings: AuthSettings
    token_issuer: TokenIssuer
    hasher: PasswordHasher
    mailer: Mailer
    auth_service: AuthService
    storage: AbstractStorage


def build_services(
    app: Flask,
    *,
    mailer: Mailer | None = None,
    storage: AbstractStorage | None = None,
) -> ServiceContainer:
    """Construct the services from ``app.config`` and register them on ``app``."""

    auth_settings = AuthSettings.from_mapping(app.config)
    token_issuer = TokenIssuer(auth_settings)
    hasher = PasswordHasher(auth_settings.password_hash_method)
    mailer = mailer or SmtpMailer(MailSettings.from_mapping(app.config))
    container = ServiceContainer(
        auth_settings=auth_settings,
        token_issuer=token_issuer,
        hasher=hasher,
        mailer=mailer,
        auth_service=AuthService(auth_settings, token_issuer, hasher, mailer),
        storage=storage or build_storage(StorageSettings.from_mapping(app.config)),
    )
    app.extensions[EXTENSION_KEY] = container
    return container


def get_services() -> ServiceContainer:
    container = current_app.extensions.get(EXTENSION_KEY)
    if container is None:
        raise RuntimeError("Application services not initialised.")
    return container
