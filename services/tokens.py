"""Ephemeral and session token issuance."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from flask_jwt_extended import JWTManager, create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from config import AuthSettings
from models import utcnow
from utils.errors import InternalConfiguration

EPHEMERAL_TOKEN_BYTES = 32
ROLE_CLAIM = "role"


class InvalidSessionToken(Exception):
    """The session token is malformed, badly signed or expired."""


@dataclass(frozen=True)
class EphemeralToken:
    """Random single-use token validated by a store lookup."""

    value: str
    expires_at: datetime


@dataclass(frozen=True)
class SessionToken:
    """Signed, self-contained bearer token for an authenticated user."""

    access_token: str
    subject_id: str
    role: str
    expires_at: datetime


class TokenIssuer:
    """Creates verification/reset tokens and signs session tokens."""

    def __init__(self, settings: AuthSettings, clock: Callable[[], datetime] = utcnow):
        self._settings = settings
        self._clock = clock

    def install(self, jwt_manager: JWTManager) -> None:
        """Make the JWT manager sign and verify with the configured secret only."""

        jwt_manager.encode_key_loader(lambda identity: self.signing_secret())
        jwt_manager.decode_key_loader(lambda jwt_header, jwt_data: self.signing_secret())

    def signing_secret(self) -> str:
        secret = self._settings.jwt_secret_key
        if not secret:
            raise InternalConfiguration("JWT secret")
        return secret

    def issue_ephemeral(self) -> EphemeralToken:
        return EphemeralToken(
            value=secrets.token_hex(EPHEMERAL_TOKEN_BYTES),
            expires_at=self._clock() + self._settings.ephemeral_token_ttl,
        )

    def issue_session(self, subject_id: str, role: str) -> SessionToken:
        self.signing_secret()
        expires_at = self._clock() + self._settings.session_token_ttl
        access_token = create_access_token(
            identity=subject_id,
            additional_claims={ROLE_CLAIM: role},
            expires_delta=self._settings.session_token_ttl,
        )
        return SessionToken(
            access_token=access_token,
            subject_id=subject_id,
            role=role,
            expires_at=expires_at,
        )

    def decode_session_token(self, raw_token: str) -> dict[str, Any]:
        """Return the verified claims of ``raw_token``.

        Raises ``InternalConfiguration`` when no signing secret is configured and
        ``InvalidSessionToken`` for any signature, format or expiry failure.
        """

        self.signing_secret()
        try:
            claims = decode_token(raw_token)
        except (PyJWTError, JWTExtendedException) as exc:
            raise InvalidSessionToken(str(exc)) from exc
        if not claims.get("sub"):
            raise InvalidSessionToken("Token has no subject.")
        return claims
