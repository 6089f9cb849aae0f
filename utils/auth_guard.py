"""Bearer-token guards for protected routes."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Callable

from flask import request
from werkzeug.exceptions import Forbidden, Unauthorized

from models import db
from models.user import User
from services.container import get_services
from services.tokens import InvalidSessionToken

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
NO_TOKEN = "Not authorized, no token"
TOKEN_FAILED = "Not authorized, token failed"
USER_NOT_FOUND = "Not authorized, user not found"
NOT_ADMIN = "Not authorized as an admin"


@dataclass(frozen=True)
class Identity:
    """The acting user, resolved from the store for the current request."""

    id: str
    email: str
    plan: str
    role: str
    is_verified: bool

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(
            id=user.id,
            email=user.email,
            plan=user.plan,
            role=user.role,
            is_verified=user.is_verified,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "plan": self.plan,
            "role": self.role,
            "is_verified": self.is_verified,
        }


def _read_bearer_token() -> str:
    header = request.headers.get("Authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        raise Unauthorized(NO_TOKEN)
    return header[len(BEARER_PREFIX):].strip()


def authenticate_request() -> Identity:
    """Validate the bearer token and resolve the user it names."""

    raw_token = _read_bearer_token()
    try:
        claims = get_services().token_issuer.decode_session_token(raw_token)
    except InvalidSessionToken as exc:
        logger.info("Rejected session token: %s", exc)
        raise Unauthorized(TOKEN_FAILED) from exc

    user = db.session.get(User, str(claims["sub"]))
    if user is None:
        raise Unauthorized(USER_NOT_FOUND)
    return Identity.from_user(user)


def protect(view: Callable) -> Callable:
    """Require a valid session token and pass the caller as ``identity``."""

    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        identity = authenticate_request()
        kwargs["identity"] = identity
        return view(*args, **kwargs)

    return wrapper


def admin_required(view: Callable) -> Callable:
    """Allow only ADMIN identities; apply beneath ``protect``."""

    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        identity = kwargs.get("identity")
        if not isinstance(identity, Identity) or not identity.is_admin:
            raise Forbidden(NOT_ADMIN)
        return view(*args, **kwargs)

    return wrapper
