"""User model definition."""

from __future__ import annotations

import uuid

from . import db, utcnow


USER_ROLES = ("USER", "ADMIN")
USER_PLANS = ("FREE", "PREMIUM")


def _new_id() -> str:
    return str(uuid.uuid4())


def _configured_hasher():
    # Imported late: the service container imports this module.
    from services.container import get_services

    return get_services().hasher


class User(db.Model):
    """Represents a registered account and its credential state."""

    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.text("false"),
    )
    email_verification_token = db.Column(db.String(128), unique=True, nullable=True)
    email_verification_token_expires = db.Column(db.DateTime, nullable=True)
    password_reset_token = db.Column(db.String(128), unique=True, nullable=True)
    password_reset_token_expires = db.Column(db.DateTime, nullable=True)
    role = db.Column(
        db.Enum(*USER_ROLES, name="user_role"),
        nullable=False,
        default="USER",
        server_default=db.text("'USER'"),
    )
    plan = db.Column(
        db.Enum(*USER_PLANS, name="user_plan"),
        nullable=False,
        default="FREE",
        server_default=db.text("'FREE'"),
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = _configured_hasher().hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return _configured_hasher().verify(password, self.password_hash)

    def set_verification_token(self, token) -> None:
        """Store a fresh email verification token and mark the account unverified."""

        self.is_verified = False
        self.email_verification_token = token.value
        self.email_verification_token_expires = token.expires_at

    def mark_verified(self) -> None:
        """Mark the email as verified and consume the verification token."""

        self.is_verified = True
        self.email_verification_token = None
        self.email_verification_token_expires = None

    def set_password_reset_token(self, token) -> None:
        """Store a reset token, superseding any earlier one."""

        self.password_reset_token = token.value
        self.password_reset_token_expires = token.expires_at

    def clear_password_reset_token(self) -> None:
        self.password_reset_token = None
        self.password_reset_token_expires = None

    def to_public_dict(self) -> dict:
        """Serialize the fields safe to return to the account owner."""

        return {
            "id": self.id,
            "email": self.email,
            "plan": self.plan,
            "role": self.role,
        }

    def to_admin_dict(self) -> dict:
        """Serialize the user for admin listings."""

        return {
            "id": self.id,
            "email": self.email,
            "is_verified": self.is_verified,
            "plan": self.plan,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
