"""Registration, verification, login and password reset flows."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import BadRequest, Conflict, Forbidden, Gone, NotFound, Unauthorized

from config import AuthSettings
from models import db, utcnow
from models.user import User

from .mailer import EmailMessage, Mailer
from .passwords import PasswordHasher
from .tokens import SessionToken, TokenIssuer

logger = logging.getLogger(__name__)

APP_NAME = "Voces de la Extinción"
INVALID_CREDENTIALS = "Invalid credentials"
FORGOT_PASSWORD_MESSAGE = "If a user with that email exists, a password reset link has been sent."
RESEND_VERIFICATION_MESSAGE = (
    "If an unverified account with that email exists, a new verification link has been sent."
)


def normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""

    return (raw_email or "").strip().lower()


class AuthService:
    """Orchestrates the credential lifecycle of a user account."""

    def __init__(
        self,
        settings: AuthSettings,
        token_issuer: TokenIssuer,
        hasher: PasswordHasher,
        mailer: Mailer,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._settings = settings
        self._tokens = token_issuer
        self._hasher = hasher
        self._mailer = mailer
        self._clock = clock

    @staticmethod
    def find_by_email(email: str) -> User | None:
        return User.query.filter(func.lower(User.email) == normalize_email(email)).first()

    def register(self, email: str, password: str) -> User:
        """Create an unverified account and send the verification link."""

        email = normalize_email(email)
        if self.find_by_email(email) is not None:
            raise Conflict("User with this email already exists")

        token = self._tokens.issue_ephemeral()
        user = User(email=email, password_hash=self._hasher.hash(password))
        user.set_verification_token(token)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise Conflict("User with this email already exists") from exc

        logger.info("Registered user %s", user.id)
        self._send_verification_email(user, token.value)
        return user

    def verify_email(self, token: str | None) -> User:
        if not token or not token.strip():
            raise BadRequest("Verification token is required.")

        user = User.query.filter_by(email_verification_token=token).first()
        if user is None:
            raise NotFound("Invalid verification token.")

        expires = user.email_verification_token_expires
        if expires is not None and expires < self._clock():
            raise Gone("Verification token has expired.")

        user.mark_verified()
        db.session.commit()
        logger.info("Verified email for user %s", user.id)
        return user

    def resend_verification(self, email: str) -> str:
        user = self.find_by_email(email)
        if user is None or user.is_verified:
            return RESEND_VERIFICATION_MESSAGE

        token = self._tokens.issue_ephemeral()
        user.set_verification_token(token)
        db.session.commit()
        self._send_verification_email(user, token.value)
        return RESEND_VERIFICATION_MESSAGE

    def login(self, email: str, password: str) -> tuple[SessionToken, User]:
        user = self.find_by_email(email)
        if user is None:
            # Unknown emails pay for a hash check too.
            self._hasher.verify_dummy(password)
            logger.info("Login failed: unknown email")
            raise Unauthorized(INVALID_CREDENTIALS)

        if not self._hasher.verify(password, user.password_hash):
            logger.info("Login failed for user %s", user.id)
            raise Unauthorized(INVALID_CREDENTIALS)

        if not user.is_verified:
            raise Forbidden("Please verify your email before logging in.")

        session = self._tokens.issue_session(user.id, user.role)
        return session, user

    def forgot_password(self, email: str) -> str:
        user = self.find_by_email(email)
        if user is None:
            return FORGOT_PASSWORD_MESSAGE

        token = self._tokens.issue_ephemeral()
        user.set_password_reset_token(token)
        db.session.commit()
        logger.info("Password reset requested for user %s", user.id)

        reset_url = f"{self._settings.public_base_url}/auth/reset-password/{token.value}"
        self._send_quietly(
            EmailMessage(
                to=user.email,
                subject="Your Password Reset Request",
                text=(
                    "You requested a password reset. Please use the following link to "
                    f"reset your password: {reset_url}"
                ),
                html=(
                    "<p>You requested a password reset. Please use the following link to "
                    f'reset your password: <a href="{reset_url}">{reset_url}</a></p>'
                ),
            ),
            kind="password reset",
        )
        return FORGOT_PASSWORD_MESSAGE

    def reset_password(self, token: str | None, new_password: str) -> User:
        user = None
        if token:
            user = User.query.filter(
                User.password_reset_token == token,
                User.password_reset_token_expires > self._clock(),
            ).first()
        if user is None:
            raise BadRequest("Invalid or expired password reset token.")

        user.password_hash = self._hasher.hash(new_password)
        user.clear_password_reset_token()
        db.session.commit()
        logger.info("Password reset completed for user %s", user.id)
        return user

    def _send_verification_email(self, user: User, token: str) -> None:
        verification_url = f"{self._settings.public_base_url}/auth/verify-email/{token}"
        self._send_quietly(
            EmailMessage(
                to=user.email,
                subject=f"Welcome to {APP_NAME}! Please Verify Your Email",
                text=(
                    "Thank you for registering. Please verify your email by clicking "
                    f"this link: {verification_url}"
                ),
                html=(
                    "<p>Thank you for registering. Please verify your email by clicking "
                    f'this link: <a href="{verification_url}">{verification_url}</a></p>'
                ),
            ),
            kind="verification",
        )

    def _send_quietly(self, message: EmailMessage, *, kind: str) -> None:
        try:
            self._mailer.send(message)
        except Exception:
            logger.exception("Failed to send %s email", kind)
