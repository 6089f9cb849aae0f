"""One-way password hashing."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_METHOD = "scrypt"


class PasswordHasher:
    """Hash and verify secrets with a slow, salted werkzeug method."""

    def __init__(self, method: str = DEFAULT_METHOD, salt_length: int = 16):
        self.method = method
        self.salt_length = salt_length
        self._dummy_digest: str | None = None

    def hash(self, plaintext: str) -> str:
        return generate_password_hash(plaintext, method=self.method, salt_length=self.salt_length)

    def verify(self, plaintext: str, digest: str | None) -> bool:
        """Return True if ``plaintext`` matches ``digest``.

        werkzeug compares the derived keys with ``hmac.compare_digest``.
        """

        if not digest:
            return False
        return check_password_hash(digest, plaintext)

    def verify_dummy(self, plaintext: str) -> bool:
        """Spend the same work as a real check when there is no stored digest."""

        if self._dummy_digest is None:
            self._dummy_digest = self.hash("dummy-password-for-timing")
        check_password_hash(self._dummy_digest, plaintext)
        return False

