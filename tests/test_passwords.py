"""Tests for password hashing."""

from services.passwords import PasswordHasher


def test_hash_is_salted_and_one_way():
    hasher = PasswordHasher("pbkdf2:sha256:1000")

    first = hasher.hash("pw12345678")
    second = hasher.hash("pw12345678")

    assert first != second
    assert "pw12345678" not in first
    assert first.startswith("pbkdf2:sha256:1000$")


def test_verify_matches_only_the_original_password():
    hasher = PasswordHasher("pbkdf2:sha256:1000")
    digest = hasher.hash("pw12345678")

    assert hasher.verify("pw12345678", digest) is True
    assert hasher.verify("pw12345679", digest) is False
    assert hasher.verify("pw12345678", None) is False


def test_default_method_is_scrypt():
    digest = PasswordHasher().hash("pw12345678")

    assert digest.startswith("scrypt:")


def test_verify_dummy_never_matches():
    hasher = PasswordHasher("pbkdf2:sha256:1000")

    assert hasher.verify_dummy("dummy-password-for-timing") is False
    assert hasher.verify_dummy("anything") is False
