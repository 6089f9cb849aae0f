"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

import json

from email_validator import EmailNotValidError, validate_email
from flask import Request
from werkzeug.exceptions import BadRequest

MIN_PASSWORD_LENGTH = 8


def parse_json_request(req: Request) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=False)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data:
        raise BadRequest("Request JSON body must not be empty.")

    return data


def require_email(value: object) -> str:
    """Validate an email address and return it lower-cased."""

    if not isinstance(value, str) or not value.strip():
        raise BadRequest("Please provide a valid email address.")
    try:
        result = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise BadRequest("Please provide a valid email address.") from exc
    return result.normalized.lower()


def require_password(value: object, *, min_length: int = MIN_PASSWORD_LENGTH) -> str:
    """Return the password if it meets the length policy."""

    if not isinstance(value, str) or len(value) < min_length:
        raise BadRequest(f"Password must be at least {min_length} characters long.")
    return value


def require_non_empty_password(value: object) -> str:
    if not isinstance(value, str) or not value:
        raise BadRequest("Password is required.")
    return value


def parse_bool(value: object) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "y"}:
        return True
    if text in {"0", "false", "no", "n"}:
        return False
    return None


def parse_json_object(raw: str | None, field: str) -> dict | None:
    """Decode a JSON object sent as a form field."""

    if raw is None or raw == "":
        return None
    try:
        value = json.loads(raw)
    except ValueError as exc:
        raise BadRequest(f"{field} must be a valid JSON object.") from exc
    if not isinstance(value, dict):
        raise BadRequest(f"{field} must be a valid JSON object.")
    return value
