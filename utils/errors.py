"""HTTP exceptions that werkzeug does not provide."""

from __future__ import annotations

from werkzeug.exceptions import InternalServerError


class InternalConfiguration(InternalServerError):
    """Raised when a required server setting is missing.

    Rendered as a 500 like any other server error, but with a description that
    names the missing setting instead of the generic message.
    """

    def __init__(self, setting: str):
        super().__init__(f"Server error: {setting} not configured.")
        self.setting = setting
