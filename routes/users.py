"""Profile endpoints for the signed-in user."""

from __future__ import annotations

from flask import Blueprint, jsonify

from utils.auth_guard import Identity, protect

users_bp = Blueprint("users", __name__)


@users_bp.route("/me", methods=["GET"])
@protect
def get_me(identity: Identity):
    """Return the identity resolved from the session token."""

    return jsonify(identity.to_dict())
