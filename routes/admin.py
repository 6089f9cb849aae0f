"""Admin blueprint for user management."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import func
from werkzeug.exceptions import BadRequest, Conflict, NotFound

from models import db
from models.user import USER_PLANS, USER_ROLES, User
from utils.auth_guard import Identity, admin_required, protect
from utils.request_validation import parse_bool, parse_json_request, require_email

admin_bp = Blueprint("admin", __name__)


def _get_user_or_404(user_id: str) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


@admin_bp.route("/users", methods=["GET"])
@protect
@admin_required
def list_users(identity: Identity):
    users = User.query.order_by(User.created_at.asc()).all()
    return jsonify([user.to_admin_dict() for user in users])


@admin_bp.route("/users/<user_id>", methods=["GET"])
@protect
@admin_required
def get_user(user_id: str, identity: Identity):
    return jsonify(_get_user_or_404(user_id).to_admin_dict())


@admin_bp.route("/users/<user_id>", methods=["PUT"])
@protect
@admin_required
def update_user(user_id: str, identity: Identity):
    """Update email, verification state, plan or role of a user."""

    user = _get_user_or_404(user_id)
    payload = parse_json_request(request)

    if "email" in payload:
        email = require_email(payload["email"])
        clash = User.query.filter(func.lower(User.email) == email, User.id != user.id).first()
        if clash is not None:
            raise Conflict("User with this email already exists")
        user.email = email

    if "is_verified" in payload:
        is_verified = parse_bool(payload["is_verified"])
        if is_verified is None:
            raise BadRequest("is_verified must be a boolean value.")
        user.is_verified = is_verified
        if is_verified:
            user.email_verification_token = None
            user.email_verification_token_expires = None

    if "plan" in payload:
        if payload["plan"] not in USER_PLANS:
            raise BadRequest(f"plan must be one of: {', '.join(USER_PLANS)}.")
        user.plan = payload["plan"]

    if "role" in payload:
        if payload["role"] not in USER_ROLES:
            raise BadRequest(f"role must be one of: {', '.join(USER_ROLES)}.")
        user.role = payload["role"]

    db.session.commit()
    current_app.logger.info("Admin %s updated user %s", identity.id, user.id)
    return jsonify(user.to_admin_dict())


@admin_bp.route("/users/<user_id>", methods=["DELETE"])
@protect
@admin_required
def delete_user(user_id: str, identity: Identity):
    user = _get_user_or_404(user_id)
    db.session.delete(user)
    db.session.commit()
    current_app.logger.info("Admin %s deleted user %s", identity.id, user_id)
    return "", 204
