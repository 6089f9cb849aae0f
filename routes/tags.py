"""Tag management blueprint (admins only)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from sqlalchemy import func
from werkzeug.exceptions import BadRequest, Conflict, NotFound

from models import db
from models.tag import Tag
from utils.auth_guard import Identity, admin_required, protect
from utils.request_validation import parse_json_request

tags_bp = Blueprint("tags", __name__)


def _get_tag_or_404(tag_id: str) -> Tag:
    tag = db.session.get(Tag, tag_id)
    if tag is None:
        raise NotFound("Tag not found")
    return tag


def _require_name(payload: dict) -> str:
    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise BadRequest("Tag name is required.")
    return name.strip()


def _ensure_unique(name: str, exclude_id: str | None = None) -> None:
    query = Tag.query.filter(func.lower(Tag.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Tag.id != exclude_id)
    if query.first() is not None:
        raise Conflict("A tag with that name already exists.")


@tags_bp.route("", methods=["GET"])
@protect
@admin_required
def list_tags(identity: Identity):
    tags = Tag.query.order_by(Tag.name.asc()).all()
    return jsonify([tag.to_dict() for tag in tags])


@tags_bp.route("/<tag_id>", methods=["GET"])
@protect
@admin_required
def get_tag(tag_id: str, identity: Identity):
    return jsonify(_get_tag_or_404(tag_id).to_dict())


@tags_bp.route("", methods=["POST"])
@protect
@admin_required
def create_tag(identity: Identity):
    name = _require_name(parse_json_request(request))
    _ensure_unique(name)

    tag = Tag(name=name)
    db.session.add(tag)
    db.session.commit()
    return jsonify(tag.to_dict()), 201


@tags_bp.route("/<tag_id>", methods=["PUT"])
@protect
@admin_required
def update_tag(tag_id: str, identity: Identity):
    tag = _get_tag_or_404(tag_id)
    name = _require_name(parse_json_request(request))
    _ensure_unique(name, exclude_id=tag.id)

    tag.name = name
    db.session.commit()
    return jsonify(tag.to_dict())


@tags_bp.route("/<tag_id>", methods=["DELETE"])
@protect
@admin_required
def delete_tag(tag_id: str, identity: Identity):
    tag = _get_tag_or_404(tag_id)
    db.session.delete(tag)
    db.session.commit()
    return "", 204
