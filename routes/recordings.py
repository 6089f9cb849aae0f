"""Recordings blueprint: catalogue browsing and admin uploads."""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Iterable

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest, NotFound

from models import db
from models.recording import Recording
from models.tag import Tag
from services.container import get_services
from utils.auth_guard import Identity, admin_required, protect
from utils.request_validation import parse_json_object

recordings_bp = Blueprint("recordings", __name__)

MAX_UPLOAD_SIZE_DEFAULT = 50 * 1024 * 1024  # 50 MB
ALLOWED_EXTENSIONS_DEFAULT = {"mp3", "wav", "ogg", "flac", "m4a", "aac"}


def _allowed_extensions() -> set[str]:
    configured = current_app.config.get("ALLOWED_UPLOAD_TYPES")
    if not configured:
        return set(ALLOWED_EXTENSIONS_DEFAULT)
    if isinstance(configured, str):
        values: Iterable[str] = configured.split(",")
    else:
        values = configured

    normalized: set[str] = set()
    for raw in values:
        if not isinstance(raw, str):
            continue

        item = raw.strip().lower()
        if not item:
            continue

        if "/" in item and not item.startswith("."):
            item = item.rsplit("/", 1)[-1]

        item = item.lstrip(".")
        if item:
            normalized.add(item)

    return normalized or set(ALLOWED_EXTENSIONS_DEFAULT)


def _validate_upload(file: FileStorage) -> None:
    extension = Path(file.filename or "").suffix.lower().lstrip(".")
    if extension not in _allowed_extensions():
        allowed = ", ".join(sorted(_allowed_extensions()))
        raise BadRequest(f"File type not allowed. Allowed types: {allowed}.")

    max_size = int(current_app.config.get("MAX_UPLOAD_SIZE", MAX_UPLOAD_SIZE_DEFAULT))
    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    if size > max_size:
        raise BadRequest(f"File exceeds the maximum upload size of {max_size} bytes.")


def _build_object_key(original: str) -> str:
    return f"{uuid.uuid4().hex}{Path(original).suffix.lower()}"


def _get_recording_or_404(recording_id: str) -> Recording:
    recording = db.session.get(Recording, recording_id)
    if recording is None:
        raise NotFound("Recording not found")
    return recording


def _submitted_tag_names() -> list[str] | None:
    if "tags" not in request.form and "tags[]" not in request.form:
        return None
    names: list[str] = []
    for raw in request.form.getlist("tags") + request.form.getlist("tags[]"):
        name = raw.strip()
        if name and name.lower() not in {existing.lower() for existing in names}:
            names.append(name)
    return names


def _resolve_tags(names: list[str]) -> list[Tag]:
    """Return the tags with the given names, creating the missing ones."""

    tags = []
    for name in names:
        tag = Tag.query.filter(func.lower(Tag.name) == name.lower()).first()
        if tag is None:
            tag = Tag(name=name)
            db.session.add(tag)
        tags.append(tag)
    return tags


def _uploaded_file() -> FileStorage | None:
    file = request.files.get("recording")
    if not isinstance(file, FileStorage) or not (file.filename or "").strip():
        return None
    return file


def _commit_or_discard(key: str) -> None:
    """Commit the session, removing the freshly stored object if that fails."""

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        get_services().storage.delete(key)
        raise


@recordings_bp.route("", methods=["GET"])
@protect
def list_recordings(identity: Identity):
    recordings = Recording.query.order_by(Recording.created_at.desc()).all()
    return jsonify([recording.to_dict() for recording in recordings])


@recordings_bp.route("/<recording_id>", methods=["GET"])
@protect
def get_recording(recording_id: str, identity: Identity):
    return jsonify(_get_recording_or_404(recording_id).to_dict(include_tags=True))


@recordings_bp.route("", methods=["POST"])
@protect
@admin_required
def create_recording(identity: Identity):
    """Upload a recording file and create its catalogue entry."""

    title = (request.form.get("title") or "").strip()
    file = _uploaded_file()
    if not title or file is None:
        raise BadRequest("Title and file are required.")

    _validate_upload(file)
    metadata = parse_json_object(request.form.get("metadata"), "metadata")
    storage = get_services().storage
    storage.check_configured()

    key = _build_object_key(file.filename)
    file_url = storage.save(file, key, content_type=file.mimetype)

    recording = Recording(
        title=title,
        description=request.form.get("description"),
        file_url=file_url,
        file_key=key,
        extra_metadata=metadata,
        tags=_resolve_tags(_submitted_tag_names() or []),
    )
    db.session.add(recording)
    _commit_or_discard(key)

    current_app.logger.info("Admin %s created recording %s", identity.id, recording.id)
    return jsonify(recording.to_dict(include_tags=True)), 201


@recordings_bp.route("/<recording_id>", methods=["PUT"])
@protect
@admin_required
def update_recording(recording_id: str, identity: Identity):
    """Update recording fields, optionally replacing the stored file."""

    recording = _get_recording_or_404(recording_id)

    if "title" in request.form:
        title = request.form["title"].strip()
        if not title:
            raise BadRequest("Title cannot be empty.")
        recording.title = title
    if "description" in request.form:
        recording.description = request.form["description"]
    if "metadata" in request.form:
        recording.extra_metadata = parse_json_object(request.form["metadata"], "metadata")

    tag_names = _submitted_tag_names()
    if tag_names is not None:
        recording.tags = _resolve_tags(tag_names)

    file = _uploaded_file()
    previous_key = None
    if file is not None:
        _validate_upload(file)
        storage = get_services().storage
        storage.check_configured()

        key = _build_object_key(file.filename)
        recording.file_url = storage.save(file, key, content_type=file.mimetype)
        previous_key, recording.file_key = recording.file_key, key
        _commit_or_discard(key)
    else:
        db.session.commit()

    if previous_key:
        try:
            get_services().storage.delete(previous_key)
        except Exception:
            current_app.logger.exception("Failed to delete replaced object %s", previous_key)

    return jsonify(recording.to_dict(include_tags=True))


@recordings_bp.route("/<recording_id>", methods=["DELETE"])
@protect
@admin_required
def delete_recording(recording_id: str, identity: Identity):
    recording = _get_recording_or_404(recording_id)
    storage = get_services().storage
    storage.check_configured()

    storage.delete(recording.file_key)
    db.session.delete(recording)
    db.session.commit()

    current_app.logger.info("Admin %s deleted recording %s", identity.id, recording_id)
    return "", 204
