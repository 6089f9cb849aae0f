"""Authentication blueprint: registration, verification, login and password reset."""

from __future__ import annotations
from http import HTTPStatus

from flask import Blueprint, jsonify, request

from services.container import get_services
from utils.request_validation import (
    parse_json_request,
    require_email,
    require_non_empty_password,
    require_password,
)

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a new, unverified user and email them a verification link."""
    payload = parse_json_request(request)
    email = require_email(payload.get("email"))
    password = require_password(payload.get("password"))

    user = get_services().auth_service.register(email, password)

    return (
        jsonify(
            {
                "message": "User created successfully. Please verify your email.",
                "user": user.to_public_dict(),
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/verify-email/", defaults={"token": ""}, methods=["POST"])
@auth_bp.route("/verify-email/<token>", methods=["POST"])
def verify_email(token: str) -> tuple:
    """Consume an email verification token."""
    get_services().auth_service.verify_email(token)
    return (
        jsonify({"message": "Email verified successfully. You can now log in."}),
        HTTPStatus.OK,
    )


@auth_bp.route("/resend-verification", methods=["POST"])
def resend_verification() -> tuple:
    """Issue a fresh verification link without revealing whether the account exists."""
    payload = parse_json_request(request)
    email = require_email(payload.get("email"))
    message = get_services().auth_service.resend_verification(email)
    return jsonify({"message": message}), HTTPStatus.OK


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a verified user and return a session token."""
    payload = parse_json_request(request)
    email = require_email(payload.get("email"))
    password = require_non_empty_password(payload.get("password"))

    session, user = get_services().auth_service.login(email, password)
    return (
        jsonify(
            {
                "message": "Login successful",
                "token": session.access_token,
                "user": user.to_public_dict(),
            }
        ),
        HTTPStatus.OK,
    )


@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password() -> tuple:
    payload = parse_json_request(request)
    email = require_email(payload.get("email"))
    message = get_services().auth_service.forgot_password(email)
    return jsonify({"message": message}), HTTPStatus.OK


@auth_bp.route("/reset-password/<token>", methods=["POST"])
def reset_password(token: str) -> tuple:
    payload = parse_json_request(request)
    password = require_password(payload.get("password"))
    get_services().auth_service.reset_password(token, password)
    return jsonify({"message": "Password has been reset successfully."}), HTTPStatus.OK
