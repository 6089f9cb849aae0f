"""Seed an administrator user."""

from __future__ import annotations

import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402
from services.auth_service import normalize_email  # noqa: E402


def seed_admin(email: str, password: str) -> tuple[User, str]:
    """Create or promote a verified administrator; return it and the action taken."""

    email = normalize_email(email)
    admin = User.query.filter_by(email=email).first()
    if admin is None:
        admin = User(email=email, role="ADMIN")
        db.session.add(admin)
        action = "created"
    else:
        admin.role = "ADMIN"
        action = "updated"
    admin.mark_verified()
    admin.set_password(password)
    db.session.commit()
    return admin, action


def main() -> None:
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        sys.exit("ADMIN_EMAIL and ADMIN_PASSWORD must be set.")

    app = create_app()
    with app.app_context():
        admin, action = seed_admin(email, password)
        print(f"Admin user {action}: {admin.email}")


if __name__ == "__main__":
    main()
