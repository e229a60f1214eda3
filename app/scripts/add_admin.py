"""Grant the admin role to an existing profile.

Usage:
    python -m app.scripts.add_admin --email founder@example.com
"""

from __future__ import annotations

import argparse
import sys

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.models.profile import Profile, ProfileRole


def promote_to_admin(db: Session, email: str) -> Profile | None:
    """Set role=admin on the profile with this email. Returns None if there is none."""
    profile = db.query(Profile).filter(func.lower(Profile.email) == email.strip().lower()).first()
    if profile is None:
        return None
    if profile.role != ProfileRole.admin.value:
        profile.role = ProfileRole.admin.value
        db.commit()
    return profile


def main() -> None:
    parser = argparse.ArgumentParser(description="Grant the LaunchPad admin role")
    parser.add_argument("--email", required=True, help="Email of the profile to promote")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        profile = promote_to_admin(db, args.email)
        if profile is None:
            print(f"Profile with email '{args.email}' not found. Sign in once first.")
            sys.exit(1)
        print(f"Profile '{profile.email}' is now an admin (id={profile.id}).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
