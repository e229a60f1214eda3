"""Repair startup slugs that are empty or not URL-safe.

Each broken slug is regenerated from the startup's name and suffixed until
unique. Running servers keep cached pages until their TTL expires or
`/internal/clear_page_cache` is called.

Usage:
    python -m app.scripts.fix_slugs [--dry-run]
"""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.models.startup import Startup
from app.services.slugs import generate_unique_slug, is_valid_slug

logger = logging.getLogger(__name__)


def fix_slugs(db: Session, dry_run: bool = False) -> list[tuple[str, str, str]]:
    """Return (startup id, old slug, new slug) for every startup that needed a new slug."""
    changes: list[tuple[str, str, str]] = []
    for startup in db.query(Startup).order_by(Startup.created_at).all():
        if is_valid_slug(startup.slug) and len(startup.slug) <= 50:
            continue
        new_slug = generate_unique_slug(db, startup.name or startup.slug, exclude_id=startup.id)
        changes.append((str(startup.id), startup.slug, new_slug))
        if not dry_run:
            startup.slug = new_slug
            # Later candidates must see this slug as taken.
            db.flush()
    if changes and not dry_run:
        db.commit()
        logger.info("Repaired %d slug(s)", len(changes))
    return changes


def main() -> None:
    parser = argparse.ArgumentParser(description="Regenerate invalid startup slugs")
    parser.add_argument("--dry-run", action="store_true", help="Report changes without saving")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        changes = fix_slugs(db, dry_run=args.dry_run)
        for startup_id, old, new in changes:
            print(f"{startup_id}: '{old}' -> '{new}'")
        verb = "Would repair" if args.dry_run else "Repaired"
        print(f"{verb} {len(changes)} slug(s).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
