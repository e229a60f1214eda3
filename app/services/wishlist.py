"""Investor wishlist service."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.models.profile import Profile
from app.models.startup import Startup, StartupStatus
from app.models.wishlist import WishlistEntry
from app.services.errors import AuthenticationError, ConflictError, DependencyError, NotFoundError
from app.services.startup_access import parse_startup_id

logger = logging.getLogger(__name__)


def _require_actor(actor: Profile | None) -> Profile:
    if actor is None:
        raise AuthenticationError("Unauthorized")
    return actor


def add_to_wishlist(
    db: Session, actor: Profile | None, startup_id: str | UUID, notes: str | None = None
) -> WishlistEntry:
    """Bookmark an approved startup. Raises ConflictError if already present."""
    investor = _require_actor(actor)
    startup = db.get(Startup, parse_startup_id(startup_id))
    if startup is None or startup.status != StartupStatus.approved.value:
        raise NotFoundError("Startup not found")

    existing = (
        db.query(WishlistEntry)
        .filter(WishlistEntry.investor_id == investor.id, WishlistEntry.startup_id == startup.id)
        .first()
    )
    if existing is not None:
        raise ConflictError("Startup is already on the wishlist")

    entry = WishlistEntry(investor_id=investor.id, startup_id=startup.id, notes=notes)
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Startup is already on the wishlist") from None
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Wishlist add failed for startup %s: %s", startup.id, exc)
        raise DependencyError("Failed to update wishlist", error=str(exc)) from exc
    db.refresh(entry)
    return entry


def remove_from_wishlist(db: Session, actor: Profile | None, startup_id: str | UUID) -> None:
    """Remove a bookmark. Raises NotFoundError if it is not on the wishlist."""
    investor = _require_actor(actor)
    sid = parse_startup_id(startup_id)
    entry = (
        db.query(WishlistEntry)
        .filter(WishlistEntry.investor_id == investor.id, WishlistEntry.startup_id == sid)
        .first()
    )
    if entry is None:
        raise NotFoundError("Startup not on wishlist")
    try:
        db.delete(entry)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise DependencyError("Failed to update wishlist", error=str(exc)) from exc


def list_wishlist(db: Session, actor: Profile | None) -> list[WishlistEntry]:
    """The actor's wishlist, newest first, with startups loaded."""
    investor = _require_actor(actor)
    return (
        db.query(WishlistEntry)
        .options(
            selectinload(WishlistEntry.startup).selectinload(Startup.media),
            selectinload(WishlistEntry.startup).selectinload(Startup.category),
        )
        .filter(WishlistEntry.investor_id == investor.id)
        .order_by(WishlistEntry.created_at.desc())
        .all()
    )
