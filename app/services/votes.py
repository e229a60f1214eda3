"""Votes: at most one up/down vote per (startup, user)."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.models.startup import Startup, StartupStatus
from app.models.vote import Vote
from app.services.errors import AuthenticationError, DependencyError, NotFoundError
from app.services.startup_access import parse_startup_id

logger = logging.getLogger(__name__)


def _get_votable_startup(db: Session, startup_id: str | UUID) -> Startup:
    startup = db.get(Startup, parse_startup_id(startup_id))
    if startup is None or startup.status != StartupStatus.approved.value:
        raise NotFoundError("Startup not found")
    return startup


def _counts(db: Session, startup_id: UUID, viewer: Profile | None) -> dict:
    rows = (
        db.query(Vote.is_upvote, func.count(Vote.id))
        .filter(Vote.startup_id == startup_id)
        .group_by(Vote.is_upvote)
        .all()
    )
    counts = {bool(is_up): n for is_up, n in rows}
    user_vote = None
    if viewer is not None:
        mine = (
            db.query(Vote.is_upvote)
            .filter(Vote.startup_id == startup_id, Vote.user_id == viewer.id)
            .first()
        )
        user_vote = None if mine is None else bool(mine[0])
    return {"upvotes": counts.get(True, 0), "downvotes": counts.get(False, 0), "userVote": user_vote}


def vote_summary(db: Session, startup_id: str | UUID, viewer: Profile | None = None) -> dict:
    """Return ``{"upvotes", "downvotes", "userVote"}``; userVote is True/False/None.

    Raises NotFoundError for unknown or unapproved startups, like ``cast_vote``.
    """
    startup = _get_votable_startup(db, startup_id)
    return _counts(db, startup.id, viewer)


def cast_vote(db: Session, actor: Profile | None, startup_id: str | UUID, is_upvote: bool) -> dict:
    """Create or flip the actor's vote on an approved startup."""
    if actor is None:
        raise AuthenticationError("Unauthorized")
    startup = _get_votable_startup(db, startup_id)
    try:
        try:
            vote = (
                db.query(Vote)
                .filter(Vote.startup_id == startup.id, Vote.user_id == actor.id)
                .first()
            )
            if vote is None:
                db.add(Vote(startup_id=startup.id, user_id=actor.id, is_upvote=is_upvote))
            else:
                vote.is_upvote = is_upvote
            db.commit()
        except IntegrityError:
            # Concurrent first vote from the same user; apply as an update.
            db.rollback()
            db.query(Vote).filter(Vote.startup_id == startup.id, Vote.user_id == actor.id).update(
                {Vote.is_upvote: is_upvote}
            )
            db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Vote failed for startup %s: %s", startup.id, exc)
        raise DependencyError("Failed to record vote", error=str(exc)) from exc
    return _counts(db, startup.id, actor)


def remove_vote(db: Session, actor: Profile | None, startup_id: str | UUID) -> dict:
    """Remove the actor's vote if any. Works whatever the startup's status."""
    if actor is None:
        raise AuthenticationError("Unauthorized")
    sid = parse_startup_id(startup_id)
    try:
        db.query(Vote).filter(Vote.startup_id == sid, Vote.user_id == actor.id).delete()
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Vote removal failed for startup %s: %s", sid, exc)
        raise DependencyError("Failed to remove vote", error=str(exc)) from exc
    return _counts(db, sid, actor)
