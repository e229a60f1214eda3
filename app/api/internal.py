"""Internal job endpoints for cron/scripts.

These endpoints are secured with a static token (X-Internal-Token header),
NOT cookie-based auth.  They are meant for automated triggers only.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db.session import get_db
from app.services.moderation import normalize_invalid_statuses
from app.services.page_cache import page_cache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", include_in_schema=False)


# ── Token dependency ────────────────────────────────────────────────


def _require_internal_token(x_internal_token: str = Header(...)) -> None:
    """Validate the internal job token from the request header.

    Uses constant-time comparison to prevent timing attacks.
    Raises 403 if the token is empty or does not match the configured value.
    """
    expected = get_settings().internal_job_token
    if not expected or not secrets.compare_digest(x_internal_token, expected):
        logger.warning("Internal endpoint auth failed: invalid or missing token")
        raise HTTPException(status_code=403, detail="Invalid internal token")


# ── Endpoints ───────────────────────────────────────────────────────


@router.post("/normalize_statuses")
def normalize_statuses(
    db: Session = Depends(get_db),
    _token: None = Depends(_require_internal_token),
):
    """Reset startups whose status is outside the moderation states to pending."""
    repaired = normalize_invalid_statuses(db)
    if repaired:
        page_cache.clear()
    return {
        "status": "completed",
        "message": f"Updated {len(repaired)} startup(s) to pending status",
        "updated": len(repaired),
        "startups": repaired,
    }


@router.post("/clear_page_cache")
def clear_page_cache(_token: None = Depends(_require_internal_token)):
    """Drop every cached public page."""
    page_cache.clear()
    return {"status": "completed"}
