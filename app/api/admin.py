"""Admin routes: moderation, users and analytics."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_blob_store_dep, get_db, require_admin
from app.models.profile import Profile
from app.schemas.auth import AdminStats, ProfileRead, UserListResponse
from app.schemas.moderation import (
    BulkStatusUpdateRequest,
    BulkStatusUpdateResponse,
    SpamEntry,
    SpamReport,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from app.schemas.startup import MessageResponse, StartupRead
from app.services.analytics import admin_stats
from app.services.moderation import (
    bulk_set_status,
    list_startups_for_moderation,
    set_status,
    spam_report,
)
from app.services.profiles import list_profiles
from app.services.startups import delete_startup
from app.storage.base import BlobStore

router = APIRouter()


@router.get("/startups", response_model=list[StartupRead])
def api_admin_list_startups(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    """All startups for the moderation queue, optionally filtered by status."""
    return list_startups_for_moderation(db, admin, status, search)


@router.get("/spam-report", response_model=SpamReport)
def api_spam_report(
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
) -> SpamReport:
    """Score every startup and return the suspicious ones, highest score first."""
    report = spam_report(db, admin, search)

    def entries(group):
        return [
            SpamEntry(
                startup=StartupRead.model_validate(startup),
                score=result.score,
                reasons=result.reasons,
                classification=result.classification.value,
            )
            for startup, result in group
        ]

    return SpamReport(
        spam=entries(report["spam"]),
        potential_spam=entries(report["potential_spam"]),
        total=report["total"],
    )


@router.post("/startups/status", response_model=StatusUpdateResponse)
def api_set_status(
    data: StatusUpdateRequest,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
) -> StatusUpdateResponse:
    """Move one startup to any moderation status."""
    startup = set_status(db, admin, data.startup_id, data.status)
    return StatusUpdateResponse(
        message=f"Startup status updated to {startup.status}",
        startup=StartupRead.model_validate(startup),
    )


@router.post("/startups/status/bulk", response_model=BulkStatusUpdateResponse)
def api_bulk_set_status(
    data: BulkStatusUpdateRequest,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
) -> BulkStatusUpdateResponse:
    """Move several startups to one status; all or nothing."""
    startups = bulk_set_status(db, admin, data.startup_ids, data.status)
    return BulkStatusUpdateResponse(
        message=f"{len(startups)} startup(s) updated to {data.status.strip().lower()}",
        updated=len(startups),
        ids=[str(s.id) for s in startups],
    )


@router.delete("/startups/{startup_id}", response_model=MessageResponse)
def api_admin_delete_startup(
    startup_id: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
    store: BlobStore = Depends(get_blob_store_dep),
) -> MessageResponse:
    """Hard-delete any startup with its dependent rows."""
    delete_startup(db, admin, startup_id, store)
    return MessageResponse(message="Startup deleted successfully")


# ── Users and analytics ─────────────────────────────────────────────


@router.get("/users", response_model=UserListResponse)
def api_admin_list_users(
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
) -> UserListResponse:
    """Every profile with its role, newest first."""
    result = list_profiles(db, admin, search)
    return UserListResponse(
        items=[ProfileRead.model_validate(p) for p in result["items"]],
        total=result["total"],
        admins=result["admins"],
        new_this_week=result["new_this_week"],
    )


@router.get("/stats", response_model=AdminStats)
def api_admin_stats(
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
) -> AdminStats:
    """Headline counts for the analytics dashboard."""
    return AdminStats(**admin_stats(db, admin))
