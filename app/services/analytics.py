"""Admin analytics: headline counts over profiles and startups."""

from __future__ import annotations

import calendar
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.profile import Profile
from app.models.startup import VALID_STATUSES, Startup, StartupStatus
from app.services.startup_access import require_admin_actor


def one_month_before(moment: datetime) -> datetime:
    """Same day and time one calendar month earlier, clamped to the month's last day."""
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def approval_rate(approved: int, total: int) -> int:
    """Approved share of all startups as a whole percentage; 0 when there are none."""
    if total <= 0:
        return 0
    return round(approved / total * 100)


def admin_stats(
    db: Session, actor: Profile | None, now: Optional[datetime] = None
) -> dict[str, Any]:
    require_admin_actor(actor)
    now = now or datetime.now(timezone.utc)

    by_status = {status: 0 for status in sorted(VALID_STATUSES)}
    for status, count in db.query(Startup.status, func.count(Startup.id)).group_by(Startup.status):
        by_status[status] = count
    total_startups = sum(by_status.values())
    approved = by_status.get(StartupStatus.approved.value, 0)

    return {
        "total_users": db.query(Profile).count(),
        "total_startups": total_startups,
        "approved_startups": approved,
        "approval_rate": approval_rate(approved, total_startups),
        "new_users_this_month": db.query(Profile)
        .filter(Profile.created_at >= one_month_before(now))
        .count(),
        "startups_by_status": by_status,
    }
