"""Best-effort audit logging. A failed audit write never fails the caller."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def record_audit(
    db: Session,
    *,
    user_id: uuid.UUID | None,
    action: str,
    entity_type: str,
    entity_id: uuid.UUID | str,
    details: dict[str, Any] | None = None,
) -> bool:
    """Append an audit entry in its own commit. Returns False (and logs) on failure.

    Call after the primary operation has committed so a rollback here cannot
    undo it.
    """
    try:
        db.add(
            AuditLog(
                user_id=user_id,
                action=action,
                entity_type=entity_type,
                entity_id=str(entity_id),
                details=details,
            )
        )
        db.commit()
        return True
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning(
            "audit_write_failed: action=%s entity=%s:%s error=%s",
            action,
            entity_type,
            entity_id,
            exc,
        )
        return False
