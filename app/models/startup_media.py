"""StartupMedia model: one image, document or video attached to a startup.

The logo is the primary image row and the pitch deck is the primary document row.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base

MEDIA_IMAGE = "image"
MEDIA_DOCUMENT = "document"
MEDIA_VIDEO = "video"
STORED_MEDIA_TYPES: tuple[str, ...] = (MEDIA_IMAGE, MEDIA_DOCUMENT, MEDIA_VIDEO)


class StartupMedia(Base):
    """Media item; (startup_id, media_type, url) is unique."""

    __tablename__ = "startup_media"

    __table_args__ = (
        UniqueConstraint("startup_id", "media_type", "url", name="uq_startup_media_url"),
        Index(
            "uq_startup_media_primary",
            "startup_id",
            "media_type",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary = 1"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    startup_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("startups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    media_type: Mapped[str] = mapped_column(String(16), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    startup: Mapped["Startup"] = relationship("Startup", back_populates="media")
