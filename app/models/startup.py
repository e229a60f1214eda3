"""Startup model: one submitted venture."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from enum import Enum

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base
from app.models.looking_for import startup_looking_for
from app.models.startup_media import MEDIA_DOCUMENT, MEDIA_IMAGE, MEDIA_VIDEO


class StartupStatus(str, Enum):
    """Moderation status. Every state is reachable from every other state."""

    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    flagged_spam = "flagged_spam"


VALID_STATUSES: frozenset[str] = frozenset(s.value for s in StartupStatus)


class Startup(Base):
    """Startup profile owned by exactly one user."""

    __tablename__ = "startups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    tagline: Mapped[str | None] = mapped_column(String(150), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    founding_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    website_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    funding_stage: Mapped[str | None] = mapped_column(String(64), nullable=True)
    funding_amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    employee_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), default=StartupStatus.pending.value, nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    owner: Mapped["Profile"] = relationship("Profile", back_populates="startups")
    category: Mapped["Category | None"] = relationship("Category", back_populates="startups")
    media: Mapped[list["StartupMedia"]] = relationship(
        "StartupMedia",
        back_populates="startup",
        cascade="all, delete-orphan",
        order_by="StartupMedia.position",
    )
    social_links: Mapped[list["SocialLink"]] = relationship(
        "SocialLink", back_populates="startup", cascade="all, delete-orphan"
    )
    votes: Mapped[list["Vote"]] = relationship(
        "Vote", back_populates="startup", cascade="all, delete-orphan"
    )
    wishlist_entries: Mapped[list["WishlistEntry"]] = relationship(
        "WishlistEntry", back_populates="startup", cascade="all, delete-orphan"
    )
    looking_for: Mapped[list["LookingForOption"]] = relationship(
        "LookingForOption", secondary=startup_looking_for
    )

    # ── Media projections ────────────────────────────────────────────
    # Denormalized read view over startup_media rows.

    def _urls(self, media_type: str) -> list[str]:
        return [m.url for m in self.media if m.media_type == media_type]

    def _primary_url(self, media_type: str) -> str | None:
        for m in self.media:
            if m.media_type == media_type and m.is_primary:
                return m.url
        return None

    @property
    def logo_url(self) -> str | None:
        return self._primary_url(MEDIA_IMAGE)

    @property
    def pitch_deck_url(self) -> str | None:
        return self._primary_url(MEDIA_DOCUMENT)

    @property
    def media_images(self) -> list[str]:
        return self._urls(MEDIA_IMAGE)

    @property
    def media_documents(self) -> list[str]:
        return self._urls(MEDIA_DOCUMENT)

    @property
    def media_videos(self) -> list[str]:
        return self._urls(MEDIA_VIDEO)
