"""Profile model: one row per identity-provider user."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base


class ProfileRole(str, Enum):
    """Application roles. Only admin carries extra permissions."""

    user = "user"
    founder = "founder"
    investor = "investor"
    admin = "admin"


class Profile(Base):
    """Application profile keyed by the identity provider's user id."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str | None] = mapped_column(String(320), unique=True, nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    role: Mapped[str] = mapped_column(String(32), default=ProfileRole.user.value, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    startups: Mapped[list["Startup"]] = relationship("Startup", back_populates="owner")

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.admin.value
