"""Looking-for catalog and its many-to-many join with startups."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base

startup_looking_for = Table(
    "startup_looking_for",
    Base.metadata,
    Column(
        "startup_id",
        Uuid,
        ForeignKey("startups.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "option_id",
        Integer,
        ForeignKey("looking_for_options.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class LookingForOption(Base):
    """What a startup is seeking (funding, co-founder, mentorship, ...)."""

    __tablename__ = "looking_for_options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
