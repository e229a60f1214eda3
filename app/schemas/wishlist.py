"""Wishlist schemas for request/response validation."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field

from app.schemas.base import CamelModel
from app.schemas.startup import StartupRead


class WishlistAddRequest(CamelModel):
    """Schema for adding a startup to the wishlist."""

    startup_id: UUID
    notes: Optional[str] = Field(None, max_length=1000)


class WishlistItem(CamelModel):
    """Schema for a wishlist item in the list response."""

    model_config = ConfigDict(from_attributes=True)

    startup_id: UUID
    notes: Optional[str] = None
    created_at: datetime
    startup: StartupRead


class WishlistListResponse(CamelModel):
    """Schema for the wishlist list response."""

    items: list[WishlistItem]
