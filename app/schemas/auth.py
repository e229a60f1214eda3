"""Profile schemas: the caller's own profile and the admin user list."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from app.schemas.base import CamelModel
from app.schemas.startup import is_http_url


class ProfileRead(CamelModel):
    """Schema for reading the current profile (response)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str
    is_admin: bool = False
    created_at: Optional[datetime] = None


class ProfileUpdate(CamelModel):
    """Editable profile fields. Omitted fields are left unchanged; "" clears."""

    full_name: Optional[str] = Field(None, max_length=255)
    avatar_url: Optional[str] = Field(None, max_length=1024)

    @field_validator("full_name")
    @classmethod
    def _strip_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None

    @field_validator("avatar_url")
    @classmethod
    def _check_avatar(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if v and not is_http_url(v):
            raise ValueError("Please enter a valid URL")
        return v


class UserListResponse(CamelModel):
    """Admin user list with the headline counts shown above it."""

    items: list[ProfileRead]
    total: int
    admins: int
    new_this_week: int


class AdminStats(CamelModel):
    total_users: int
    total_startups: int
    approved_startups: int
    approval_rate: int
    new_users_this_month: int
    startups_by_status: dict[str, int]
