"""Admin moderation schemas."""

from __future__ import annotations

from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.startup import StartupRead


class StatusUpdateRequest(CamelModel):
    startup_id: str = Field(..., min_length=1)
    status: str


class BulkStatusUpdateRequest(CamelModel):
    startup_ids: list[str] = Field(..., min_length=1)
    status: str


class StatusUpdateResponse(CamelModel):
    message: str
    startup: StartupRead


class BulkStatusUpdateResponse(CamelModel):
    message: str
    updated: int
    ids: list[str]


class SpamEntry(CamelModel):
    startup: StartupRead
    score: int
    reasons: list[str]
    classification: str


class SpamReport(CamelModel):
    spam: list[SpamEntry]
    potential_spam: list[SpamEntry]
    total: int
