"""Media endpoint schemas."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import Field

from app.schemas.base import CamelModel


class MediaStateRead(CamelModel):
    logo_url: Optional[str] = None
    media_images: list[str] = Field(default_factory=list)
    media_documents: list[str] = Field(default_factory=list)
    media_videos: list[str] = Field(default_factory=list)
    pitch_deck_url: Optional[str] = None


class MediaAttachResponse(CamelModel):
    message: str
    id: UUID
    url: str
    media_type: str
    media: MediaStateRead


class MediaDetachResponse(CamelModel):
    message: str
    id: UUID
    media: MediaStateRead
