"""Social link schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.startup import SocialLinkRead


class SocialLinksUpdate(CamelModel):
    """``{"socialLinks": {"linkedin": "https://...", "twitter": ""}}``; empty URLs are dropped."""

    social_links: dict[str, Optional[str]] = Field(default_factory=dict)


class SocialLinksResponse(CamelModel):
    message: str
    social_links: list[SocialLinkRead]
