"""Startup schemas: wizard step payloads and read models."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional
from urllib.parse import urlparse
from uuid import UUID

from pydantic import AliasChoices, ConfigDict, Field, field_validator

from app.schemas.base import CamelModel
from app.schemas.category import CategoryRead, LookingForRead

_SLUG_RE = re.compile(r"^[a-z0-9-]+$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _optional_url(value: Optional[str], message: str) -> Optional[str]:
    """Empty string and None mean "not provided"; anything else must be an http(s) URL."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not is_http_url(value):
        raise ValueError(message)
    return value


def _as_text(value: Any) -> Any:
    """Accept numbers where the form sends strings (e.g. teamSize 10)."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class WizardStep(CamelModel):
    """Wizard payloads report every field error, including missing fields."""

    model_config = ConfigDict(validate_default=True)


# ── Wizard steps ─────────────────────────────────────────────────────


class BasicInfo(WizardStep):
    name: str = ""
    slug: str = ""
    tagline: Optional[str] = None
    category_id: Optional[int] = Field(
        None, validation_alias=AliasChoices("categoryId", "industry", "category_id")
    )
    founding_date: Optional[str] = None
    website_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("websiteUrl", "website", "website_url")
    )

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        v = (v or "").strip()
        if len(v) < 2:
            raise ValueError("Startup name must be at least 2 characters")
        if len(v) > 100:
            raise ValueError("Startup name must be 100 characters or less")
        return v

    @field_validator("slug")
    @classmethod
    def _check_slug(cls, v: str) -> str:
        v = (v or "").strip()
        if len(v) < 3:
            raise ValueError("Slug must be at least 3 characters")
        if len(v) > 50:
            raise ValueError("Slug must be 50 characters or less")
        if not _SLUG_RE.match(v):
            raise ValueError("Slug can only contain lowercase letters, numbers, and hyphens")
        return v

    @field_validator("tagline")
    @classmethod
    def _check_tagline(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 150:
            raise ValueError("Tagline must be 150 characters or less")
        return v or None

    @field_validator("category_id")
    @classmethod
    def _check_category(cls, v: Optional[int]) -> int:
        if v is None:
            raise ValueError("Please select an industry")
        return v

    @field_validator("founding_date")
    @classmethod
    def _check_founding_date(cls, v: Optional[str]) -> str:
        v = (v or "").strip()
        if not _DATE_RE.match(v):
            raise ValueError("Please enter a valid date (YYYY-MM-DD)")
        try:
            date.fromisoformat(v)
        except ValueError:
            raise ValueError("Please enter a valid date (YYYY-MM-DD)") from None
        return v

    @field_validator("website_url")
    @classmethod
    def _check_website(cls, v: Optional[str]) -> Optional[str]:
        return _optional_url(v, "Please enter a valid URL")


class DetailedInfo(WizardStep):
    description: str = ""
    funding_stage: str = ""
    funding_amount: Optional[str] = None
    team_size: str = ""
    location: str = ""
    looking_for: list[int] = Field(default_factory=list)

    @field_validator("funding_amount", "team_size", mode="before")
    @classmethod
    def _numbers_as_text(cls, v: Any) -> Any:
        return _as_text(v)

    @field_validator("description")
    @classmethod
    def _check_description(cls, v: str) -> str:
        v = (v or "").strip()
        if len(v) < 50:
            raise ValueError("Description must be at least 50 characters")
        if len(v) > 2000:
            raise ValueError("Description must be 2000 characters or less")
        return v

    @field_validator("funding_stage")
    @classmethod
    def _check_funding_stage(cls, v: str) -> str:
        if not (v or "").strip():
            raise ValueError("Please select a funding stage")
        return v.strip()

    @field_validator("funding_amount")
    @classmethod
    def _check_funding_amount(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        if parse_funding_amount(v) is None:
            raise ValueError("Funding amount must be a number")
        return v.strip()

    @field_validator("team_size")
    @classmethod
    def _check_team_size(cls, v: str) -> str:
        if not (v or "").strip():
            raise ValueError("Please select a team size")
        return v.strip()

    @field_validator("location")
    @classmethod
    def _check_location(cls, v: str) -> str:
        v = (v or "").strip()
        if len(v) < 2:
            raise ValueError("Location must be at least 2 characters")
        return v

    @field_validator("looking_for")
    @classmethod
    def _check_looking_for(cls, v: list[int]) -> list[int]:
        ids = [i for i in dict.fromkeys(v) if i > 0]
        if not ids:
            raise ValueError("Please select at least one option")
        return ids


class MediaInfo(WizardStep):
    """Media step. File parts travel separately; URLs here are already hosted."""

    video_url: Optional[str] = None
    # None means "leave existing links alone"; {} clears them.
    social_links: Optional[dict[str, str]] = None
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    pitch_deck_url: Optional[str] = None
    gallery_urls: list[str] = Field(default_factory=list)

    @field_validator("video_url")
    @classmethod
    def _check_video(cls, v: Optional[str]) -> Optional[str]:
        return _optional_url(v, "Please enter a valid URL")

    @field_validator("logo_url", "cover_image_url", "pitch_deck_url")
    @classmethod
    def _check_media_url(cls, v: Optional[str]) -> Optional[str]:
        return _optional_url(v, "Please enter a valid URL")

    @field_validator("gallery_urls")
    @classmethod
    def _check_gallery(cls, v: list[str]) -> list[str]:
        urls = []
        for item in v:
            url = _optional_url(item, "Please enter a valid URL")
            if url:
                urls.append(url)
        return urls

    @field_validator("social_links", mode="before")
    @classmethod
    def _check_social_links(cls, v: Any) -> Optional[dict[str, str]]:
        if v is None:
            return None
        if not isinstance(v, dict):
            raise ValueError("Social links must be an object of platform to URL")
        links: dict[str, str] = {}
        for platform, url in v.items():
            key = str(platform).strip().lower()
            if not key:
                continue
            label = {"linkedin": "LinkedIn", "twitter": "Twitter"}.get(key, key.title())
            clean = _optional_url(None if url is None else str(url), f"Please enter a valid {label} URL")
            if clean:
                links[key] = clean
        return links


class StartupForm(CamelModel):
    """All three steps, as submitted from the review step."""

    basic_info: BasicInfo
    detailed_info: DetailedInfo
    media_info: MediaInfo = Field(default_factory=MediaInfo)


def parse_funding_amount(value: Optional[str]) -> Optional[float]:
    """Parse "1,500,000" as 1500000.0. Blank or non-numeric gives None."""
    if value is None:
        return None
    text = str(value).replace(",", "").replace("$", "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def parse_team_size(value: Optional[str]) -> Optional[int]:
    """Leading integer of a team-size label: "11-50" -> 11, "200+" -> 200."""
    if value is None:
        return None
    match = re.match(r"\s*(\d+)", str(value))
    return int(match.group(1)) if match else None


# ── Read models ──────────────────────────────────────────────────────


class SocialLinkRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    platform: str
    url: str


class StartupRead(CamelModel):
    """Startup as returned by the API, with the denormalized media view."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    tagline: Optional[str] = None
    description: str
    category_id: Optional[int] = None
    category: Optional[CategoryRead] = None
    founding_date: Optional[date] = None
    website_url: Optional[str] = None
    funding_stage: Optional[str] = None
    funding_amount: Optional[float] = None
    employee_count: Optional[int] = None
    location: Optional[str] = None
    status: str
    user_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None
    logo_url: Optional[str] = None
    pitch_deck_url: Optional[str] = None
    media_images: list[str] = Field(default_factory=list)
    media_documents: list[str] = Field(default_factory=list)
    media_videos: list[str] = Field(default_factory=list)
    social_links: list[SocialLinkRead] = Field(default_factory=list)
    looking_for: list[LookingForRead] = Field(default_factory=list)


class StartupList(CamelModel):
    """Paginated list of startups."""

    items: list[StartupRead]
    total: int
    page: int = 1
    page_size: int = 12


class StartupCreateResponse(CamelModel):
    id: UUID
    slug: str
    message: str


class StartupUpdateResponse(CamelModel):
    message: str
    id: UUID
    startup: StartupRead


class MessageResponse(CamelModel):
    message: str


class SlugAvailability(CamelModel):
    slug: str
    available: bool
    suggestion: Optional[str] = None


class StepValidationResult(CamelModel):
    step: str
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)
