"""Public (anonymous) read routes. Responses are cached per page path.

Cache keys mirror the public pages the payloads back, so moderation and
owner edits invalidate them through ``revalidate_startup_pages``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.models.profile import Profile
from app.models.startup import StartupStatus
from app.schemas.category import CategoryRead, LookingForRead
from app.schemas.startup import StartupList, StartupRead
from app.services.categories import get_category_by_slug, list_categories, list_looking_for_options
from app.services.page_cache import (
    HOME_PATH,
    LISTING_PATH,
    category_page_path,
    page_cache,
    startup_page_path,
)
from app.services.startups import DEFAULT_PAGE_SIZE, get_startup_by_slug, list_public_startups

router = APIRouter()

HOME_LATEST_COUNT = 6


def _startup_list(items, total: int, page: int, page_size: int) -> dict:
    return StartupList(
        items=[StartupRead.model_validate(s) for s in items],
        total=total,
        page=page,
        page_size=page_size,
    ).model_dump(mode="json", by_alias=True)


@router.get("/home")
def api_home(db: Session = Depends(get_db)) -> dict:
    """Landing page data: latest approved startups and the category list."""
    cached = page_cache.get(HOME_PATH)
    if cached is not None:
        return cached
    items, total = list_public_startups(db, page=1, page_size=HOME_LATEST_COUNT)
    payload = {
        "latest": [StartupRead.model_validate(s).model_dump(mode="json", by_alias=True) for s in items],
        "totalStartups": total,
        "categories": [
            CategoryRead.model_validate(c).model_dump(mode="json", by_alias=True)
            for c in list_categories(db)
        ],
    }
    page_cache.set(HOME_PATH, payload)
    return payload


@router.get("/startups")
def api_list_startups(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100, alias="pageSize"),
    db: Session = Depends(get_db),
) -> dict:
    """Approved startups, newest first, with optional category and search filters."""
    variant = f"category={category or ''}&search={search or ''}&page={page}&size={page_size}"
    cached = page_cache.get(LISTING_PATH, variant)
    if cached is not None:
        return cached
    items, total = list_public_startups(db, category, search, page, page_size)
    payload = _startup_list(items, total, page, page_size)
    page_cache.set(LISTING_PATH, payload, variant)
    return payload


@router.get("/startups/{slug}")
def api_get_startup_by_slug(
    slug: str,
    db: Session = Depends(get_db),
    viewer: Optional[Profile] = Depends(get_current_user),
) -> dict:
    """Startup detail. Owners and admins also see their non-approved startups."""
    path = startup_page_path(slug)
    cached = page_cache.get(path)
    if cached is not None:
        return cached
    startup = get_startup_by_slug(db, slug, viewer)
    payload = StartupRead.model_validate(startup).model_dump(mode="json", by_alias=True)
    if startup.status == StartupStatus.approved.value:
        page_cache.set(path, payload)
    return payload


@router.get("/categories", response_model=list[CategoryRead])
def api_list_categories(db: Session = Depends(get_db)):
    return list_categories(db)


@router.get("/categories/{slug}/startups")
def api_category_startups(
    slug: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100, alias="pageSize"),
    db: Session = Depends(get_db),
) -> dict:
    """Approved startups in one category."""
    path = category_page_path(slug)
    variant = f"page={page}&size={page_size}"
    cached = page_cache.get(path, variant)
    if cached is not None:
        return cached
    category = get_category_by_slug(db, slug)
    items, total = list_public_startups(db, category.slug, None, page, page_size)
    payload = {
        "category": CategoryRead.model_validate(category).model_dump(mode="json", by_alias=True),
        **_startup_list(items, total, page, page_size),
    }
    page_cache.set(path, payload, variant)
    return payload


@router.get("/looking-for-options", response_model=list[LookingForRead])
def api_looking_for_options(db: Session = Depends(get_db)):
    return list_looking_for_options(db)
