"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.factories import make_profile, make_startup
from tests.test_constants import (
    TEST_INTERNAL_JOB_TOKEN,
    TEST_SECRET_KEY,
    TEST_STORAGE_BASE_URL,
)

# Tests run against an in-memory SQLite database built from the ORM metadata;
# don't inherit DATABASE_URL or SMTP settings from .env.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = TEST_SECRET_KEY
os.environ["INTERNAL_JOB_TOKEN"] = TEST_INTERNAL_JOB_TOKEN
os.environ["SMTP_HOST"] = ""
os.environ["ADMIN_NOTIFY_EMAIL"] = "admin@example.com"
os.environ.pop("JWT_AUDIENCE", None)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from app.main import app

    return TestClient(app)


@pytest.fixture
def db() -> Session:
    """Database session on a freshly created schema; tables are dropped afterwards."""
    import app.models  # noqa: F401  (register tables)
    from app.db import Base, engine

    Base.metadata.create_all(engine)
    session = Session(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def blob_store(tmp_path):
    """Local blob store rooted in a temp dir."""
    from app.storage.local import LocalBlobStore

    return LocalBlobStore(root=tmp_path, bucket="startups", public_base_url=TEST_STORAGE_BASE_URL)


@pytest.fixture
def client_with_db(db: Session, blob_store) -> TestClient:
    """TestClient with get_db and the blob store overridden for integration tests."""
    from app.api.deps import get_blob_store_dep
    from app.db.session import get_db
    from app.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store_dep] = lambda: blob_store
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _clear_caches() -> None:
    """Reset the public page cache and settings cache around each test."""
    from app.config import get_settings
    from app.services.page_cache import page_cache

    page_cache.clear()
    get_settings.cache_clear()
    yield
    page_cache.clear()
    get_settings.cache_clear()


# ── Common rows ─────────────────────────────────────────────────────


@pytest.fixture
def founder(db: Session):
    return make_profile(db, role="founder")


@pytest.fixture
def other_user(db: Session):
    return make_profile(db, role="founder")


@pytest.fixture
def admin(db: Session):
    return make_profile(db, role="admin")


@pytest.fixture
def startup(db: Session, founder):
    return make_startup(db, founder)
