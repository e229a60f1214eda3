"""Internal job endpoints (token-authenticated)."""

from __future__ import annotations

from app.models import Startup
from app.services.page_cache import page_cache
from tests.factories import make_startup
from tests.test_constants import TEST_INTERNAL_JOB_TOKEN

HEADERS = {"X-Internal-Token": TEST_INTERNAL_JOB_TOKEN}


def test_rejects_missing_token(client_with_db) -> None:
    assert client_with_db.post("/internal/normalize_statuses").status_code == 422


def test_rejects_wrong_token(client_with_db) -> None:
    response = client_with_db.post(
        "/internal/normalize_statuses", headers={"X-Internal-Token": "wrong"}
    )
    assert response.status_code == 403
    assert response.json() == {"detail": "Invalid internal token"}


def test_rejects_when_token_unconfigured(client_with_db, monkeypatch) -> None:
    from app.config import get_settings

    monkeypatch.setenv("INTERNAL_JOB_TOKEN", "")
    get_settings.cache_clear()
    assert client_with_db.post("/internal/normalize_statuses", headers=HEADERS).status_code == 403


def test_normalize_statuses(client_with_db, db, founder) -> None:
    broken = make_startup(db, founder, status="live")
    make_startup(db, founder, status="approved")
    page_cache.set("/", {"cached": True})

    response = client_with_db.post("/internal/normalize_statuses", headers=HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["updated"] == 1
    assert body["message"] == "Updated 1 startup(s) to pending status"
    assert body["startups"] == [{"id": str(broken.id), "name": broken.name, "oldStatus": "live"}]
    db.expire_all()
    assert db.get(Startup, broken.id).status == "pending"
    assert page_cache.get("/") is None


def test_normalize_statuses_nothing_to_do(client_with_db, startup) -> None:
    body = client_with_db.post("/internal/normalize_statuses", headers=HEADERS).json()
    assert body["updated"] == 0
    assert body["startups"] == []


def test_clear_page_cache(client_with_db) -> None:
    page_cache.set("/startups", {"cached": True}, "page=1")
    response = client_with_db.post("/internal/clear_page_cache", headers=HEADERS)
    assert response.json() == {"status": "completed"}
    assert page_cache.get("/startups", "page=1") is None
