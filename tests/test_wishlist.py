"""Investor wishlist service and dashboard routes."""

from __future__ import annotations

import pytest

from app.services.errors import ConflictError, NotFoundError
from app.services.wishlist import add_to_wishlist, list_wishlist, remove_from_wishlist
from tests.factories import auth_headers, make_profile, make_startup


@pytest.fixture
def investor(db):
    return make_profile(db, role="investor")


@pytest.fixture
def approved(db, founder):
    return make_startup(db, founder, status="approved")


def test_add_list_remove(db, investor, approved) -> None:
    entry = add_to_wishlist(db, investor, approved.id, notes="Follow up in Q3")
    assert entry.notes == "Follow up in Q3"

    items = list_wishlist(db, investor)
    assert [i.startup_id for i in items] == [approved.id]

    remove_from_wishlist(db, investor, approved.id)
    assert list_wishlist(db, investor) == []


def test_duplicate_add_conflicts(db, investor, approved) -> None:
    add_to_wishlist(db, investor, approved.id)
    with pytest.raises(ConflictError):
        add_to_wishlist(db, investor, approved.id)


def test_only_approved_startups(db, investor, startup) -> None:
    with pytest.raises(NotFoundError):
        add_to_wishlist(db, investor, startup.id)


def test_remove_missing(db, investor, approved) -> None:
    with pytest.raises(NotFoundError, match="Startup not on wishlist"):
        remove_from_wishlist(db, investor, approved.id)


def test_wishlists_are_per_user(db, investor, other_user, approved) -> None:
    add_to_wishlist(db, investor, approved.id)
    assert list_wishlist(db, other_user) == []


def test_api(client_with_db, investor, approved) -> None:
    headers = auth_headers(investor)

    added = client_with_db.post(
        "/api/dashboard/wishlist",
        json={"startupId": str(approved.id), "notes": "Great team"},
        headers=headers,
    )
    assert added.status_code == 201
    assert added.json()["startupId"] == str(approved.id)

    again = client_with_db.post(
        "/api/dashboard/wishlist", json={"startupId": str(approved.id)}, headers=headers
    )
    assert again.status_code == 409

    listing = client_with_db.get("/api/dashboard/wishlist", headers=headers).json()
    assert [i["startupId"] for i in listing["items"]] == [str(approved.id)]
    assert listing["items"][0]["startup"]["name"] == approved.name
    assert listing["items"][0]["notes"] == "Great team"

    removed = client_with_db.delete(f"/api/dashboard/wishlist/{approved.id}", headers=headers)
    assert removed.status_code == 204
    assert client_with_db.get("/api/dashboard/wishlist", headers=headers).json() == {"items": []}
