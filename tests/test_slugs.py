"""Slug generation and availability tests."""

from __future__ import annotations

import pytest

from app.services.slugs import (
    MAX_SLUG_LENGTH,
    check_slug_availability,
    generate_slug,
    generate_unique_slug,
    is_valid_slug,
)
from tests.factories import make_startup


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Acme Robotics", "acme-robotics"),
        ("  Acme   Robotics  ", "acme-robotics"),
        ("Acme & Co. Labs", "acme-and-co-labs"),
        ("snake_case_name", "snake-case-name"),
        ("Café--Déjà!!", "caf-dj"),
        ("", ""),
        (None, ""),
    ],
)
def test_generate_slug(name, expected) -> None:
    assert generate_slug(name) == expected


def test_generate_slug_truncates() -> None:
    assert len(generate_slug("x" * 80)) == MAX_SLUG_LENGTH


def test_is_valid_slug() -> None:
    assert is_valid_slug("acme-1")
    assert not is_valid_slug("ab")
    assert not is_valid_slug("Acme")
    assert not is_valid_slug("acme robotics")


def test_check_slug_availability(db, founder) -> None:
    existing = make_startup(db, founder, slug="acme-robotics")
    assert not check_slug_availability(db, "acme-robotics")
    assert check_slug_availability(db, "acme-robotics", exclude_id=existing.id)
    assert check_slug_availability(db, "other-slug")
    assert not check_slug_availability(db, "no")


def test_generate_unique_slug_appends_counter(db, founder) -> None:
    make_startup(db, founder, slug="acme-robotics")
    make_startup(db, founder, slug="acme-robotics-1")
    assert generate_unique_slug(db, "Acme Robotics") == "acme-robotics-2"


def test_generate_unique_slug_pads_short_names(db) -> None:
    assert generate_unique_slug(db, "X") == "x-startup"
