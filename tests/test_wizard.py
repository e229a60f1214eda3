"""Wizard step normalization, per-step validation and form parsing."""

from __future__ import annotations

import json

import pytest

from app.schemas.startup import parse_funding_amount, parse_team_size
from app.services.errors import ValidationError
from app.services.wizard import normalize_step, parse_startup_form, validate_step

BASIC = {"name": "Acme", "slug": "acme", "categoryId": 1, "foundingDate": "2023-01-01"}
DETAILED = {
    "description": "Acme builds warehouse robots that pick and pack small parcels fast.",
    "fundingStage": "seed",
    "teamSize": 12,
    "location": "Berlin",
    "lookingFor": [2, 2, 1],
}


@pytest.mark.parametrize("raw", ["basic-info", "basicInfo", "basic_info", " basic_info "])
def test_normalize_step(raw) -> None:
    assert normalize_step(raw) == "basic_info"


def test_normalize_unknown_step() -> None:
    with pytest.raises(ValidationError, match="Unknown wizard step"):
        normalize_step("billing")


def test_validate_step_valid() -> None:
    assert validate_step("detailed-info", DETAILED) == {}


def test_validate_step_founding_date_must_exist() -> None:
    errors = validate_step("basic_info", {**BASIC, "foundingDate": "2023-02-30"})
    assert list(errors.values()) == ["Please enter a valid date (YYYY-MM-DD)"]


def test_validate_step_website_must_be_http() -> None:
    errors = validate_step("basic_info", {**BASIC, "websiteUrl": "acme.example"})
    assert list(errors.values()) == ["Please enter a valid URL"]


def test_validate_review_covers_all_blocks() -> None:
    errors = validate_step("review", {"basicInfo": BASIC})
    assert any(key.startswith("detailedInfo") for key in errors)


def test_parse_startup_form_accepts_json_strings() -> None:
    form = parse_startup_form(json.dumps(BASIC), json.dumps(DETAILED), json.dumps({}))
    assert form.basic_info.name == "Acme"
    assert form.detailed_info.team_size == "12"
    assert form.detailed_info.looking_for == [2, 1]
    assert form.media_info.social_links is None


def test_parse_startup_form_names_first_failing_field() -> None:
    with pytest.raises(ValidationError, match="name: Startup name must be at least 2 characters"):
        parse_startup_form({**BASIC, "name": "A"}, DETAILED, {})


def test_parse_startup_form_rejects_non_object() -> None:
    with pytest.raises(ValidationError, match="mediaInfo must be a JSON object"):
        parse_startup_form(BASIC, DETAILED, "[]")


@pytest.mark.parametrize(
    "raw,expected",
    [("1,500,000", 1500000.0), ("$250000", 250000.0), ("", None), ("lots", None), (None, None)],
)
def test_parse_funding_amount(raw, expected) -> None:
    assert parse_funding_amount(raw) == expected


@pytest.mark.parametrize("raw,expected", [("11-50", 11), ("200+", 200), ("1", 1), ("n/a", None)])
def test_parse_team_size(raw, expected) -> None:
    assert parse_team_size(raw) == expected
