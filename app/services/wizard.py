"""Startup creation wizard: per-step validation and form parsing.

Steps run basic_info -> detailed_info -> media_info -> review. Each step is
validated on its own as the user advances. The review step validates all
three blocks together, exactly as the final create request will.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.schemas.startup import BasicInfo, DetailedInfo, MediaInfo, StartupForm
from app.services.errors import ValidationError

STEP_BASIC_INFO = "basic_info"
STEP_DETAILED_INFO = "detailed_info"
STEP_MEDIA_INFO = "media_info"
STEP_REVIEW = "review"

WIZARD_STEPS: tuple[str, ...] = (STEP_BASIC_INFO, STEP_DETAILED_INFO, STEP_MEDIA_INFO, STEP_REVIEW)

STEP_SCHEMAS: dict[str, type[BaseModel]] = {
    STEP_BASIC_INFO: BasicInfo,
    STEP_DETAILED_INFO: DetailedInfo,
    STEP_MEDIA_INFO: MediaInfo,
    STEP_REVIEW: StartupForm,
}


def normalize_step(step: str) -> str:
    """Accept "basic-info", "basicInfo" and "basic_info" alike."""
    raw = (step or "").strip()
    key = "".join("_" + c.lower() if c.isupper() else c for c in raw).replace("-", "_").strip("_")
    if key not in STEP_SCHEMAS:
        raise ValidationError(f"Unknown wizard step: {step}")
    return key


def format_errors(exc: PydanticValidationError) -> dict[str, str]:
    """Flatten pydantic errors to ``{"field.path": "message"}``, first error per field."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"]) or "__root__"
        if err["type"] == "value_error" and "error" in err.get("ctx", {}):
            message = str(err["ctx"]["error"])
        else:
            message = err["msg"]
        errors.setdefault(path, message)
    return errors


def validate_step(step: str, payload: dict[str, Any] | None) -> dict[str, str]:
    """Validate one wizard step. Returns field errors; empty means valid."""
    schema = STEP_SCHEMAS[normalize_step(step)]
    try:
        schema.model_validate(payload or {})
    except PydanticValidationError as exc:
        return format_errors(exc)
    return {}


def _load_block(raw: str | dict | None, name: str) -> dict:
    if raw is None or raw == "":
        raise ValidationError(f"Missing {name} in form data")
    if isinstance(raw, dict):
        return raw
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid JSON in form data") from None
    if not isinstance(value, dict):
        raise ValidationError(f"{name} must be a JSON object")
    return value


def parse_startup_form(
    basic_info: str | dict | None,
    detailed_info: str | dict | None,
    media_info: str | dict | None,
) -> StartupForm:
    """Parse the JSON-encoded multipart blocks into a validated StartupForm.

    Raises ValidationError naming the first failing field.
    """
    payload = {
        "basicInfo": _load_block(basic_info, "basicInfo"),
        "detailedInfo": _load_block(detailed_info, "detailedInfo"),
        "mediaInfo": _load_block(media_info, "mediaInfo"),
    }
    try:
        return StartupForm.model_validate(payload)
    except PydanticValidationError as exc:
        errors = format_errors(exc)
        field, message = next(iter(errors.items()))
        raise ValidationError(f"{field}: {message}") from None
