"""File upload helper tests: MIME whitelist, storage paths, upload and delete."""

from __future__ import annotations

import re
from unittest.mock import MagicMock

import pytest

from app.services.errors import DependencyError, ValidationError
from app.services.file_upload import (
    build_storage_path,
    delete_file,
    path_from_url,
    upload_file,
    validate_mime_type,
)
from app.storage.base import StorageError
from tests.test_constants import TEST_STORAGE_BASE_URL


@pytest.mark.parametrize(
    "media_type,content_type",
    [
        ("logo", "image/png"),
        ("coverImage", "image/jpeg"),
        ("pitch_deck", "application/pdf"),
        ("document", "application/vnd.openxmlformats-officedocument.presentationml.presentation"),
        ("video", "video/mp4"),
    ],
)
def test_validate_mime_type_accepts_whitelisted(media_type, content_type) -> None:
    validate_mime_type(media_type, content_type)


@pytest.mark.parametrize(
    "media_type,content_type",
    [
        ("logo", "application/pdf"),
        ("document", "image/png"),
        ("video", "application/x-msdownload"),
        ("image", None),
    ],
)
def test_validate_mime_type_rejects_others(media_type, content_type) -> None:
    with pytest.raises(ValidationError):
        validate_mime_type(media_type, content_type)


def test_build_storage_path_layout() -> None:
    path = build_storage_path("user-1", "logo", "Brand Mark.PNG", "image/png", now_ms=1700000000000)
    assert re.fullmatch(r"user-1/logos/1700000000000-[0-9a-f]{12}\.png", path)


def test_build_storage_path_categories() -> None:
    assert build_storage_path("u", "coverImage", "a.jpg").split("/")[1] == "images"
    assert build_storage_path("u", "pitchDeck", "deck.pdf").split("/")[1] == "documents"
    assert build_storage_path("u", "video", "demo.mp4").split("/")[1] == "videos"


def test_build_storage_path_is_collision_resistant() -> None:
    paths = {build_storage_path("u", "image", "a.png", now_ms=1) for _ in range(50)}
    assert len(paths) == 50


def test_upload_file_reports_progress_and_returns_public_url(blob_store) -> None:
    progress: list[int] = []
    url = upload_file(
        blob_store,
        user_id="u1",
        media_type="logo",
        filename="logo.png",
        content_type="image/png",
        data=b"\x89PNG",
        on_progress=progress.append,
    )
    assert progress == [0, 30, 100]
    assert url.startswith(f"{TEST_STORAGE_BASE_URL}/startups/u1/logos/")
    path = path_from_url(blob_store, url)
    assert (blob_store.base_dir / path).read_bytes() == b"\x89PNG"


def test_upload_file_rejects_oversized(blob_store) -> None:
    with pytest.raises(ValidationError):
        upload_file(
            blob_store,
            user_id="u1",
            media_type="image",
            filename="big.png",
            content_type="image/png",
            data=b"x" * 11,
            max_bytes=10,
        )


def test_upload_file_wraps_storage_failure() -> None:
    store = MagicMock()
    store.upload.side_effect = StorageError("bucket missing")
    with pytest.raises(DependencyError) as exc_info:
        upload_file(
            store,
            user_id="u1",
            media_type="document",
            filename="deck.pdf",
            content_type="application/pdf",
            data=b"%PDF",
        )
    assert exc_info.value.error == "bucket missing"


def test_path_from_url_ignores_foreign_urls(blob_store) -> None:
    assert path_from_url(blob_store, "https://youtube.com/watch?v=abc") is None
    assert path_from_url(blob_store, "") is None


def test_delete_file(blob_store) -> None:
    url = upload_file(
        blob_store,
        user_id="u1",
        media_type="document",
        filename="deck.pdf",
        content_type="application/pdf",
        data=b"%PDF",
    )
    assert delete_file(blob_store, url) is True
    assert not (blob_store.base_dir / path_from_url(blob_store, url)).exists()
    assert delete_file(blob_store, "https://elsewhere.example/deck.pdf") is False
    with pytest.raises(StorageError):
        delete_file(blob_store, url)
