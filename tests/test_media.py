"""Media reconciliation: attach/detach rules, projections and the media API."""

from __future__ import annotations

import pytest

from app.models import AuditLog, StartupMedia
from app.services.errors import AuthorizationError, NotFoundError, ValidationError
from app.services.file_upload import upload_file
from app.services.media import attach_media, detach_media, normalize_media_type
from app.services.page_cache import page_cache, startup_page_path
from app.services.startups import delete_startup
from tests.factories import auth_headers, make_startup

LOGO = "https://cdn.example.com/logo.png"
SHOT = "https://cdn.example.com/shot.png"
DECK = "https://cdn.example.com/deck.pdf"
ONE_PAGER = "https://cdn.example.com/one-pager.pdf"
VIDEO = "https://youtube.com/watch?v=abc"


def _upload_logo(store, owner) -> str:
    return upload_file(
        store,
        user_id=str(owner.id),
        media_type="logo",
        filename="logo.png",
        content_type="image/png",
        data=b"png",
    )


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("logo", "logo"),
        ("LOGO", "logo"),
        ("coverImage", "image"),
        ("COVER_IMAGE", "image"),
        ("cover", "image"),
        ("pitchDeck", "document"),
        ("Pitch_Deck", "document"),
        ("Video", "video"),
        ("  image ", "image"),
        ("banner", "banner"),
        (None, ""),
    ],
)
def test_normalize_media_type(raw, expected) -> None:
    assert normalize_media_type(raw) == expected


class TestAttach:
    def test_logo_becomes_primary_image(self, db, founder, startup) -> None:
        state = attach_media(db, founder, startup.id, "logo", LOGO)
        assert state.logo_url == LOGO
        assert state.media_images == [LOGO]

    @pytest.mark.parametrize(
        "media_type,url,field",
        [
            ("image", SHOT, "media_images"),
            ("logo", LOGO, "media_images"),
            ("document", DECK, "media_documents"),
            ("video", VIDEO, "media_videos"),
        ],
    )
    def test_attach_is_idempotent(self, db, founder, startup, media_type, url, field) -> None:
        first = attach_media(db, founder, startup.id, media_type, url)
        second = attach_media(db, founder, startup.id, media_type, url)
        assert getattr(second, field) == [url]
        assert second == first
        assert db.query(StartupMedia).filter_by(startup_id=startup.id).count() == 1

    def test_image_then_logo_promotes_existing_row(self, db, founder, startup) -> None:
        attach_media(db, founder, startup.id, "image", SHOT)
        attach_media(db, founder, startup.id, "image", LOGO)
        state = attach_media(db, founder, startup.id, "logo", LOGO)
        assert state.logo_url == LOGO
        assert state.media_images == [SHOT, LOGO]

    def test_new_logo_replaces_previous_logo(self, db, founder, startup) -> None:
        attach_media(db, founder, startup.id, "logo", LOGO)
        state = attach_media(db, founder, startup.id, "logo", SHOT)
        assert state.logo_url == SHOT
        assert state.media_images == [LOGO, SHOT]
        primaries = (
            db.query(StartupMedia)
            .filter_by(startup_id=startup.id, media_type="image", is_primary=True)
            .count()
        )
        assert primaries == 1

    def test_cover_image_is_not_logo(self, db, founder, startup) -> None:
        state = attach_media(db, founder, startup.id, "coverImage", SHOT)
        assert state.media_images == [SHOT]
        assert state.logo_url is None

    def test_first_document_becomes_pitch_deck(self, db, founder, startup) -> None:
        attach_media(db, founder, startup.id, "document", ONE_PAGER)
        state = attach_media(db, founder, startup.id, "document", DECK)
        assert state.pitch_deck_url == ONE_PAGER
        assert state.media_documents == [ONE_PAGER, DECK]

    def test_pitch_label_takes_over_pitch_deck(self, db, founder, startup) -> None:
        attach_media(db, founder, startup.id, "document", ONE_PAGER)
        state = attach_media(db, founder, startup.id, "pitchDeck", DECK)
        assert state.pitch_deck_url == DECK
        assert state.media_documents == [ONE_PAGER, DECK]

    def test_video(self, db, founder, startup) -> None:
        state = attach_media(db, founder, startup.id, "VIDEO", VIDEO)
        assert state.media_videos == [VIDEO]

    @pytest.mark.parametrize(
        "media_type,url,message",
        [
            (None, LOGO, "Media type and URL are required"),
            ("logo", "   ", "Media type and URL are required"),
            ("spreadsheet", LOGO, "Invalid media type"),
        ],
    )
    def test_rejects_bad_payload(self, db, founder, startup, media_type, url, message) -> None:
        with pytest.raises(ValidationError, match=message):
            attach_media(db, founder, startup.id, media_type, url)

    def test_non_owner_forbidden_before_payload_checks(self, db, other_user, startup) -> None:
        with pytest.raises(AuthorizationError):
            attach_media(db, other_user, startup.id, None, None)

    def test_admin_may_attach(self, db, admin, startup) -> None:
        state = attach_media(db, admin, startup.id, "logo", LOGO)
        assert state.logo_url == LOGO

    def test_unknown_startup(self, db, founder) -> None:
        with pytest.raises(NotFoundError):
            attach_media(db, founder, "not-a-uuid", "logo", LOGO)

    def test_writes_audit_entry(self, db, founder, startup) -> None:
        attach_media(db, founder, startup.id, "logo", LOGO, title="Logo")
        entry = db.query(AuditLog).filter_by(action="update_media").one()
        assert entry.entity_id == str(startup.id)
        assert entry.details == {"mediaType": "logo", "title": "Logo", "url": LOGO}


class TestDetach:
    def test_round_trip(self, db, founder, startup) -> None:
        attach_media(db, founder, startup.id, "image", SHOT)
        state = detach_media(db, founder, startup.id, "image", SHOT)
        assert state.media_images == []
        assert state.logo_url is None

    def test_detach_logo_clears_logo_keeps_other_images(self, db, founder, startup) -> None:
        attach_media(db, founder, startup.id, "image", SHOT)
        attach_media(db, founder, startup.id, "logo", LOGO)
        state = detach_media(db, founder, startup.id, "logo", LOGO)
        assert state.logo_url is None
        assert state.media_images == [SHOT]

    def test_detach_pitch_deck_does_not_promote(self, db, founder, startup) -> None:
        attach_media(db, founder, startup.id, "pitchDeck", DECK)
        attach_media(db, founder, startup.id, "document", ONE_PAGER)
        state = detach_media(db, founder, startup.id, "pitch_deck", DECK)
        assert state.pitch_deck_url is None
        assert state.media_documents == [ONE_PAGER]

    def test_detach_unknown_url_is_noop(self, db, founder, startup) -> None:
        attach_media(db, founder, startup.id, "image", SHOT)
        state = detach_media(db, founder, startup.id, "image", LOGO)
        assert state.media_images == [SHOT]

    def test_deletes_hosted_blob(self, db, founder, startup, blob_store) -> None:
        url = upload_file(
            blob_store,
            user_id=str(founder.id),
            media_type="logo",
            filename="logo.png",
            content_type="image/png",
            data=b"png",
        )
        attach_media(db, founder, startup.id, "logo", url)
        path = blob_store.path_from_url(url)
        assert (blob_store.base_dir / path).exists()

        detach_media(db, founder, startup.id, "logo", url, store=blob_store)
        assert not (blob_store.base_dir / path).exists()

    def test_storage_failure_still_detaches(self, db, founder, startup, blob_store) -> None:
        url = blob_store.public_url(f"{founder.id}/logos/missing.png")
        attach_media(db, founder, startup.id, "logo", url)
        state = detach_media(db, founder, startup.id, "logo", url, store=blob_store)
        assert state.logo_url is None

    def test_detach_keeps_blob_owned_by_another_user(
        self, db, founder, other_user, startup, blob_store
    ) -> None:
        url = _upload_logo(blob_store, founder)
        attach_media(db, founder, startup.id, "logo", url)
        theirs = make_startup(db, other_user)
        attach_media(db, other_user, theirs.id, "logo", url)

        detach_media(db, other_user, theirs.id, "logo", url, store=blob_store)

        assert (blob_store.base_dir / blob_store.path_from_url(url)).exists()
        db.refresh(startup)
        assert startup.logo_url == url

    def test_detach_keeps_blob_still_referenced(self, db, founder, startup, blob_store) -> None:
        url = _upload_logo(blob_store, founder)
        second = make_startup(db, founder)
        attach_media(db, founder, startup.id, "logo", url)
        attach_media(db, founder, second.id, "image", url)
        path = blob_store.base_dir / blob_store.path_from_url(url)

        detach_media(db, founder, startup.id, "logo", url, store=blob_store)
        assert path.exists()

        detach_media(db, founder, second.id, "image", url, store=blob_store)
        assert not path.exists()

    def test_startup_delete_keeps_foreign_blob(
        self, db, founder, other_user, startup, blob_store
    ) -> None:
        url = _upload_logo(blob_store, founder)
        attach_media(db, founder, startup.id, "logo", url)
        theirs = make_startup(db, other_user)
        attach_media(db, other_user, theirs.id, "image", url)

        delete_startup(db, other_user, theirs.id, store=blob_store)

        assert (blob_store.base_dir / blob_store.path_from_url(url)).exists()

    def test_startup_delete_releases_own_blobs(self, db, founder, startup, blob_store) -> None:
        url = _upload_logo(blob_store, founder)
        attach_media(db, founder, startup.id, "logo", url)
        path = blob_store.base_dir / blob_store.path_from_url(url)

        delete_startup(db, founder, startup.id, store=blob_store)

        assert not path.exists()

    def test_non_owner_forbidden(self, db, other_user, startup) -> None:
        with pytest.raises(AuthorizationError):
            detach_media(db, other_user, startup.id, "image", SHOT)


class TestRevalidation:
    def test_approved_startup_pages_are_revalidated(self, db, founder) -> None:
        approved = make_startup(db, founder, status="approved", slug="visible-co")
        page_cache.set(startup_page_path("visible-co"), {"cached": True})
        page_cache.set("/", {"cached": True})
        attach_media(db, founder, approved.id, "logo", LOGO)
        assert page_cache.get(startup_page_path("visible-co")) is None
        assert page_cache.get("/") is None

    def test_pending_startup_leaves_cache(self, db, founder, startup) -> None:
        page_cache.set("/", {"cached": True})
        attach_media(db, founder, startup.id, "logo", LOGO)
        assert page_cache.get("/") == {"cached": True}


class TestMediaApi:
    def test_attach(self, client_with_db, founder, startup) -> None:
        response = client_with_db.post(
            f"/api/startups/{startup.id}/media",
            json={"mediaType": "logo", "url": LOGO, "title": "Logo"},
            headers=auth_headers(founder),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Media added successfully"
        assert body["id"] == str(startup.id)
        assert body["mediaType"] == "logo"
        assert body["media"]["logoUrl"] == LOGO
        assert body["media"]["mediaImages"] == [LOGO]

    def test_attach_requires_auth(self, client_with_db, startup) -> None:
        response = client_with_db.post(
            f"/api/startups/{startup.id}/media", json={"mediaType": "logo", "url": LOGO}
        )
        assert response.status_code == 401
        assert response.json() == {"detail": "Unauthorized"}

    def test_attach_non_owner_gets_403_even_with_empty_body(
        self, client_with_db, other_user, startup
    ) -> None:
        response = client_with_db.post(
            f"/api/startups/{startup.id}/media", headers=auth_headers(other_user)
        )
        assert response.status_code == 403

    def test_attach_missing_fields(self, client_with_db, founder, startup) -> None:
        response = client_with_db.post(
            f"/api/startups/{startup.id}/media",
            json={"mediaType": "logo"},
            headers=auth_headers(founder),
        )
        assert response.status_code == 400
        assert response.json() == {"detail": "Media type and URL are required"}

    def test_attach_invalid_type(self, client_with_db, founder, startup) -> None:
        response = client_with_db.post(
            f"/api/startups/{startup.id}/media",
            json={"mediaType": "spreadsheet", "url": LOGO},
            headers=auth_headers(founder),
        )
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid media type"}

    def test_attach_unknown_startup(self, client_with_db, founder) -> None:
        response = client_with_db.post(
            "/api/startups/00000000-0000-0000-0000-000000000000/media",
            json={"mediaType": "logo", "url": LOGO},
            headers=auth_headers(founder),
        )
        assert response.status_code == 404

    def test_detach(self, client_with_db, db, founder, startup) -> None:
        attach_media(db, founder, startup.id, "pitchDeck", DECK)
        response = client_with_db.request(
            "DELETE",
            f"/api/startups/{startup.id}/media",
            json={"mediaType": "pitchDeck", "url": DECK},
            headers=auth_headers(founder),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Media removed successfully"
        assert body["media"]["pitchDeckUrl"] is None
        assert body["media"]["mediaDocuments"] == []
