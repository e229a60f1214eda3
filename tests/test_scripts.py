"""Tests for the add_admin and fix_slugs CLI scripts."""

from __future__ import annotations

import sys
from unittest.mock import patch

import pytest

from app.models import Startup
from app.scripts.add_admin import promote_to_admin
from app.scripts.fix_slugs import fix_slugs
from tests.factories import make_profile, make_startup


class TestAddAdmin:
    def test_promotes_by_email_case_insensitively(self, db) -> None:
        profile = make_profile(db, role="founder", email="Jane@Example.com")
        promoted = promote_to_admin(db, " jane@example.com ")
        assert promoted.id == profile.id
        assert promoted.is_admin

    def test_unknown_email(self, db) -> None:
        assert promote_to_admin(db, "nobody@example.com") is None

    def test_main_exits_when_missing(self, db, capsys) -> None:
        from app.scripts import add_admin

        with (
            patch.object(add_admin, "SessionLocal", return_value=db),
            patch.object(sys, "argv", ["add_admin", "--email", "nobody@example.com"]),
            pytest.raises(SystemExit) as exc_info,
        ):
            add_admin.main()
        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().out


class TestFixSlugs:
    def test_repairs_invalid_slugs(self, db, founder) -> None:
        make_startup(db, founder, name="Acme Robotics", slug="acme-robotics")
        broken = make_startup(db, founder, name="Acme Robotics", slug="Acme Robotics!")
        fine = make_startup(db, founder, name="Other", slug="other-co")

        changes = fix_slugs(db)

        assert changes == [(str(broken.id), "Acme Robotics!", "acme-robotics-1")]
        db.expire_all()
        assert db.get(Startup, broken.id).slug == "acme-robotics-1"
        assert db.get(Startup, fine.id).slug == "other-co"

    def test_dry_run_saves_nothing(self, db, founder) -> None:
        broken = make_startup(db, founder, name="Beta", slug="x")
        changes = fix_slugs(db, dry_run=True)
        assert changes == [(str(broken.id), "x", "beta")]
        db.expire_all()
        assert db.get(Startup, broken.id).slug == "x"
