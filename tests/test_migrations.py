"""Alembic migration tests."""

import os
import subprocess
import sys

from sqlalchemy import create_engine, inspect

import app.models  # noqa: F401
from app.db import Base

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def run_alembic(database_url: str, *args: str) -> subprocess.CompletedProcess[str]:
    """Run alembic against database_url and return the result."""
    env = os.environ.copy()
    env["DATABASE_URL"] = database_url
    return subprocess.run(
        [sys.executable, "-m", "alembic", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=60,
        env=env,
    )


def test_alembic_upgrade_downgrade_cycle(tmp_path) -> None:
    """Full migration cycle: upgrade creates every mapped table, downgrade removes them."""
    url = f"sqlite:///{tmp_path / 'migrations.db'}"
    engine = create_engine(url)

    result = run_alembic(url, "upgrade", "head")
    assert result.returncode == 0, f"upgrade failed: {result.stderr}"

    tables = set(inspect(engine).get_table_names())
    assert set(Base.metadata.tables) <= tables

    indexes = {ix["name"] for ix in inspect(engine).get_indexes("startup_media")}
    assert "uq_startup_media_primary" in indexes

    profile_columns = {c["name"] for c in inspect(engine).get_columns("profiles")}
    assert "avatar_url" in profile_columns

    result = run_alembic(url, "downgrade", "base")
    assert result.returncode == 0, f"downgrade failed: {result.stderr}"

    tables = set(inspect(engine).get_table_names())
    assert tables <= {"alembic_version"}
    engine.dispose()
