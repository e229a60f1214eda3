"""Up/down votes on approved startups."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.models import Vote
from app.services.errors import DependencyError, NotFoundError
from app.services.votes import cast_vote, remove_vote, vote_summary
from tests.factories import auth_headers, make_startup


@pytest.fixture
def approved(db, founder):
    return make_startup(db, founder, status="approved")


def test_cast_and_flip(db, other_user, approved) -> None:
    assert cast_vote(db, other_user, approved.id, True) == {
        "upvotes": 1,
        "downvotes": 0,
        "userVote": True,
    }
    assert cast_vote(db, other_user, approved.id, False) == {
        "upvotes": 0,
        "downvotes": 1,
        "userVote": False,
    }
    assert db.query(Vote).count() == 1


def test_summary_counts_everyone(db, founder, other_user, admin, approved) -> None:
    cast_vote(db, other_user, approved.id, True)
    cast_vote(db, admin, approved.id, True)
    cast_vote(db, founder, approved.id, False)
    assert vote_summary(db, approved.id) == {"upvotes": 2, "downvotes": 1, "userVote": None}


def test_remove_vote(db, other_user, approved) -> None:
    cast_vote(db, other_user, approved.id, True)
    assert remove_vote(db, other_user, approved.id)["upvotes"] == 0
    assert remove_vote(db, other_user, approved.id)["userVote"] is None


def test_cannot_vote_on_unapproved(db, other_user, startup) -> None:
    with pytest.raises(NotFoundError):
        cast_vote(db, other_user, startup.id, True)


def test_api(client_with_db, other_user, approved) -> None:
    response = client_with_db.post(
        f"/api/startups/{approved.id}/vote",
        json={"isUpvote": True},
        headers=auth_headers(other_user),
    )
    assert response.status_code == 200
    assert response.json() == {"upvotes": 1, "downvotes": 0, "userVote": True}

    anonymous = client_with_db.get(f"/api/startups/{approved.id}/votes")
    assert anonymous.json() == {"upvotes": 1, "downvotes": 0, "userVote": None}

    removed = client_with_db.delete(
        f"/api/startups/{approved.id}/vote", headers=auth_headers(other_user)
    )
    assert removed.json() == {"upvotes": 0, "downvotes": 0, "userVote": None}


def test_api_requires_auth(client_with_db, approved) -> None:
    response = client_with_db.post(f"/api/startups/{approved.id}/vote", json={"isUpvote": True})
    assert response.status_code == 401


def test_summary_hidden_for_unapproved_or_unknown(db, startup) -> None:
    with pytest.raises(NotFoundError):
        vote_summary(db, startup.id)
    with pytest.raises(NotFoundError):
        vote_summary(db, "00000000-0000-0000-0000-000000000000")


def test_summary_api_404_for_pending(client_with_db, startup) -> None:
    response = client_with_db.get(f"/api/startups/{startup.id}/votes")
    assert response.status_code == 404
    assert response.json() == {"detail": "Startup not found"}


def test_vote_removable_after_unapproval(db, other_user, approved) -> None:
    cast_vote(db, other_user, approved.id, True)
    approved.status = "rejected"
    db.commit()
    assert remove_vote(db, other_user, approved.id) == {
        "upvotes": 0,
        "downvotes": 0,
        "userVote": None,
    }


def test_conflict_retry_failure_is_dependency_error(db, other_user, approved) -> None:
    conflict = IntegrityError("INSERT INTO votes", {}, Exception("UNIQUE constraint failed"))
    outage = OperationalError("UPDATE votes", {}, Exception("database is locked"))
    with patch.object(db, "commit", side_effect=[conflict, outage]):
        with pytest.raises(DependencyError) as excinfo:
            cast_vote(db, other_user, approved.id, True)
    assert "database is locked" in excinfo.value.error
