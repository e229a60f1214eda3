"""Vote schemas."""

from __future__ import annotations

from typing import Optional

from app.schemas.base import CamelModel


class VoteRequest(CamelModel):
    is_upvote: bool


class VoteSummary(CamelModel):
    upvotes: int = 0
    downvotes: int = 0
    user_vote: Optional[bool] = None
