"""Pydantic schemas for request/response validation."""

from app.schemas.auth import AdminStats, ProfileRead, ProfileUpdate, UserListResponse
from app.schemas.category import CategoryRead, LookingForRead
from app.schemas.media import MediaAttachResponse, MediaDetachResponse, MediaStateRead
from app.schemas.moderation import (
    BulkStatusUpdateRequest,
    BulkStatusUpdateResponse,
    SpamReport,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from app.schemas.startup import (
    BasicInfo,
    DetailedInfo,
    MediaInfo,
    StartupForm,
    StartupList,
    StartupRead,
)
from app.schemas.vote import VoteRequest, VoteSummary
from app.schemas.wishlist import WishlistAddRequest, WishlistItem, WishlistListResponse

__all__ = [
    "AdminStats",
    "BasicInfo",
    "BulkStatusUpdateRequest",
    "BulkStatusUpdateResponse",
    "CategoryRead",
    "DetailedInfo",
    "LookingForRead",
    "MediaAttachResponse",
    "MediaDetachResponse",
    "MediaInfo",
    "MediaStateRead",
    "ProfileRead",
    "ProfileUpdate",
    "SpamReport",
    "StartupForm",
    "StartupList",
    "StartupRead",
    "StatusUpdateRequest",
    "StatusUpdateResponse",
    "UserListResponse",
    "VoteRequest",
    "VoteSummary",
    "WishlistAddRequest",
    "WishlistItem",
    "WishlistListResponse",
]
