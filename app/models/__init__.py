"""SQLAlchemy models."""

from app.models.audit_log import AuditLog
from app.models.category import Category
from app.models.looking_for import LookingForOption, startup_looking_for
from app.models.profile import Profile, ProfileRole
from app.models.social_link import SocialLink
from app.models.startup import VALID_STATUSES, Startup, StartupStatus
from app.models.startup_media import StartupMedia
from app.models.vote import Vote
from app.models.wishlist import WishlistEntry

__all__ = [
    "AuditLog",
    "Category",
    "LookingForOption",
    "Profile",
    "ProfileRole",
    "SocialLink",
    "Startup",
    "StartupMedia",
    "StartupStatus",
    "VALID_STATUSES",
    "Vote",
    "WishlistEntry",
    "startup_looking_for",
]
