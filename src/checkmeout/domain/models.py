"""Domain models for the social activity store."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class ActivityType(StrEnum):
    """Kind of activity a feed post records."""

    MEAL = "meal"
    WORKOUT = "workout"
    BODY_CHECK = "bodycheck"
    ROAST = "roast"
    THREAD = "thread"
    SHAMED = "shamed"


@dataclass(frozen=True)
class UserIdentity:
    """Authenticated user as reported by the auth provider."""

    id: UUID
    email: str | None = None


@dataclass(frozen=True)
class UserProfile:
    """Profile row cached for the signed-in user."""

    id: UUID
    username: str | None
    full_name: str | None
    avatar_url: str | None
    total_points: int = 0

    @property
    def display_name(self) -> str:
        return self.username or "User"


@dataclass(frozen=True)
class AuthState:
    """Single value of the authentication state stream."""

    signed_in: bool
    user: UserIdentity | None = None


@dataclass(frozen=True)
class Roast:
    """Response attached to a feed post."""

    id: UUID
    user_id: UUID | None
    username: str
    user_avatar_url: str | None
    created_at: datetime
    text: str | None = None
    image_data: bytes | None = None
    image_url: str | None = None
    likes: int = 0


@dataclass(frozen=True)
class FeedPost:
    """Activity entry shown in the social timeline."""

    id: UUID
    user_id: UUID
    username: str
    user_avatar_url: str | None
    activity_type: ActivityType
    timestamp: datetime
    image_data: bytes | None = None
    image_url: str | None = None
    likes: int = 0
    comments: int = 0
    points: int = 0
    caption: str | None = None
    roasts: tuple[Roast, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ScanLog:
    """Result of a body-composition scan."""

    id: UUID
    timestamp: datetime
    body_fat_percentage: float
    front_image_data: bytes | None = None
    side_image_data: bytes | None = None
    front_image_url: str | None = None
    side_image_url: str | None = None
