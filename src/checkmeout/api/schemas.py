"""Pydantic models for the presentation API."""

from datetime import datetime
from uuid import UUID

from pydantic import Base64Bytes, BaseModel, Field

from checkmeout.domain.models import ActivityType, FeedPost, Roast, ScanLog


class SignInRequest(BaseModel):
    """Identity reported by the auth provider after sign-in."""

    user_id: UUID
    email: str | None = None


class PostActivityRequest(BaseModel):
    """Meal or workout log payload."""

    image: Base64Bytes | None = None
    caption: str | None = Field(default=None, max_length=500)
    from_challenge: bool = False


class ScanRequest(BaseModel):
    """Body scan result payload."""

    body_fat_percentage: float = Field(ge=0.0, le=100.0)
    front_image: Base64Bytes | None = None
    side_image: Base64Bytes | None = None
    from_challenge: bool = False


class RoastRequest(BaseModel):
    """Roast response payload."""

    text: str | None = Field(default=None, max_length=500)
    image: Base64Bytes | None = None
    from_challenge: bool = False


class ShameRequest(BaseModel):
    """Shame-a-friend payload."""

    friend_name: str = Field(min_length=1, max_length=64)
    caption: str | None = Field(default=None, max_length=500)


class ProfileRequest(BaseModel):
    """Profile edit payload."""

    username: str
    full_name: str | None = None


class RoastView(BaseModel):
    """Roast as shown in the feed."""

    id: UUID
    username: str
    user_avatar_url: str | None
    created_at: datetime
    text: str | None
    image_url: str | None
    has_image: bool
    likes: int

    @classmethod
    def from_roast(cls, roast: Roast) -> "RoastView":
        return cls(
            id=roast.id,
            username=roast.username,
            user_avatar_url=roast.user_avatar_url,
            created_at=roast.created_at,
            text=roast.text,
            image_url=roast.image_url,
            has_image=roast.image_data is not None,
            likes=roast.likes,
        )


class PostView(BaseModel):
    """Feed post as shown in the timeline."""

    id: UUID
    user_id: UUID
    username: str
    user_avatar_url: str | None
    activity_type: ActivityType
    timestamp: datetime
    image_url: str | None
    has_image: bool
    likes: int
    comments: int
    points: int
    caption: str | None
    liked: bool
    roasts: list[RoastView]

    @classmethod
    def from_post(cls, post: FeedPost, liked: bool) -> "PostView":
        return cls(
            id=post.id,
            user_id=post.user_id,
            username=post.username,
            user_avatar_url=post.user_avatar_url,
            activity_type=post.activity_type,
            timestamp=post.timestamp,
            image_url=post.image_url,
            has_image=post.image_data is not None,
            likes=post.likes,
            comments=post.comments,
            points=post.points,
            caption=post.caption,
            liked=liked,
            roasts=[RoastView.from_roast(roast) for roast in post.roasts],
        )


class ScanLogView(BaseModel):
    """Scan log as shown in the history."""

    id: UUID
    timestamp: datetime
    body_fat_percentage: float
    front_image_url: str | None
    side_image_url: str | None
    has_front_image: bool
    has_side_image: bool

    @classmethod
    def from_scan_log(cls, log: ScanLog) -> "ScanLogView":
        return cls(
            id=log.id,
            timestamp=log.timestamp,
            body_fat_percentage=log.body_fat_percentage,
            front_image_url=log.front_image_url,
            side_image_url=log.side_image_url,
            has_front_image=log.front_image_data is not None,
            has_side_image=log.side_image_data is not None,
        )


class ChallengeView(BaseModel):
    """Challenge catalog entry with its completion state."""

    title: str
    description: str
    activity_type: ActivityType
    completed: bool


class StoreState(BaseModel):
    """Snapshot of every published cache."""

    user_id: UUID | None
    username: str | None
    total_points: int
    completed_challenges: list[str]
    liked_post_ids: list[str]
    feed: list[PostView]
    scan_logs: list[ScanLogView]
