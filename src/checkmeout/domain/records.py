"""Pydantic schemas for rows exchanged with the remote backend."""

from datetime import datetime
from typing import Annotated
from uuid import UUID, uuid4

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from checkmeout.domain.models import ActivityType

# Server counters can drift below zero under concurrent decrements.
Counter = Annotated[int, AfterValidator(lambda value: max(value, 0))]


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")

    def to_row(self) -> dict[str, object]:
        """Serialize the record into a JSON-compatible row payload."""
        return self.model_dump(mode="json")


class ProfileRecord(_Record):
    """Row of the profiles table."""

    id: UUID
    username: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None
    total_points: int | None = 0


class ProfileUpdate(_Record):
    """Editable profile fields."""

    username: str = Field(min_length=1, max_length=64)
    full_name: str | None = Field(default=None, max_length=128)


class RoastRecord(_Record):
    """Row of the roasts table."""

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID | None = None
    feed_item_id: UUID
    username: str | None = None
    created_at: datetime
    text: str | None = None
    image_url: str | None = None
    likes: Counter = 0


class FeedItemRecord(_Record):
    """Row of the feed_items table, optionally with embedded roasts."""

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    username: str
    user_avatar_url: str | None = None
    activity_type: ActivityType
    timestamp: datetime
    image_url: str | None = None
    likes: Counter = 0
    comments: Counter = 0
    points: int = 0
    caption: str | None = None
    roasts: list[RoastRecord] | None = None

    def to_row(self) -> dict[str, object]:
        """Serialize without the embedded roast relation."""
        return self.model_dump(mode="json", exclude={"roasts"})


class ScanLogRecord(_Record):
    """Row of the scan_logs table."""

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    timestamp: datetime
    body_fat_percentage: float = Field(ge=0.0, le=100.0)
    front_image_url: str | None = None
    side_image_url: str | None = None


class LikeRecord(_Record):
    """Row of the likes table."""

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    feed_item_id: UUID


class CompletedChallengeRecord(_Record):
    """Row of the completed_challenges table."""

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    challenge_title: str = Field(min_length=1)
