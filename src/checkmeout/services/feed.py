"""Feed post synchronization."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from checkmeout.domain.errors import NotFoundError, OwnershipError
from checkmeout.domain.models import ActivityType, FeedPost, Roast
from checkmeout.domain.records import FeedItemRecord, RoastRecord
from checkmeout.domain.results import MutationResult
from checkmeout.services.caches import ActivityCaches, SessionState
from checkmeout.services.media import MediaService
from checkmeout.services.operations import KeyedLocks, run_operation

logger = logging.getLogger(__name__)

FEED_IMAGE_PREFIX = "feed"


class FeedRepository(Protocol):
    """Persistence interface for feed items and their roasts."""

    async def list_feed_items(self) -> list[FeedItemRecord]:
        """Return all feed items with embedded roasts, newest first."""

    async def get_feed_item(self, item_id: UUID) -> FeedItemRecord | None:
        """Return a feed item by id, if present."""

    async def create_feed_item(self, record: FeedItemRecord) -> None:
        """Insert a feed item row."""

    async def delete_feed_item(self, item_id: UUID) -> None:
        """Delete a feed item row."""

    async def list_roasts(self, item_id: UUID) -> list[RoastRecord]:
        """Return the roasts attached to a feed item."""

    async def create_roast(self, record: RoastRecord) -> None:
        """Insert a roast row."""

    async def delete_roasts(self, item_id: UUID) -> None:
        """Delete every roast attached to a feed item."""

    async def increment_comments(self, item_id: UUID) -> None:
        """Atomically increment the comment counter of a feed item."""


class LikeCleanup(Protocol):
    """Subset of the like repository needed to cascade a post deletion."""

    async def delete_likes_for_item(self, item_id: UUID) -> None:
        """Delete every like row referencing a feed item."""


@dataclass
class FeedService:
    """Loads, creates and deletes feed posts."""

    repository: FeedRepository
    like_cleanup: LikeCleanup
    media: MediaService
    session: SessionState
    caches: ActivityCaches
    post_locks: KeyedLocks

    async def refresh_feed(self) -> tuple[FeedPost, ...]:
        records = await self.repository.list_feed_items()
        posts = await asyncio.gather(
            *(self._hydrate(record) for record in records)
        )
        snapshot = tuple(posts)
        self.caches.feed_posts.publish(snapshot)
        return snapshot

    async def load_feed(self) -> MutationResult[tuple[FeedPost, ...]]:
        """Replace the cached feed with the global remote feed."""
        return await run_operation("load_feed", self.refresh_feed)

    async def create_post(  # noqa: PLR0913
        self,
        activity_type: ActivityType,
        points: int,
        image_data: bytes | None = None,
        caption: str | None = None,
        image_url: str | None = None,
        username: str | None = None,
    ) -> FeedPost:
        """Upload the image, insert the row and prepend the cached post."""
        user = self.session.require_user()
        profile = self.session.profile
        if image_url is None:
            image_url = await self.media.upload_optional(FEED_IMAGE_PREFIX, image_data)
        record = FeedItemRecord(
            user_id=user.id,
            username=username or (profile.display_name if profile else "User"),
            user_avatar_url=profile.avatar_url if profile else None,
            activity_type=activity_type,
            timestamp=datetime.now(tz=UTC),
            image_url=image_url,
            points=points,
            caption=caption or None,
        )
        await self.repository.create_feed_item(record)
        post = build_post(record, image_data)
        self.caches.prepend_post(post)
        logger.info("Created %s post %s", activity_type, post.id)
        return post

    async def remove_post(self, post_id: UUID) -> None:
        """Delete an owned post with its roasts, likes and images."""
        user = self.session.require_user()
        cached = self.caches.find_post(post_id)
        if cached is not None and cached.user_id != user.id:
            raise OwnershipError(f"Post {post_id} belongs to another user")
        async with self.post_locks.hold(str(post_id)):
            record = await self.repository.get_feed_item(post_id)
            if record is None:
                raise NotFoundError(f"Feed item {post_id} not found")
            if record.user_id != user.id:
                raise OwnershipError(f"Post {post_id} belongs to another user")
            roasts = await self.repository.list_roasts(post_id)
            await self.repository.delete_roasts(post_id)
            await self.like_cleanup.delete_likes_for_item(post_id)
            await self.repository.delete_feed_item(post_id)
            await self.media.delete_images(
                [record.image_url, *(roast.image_url for roast in roasts)]
            )
            self.caches.remove_post(post_id)
        logger.info("Deleted post %s", post_id)

    async def delete_post(self, post_id: UUID) -> MutationResult[None]:
        return await run_operation("delete_post", lambda: self.remove_post(post_id))

    async def _hydrate(self, record: FeedItemRecord) -> FeedPost:
        roast_records = sorted(record.roasts or [], key=lambda roast: roast.created_at)
        images = await self.media.fetch_images(
            [record.image_url, *(roast.image_url for roast in roast_records)]
        )
        roasts = tuple(
            build_roast(roast, image)
            for roast, image in zip(roast_records, images[1:], strict=True)
        )
        return build_post(record, images[0], roasts)


def build_post(
    record: FeedItemRecord,
    image_data: bytes | None,
    roasts: tuple[Roast, ...] = (),
) -> FeedPost:
    """Build a cached post from its row and dereferenced image."""
    return FeedPost(
        id=record.id,
        user_id=record.user_id,
        username=record.username,
        user_avatar_url=record.user_avatar_url,
        activity_type=record.activity_type,
        timestamp=record.timestamp,
        image_data=image_data,
        image_url=record.image_url,
        likes=record.likes,
        comments=record.comments,
        points=record.points,
        caption=record.caption,
        roasts=roasts,
    )


def build_roast(record: RoastRecord, image_data: bytes | None) -> Roast:
    """Build a cached roast. Roast rows carry no avatar, so neither does the roast."""
    return Roast(
        id=record.id,
        user_id=record.user_id,
        username=record.username or "Unknown",
        user_avatar_url=None,
        created_at=record.created_at,
        text=record.text,
        image_data=image_data,
        image_url=record.image_url,
        likes=record.likes,
    )
