"""Like toggling against remote counters."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from checkmeout.domain.errors import NotFoundError
from checkmeout.domain.records import LikeRecord
from checkmeout.domain.results import MutationResult
from checkmeout.services.caches import ActivityCaches, SessionState
from checkmeout.services.feed import FeedRepository
from checkmeout.services.operations import KeyedLocks, run_operation


class LikeRepository(Protocol):
    """Persistence interface for likes and like counters."""

    async def list_likes(self, user_id: UUID) -> list[LikeRecord]:
        """Return every like row of a user."""

    async def create_like(self, record: LikeRecord) -> None:
        """Insert a like row."""

    async def delete_like(self, user_id: UUID, item_id: UUID) -> None:
        """Delete the like row of a user for a feed item."""

    async def delete_likes_for_item(self, item_id: UUID) -> None:
        """Delete every like row referencing a feed item."""

    async def increment_likes(self, item_id: UUID) -> None:
        """Atomically increment the like counter of a feed item."""

    async def decrement_likes(self, item_id: UUID) -> None:
        """Atomically decrement the like counter of a feed item."""


@dataclass
class LikeService:
    """Keeps the liked-post set and cached like counts in step with the server.

    Every toggle performs the lookup, the relation change and the counter
    procedure remotely before touching the caches, so a failure at any step
    leaves the previous local state intact.
    """

    repository: LikeRepository
    feed_repository: FeedRepository
    session: SessionState
    caches: ActivityCaches
    post_locks: KeyedLocks

    async def refresh_liked(self) -> frozenset[str]:
        user = self.session.require_user()
        records = await self.repository.list_likes(user.id)
        liked = frozenset(str(record.feed_item_id) for record in records)
        self.caches.liked_post_ids.publish(liked)
        return liked

    async def load_liked(self) -> MutationResult[frozenset[str]]:
        """Replace the cached liked-id set with the stored likes."""
        return await run_operation("load_liked_posts", self.refresh_liked)

    async def toggle(self, post_id: UUID) -> bool:
        """Flip the like state of a post and return the new state."""
        user = self.session.require_user()
        key = str(post_id)
        async with self.post_locks.hold(key):
            record = await self.feed_repository.get_feed_item(post_id)
            if record is None:
                raise NotFoundError(f"Feed item {post_id} not found")
            if key in self.caches.liked_post_ids.value:
                await self.repository.delete_like(user.id, record.id)
                await self.repository.decrement_likes(record.id)
                self.caches.liked_post_ids.publish(
                    self.caches.liked_post_ids.value - {key}
                )
                self.caches.adjust_likes(post_id, -1)
                return False
            await self.repository.create_like(
                LikeRecord(user_id=user.id, feed_item_id=record.id)
            )
            await self.repository.increment_likes(record.id)
            self.caches.liked_post_ids.publish(self.caches.liked_post_ids.value | {key})
            self.caches.adjust_likes(post_id, 1)
            return True

    async def toggle_like(self, post_id: UUID) -> MutationResult[bool]:
        return await run_operation("toggle_like", lambda: self.toggle(post_id))

    def is_liked(self, post_id: UUID) -> bool:
        return str(post_id) in self.caches.liked_post_ids.value
