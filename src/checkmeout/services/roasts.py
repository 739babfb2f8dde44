"""Roast attachment to existing feed posts."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from uuid import UUID

from checkmeout.domain.errors import InvalidInputError, NotFoundError
from checkmeout.domain.models import FeedPost, Roast
from checkmeout.domain.records import RoastRecord
from checkmeout.domain.results import MutationResult
from checkmeout.services.caches import ActivityCaches, SessionState
from checkmeout.services.feed import FeedRepository, build_roast
from checkmeout.services.media import MediaService
from checkmeout.services.operations import KeyedLocks, run_operation

ROAST_IMAGE_PREFIX = "roasts"


@dataclass
class RoastService:
    """Attaches roasts to posts and moves the roasted post to the front."""

    repository: FeedRepository
    media: MediaService
    session: SessionState
    caches: ActivityCaches
    post_locks: KeyedLocks

    async def attach(
        self, post_id: UUID, text: str | None, image_data: bytes | None = None
    ) -> Roast:
        """Persist a roast for a post and append it to the cached post."""
        user = self.session.require_user()
        profile = self.session.profile
        text = (text or "").strip() or None
        if text is None and image_data is None:
            raise InvalidInputError("A roast needs text or an image")
        async with self.post_locks.hold(str(post_id)):
            post = await self.repository.get_feed_item(post_id)
            if post is None:
                raise NotFoundError(f"Feed item {post_id} not found")
            image_url = await self.media.upload_optional(ROAST_IMAGE_PREFIX, image_data)
            record = RoastRecord(
                user_id=user.id,
                feed_item_id=post.id,
                username=profile.display_name if profile else "User",
                created_at=datetime.now(tz=UTC),
                text=text,
                image_url=image_url,
            )
            await self.repository.create_roast(record)
            await self.repository.increment_comments(post.id)
            roast = build_roast(record, image_data)
            self.caches.update_post(
                post_id, lambda cached: _with_roast(cached, roast), move_to_front=True
            )
            return roast

    async def add_roast(
        self, post_id: UUID, text: str | None, image_data: bytes | None = None
    ) -> MutationResult[Roast]:
        return await run_operation(
            "add_roast", lambda: self.attach(post_id, text, image_data)
        )


def _with_roast(post: FeedPost, roast: Roast) -> FeedPost:
    return replace(post, roasts=(*post.roasts, roast), comments=post.comments + 1)
