"""Observable in-memory caches published to the presentation layer."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Generic, TypeVar
from uuid import UUID

from checkmeout.domain.errors import NotSignedInError
from checkmeout.domain.models import FeedPost, ScanLog, UserIdentity, UserProfile

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Observable(Generic[T]):
    """Holds an immutable snapshot and notifies subscribers on publish."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._listeners: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        """Return the current snapshot."""
        return self._value

    def publish(self, value: T) -> None:
        """Replace the snapshot and announce it to every subscriber."""
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("Cache subscriber raised while handling update")

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


@dataclass
class SessionState:
    """Identity and profile of the signed-in user."""

    user: UserIdentity | None = None
    profile: UserProfile | None = None

    def require_user(self) -> UserIdentity:
        """Return the current user or raise when signed out."""
        if self.user is None:
            raise NotSignedInError("No signed-in user")
        return self.user

    def clear(self) -> None:
        self.user = None
        self.profile = None


@dataclass
class ActivityCaches:
    """The five entity caches owned by the store."""

    scan_logs: Observable[tuple[ScanLog, ...]] = field(
        default_factory=lambda: Observable(())
    )
    feed_posts: Observable[tuple[FeedPost, ...]] = field(
        default_factory=lambda: Observable(())
    )
    total_points: Observable[int] = field(default_factory=lambda: Observable(0))
    completed_challenges: Observable[frozenset[str]] = field(
        default_factory=lambda: Observable(frozenset())
    )
    liked_post_ids: Observable[frozenset[str]] = field(
        default_factory=lambda: Observable(frozenset())
    )

    def clear(self) -> None:
        """Reset every cache to its empty value."""
        self.scan_logs.publish(())
        self.feed_posts.publish(())
        self.total_points.publish(0)
        self.completed_challenges.publish(frozenset())
        self.liked_post_ids.publish(frozenset())

    def find_post(self, post_id: UUID) -> FeedPost | None:
        for post in self.feed_posts.value:
            if post.id == post_id:
                return post
        return None

    def prepend_post(self, post: FeedPost) -> None:
        self.feed_posts.publish((post, *self.feed_posts.value))

    def prepend_scan_log(self, log: ScanLog) -> None:
        self.scan_logs.publish((log, *self.scan_logs.value))

    def update_post(
        self,
        post_id: UUID,
        transform: Callable[[FeedPost], FeedPost],
        move_to_front: bool = False,
    ) -> FeedPost | None:
        """Apply a transform to a cached post, optionally moving it first."""
        posts = list(self.feed_posts.value)
        for index, post in enumerate(posts):
            if post.id != post_id:
                continue
            updated = transform(post)
            if move_to_front:
                posts.pop(index)
                posts.insert(0, updated)
            else:
                posts[index] = updated
            self.feed_posts.publish(tuple(posts))
            return updated
        return None

    def remove_post(self, post_id: UUID) -> None:
        self.feed_posts.publish(
            tuple(post for post in self.feed_posts.value if post.id != post_id)
        )
        key = str(post_id)
        if key in self.liked_post_ids.value:
            self.liked_post_ids.publish(self.liked_post_ids.value - {key})

    def adjust_likes(self, post_id: UUID, delta: int) -> FeedPost | None:
        return self.update_post(
            post_id, lambda post: replace(post, likes=max(post.likes + delta, 0))
        )
