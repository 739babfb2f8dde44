"""Social activity store facade handed to the presentation layer."""

from dataclasses import dataclass
from uuid import UUID

from checkmeout.domain.models import (
    AuthState,
    FeedPost,
    Roast,
    ScanLog,
    UserIdentity,
    UserProfile,
)
from checkmeout.domain.results import MutationResult
from checkmeout.services.activities import ActivityService
from checkmeout.services.caches import ActivityCaches, SessionState
from checkmeout.services.challenges import ChallengeService
from checkmeout.services.feed import FeedService
from checkmeout.services.likes import LikeService
from checkmeout.services.profiles import ProfileService
from checkmeout.services.session_gate import SessionGate


@dataclass
class ActivityStore:
    """Read-only cache snapshots plus the mutation methods that change them."""

    session: SessionState
    caches: ActivityCaches
    gate: SessionGate
    activities: ActivityService
    feed_service: FeedService
    like_service: LikeService
    challenge_service: ChallengeService
    profile_service: ProfileService

    @property
    def current_user(self) -> UserIdentity | None:
        return self.session.user

    @property
    def profile(self) -> UserProfile | None:
        return self.session.profile

    @property
    def scan_logs(self) -> tuple[ScanLog, ...]:
        return self.caches.scan_logs.value

    @property
    def feed_posts(self) -> tuple[FeedPost, ...]:
        return self.caches.feed_posts.value

    @property
    def total_points(self) -> int:
        return self.caches.total_points.value

    @property
    def completed_challenges(self) -> frozenset[str]:
        return self.caches.completed_challenges.value

    @property
    def liked_post_ids(self) -> frozenset[str]:
        return self.caches.liked_post_ids.value

    async def handle_auth_state(self, state: AuthState) -> None:
        await self.gate.handle(state)

    async def sign_in(self, user: UserIdentity) -> dict[str, MutationResult[object]]:
        return await self.gate.sign_in(user)

    def sign_out(self) -> None:
        self.gate.sign_out()

    async def reload(self) -> dict[str, MutationResult[object]]:
        """Reload every cache for the current user, if any."""
        if self.session.user is None:
            return {}
        return await self.gate.sign_in(self.session.user)

    async def log_meal(
        self,
        image_data: bytes | None = None,
        caption: str | None = None,
        from_challenge: bool = False,
    ) -> MutationResult[FeedPost]:
        return await self.activities.log_meal(image_data, caption, from_challenge)

    async def log_workout(
        self,
        image_data: bytes | None = None,
        caption: str | None = None,
        from_challenge: bool = False,
    ) -> MutationResult[FeedPost]:
        return await self.activities.log_workout(image_data, caption, from_challenge)

    async def log_scan(
        self,
        body_fat_percentage: float,
        front_image: bytes | None = None,
        side_image: bytes | None = None,
        from_challenge: bool = False,
    ) -> MutationResult[ScanLog]:
        return await self.activities.log_scan(
            body_fat_percentage, front_image, side_image, from_challenge
        )

    async def add_roast(
        self,
        post_id: UUID,
        text: str | None,
        image_data: bytes | None = None,
        from_challenge: bool = False,
    ) -> MutationResult[Roast]:
        return await self.activities.respond_to_post(
            post_id, text, image_data, from_challenge
        )

    async def shame_friend(
        self, friend_name: str, caption: str | None = None
    ) -> MutationResult[FeedPost]:
        return await self.activities.shame_friend(friend_name, caption)

    async def toggle_like(self, post_id: UUID) -> MutationResult[bool]:
        return await self.like_service.toggle_like(post_id)

    def is_liked(self, post_id: UUID) -> bool:
        return self.like_service.is_liked(post_id)

    async def delete_post(self, post_id: UUID) -> MutationResult[None]:
        return await self.feed_service.delete_post(post_id)

    async def complete_challenge(self, challenge_title: str) -> MutationResult[bool]:
        return await self.challenge_service.complete_challenge(challenge_title)

    def is_challenge_completed(self, challenge_title: str) -> bool:
        return self.challenge_service.is_completed(challenge_title)

    async def update_profile(
        self, username: str, full_name: str | None = None
    ) -> MutationResult[UserProfile]:
        return await self.profile_service.update_profile(username, full_name)
