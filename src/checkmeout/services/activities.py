"""User-facing activity flows that chain creation, points and challenges."""

import logging
from dataclasses import dataclass
from uuid import UUID

from checkmeout.config import Settings
from checkmeout.domain.challenges import (
    GYM_PICTURE,
    LOG_A_MEAL,
    POST_A_SCAN,
    RESPOND_TO_FRIEND,
    SHAME_A_FRIEND,
)
from checkmeout.domain.errors import InvalidInputError, StoreError
from checkmeout.domain.models import ActivityType, FeedPost, Roast, ScanLog
from checkmeout.domain.results import MutationResult
from checkmeout.services.challenges import ChallengeService
from checkmeout.services.feed import FeedService
from checkmeout.services.operations import run_operation
from checkmeout.services.profiles import ProfileService
from checkmeout.services.roasts import RoastService
from checkmeout.services.scans import ScanLogService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointSchedule:
    """Points awarded per activity."""

    meal: int = 50
    workout: int = 50
    body_check: int = 75
    body_check_challenge: int = 100
    roast: int = 50
    roast_challenge: int = 100
    shame_challenge: int = 100
    shamed_post: int = -50

    @classmethod
    def from_settings(cls, settings: Settings) -> "PointSchedule":
        return cls(
            meal=settings.meal_points,
            workout=settings.workout_points,
            body_check=settings.body_check_points,
            body_check_challenge=settings.body_check_challenge_points,
            roast=settings.roast_points,
            roast_challenge=settings.roast_challenge_points,
            shame_challenge=settings.shame_challenge_points,
            shamed_post=settings.shamed_post_points,
        )


@dataclass
class ActivityService:
    """Runs each logging flow as one operation with sequential sub-steps.

    A failure in any step aborts the remaining ones: a post whose insert
    failed is never cached and awards nothing, and a failed point update
    skips the challenge completion.
    """

    feed_service: FeedService
    scan_service: ScanLogService
    roast_service: RoastService
    profile_service: ProfileService
    challenge_service: ChallengeService
    points: PointSchedule

    async def log_meal(
        self,
        image_data: bytes | None = None,
        caption: str | None = None,
        from_challenge: bool = False,
    ) -> MutationResult[FeedPost]:
        return await run_operation(
            "log_meal",
            lambda: self._log_post(
                ActivityType.MEAL,
                self.points.meal,
                image_data,
                caption,
                LOG_A_MEAL if from_challenge else None,
            ),
        )

    async def log_workout(
        self,
        image_data: bytes | None = None,
        caption: str | None = None,
        from_challenge: bool = False,
    ) -> MutationResult[FeedPost]:
        return await run_operation(
            "log_workout",
            lambda: self._log_post(
                ActivityType.WORKOUT,
                self.points.workout,
                image_data,
                caption,
                GYM_PICTURE if from_challenge else None,
            ),
        )

    async def log_scan(
        self,
        body_fat_percentage: float,
        front_image: bytes | None = None,
        side_image: bytes | None = None,
        from_challenge: bool = False,
    ) -> MutationResult[ScanLog]:
        """Store a scan, then share it as a body check and award its points.

        The scan counts as logged once its own row is stored. Sharing and
        awarding are follow-ups: a failure there is logged and leaves the
        stored scan in place.
        """

        async def operation() -> ScanLog:
            log = await self.scan_service.create_scan_log(
                body_fat_percentage, front_image, side_image
            )
            try:
                await self._share_scan(log, front_image, from_challenge)
            except StoreError as exc:
                logger.warning("Scan %s stored but not shared: %s", log.id, exc)
            return log

        return await run_operation("log_scan", operation)

    async def respond_to_post(
        self,
        post_id: UUID,
        text: str | None,
        image_data: bytes | None = None,
        from_challenge: bool = False,
    ) -> MutationResult[Roast]:
        """Roast a friend's post and award the response points."""

        async def operation() -> Roast:
            roast = await self.roast_service.attach(post_id, text, image_data)
            await self.profile_service.add_points(
                self.points.roast_challenge if from_challenge else self.points.roast
            )
            if from_challenge:
                await self.challenge_service.complete(RESPOND_TO_FRIEND)
            return roast

        return await run_operation("respond_to_post", operation)

    async def shame_friend(
        self, friend_name: str, caption: str | None = None
    ) -> MutationResult[FeedPost]:
        """Post a punitive entry for a friend and complete the challenge."""

        async def operation() -> FeedPost:
            name = friend_name.strip()
            if not name:
                raise InvalidInputError("Friend name must not be empty")
            post = await self.feed_service.create_post(
                ActivityType.SHAMED,
                self.points.shamed_post,
                caption=caption,
                username=name,
            )
            await self.profile_service.add_points(self.points.shame_challenge)
            await self.challenge_service.complete(SHAME_A_FRIEND)
            return post

        return await run_operation("shame_friend", operation)

    async def _share_scan(
        self, log: ScanLog, front_image: bytes | None, from_challenge: bool
    ) -> None:
        points = (
            self.points.body_check_challenge
            if from_challenge
            else self.points.body_check
        )
        await self.feed_service.create_post(
            ActivityType.BODY_CHECK,
            points,
            image_data=front_image,
            image_url=log.front_image_url,
        )
        await self.profile_service.add_points(points)
        if from_challenge:
            await self.challenge_service.complete(POST_A_SCAN)

    async def _log_post(  # noqa: PLR0913
        self,
        activity_type: ActivityType,
        points: int,
        image_data: bytes | None,
        caption: str | None,
        challenge_title: str | None,
    ) -> FeedPost:
        post = await self.feed_service.create_post(
            activity_type, points, image_data=image_data, caption=caption
        )
        await self.profile_service.add_points(points)
        if challenge_title is not None:
            await self.challenge_service.complete(challenge_title)
        return post
