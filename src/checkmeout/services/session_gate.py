"""Reacts to authentication changes by reloading or clearing the caches."""

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

from checkmeout.domain.models import AuthState, UserIdentity
from checkmeout.domain.results import MutationResult
from checkmeout.services.caches import ActivityCaches, SessionState
from checkmeout.services.challenges import ChallengeService
from checkmeout.services.feed import FeedService
from checkmeout.services.likes import LikeService
from checkmeout.services.operations import run_operation
from checkmeout.services.profiles import ProfileService
from checkmeout.services.scans import ScanLogService

logger = logging.getLogger(__name__)


@dataclass
class SessionGate:
    """Drives full reloads on sign-in and full clears on sign-out."""

    session: SessionState
    caches: ActivityCaches
    profile_service: ProfileService
    scan_service: ScanLogService
    feed_service: FeedService
    challenge_service: ChallengeService
    like_service: LikeService
    _reloads: set[asyncio.Task[dict[str, MutationResult[object]]]] = field(
        default_factory=set, init=False, repr=False
    )

    async def sign_in(self, user: UserIdentity) -> dict[str, MutationResult[object]]:
        """Adopt the user and reload every cache concurrently."""
        current = self.session.user
        if current is not None and current.id != user.id:
            self.sign_out()
        self.session.user = user
        logger.info("Reloading caches for user %s", user.id)
        await run_operation("ensure_profile", self.profile_service.ensure_profile)
        names = ("scan_logs", "feed", "completed_challenges", "liked_posts", "points")
        results = await asyncio.gather(
            self.scan_service.load_scan_logs(),
            self.feed_service.load_feed(),
            self.challenge_service.load_completed(),
            self.like_service.load_liked(),
            self.profile_service.load_points(),
        )
        if self.session.user is None:
            # Signed out while the reload was in flight.
            self.caches.clear()
        return dict(zip(names, results, strict=True))

    def sign_out(self) -> None:
        """Forget the user and reset every cache to empty."""
        if self.session.user is not None:
            logger.info("Clearing caches for user %s", self.session.user.id)
        self.session.clear()
        self.caches.clear()

    async def handle(self, state: AuthState) -> None:
        if state.signed_in and state.user is not None:
            await self.sign_in(state.user)
        else:
            self.sign_out()

    async def run(self, states: AsyncIterator[AuthState]) -> None:
        """Consume an auth-state stream until it ends.

        Reloads run as background tasks so a sign-out arriving mid-reload
        clears the caches immediately.
        """
        try:
            async for state in states:
                if state.signed_in and state.user is not None:
                    task = asyncio.create_task(self.sign_in(state.user))
                    self._reloads.add(task)
                    task.add_done_callback(self._reloads.discard)
                else:
                    self.sign_out()
        finally:
            for task in list(self._reloads):
                task.cancel()
