"""Completed-challenge tracking."""

from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from checkmeout.domain.errors import InvalidInputError
from checkmeout.domain.records import CompletedChallengeRecord
from checkmeout.domain.results import MutationResult
from checkmeout.services.caches import ActivityCaches, SessionState
from checkmeout.services.operations import KeyedLocks, run_operation


class ChallengeRepository(Protocol):
    """Persistence interface for completed challenges."""

    async def list_completed(self, user_id: UUID) -> list[CompletedChallengeRecord]:
        """Return every completed challenge row for a user."""

    async def has_completed(self, user_id: UUID, challenge_title: str) -> bool:
        """Return whether a completion row exists for the title."""

    async def create_completed(self, record: CompletedChallengeRecord) -> None:
        """Insert a completion row."""


@dataclass
class ChallengeService:
    """Records challenge completions idempotently per user and title."""

    repository: ChallengeRepository
    session: SessionState
    caches: ActivityCaches
    locks: KeyedLocks = field(default_factory=KeyedLocks)

    async def refresh_completed(self) -> frozenset[str]:
        user = self.session.require_user()
        records = await self.repository.list_completed(user.id)
        titles = frozenset(record.challenge_title for record in records)
        self.caches.completed_challenges.publish(titles)
        return titles

    async def load_completed(self) -> MutationResult[frozenset[str]]:
        """Replace the cached title set with the stored completions."""
        return await run_operation("load_completed_challenges", self.refresh_completed)

    async def complete(self, challenge_title: str) -> bool:
        """Record a completion; return False when the title was already cached."""
        user = self.session.require_user()
        title = challenge_title.strip()
        if not title:
            raise InvalidInputError("Challenge title must not be empty")
        async with self.locks.hold(title):
            completed = self.caches.completed_challenges.value
            if title in completed:
                return False
            if not await self.repository.has_completed(user.id, title):
                await self.repository.create_completed(
                    CompletedChallengeRecord(user_id=user.id, challenge_title=title)
                )
            self.caches.completed_challenges.publish(
                self.caches.completed_challenges.value | {title}
            )
            return True

    async def complete_challenge(self, challenge_title: str) -> MutationResult[bool]:
        return await run_operation(
            "complete_challenge", lambda: self.complete(challenge_title)
        )

    def is_completed(self, challenge_title: str) -> bool:
        return challenge_title in self.caches.completed_challenges.value
