"""Profile and point-total management."""

from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError

from checkmeout.domain.errors import InvalidInputError, NotFoundError
from checkmeout.domain.models import UserIdentity, UserProfile
from checkmeout.domain.records import ProfileRecord, ProfileUpdate
from checkmeout.domain.results import MutationResult
from checkmeout.services.caches import ActivityCaches, SessionState
from checkmeout.services.operations import KeyedLocks, run_operation


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    async def get_profile(self, user_id: UUID) -> ProfileRecord | None:
        """Return the profile row for a user, if present."""

    async def create_profile(self, record: ProfileRecord) -> None:
        """Insert a new profile row."""

    async def update_profile(self, user_id: UUID, update: ProfileUpdate) -> None:
        """Update editable profile fields."""

    async def set_total_points(self, user_id: UUID, total_points: int) -> None:
        """Overwrite the stored point total."""


@dataclass
class ProfileService:
    """Keeps the signed-in user's profile and point total in sync."""

    repository: ProfileRepository
    session: SessionState
    caches: ActivityCaches
    locks: KeyedLocks = field(default_factory=KeyedLocks)

    async def ensure_profile(self) -> UserProfile:
        """Load the user's profile, creating a default one if missing."""
        user = self.session.require_user()
        record = await self.repository.get_profile(user.id)
        if record is None:
            record = ProfileRecord(
                id=user.id, username=_default_username(user), total_points=0
            )
            await self.repository.create_profile(record)
        profile = _profile_from_record(record)
        self.session.profile = profile
        return profile

    async def refresh_points(self) -> int:
        user = self.session.require_user()
        total = await self._stored_total(user.id)
        self.caches.total_points.publish(total)
        return total

    async def load_points(self) -> MutationResult[int]:
        """Replace the cached point total with the stored one."""
        return await run_operation("load_points", self.refresh_points)

    async def add_points(self, points: int) -> int:
        """Add points to the stored total, then publish the new total.

        Awards for one user run one at a time and always start from the
        stored total, so a stale or unloaded cache is never written back.
        """
        user = self.session.require_user()
        async with self.locks.hold(f"points:{user.id}"):
            new_total = await self._stored_total(user.id) + points
            await self.repository.set_total_points(user.id, new_total)
            self.caches.total_points.publish(new_total)
            if self.session.profile is not None:
                self.session.profile = replace(
                    self.session.profile, total_points=new_total
                )
            return new_total

    async def update_profile(
        self, username: str, full_name: str | None
    ) -> MutationResult[UserProfile]:
        """Apply an explicit profile edit and reload the profile."""

        async def operation() -> UserProfile:
            user = self.session.require_user()
            try:
                update = ProfileUpdate(username=username, full_name=full_name)
            except ValidationError as exc:
                raise InvalidInputError(str(exc)) from exc
            await self.repository.update_profile(user.id, update)
            return await self.ensure_profile()

        return await run_operation("update_profile", operation)

    async def _stored_total(self, user_id: UUID) -> int:
        record = await self.repository.get_profile(user_id)
        if record is None:
            raise NotFoundError(f"Profile {user_id} not found")
        return record.total_points or 0


def _default_username(user: UserIdentity) -> str | None:
    if not user.email:
        return None
    return user.email.split("@", 1)[0] or None


def _profile_from_record(record: ProfileRecord) -> UserProfile:
    return UserProfile(
        id=record.id,
        username=record.username,
        full_name=record.full_name,
        avatar_url=record.avatar_url,
        total_points=record.total_points or 0,
    )
