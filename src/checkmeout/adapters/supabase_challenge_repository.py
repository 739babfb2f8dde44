"""Supabase repository for completed challenges."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from checkmeout.adapters.supabase_query import execute, parse_records
from checkmeout.domain.records import CompletedChallengeRecord
from checkmeout.services.challenges import ChallengeRepository


@dataclass
class SupabaseChallengeRepository(ChallengeRepository):
    """Supabase implementation for challenge completions."""

    client: Client

    async def list_completed(self, user_id: UUID) -> list[CompletedChallengeRecord]:
        """Return every completion row of a user."""
        rows = await execute(
            self.client.table("completed_challenges")
            .select("id, user_id, challenge_title")
            .eq("user_id", str(user_id))
        )
        return parse_records(CompletedChallengeRecord, rows, "completed_challenges")

    async def has_completed(self, user_id: UUID, challenge_title: str) -> bool:
        """Return whether the user already completed a challenge."""
        rows = await execute(
            self.client.table("completed_challenges")
            .select("id")
            .eq("user_id", str(user_id))
            .eq("challenge_title", challenge_title)
            .limit(1)
        )
        return bool(rows)

    async def create_completed(self, record: CompletedChallengeRecord) -> None:
        """Insert a completion row."""
        await execute(
            self.client.table("completed_challenges").insert(record.to_row())
        )
