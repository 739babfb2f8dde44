"""Supabase-backed profile repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from checkmeout.adapters.supabase_query import execute, parse_records
from checkmeout.domain.records import ProfileRecord, ProfileUpdate
from checkmeout.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    async def get_profile(self, user_id: UUID) -> ProfileRecord | None:
        """Return the profile row for a user, if present."""
        rows = await execute(
            self.client.table("profiles")
            .select("id, username, full_name, avatar_url, total_points")
            .eq("id", str(user_id))
            .limit(1)
        )
        records = parse_records(ProfileRecord, rows, "profiles")
        return records[0] if records else None

    async def create_profile(self, record: ProfileRecord) -> None:
        """Insert a new profile row."""
        await execute(self.client.table("profiles").insert(record.to_row()))

    async def update_profile(self, user_id: UUID, update: ProfileUpdate) -> None:
        """Update the username and full name of a profile."""
        await execute(
            self.client.table("profiles")
            .update(update.to_row())
            .eq("id", str(user_id))
        )

    async def set_total_points(self, user_id: UUID, total_points: int) -> None:
        """Overwrite the point total of a profile."""
        await execute(
            self.client.table("profiles")
            .update({"total_points": total_points})
            .eq("id", str(user_id))
        )
