"""Supabase repository for likes."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from checkmeout.adapters.supabase_query import execute, parse_records
from checkmeout.domain.records import LikeRecord
from checkmeout.services.likes import LikeRepository


@dataclass
class SupabaseLikeRepository(LikeRepository):
    """Supabase implementation for likes and like counters."""

    client: Client

    async def list_likes(self, user_id: UUID) -> list[LikeRecord]:
        """Return every like row of a user."""
        rows = await execute(
            self.client.table("likes")
            .select("id, user_id, feed_item_id")
            .eq("user_id", str(user_id))
        )
        return parse_records(LikeRecord, rows, "likes")

    async def create_like(self, record: LikeRecord) -> None:
        """Insert a like row."""
        await execute(self.client.table("likes").insert(record.to_row()))

    async def delete_like(self, user_id: UUID, item_id: UUID) -> None:
        """Delete the like of a user for a feed item."""
        await execute(
            self.client.table("likes")
            .delete()
            .eq("user_id", str(user_id))
            .eq("feed_item_id", str(item_id))
        )

    async def delete_likes_for_item(self, item_id: UUID) -> None:
        """Delete every like referencing a feed item."""
        await execute(
            self.client.table("likes").delete().eq("feed_item_id", str(item_id))
        )

    async def increment_likes(self, item_id: UUID) -> None:
        """Increment the like counter through its stored procedure."""
        await execute(self.client.rpc("increment_likes", {"item_id": str(item_id)}))

    async def decrement_likes(self, item_id: UUID) -> None:
        """Decrement the like counter through its stored procedure."""
        await execute(self.client.rpc("decrement_likes", {"item_id": str(item_id)}))
