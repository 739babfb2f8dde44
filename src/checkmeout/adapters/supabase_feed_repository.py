"""Supabase repository for feed items and roasts."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from checkmeout.adapters.supabase_query import execute, parse_records
from checkmeout.domain.records import FeedItemRecord, RoastRecord
from checkmeout.services.feed import FeedRepository


@dataclass
class SupabaseFeedRepository(FeedRepository):
    """Supabase implementation for the global feed."""

    client: Client

    async def list_feed_items(self) -> list[FeedItemRecord]:
        """Return every feed item with its roasts, newest first."""
        rows = await execute(
            self.client.table("feed_items")
            .select("*, roasts(*)")
            .order("timestamp", desc=True)
        )
        return parse_records(FeedItemRecord, rows, "feed_items")

    async def get_feed_item(self, item_id: UUID) -> FeedItemRecord | None:
        """Return a feed item by id."""
        rows = await execute(
            self.client.table("feed_items")
            .select("*")
            .eq("id", str(item_id))
            .limit(1)
        )
        records = parse_records(FeedItemRecord, rows, "feed_items")
        return records[0] if records else None

    async def create_feed_item(self, record: FeedItemRecord) -> None:
        """Insert a feed item carrying its client-generated id."""
        await execute(self.client.table("feed_items").insert(record.to_row()))

    async def delete_feed_item(self, item_id: UUID) -> None:
        """Delete a feed item row."""
        await execute(
            self.client.table("feed_items").delete().eq("id", str(item_id))
        )

    async def list_roasts(self, item_id: UUID) -> list[RoastRecord]:
        """Return the roasts of a feed item, oldest first."""
        rows = await execute(
            self.client.table("roasts")
            .select("*")
            .eq("feed_item_id", str(item_id))
            .order("created_at", desc=False)
        )
        return parse_records(RoastRecord, rows, "roasts")

    async def create_roast(self, record: RoastRecord) -> None:
        """Insert a roast row."""
        await execute(self.client.table("roasts").insert(record.to_row()))

    async def delete_roasts(self, item_id: UUID) -> None:
        """Delete every roast attached to a feed item."""
        await execute(
            self.client.table("roasts").delete().eq("feed_item_id", str(item_id))
        )

    async def increment_comments(self, item_id: UUID) -> None:
        """Increment the comment counter through its stored procedure."""
        await execute(
            self.client.rpc("increment_comments", {"item_id": str(item_id)})
        )
