"""Supabase repository for scan logs."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from checkmeout.adapters.supabase_query import execute, parse_records
from checkmeout.domain.records import ScanLogRecord
from checkmeout.services.scans import ScanLogRepository


@dataclass
class SupabaseScanLogRepository(ScanLogRepository):
    """Supabase implementation for scan logs."""

    client: Client

    async def list_scan_logs(self, user_id: UUID) -> list[ScanLogRecord]:
        """Return a user's scan logs, newest first."""
        rows = await execute(
            self.client.table("scan_logs")
            .select(
                "id, user_id, timestamp, body_fat_percentage, front_image_url, "
                "side_image_url"
            )
            .eq("user_id", str(user_id))
            .order("timestamp", desc=True)
        )
        return parse_records(ScanLogRecord, rows, "scan_logs")

    async def create_scan_log(self, record: ScanLogRecord) -> None:
        """Insert a scan log carrying its client-generated id."""
        await execute(self.client.table("scan_logs").insert(record.to_row()))
