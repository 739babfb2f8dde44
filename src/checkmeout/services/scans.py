"""Scan log synchronization."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from checkmeout.domain.errors import InvalidInputError
from checkmeout.domain.models import ScanLog
from checkmeout.domain.records import ScanLogRecord
from checkmeout.domain.results import MutationResult
from checkmeout.services.caches import ActivityCaches, SessionState
from checkmeout.services.media import MediaService
from checkmeout.services.operations import run_operation

logger = logging.getLogger(__name__)

SCAN_IMAGE_PREFIX = "scan_logs"
MAX_BODY_FAT_PERCENTAGE = 100.0


class ScanLogRepository(Protocol):
    """Persistence interface for scan logs."""

    async def list_scan_logs(self, user_id: UUID) -> list[ScanLogRecord]:
        """Return a user's scan logs, newest first."""

    async def create_scan_log(self, record: ScanLogRecord) -> None:
        """Insert a scan log row."""


@dataclass
class ScanLogService:
    """Loads and creates the signed-in user's scan logs."""

    repository: ScanLogRepository
    media: MediaService
    session: SessionState
    caches: ActivityCaches

    async def refresh_scan_logs(self) -> tuple[ScanLog, ...]:
        user = self.session.require_user()
        records = await self.repository.list_scan_logs(user.id)
        logs = await asyncio.gather(*(self._hydrate(record) for record in records))
        snapshot = tuple(logs)
        self.caches.scan_logs.publish(snapshot)
        return snapshot

    async def load_scan_logs(self) -> MutationResult[tuple[ScanLog, ...]]:
        """Replace the cached scan logs with the stored ones."""
        return await run_operation("load_scan_logs", self.refresh_scan_logs)

    async def create_scan_log(
        self,
        body_fat_percentage: float,
        front_image: bytes | None = None,
        side_image: bytes | None = None,
    ) -> ScanLog:
        """Upload scan images, insert the row and prepend the cached log."""
        user = self.session.require_user()
        if not 0.0 <= body_fat_percentage <= MAX_BODY_FAT_PERCENTAGE:
            raise InvalidInputError(
                f"Body fat percentage out of range: {body_fat_percentage}"
            )
        front_url = await self.media.upload_optional(
            SCAN_IMAGE_PREFIX, front_image, "-front"
        )
        side_url = await self.media.upload_optional(
            SCAN_IMAGE_PREFIX, side_image, "-side"
        )
        record = ScanLogRecord(
            user_id=user.id,
            timestamp=datetime.now(tz=UTC),
            body_fat_percentage=body_fat_percentage,
            front_image_url=front_url,
            side_image_url=side_url,
        )
        await self.repository.create_scan_log(record)
        log = _build_scan_log(record, front_image, side_image)
        self.caches.prepend_scan_log(log)
        logger.info("Created scan log %s", log.id)
        return log

    async def _hydrate(self, record: ScanLogRecord) -> ScanLog:
        front, side = await self.media.fetch_images(
            [record.front_image_url, record.side_image_url]
        )
        return _build_scan_log(record, front, side)


def _build_scan_log(
    record: ScanLogRecord, front: bytes | None, side: bytes | None
) -> ScanLog:
    return ScanLog(
        id=record.id,
        timestamp=record.timestamp,
        body_fat_percentage=record.body_fat_percentage,
        front_image_data=front,
        side_image_data=side,
        front_image_url=record.front_image_url,
        side_image_url=record.side_image_url,
    )
