"""Image upload and download pipeline."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from checkmeout.domain.errors import StoreError

logger = logging.getLogger(__name__)

JPEG_CONTENT_TYPE = "image/jpeg"


class ObjectStorage(Protocol):
    """Interface for the object storage bucket holding images."""

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Upload bytes to a path and return the public URL."""

    async def delete(self, paths: list[str]) -> None:
        """Delete the objects stored at the given paths."""

    def public_url(self, path: str) -> str:
        """Return the public URL of a stored object."""

    def path_from_url(self, url: str) -> str | None:
        """Return the object path for a public URL of this bucket."""


class ImageFetcher(Protocol):
    """Interface for dereferencing image URLs."""

    async def fetch(self, url: str) -> bytes:
        """Download and return the bytes behind a URL."""


@dataclass
class MediaService:
    """Uploads image payloads and dereferences stored image URLs."""

    storage: ObjectStorage
    fetcher: ImageFetcher

    async def upload_image(self, prefix: str, data: bytes, suffix: str = "") -> str:
        """Upload a JPEG payload under a fresh path and return its URL."""
        path = f"{prefix}/{uuid4()}{suffix}.jpg"
        return await self.storage.upload(path, data, JPEG_CONTENT_TYPE)

    async def upload_optional(
        self, prefix: str, data: bytes | None, suffix: str = ""
    ) -> str | None:
        if data is None:
            return None
        return await self.upload_image(prefix, data, suffix)

    async def fetch_image(self, url: str | None) -> bytes | None:
        """Download an image, returning None when the fetch fails."""
        if not url:
            return None
        try:
            return await self.fetcher.fetch(url)
        except StoreError as exc:
            logger.warning("Image fetch failed for %s: %s", url, exc)
            return None

    async def fetch_images(self, urls: list[str | None]) -> list[bytes | None]:
        """Download several images concurrently, best-effort."""
        return list(await asyncio.gather(*(self.fetch_image(url) for url in urls)))

    async def delete_images(self, urls: list[str | None]) -> None:
        """Remove stored images, logging rather than raising on failure."""
        paths = [
            path
            for path in (self.storage.path_from_url(url) for url in urls if url)
            if path
        ]
        if not paths:
            return
        try:
            await self.storage.delete(paths)
        except StoreError as exc:
            logger.warning("Failed to delete stored images %s: %s", paths, exc)
