"""Supabase Storage bucket for uploaded images."""

import asyncio
from dataclasses import dataclass

import httpx
from storage3.utils import StorageException
from supabase import Client

from checkmeout.domain.errors import RemoteError
from checkmeout.services.media import ObjectStorage

_CACHE_CONTROL_SECONDS = "3600"


@dataclass
class SupabaseMediaStorage(ObjectStorage):
    """Object storage backed by a public Supabase Storage bucket."""

    client: Client
    bucket: str = "images"

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Upload bytes, overwriting any existing object, and return its URL."""
        bucket = self.client.storage.from_(self.bucket)
        try:
            await asyncio.to_thread(
                bucket.upload,
                path,
                data,
                {
                    "content-type": content_type,
                    "cache-control": _CACHE_CONTROL_SECONDS,
                    "upsert": "true",
                },
            )
        except (StorageException, httpx.HTTPError) as exc:
            raise RemoteError(f"Upload of {path} failed: {exc}") from exc
        return self.public_url(path)

    async def delete(self, paths: list[str]) -> None:
        """Remove objects from the bucket."""
        bucket = self.client.storage.from_(self.bucket)
        try:
            await asyncio.to_thread(bucket.remove, paths)
        except (StorageException, httpx.HTTPError) as exc:
            raise RemoteError(f"Removal of {paths} failed: {exc}") from exc

    def public_url(self, path: str) -> str:
        """Return the public URL of an object, without a trailing query."""
        return self.client.storage.from_(self.bucket).get_public_url(path).rstrip("?")

    def path_from_url(self, url: str) -> str | None:
        """Return the object path of a public URL within this bucket."""
        marker = f"/object/public/{self.bucket}/"
        index = url.find(marker)
        if index < 0:
            return None
        path = url[index + len(marker) :].split("?", 1)[0]
        return path or None
