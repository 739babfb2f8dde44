"""HTTP client for dereferencing image URLs."""

from dataclasses import dataclass

import httpx

from checkmeout.domain.errors import RemoteError
from checkmeout.services.media import ImageFetcher


@dataclass
class HttpxImageFetcher(ImageFetcher):
    """Image fetcher using httpx."""

    http_client: httpx.AsyncClient
    timeout_seconds: float = 20.0

    @classmethod
    def create(cls, timeout_seconds: float = 20.0) -> "HttpxImageFetcher":
        """Create an image fetcher with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True),
            timeout_seconds=timeout_seconds,
        )

    async def fetch(self, url: str) -> bytes:
        """Download the bytes behind an image URL."""
        try:
            response = await self.http_client.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise RemoteError(f"Image download failed: {exc}") from exc
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
