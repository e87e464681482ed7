"""HTTP loader for stock background images."""

from dataclasses import dataclass

import httpx

from catemoji.domain.errors import CompositionError
from catemoji.services.compositor import ImageFetcher


@dataclass
class HttpxImageFetcher(ImageFetcher):
    """Background image fetcher using httpx."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls) -> "HttpxImageFetcher":
        """Create a fetcher with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(follow_redirects=True))

    async def fetch(self, ref: str) -> bytes:
        """Download image bytes for a URL."""
        try:
            response = await self.http_client.get(ref, timeout=20)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise CompositionError(f"Failed to load background image: {exc}") from exc
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
