"""Anthropic Messages API client for caption generation."""

from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from catemoji.domain.captions import MessagesResponse
from catemoji.domain.errors import CaptionServiceError
from catemoji.services.captions import CaptionClient

ANTHROPIC_VERSION = "2023-06-01"


@dataclass
class HttpxAnthropicCaptionClient(CaptionClient):
    """Caption client backed by the Anthropic Messages API."""

    api_key: str
    model: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 30

    @classmethod
    def create(
        cls, api_key: str, model: str, base_url: str
    ) -> "HttpxAnthropicCaptionClient":
        """Create a caption client with a managed httpx session."""
        return cls(
            api_key=api_key,
            model=model,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
        )

    async def generate(self, *, prompt: str, max_tokens: int) -> str:
        """Send one user message and return the first content block text."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/v1/messages",
                headers={
                    "content-type": "application/json",
                    "x-api-key": self.api_key,
                    "anthropic-version": ANTHROPIC_VERSION,
                },
                json={
                    "model": self.model,
                    "max_tokens": max_tokens,
                    "messages": [{"role": "user", "content": prompt}],
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = MessagesResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            raise CaptionServiceError(
                f"API error: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise CaptionServiceError(f"Caption request failed: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise CaptionServiceError("Malformed caption response") from exc

        if not payload.content or not payload.content[0].text:
            raise CaptionServiceError("Caption response has no text")
        return payload.content[0].text.strip()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
