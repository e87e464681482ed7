"""OpenAI Responses API client for caption generation."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from catemoji.domain.errors import CaptionServiceError
from catemoji.services.captions import CaptionClient


@dataclass
class OpenAICaptionClient(CaptionClient):
    """Caption client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(cls, api_key: str, model: str) -> "OpenAICaptionClient":
        """Create an OpenAI caption client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model)

    async def generate(self, *, prompt: str, max_tokens: int) -> str:
        """Send one user message and return the output text."""
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=[{"role": "user", "content": prompt}],
                max_output_tokens=max_tokens,
            )
        except OpenAIError as exc:
            raise CaptionServiceError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise CaptionServiceError("OpenAI returned an empty response")
        return output_text.strip()

    async def close(self) -> None:
        """Close the underlying OpenAI client."""
        await self.client.close()
