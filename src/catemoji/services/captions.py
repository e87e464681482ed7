"""Caption generation with a static fallback table."""

import logging
from dataclasses import dataclass
from typing import Protocol

from catemoji.domain.expressions import (
    CAT_PROFILES,
    DEFAULT_CAPTION,
    Expression,
    parse_expression,
)

_logger = logging.getLogger(__name__)

MAX_CAPTION_WORDS = 10


class CaptionClient(Protocol):
    """Interface for a remote text-generation backend."""

    async def generate(self, *, prompt: str, max_tokens: int) -> str:
        """Return raw caption text or raise CaptionServiceError."""


@dataclass
class CaptionService:
    """Best-effort caption provider.

    Remote failures of any kind never reach the caller: they are logged and
    replaced by the fallback caption for the label.
    """

    client: CaptionClient | None
    max_tokens: int = 1000

    async def get_caption(self, label: Expression | str | None) -> str:
        """Return a caption for the label."""
        if self.client is None:
            _logger.info("No caption service configured, using fallback caption")
            return fallback_caption(label)
        expression = parse_expression(label)
        if expression is None:
            _logger.info("Unrecognized label %r, using default caption", label)
            return DEFAULT_CAPTION

        prompt = build_prompt(expression)
        try:
            text = await self.client.generate(prompt=prompt, max_tokens=self.max_tokens)
        except Exception as exc:
            _logger.warning("Caption service failed, using fallback caption: %s", exc)
            return fallback_caption(expression)
        caption = text.strip()
        if not caption:
            _logger.warning("Caption service returned empty text, using fallback")
            return fallback_caption(expression)
        return caption


def fallback_caption(label: Expression | str | None) -> str:
    """Return the static caption for a label, or the generic default."""
    expression = parse_expression(label)
    if expression is None:
        return DEFAULT_CAPTION
    return CAT_PROFILES[expression].fallback_caption


def build_prompt(label: Expression | str) -> str:
    """Build the caption prompt for a label.

    Raises ValueError for labels outside the expression set.
    """
    expression = parse_expression(label)
    if expression is None:
        raise ValueError(f"Unknown expression label: {label!r}")
    return (
        "Generate a hilarious, short Instagram-style cat meme caption "
        f"(max {MAX_CAPTION_WORDS} words) for a cat that looks {expression.value}. "
        "Make it funny, relatable, and meme-worthy. "
        "Only respond with the caption text, nothing else."
    )
