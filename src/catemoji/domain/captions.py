"""Models for caption service responses."""

from pydantic import BaseModel


class ContentBlock(BaseModel):
    """Single content block of a Messages API response."""

    type: str
    text: str | None = None


class MessagesResponse(BaseModel):
    """Subset of the Messages API response used for captions."""

    content: list[ContentBlock]
