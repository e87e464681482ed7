"""Expression classification for captured face images."""

import asyncio
import io
import random
from dataclasses import dataclass, field
from typing import Protocol

from PIL import Image

from catemoji.domain.errors import ClassificationError
from catemoji.domain.expressions import Expression


class ExpressionClassifier(Protocol):
    """Interface for mapping a face image to one expression label."""

    async def classify(self, image_bytes: bytes) -> Expression:
        """Return exactly one label for the image."""


@dataclass
class RandomExpressionClassifier(ExpressionClassifier):
    """Placeholder classifier that picks a label uniformly at random.

    The image is decoded to reject malformed input, but its content does not
    influence the result. Swap in a vision model behind the same interface.
    """

    delay_seconds: float = 1.5
    rng: random.Random = field(default_factory=random.Random)

    async def classify(self, image_bytes: bytes) -> Expression:
        """Validate the image, wait, then return a random label."""
        ensure_decodable(image_bytes)
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        return self.rng.choice(list(Expression))


def ensure_decodable(image_bytes: bytes) -> None:
    """Raise ClassificationError unless the bytes hold a readable image."""
    if not image_bytes:
        raise ClassificationError("No image data received")
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image.verify()
    except Image.DecompressionBombError as exc:
        raise ClassificationError("Image is too large") from exc
    except Exception as exc:
        raise ClassificationError("Image could not be decoded") from exc
