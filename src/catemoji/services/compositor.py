"""Meme rendering: stock background plus a word-wrapped caption band."""

import io
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import lru_cache
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

from catemoji.domain.errors import CompositionError
from catemoji.domain.sessions import ComposedMeme

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 900
BACKGROUND_HEIGHT = 800
BAND_TOP = 750
BAND_FILL = (255, 255, 255, 242)
TEXT_FILL = (0, 0, 0, 255)
TEXT_CENTER_X = 400
FIRST_LINE_Y = 825
LINE_HEIGHT = 40
MAX_LINE_WIDTH = 750
FONT_SIZE = 36

_FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "arialbd.ttf",
)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


class ImageFetcher(Protocol):
    """Interface for loading a background image by reference."""

    async def fetch(self, ref: str) -> bytes:
        """Return encoded image bytes or raise CompositionError."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class MemeCompositor:
    """Compose downloadable memes from a background reference and caption."""

    fetcher: ImageFetcher
    clock: Callable[[], datetime] = _utcnow

    async def compose(self, background_ref: str, caption: str) -> ComposedMeme:
        """Fetch the background, render the caption band and encode as PNG."""
        raw = await self.fetcher.fetch(background_ref)
        background = _decode_background(raw)
        image = render_meme(background, caption)
        return ComposedMeme(
            filename=meme_filename(self.clock()),
            content=encode_png(image),
        )


def wrap_caption(
    text: str,
    measure: Callable[[str], float],
    max_width: float = MAX_LINE_WIDTH,
) -> list[str]:
    """Greedily pack words into lines no wider than max_width.

    A word that alone exceeds max_width gets its own line and is not split.
    """
    lines: list[str] = []
    line = ""
    for word in text.split():
        candidate = f"{line} {word}" if line else word
        if line and measure(candidate) > max_width:
            lines.append(line)
            line = word
        else:
            line = candidate
    if line:
        lines.append(line)
    return lines


def render_meme(
    background: Image.Image, caption: str, font: Font | None = None
) -> Image.Image:
    """Draw the background, caption band and wrapped caption on a fixed canvas."""
    font = font or load_caption_font()
    canvas = Image.new("RGBA", (CANVAS_WIDTH, CANVAS_HEIGHT), (255, 255, 255, 255))
    scaled = background.convert("RGBA").resize((CANVAS_WIDTH, BACKGROUND_HEIGHT))
    canvas.paste(scaled, (0, 0))

    band = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    ImageDraw.Draw(band).rectangle(
        [(0, BAND_TOP), (CANVAS_WIDTH - 1, CANVAS_HEIGHT - 1)], fill=BAND_FILL
    )
    canvas = Image.alpha_composite(canvas, band)

    draw = ImageDraw.Draw(canvas)
    lines = wrap_caption(caption, lambda text: draw.textlength(text, font=font))
    for index, line in enumerate(lines):
        _draw_centered(draw, line, FIRST_LINE_Y + index * LINE_HEIGHT, font)
    return canvas


def _draw_centered(
    draw: ImageDraw.ImageDraw, text: str, center_y: int, font: Font
) -> None:
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = TEXT_CENTER_X - (right - left) / 2 - left
    y = center_y - (bottom - top) / 2 - top
    draw.text((x, y), text, fill=TEXT_FILL, font=font)


@lru_cache(maxsize=1)
def load_caption_font() -> Font:
    """Load a bold sans font, falling back to Pillow's bundled font."""
    for path in _FONT_CANDIDATES:
        try:
            return ImageFont.truetype(path, FONT_SIZE)
        except OSError:
            continue
    return ImageFont.load_default(size=FONT_SIZE)


def encode_png(image: Image.Image) -> bytes:
    """Encode an image as PNG bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def meme_filename(now: datetime) -> str:
    """Build a unique download filename from a millisecond timestamp."""
    return f"cat-meme-{round(now.timestamp() * 1000)}.png"


def _decode_background(raw: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (OSError, SyntaxError, ValueError) as exc:
        raise CompositionError("Background image could not be decoded") from exc
    return image
