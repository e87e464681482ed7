"""Shared test fixtures."""

import asyncio
import io
import struct
import threading
import zlib
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest
from PIL import Image

from catemoji.config import Settings
from catemoji.containers import AppContainer
from catemoji.domain.errors import AcquisitionError
from catemoji.domain.expressions import Expression
from catemoji.services.camera import Camera
from catemoji.services.captions import CaptionClient, CaptionService
from catemoji.services.classifier import ExpressionClassifier, ensure_decodable
from catemoji.services.compositor import ImageFetcher, MemeCompositor
from catemoji.services.sessions import SessionService


def make_png(size: tuple[int, int] = (16, 16), color=(200, 120, 40)) -> bytes:
    """Return PNG bytes for a solid-color image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(kind + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)


def make_oversized_png(width: int = 30000, height: int = 30000) -> bytes:
    """Return a tiny PNG whose header declares a huge canvas."""
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(b""))
        + _png_chunk(b"IEND", b"")
    )


@dataclass
class FakeClassifier(ExpressionClassifier):
    """Classifier returning a fixed label, optionally held until released."""

    label: Expression = Expression.HAPPY
    gate: asyncio.Event | None = None
    error: Exception | None = None
    calls: list[bytes] = field(default_factory=list)

    async def classify(self, image_bytes: bytes) -> Expression:
        self.calls.append(image_bytes)
        if self.error is not None:
            raise self.error
        ensure_decodable(image_bytes)
        if self.gate is not None:
            await self.gate.wait()
        return self.label


@dataclass
class FakeCaptionClient(CaptionClient):
    """Caption client returning fixed text or raising."""

    text: str = "I KNOW WHAT YOU DID"
    error: Exception | None = None
    gate: asyncio.Event | None = None
    prompts: list[str] = field(default_factory=list)

    async def generate(self, *, prompt: str, max_tokens: int) -> str:
        self.prompts.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.text


@dataclass
class FakeImageFetcher(ImageFetcher):
    """Fetcher serving static bytes and recording requested refs."""

    content: bytes = field(default_factory=lambda: make_png((40, 40)))
    error: Exception | None = None
    refs: list[str] = field(default_factory=list)

    async def fetch(self, ref: str) -> bytes:
        self.refs.append(ref)
        if self.error is not None:
            raise self.error
        return self.content


@dataclass
class FakeCamera(Camera):
    """In-memory camera tracking start and stop calls."""

    frame: bytes = field(default_factory=make_png)
    fail_on_start: bool = False
    fail_on_capture: bool = False
    streaming: bool = False
    starts: int = 0
    stops: int = 0
    start_gate: threading.Event | None = None
    threads: list[int] = field(default_factory=list)

    @property
    def is_streaming(self) -> bool:
        return self.streaming

    def start(self) -> None:
        self.threads.append(threading.get_ident())
        if self.start_gate is not None:
            self.start_gate.wait(timeout=5)
        if self.fail_on_start:
            raise AcquisitionError("Permission denied")
        self.starts += 1
        self.streaming = True

    def capture_frame(self) -> bytes:
        self.threads.append(threading.get_ident())
        if self.fail_on_capture:
            raise AcquisitionError("Camera returned no frame")
        return self.frame

    def stop(self) -> None:
        if self.streaming:
            self.stops += 1
        self.streaming = False


def fixed_clock() -> datetime:
    return datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


def build_session_service(
    classifier: ExpressionClassifier | None = None,
    caption_client: CaptionClient | None = None,
    fetcher: ImageFetcher | None = None,
    camera: Camera | None = None,
) -> SessionService:
    """Build a session service wired with fakes."""
    return SessionService(
        classifier=classifier or FakeClassifier(),
        caption_service=CaptionService(client=caption_client),
        compositor=MemeCompositor(
            fetcher=fetcher or FakeImageFetcher(), clock=fixed_clock
        ),
        camera=camera,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        caption_backend="anthropic",
        anthropic_api_key=None,
        openai_api_key=None,
        classifier_delay_seconds=0,
    )


@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def fetcher() -> FakeImageFetcher:
    return FakeImageFetcher()


@pytest.fixture
def container(
    settings: Settings, camera: FakeCamera, fetcher: FakeImageFetcher
) -> AppContainer:
    session_service = build_session_service(
        classifier=FakeClassifier(label=Expression.ANGRY),
        fetcher=fetcher,
        camera=camera,
    )

    async def close_resources() -> None:
        session_service.restart()

    return AppContainer(
        settings=settings,
        caption_service=session_service.caption_service,
        session_service=session_service,
        close_resources=close_resources,
    )

