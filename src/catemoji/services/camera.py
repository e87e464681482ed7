"""Camera stream interface and scoping helper."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol


class Camera(Protocol):
    """Interface for a live camera device."""

    @property
    def is_streaming(self) -> bool:
        """Return True while the device stream is open."""

    def start(self) -> None:
        """Open the device stream or raise AcquisitionError."""

    def capture_frame(self) -> bytes:
        """Grab one still frame as encoded image bytes."""

    def stop(self) -> None:
        """Release the device stream. Safe to call when already stopped."""


@contextmanager
def released(camera: Camera) -> Iterator[Camera]:
    """Yield the camera and stop its stream on exit, even on error."""
    try:
        yield camera
    finally:
        camera.stop()
