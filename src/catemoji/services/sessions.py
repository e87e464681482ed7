"""Session state machine for the meme flow."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from catemoji.domain.errors import (
    AcquisitionError,
    ClassificationError,
    CompositionError,
    PhaseError,
)
from catemoji.domain.expressions import background_for
from catemoji.domain.sessions import (
    ComposedMeme,
    CompleteState,
    DetectingState,
    GeneratingState,
    SessionState,
    UploadState,
)
from catemoji.services.camera import Camera, released
from catemoji.services.captions import CaptionService
from catemoji.services.classifier import ExpressionClassifier
from catemoji.services.compositor import MemeCompositor

_logger = logging.getLogger(__name__)

CAMERA_NOTICE = "Could not access camera. Please use file upload instead."
DETECTION_NOTICE = "Could not read that image. Please try another photo."

StateListener = Callable[[SessionState], None]


@dataclass
class SessionService:
    """State machine for one meme session.

    Phases run upload -> detecting -> generating -> complete, and restart
    returns to upload. Every cycle is tagged with a generation number; results
    from a cycle that was abandoned by restart are dropped.
    """

    classifier: ExpressionClassifier
    caption_service: CaptionService
    compositor: MemeCompositor
    camera: Camera | None = None
    _state: SessionState = field(default_factory=UploadState, init=False)
    _generation: int = field(default=0, init=False)
    _listeners: list[StateListener] = field(default_factory=list, init=False)
    _pending: "asyncio.Task[SessionState] | None" = field(default=None, init=False)
    _camera_busy: bool = field(default=False, init=False)

    @property
    def state(self) -> SessionState:
        """Return the current phase record."""
        return self._state

    @property
    def generation(self) -> int:
        """Return the current cycle generation."""
        return self._generation

    def subscribe(self, listener: StateListener) -> None:
        """Register a callback invoked on every state change."""
        self._listeners.append(listener)

    async def start_camera(self) -> SessionState:
        """Open the camera stream while waiting for an image.

        The device is opened in a worker thread. If the session moves on while
        the device is opening, the stream is released and PhaseError raised.
        """
        state = self._require_upload("start the camera")
        if state.camera_streaming:
            return state
        self._require_idle_camera()
        if self.camera is None:
            self._set_state(UploadState(notice=CAMERA_NOTICE))
            raise AcquisitionError("No camera configured")
        generation = self._generation
        self._camera_busy = True
        try:
            await asyncio.to_thread(self.camera.start)
        except AcquisitionError as exc:
            _logger.warning("Camera unavailable: %s", exc)
            if self._is_current(generation):
                self._set_state(UploadState(notice=CAMERA_NOTICE))
            raise
        finally:
            self._camera_busy = False
        if not self._is_current(generation) or not isinstance(self._state, UploadState):
            _logger.info("Session moved on while the camera opened, releasing it")
            self._release_camera()
            raise PhaseError("Session changed while the camera was opening")
        return self._set_state(UploadState(camera_streaming=True))

    def stop_camera(self) -> SessionState:
        """Release the camera stream without capturing."""
        self._require_upload("stop the camera")
        self._require_idle_camera()
        self._release_camera()
        return self._set_state(UploadState())

    async def capture(self) -> "asyncio.Task[SessionState]":
        """Grab a frame, release the camera and start a cycle with the frame."""
        state = self._require_upload("capture a photo")
        if not state.camera_streaming or self.camera is None:
            raise PhaseError("Camera is not streaming")
        self._require_idle_camera()
        generation = self._generation
        self._camera_busy = True
        try:
            frame = await asyncio.to_thread(_grab_frame, self.camera)
        except AcquisitionError as exc:
            _logger.warning("Camera capture failed: %s", exc)
            if self._is_current(generation):
                self._set_state(UploadState(notice=CAMERA_NOTICE))
            raise
        finally:
            self._camera_busy = False
        if not self._is_current(generation):
            raise PhaseError("Session was restarted during capture")
        return self.submit_image(frame)

    def submit_image(self, image_bytes: bytes) -> "asyncio.Task[SessionState]":
        """Enter detecting and schedule classification and captioning.

        Must be called from a running event loop. The returned task resolves
        to the state the cycle left behind.
        """
        self._require_upload("submit an image")
        self._release_camera()
        self._generation += 1
        self._set_state(DetectingState(source_image=image_bytes))
        task = asyncio.create_task(self._run_cycle(self._generation, image_bytes))
        self._pending = task
        task.add_done_callback(self._on_cycle_done)
        return task

    async def process_image(self, image_bytes: bytes) -> SessionState:
        """Run a full cycle for the image and return the resulting state."""
        return await self.submit_image(image_bytes)

    async def download(self) -> ComposedMeme:
        """Render the completed meme. The session is left untouched."""
        state = self._state
        if not isinstance(state, CompleteState):
            raise PhaseError(f"Cannot download while {state.phase.value}")
        try:
            return await self.compositor.compose(state.background_image, state.caption)
        except CompositionError as exc:
            _logger.warning("Meme composition failed: %s", exc)
            raise

    def restart(self) -> SessionState:
        """Abandon the current cycle and clear all session data."""
        self._generation += 1
        self._release_camera()
        return self._set_state(UploadState())

    async def _run_cycle(self, generation: int, image_bytes: bytes) -> SessionState:
        try:
            label = await self.classifier.classify(image_bytes)
        except ClassificationError as exc:
            if self._is_current(generation):
                _logger.warning("Classification failed: %s", exc)
                self._set_state(UploadState(notice=str(exc)))
            return self._state
        except Exception:
            if self._is_current(generation):
                _logger.exception("Classifier failed unexpectedly")
                self._set_state(UploadState(notice=DETECTION_NOTICE))
            return self._state
        if not self._is_current(generation):
            _logger.info("Dropping stale classification for generation %s", generation)
            return self._state

        self._set_state(
            GeneratingState(
                source_image=image_bytes,
                label=label,
                background_image=background_for(label),
            )
        )
        caption = await self.caption_service.get_caption(label)
        if not self._is_current(generation):
            _logger.info("Dropping stale caption for generation %s", generation)
            return self._state

        return self._set_state(
            CompleteState(
                source_image=image_bytes,
                label=label,
                background_image=background_for(label),
                caption=caption,
            )
        )

    def _on_cycle_done(self, task: "asyncio.Task[SessionState]") -> None:
        if self._pending is task:
            self._pending = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error("Session cycle failed", exc_info=exc)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _require_upload(self, action: str) -> UploadState:
        state = self._state
        if not isinstance(state, UploadState):
            raise PhaseError(f"Cannot {action} while {state.phase.value}")
        return state

    def _require_idle_camera(self) -> None:
        if self._camera_busy:
            raise PhaseError("Camera is busy")

    def _release_camera(self) -> None:
        # A worker thread holding the device releases it when it finishes.
        if self._camera_busy:
            return
        if self.camera is not None and self.camera.is_streaming:
            self.camera.stop()

    def _set_state(self, state: SessionState) -> SessionState:
        self._state = state
        _logger.info("Session phase: %s", state.phase.value)
        for listener in list(self._listeners):
            listener(state)
        return state


def _grab_frame(camera: Camera) -> bytes:
    with released(camera):
        return camera.capture_frame()
