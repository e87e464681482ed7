"""Pydantic models for session API responses."""

import base64

from pydantic import BaseModel

from catemoji.domain.sessions import (
    CompleteState,
    DetectingState,
    GeneratingState,
    SessionState,
    UploadState,
)


class SessionView(BaseModel):
    """Serializable snapshot of the current session phase."""

    phase: str
    camera_streaming: bool = False
    notice: str | None = None
    source_image: str | None = None
    label: str | None = None
    background_image: str | None = None
    caption: str | None = None


def session_view(state: SessionState) -> SessionView:
    """Flatten a phase record into its API representation."""
    if isinstance(state, UploadState):
        return SessionView(
            phase=state.phase.value,
            camera_streaming=state.camera_streaming,
            notice=state.notice,
        )
    if isinstance(state, DetectingState):
        return SessionView(
            phase=state.phase.value, source_image=_to_data_url(state.source_image)
        )
    if not isinstance(state, GeneratingState | CompleteState):
        raise TypeError(f"Unknown session state: {state!r}")
    return SessionView(
        phase=state.phase.value,
        source_image=_to_data_url(state.source_image),
        label=state.label.value,
        background_image=state.background_image,
        caption=state.caption if isinstance(state, CompleteState) else None,
    )


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for display."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
