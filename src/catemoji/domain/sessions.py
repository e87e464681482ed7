"""Session phase variants for the meme flow.

Each phase is its own record carrying only the fields that are valid while
the session is in that phase.
"""

from dataclasses import dataclass
from enum import Enum

from catemoji.domain.expressions import Expression


class Phase(str, Enum):
    """User-visible session phases."""

    UPLOAD = "upload"
    DETECTING = "detecting"
    GENERATING = "generating"
    COMPLETE = "complete"


@dataclass(frozen=True)
class UploadState:
    """Waiting for an image; the camera may be streaming."""

    camera_streaming: bool = False
    notice: str | None = None

    @property
    def phase(self) -> Phase:
        return Phase.UPLOAD


@dataclass(frozen=True)
class DetectingState:
    """Image received, classification outstanding."""

    source_image: bytes

    @property
    def phase(self) -> Phase:
        return Phase.DETECTING


@dataclass(frozen=True)
class GeneratingState:
    """Label known, caption outstanding."""

    source_image: bytes
    label: Expression
    background_image: str

    @property
    def phase(self) -> Phase:
        return Phase.GENERATING


@dataclass(frozen=True)
class CompleteState:
    """All session data available for display and download."""

    source_image: bytes
    label: Expression
    background_image: str
    caption: str

    @property
    def phase(self) -> Phase:
        return Phase.COMPLETE


SessionState = UploadState | DetectingState | GeneratingState | CompleteState


@dataclass(frozen=True)
class ComposedMeme:
    """Rendered meme ready for download."""

    filename: str
    content: bytes
    media_type: str = "image/png"
