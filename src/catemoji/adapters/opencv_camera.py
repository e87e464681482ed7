"""OpenCV-backed camera stream."""

from dataclasses import dataclass, field

import cv2

from catemoji.domain.errors import AcquisitionError
from catemoji.services.camera import Camera


@dataclass
class OpenCVCamera(Camera):
    """Camera that grabs JPEG stills from a local video device."""

    device: int = 0
    jpeg_quality: int = 90
    _capture: "cv2.VideoCapture | None" = field(default=None, init=False, repr=False)

    @property
    def is_streaming(self) -> bool:
        """Return True while the device is held open."""
        return self._capture is not None

    def start(self) -> None:
        """Open the video device."""
        if self._capture is not None:
            return
        capture = cv2.VideoCapture(self.device)
        if not capture.isOpened():
            capture.release()
            raise AcquisitionError(f"Camera device {self.device} is unavailable")
        self._capture = capture

    def capture_frame(self) -> bytes:
        """Read one frame and encode it as JPEG."""
        if self._capture is None:
            raise AcquisitionError("Camera is not streaming")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise AcquisitionError("Camera returned no frame")
        ok, encoded = cv2.imencode(
            ".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality]
        )
        if not ok:
            raise AcquisitionError("Camera frame could not be encoded")
        return encoded.tobytes()

    def stop(self) -> None:
        """Release the video device."""
        if self._capture is None:
            return
        self._capture.release()
        self._capture = None
