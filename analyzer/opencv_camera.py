# =============================================================================
# Camera Vision Analyzer - OpenCV Camera Platform
# =============================================================================
# CameraPlatform backed by cv2.VideoCapture. Facing modes map onto device
# indexes. The "secure context" is the relay origin frames are sent to:
# frames only leave the machine over HTTPS or to a loopback relay.
# =============================================================================

import logging
import platform
import sys
from typing import Dict, Optional

import cv2
import numpy as np

from analyzer.camera import CameraAcquisitionError, is_secure_origin

logger = logging.getLogger(__name__)


def _platform_family() -> str:
    if sys.platform == "darwin":
        return "macos"
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform.startswith("win"):
        return "windows"
    return "other"


class OpenCVStream:
    """Open cv2.VideoCapture handle for one device."""

    def __init__(self, capture: "cv2.VideoCapture", device_index: int):
        self._capture = capture
        self._device_index = device_index

    def read_frame(self) -> Optional[np.ndarray]:
        ok, frame = self._capture.read()
        if not ok or frame is None:
            logger.warning("Device %d returned no frame", self._device_index)
            return None
        # OpenCV delivers BGR; the capture pipeline expects RGB
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def stop(self) -> None:
        self._capture.release()


class OpenCVCameraPlatform:
    """
    Local camera access through OpenCV.

    Args:
        origin:          URL of the relay the frames are sent to.
        device_indexes:  Mapping of facing mode -> cv2 device index.
    """

    def __init__(self, origin: str, device_indexes: Dict[str, int]):
        self._origin = origin
        self._device_indexes = dict(device_indexes)
        self.family = _platform_family()

    def supports_media(self) -> bool:
        return hasattr(cv2, "VideoCapture")

    def is_secure_context(self) -> bool:
        return is_secure_origin(self._origin)

    def in_embedded_frame(self) -> bool:
        return False

    def supports_permission_query(self) -> bool:
        return False

    def query_permission(self) -> str:
        return "unknown"

    def open_stream(self, facing: str, width: int, height: int) -> OpenCVStream:
        """
        Open the device for ``facing`` and apply resolution hints.

        Raises:
            CameraAcquisitionError: NotFoundError when the device cannot be
                opened, NotReadableError when it opens but yields no frame.
        """
        index = self._device_indexes.get(facing, 0)
        capture = cv2.VideoCapture(index)
        if not capture.isOpened():
            capture.release()
            raise CameraAcquisitionError("NotFoundError", f"Cannot open camera device {index}")

        # Hints only; drivers may pick the closest supported mode
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

        ok, _ = capture.read()
        if not ok:
            capture.release()
            raise CameraAcquisitionError("NotReadableError", f"Camera device {index} is busy")

        logger.info(
            "Opened camera device %d (%dx%d requested, facing=%s)",
            index, width, height, facing,
        )
        return OpenCVStream(capture, index)

    def describe(self) -> Dict[str, str]:
        return {
            "protocol": self._origin.split(":", 1)[0] + ":",
            "origin": self._origin,
            "platform": f"{platform.system()} {platform.release()} / OpenCV {cv2.__version__}",
        }
