# =============================================================================
# Camera Vision Analyzer - Capture Pipeline
# =============================================================================
# Provides the CapturePipeline class that turns one camera frame into a
# compact JPEG suitable for a JSON request: the longer side is bounded
# (never upscaled, aspect ratio preserved) and the quality is fixed.
# =============================================================================

import base64
import io
import logging
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

Frame = Union[np.ndarray, Image.Image]


@dataclass(frozen=True)
class CapturedImage:
    """
    One encoded frame, owned by the request in flight.

    Attributes:
        data:    JPEG bytes.
        width:   Encoded width in pixels.
        height:  Encoded height in pixels.
        quality: Lossy quality factor in [0, 1].
    """

    data: bytes
    width: int
    height: int
    quality: float
    mime_type: str = "image/jpeg"

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def scaled_size(width: int, height: int, max_dimension: int):
    """
    Target size with the longer side at most ``max_dimension``.

    Returns:
        (width, height) rounded to whole pixels, never larger than the input.
    """
    scale = min(1.0, max_dimension / max(width, height))
    return max(1, round(width * scale)), max(1, round(height * scale))


class CapturePipeline:
    """
    Downscale-and-encode step between the camera and the relay.

    Args:
        max_dimension: Ceiling for the longer side, in pixels.
        quality:       JPEG quality factor in [0, 1].
    """

    def __init__(self, max_dimension: int = 800, quality: float = 0.7):
        self._max_dimension = max_dimension
        self._quality = quality

    def capture(self, frame: Optional[Frame]) -> Optional[CapturedImage]:
        """
        Encode one frame.

        Args:
            frame: RGB uint8 array (H, W, 3) or a PIL image.

        Returns:
            CapturedImage, or None when there is no usable frame.
        """
        image = self._to_image(frame)
        if image is None:
            return None

        width, height = scaled_size(image.width, image.height, self._max_dimension)
        if (width, height) != image.size:
            image = image.resize((width, height), Image.BILINEAR)

        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=round(self._quality * 100))
        data = buffer.getvalue()

        logger.debug(
            "Captured %dx%d JPEG (%d bytes, quality=%.2f)",
            width, height, len(data), self._quality,
        )
        return CapturedImage(data=data, width=width, height=height, quality=self._quality)

    def capture_from(self, session) -> Optional[CapturedImage]:
        """Capture the session's current frame; None when it is not streaming."""
        if not session.is_streaming:
            return None
        return self.capture(session.read_frame())

    @staticmethod
    def _to_image(frame: Optional[Frame]) -> Optional[Image.Image]:
        if frame is None:
            return None
        if isinstance(frame, Image.Image):
            image = frame
        else:
            array = np.asarray(frame)
            if array.ndim == 3 and array.shape[2] == 1:
                array = array[:, :, 0]
            if array.ndim not in (2, 3) or array.size == 0:
                return None
            if array.ndim == 3 and array.shape[2] not in (3, 4):
                return None
            image = Image.fromarray(array.astype(np.uint8, copy=False))
        if image.width == 0 or image.height == 0:
            return None
        return image.convert("RGB")
