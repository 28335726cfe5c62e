# =============================================================================
# Camera Vision Analyzer - Camera Session State Machine
# =============================================================================
# Provides the CameraSession class that owns the camera stream and walks it
# through permission probing, acquisition and teardown:
#
#   idle -> permission_pending -> streaming -> idle (stop)
#   any  -> error (acquisition failure) -> permission_pending (user retry)
#
# Device access goes through a CameraPlatform; the session never retries on
# its own and reports every failure through the StatusBoard.
# =============================================================================

import logging
from enum import Enum
from typing import Dict, Optional, Protocol
from urllib.parse import urlparse

import numpy as np

from analyzer.messages import get_messages, not_allowed_help, permission_how_to
from analyzer.status import StatusBoard, StatusKind

logger = logging.getLogger(__name__)

LOOPBACK_HOSTS = ("localhost", "127.0.0.1", "::1")


class Facing(str, Enum):
    ENVIRONMENT = "environment"
    USER = "user"


class SessionState(str, Enum):
    IDLE = "idle"
    PERMISSION_PENDING = "permission_pending"
    STREAMING = "streaming"
    ERROR = "error"


class PermissionState(str, Enum):
    UNKNOWN = "unknown"
    GRANTED = "granted"
    DENIED = "denied"
    PROMPT = "prompt"


class CameraErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    DEVICE_NOT_FOUND = "device_not_found"
    DEVICE_BUSY = "device_busy"
    CONSTRAINT_UNSATISFIABLE = "constraint_unsatisfiable"
    INSECURE_CONTEXT = "insecure_context"
    UNSUPPORTED_BROWSER = "unsupported_browser"
    UNKNOWN = "unknown"


# Platform error names (DOMException-style) -> taxonomy
_ERROR_NAMES = {
    "NotAllowedError": CameraErrorKind.PERMISSION_DENIED,
    "SecurityError": CameraErrorKind.PERMISSION_DENIED,
    "NotFoundError": CameraErrorKind.DEVICE_NOT_FOUND,
    "NotReadableError": CameraErrorKind.DEVICE_BUSY,
    "OverconstrainedError": CameraErrorKind.CONSTRAINT_UNSATISFIABLE,
}

_ERROR_MESSAGE_IDS = {
    CameraErrorKind.DEVICE_NOT_FOUND: "not_found",
    CameraErrorKind.DEVICE_BUSY: "not_readable",
    CameraErrorKind.CONSTRAINT_UNSATISFIABLE: "overconstrained",
    CameraErrorKind.UNKNOWN: "unknown_error",
}


class CameraAcquisitionError(Exception):
    """
    Failure reported by a CameraPlatform while opening a stream.

    Args:
        name:    Platform error name, e.g. "NotAllowedError".
        message: Free-form detail for logs.
    """

    def __init__(self, name: str, message: str = ""):
        self.name = name
        super().__init__(message or name)


def classify_error(name: str) -> CameraErrorKind:
    """Map a platform error name onto the camera error taxonomy."""
    return _ERROR_NAMES.get(name, CameraErrorKind.UNKNOWN)


def is_secure_origin(url: str) -> bool:
    """
    Whether an origin counts as a secure context.

    HTTPS origins and loopback hosts qualify; everything else does not.
    """
    parsed = urlparse(url)
    if parsed.scheme == "https":
        return True
    return (parsed.hostname or "") in LOOPBACK_HOSTS


class CameraStream(Protocol):
    def read_frame(self) -> Optional[np.ndarray]:
        ...

    def stop(self) -> None:
        ...


class CameraPlatform(Protocol):
    """Device-side collaborator used by CameraSession."""

    family: str

    def supports_media(self) -> bool:
        ...

    def is_secure_context(self) -> bool:
        ...

    def in_embedded_frame(self) -> bool:
        ...

    def supports_permission_query(self) -> bool:
        ...

    def query_permission(self) -> str:
        ...

    def open_stream(self, facing: str, width: int, height: int) -> CameraStream:
        ...

    def describe(self) -> Dict[str, str]:
        ...


class CameraSession:
    """
    Camera permission/stream state machine.

    Args:
        platform:     CameraPlatform giving access to the device.
        status:       StatusBoard receiving status and overlay updates.
        language:     Language of user-facing messages.
        width_hint:   Preferred capture width passed to the platform.
        height_hint:  Preferred capture height passed to the platform.
    """

    def __init__(
        self,
        platform: CameraPlatform,
        status: StatusBoard,
        language: str = "es",
        width_hint: int = 1280,
        height_hint: int = 720,
    ):
        self._platform = platform
        self._status = status
        self._language = language
        self._messages = get_messages(language)
        self._width_hint = width_hint
        self._height_hint = height_hint
        self._stream: Optional[CameraStream] = None

        self.state = SessionState.IDLE
        self.facing = Facing.ENVIRONMENT
        self.permission_state = PermissionState.UNKNOWN
        self.last_error: Optional[CameraErrorKind] = None

        self._status.set_status(self._messages["idle"], StatusKind.OK)
        self._status.show_overlay(self._messages["ready_title"], self._messages["ready_text"])

    @property
    def is_streaming(self) -> bool:
        return self.state == SessionState.STREAMING

    # -----------------------------------------------------------------
    # Transitions
    # -----------------------------------------------------------------

    def activate(self, facing: Optional[Facing] = None) -> bool:
        """
        Probe permission and open the camera stream.

        Args:
            facing: Preferred sensor; defaults to the current facing.

        Returns:
            True when the session ended up streaming.
        """
        if facing is not None:
            self.facing = Facing(facing)

        self.state = SessionState.PERMISSION_PENDING
        self.last_error = None
        self._status.set_status(self._messages["requesting_permission"])

        if not self._platform.supports_media():
            return self._fail(
                CameraErrorKind.UNSUPPORTED_BROWSER,
                self._messages["unsupported_status"],
                self._messages["unsupported_title"],
                self._messages["unsupported_text"],
            )

        if not self._platform.is_secure_context():
            return self._fail(
                CameraErrorKind.INSECURE_CONTEXT,
                self._messages["insecure_status"],
                self._messages["insecure_title"],
                self._messages["insecure_text"],
            )

        if self._platform.in_embedded_frame():
            self._status.set_status(self._messages["embedded_warning"], StatusKind.WARN)

        self.permission_state = self._probe_permission()
        if self.permission_state == PermissionState.DENIED:
            message = not_allowed_help(self._language, self._platform.family)
            return self._fail(
                CameraErrorKind.PERMISSION_DENIED, message, self._messages["blocked_title"], message
            )

        self._release()
        try:
            self._stream = self._platform.open_stream(
                self.facing.value, self._width_hint, self._height_hint
            )
        except CameraAcquisitionError as exc:
            logger.error("Camera acquisition failed: %s (%s)", exc.name, exc)
            kind = classify_error(exc.name)
            if kind == CameraErrorKind.PERMISSION_DENIED:
                self.permission_state = PermissionState.DENIED
            message = self._remediation(kind)
            return self._fail(kind, message, self._messages["start_failed_title"], message)

        self.state = SessionState.STREAMING
        self.permission_state = PermissionState.GRANTED
        logger.info("Camera streaming (facing=%s)", self.facing.value)
        self._status.set_status(self._messages["camera_ready"], StatusKind.OK)
        self._status.hide_overlay()
        return True

    def deactivate(self) -> None:
        """Release the stream (safe to call in any state) and go idle."""
        self._release()
        self.state = SessionState.IDLE
        self._status.set_status(self._messages["camera_stopped"], StatusKind.OK)
        self._status.show_overlay(self._messages["stopped_title"], self._messages["stopped_text"])

    def switch_facing(self, facing: Facing) -> bool:
        """
        Select the other sensor; restarts the stream when streaming.

        Returns:
            True if the session is streaming afterwards.
        """
        self.facing = Facing(facing)
        if self.is_streaming:
            return self.activate(self.facing)
        return False

    def read_frame(self) -> Optional[np.ndarray]:
        """Current frame, or None when not streaming or the device gave none."""
        if not self.is_streaming or self._stream is None:
            return None
        return self._stream.read_frame()

    # -----------------------------------------------------------------
    # Guidance
    # -----------------------------------------------------------------

    def show_how_to(self) -> str:
        message = permission_how_to(self._language, self._platform.family)
        self._status.set_status(message, StatusKind.WARN)
        self._status.show_overlay(self._messages["howto_title"], message)
        return message

    def diagnostics(self) -> Dict[str, str]:
        """Environment facts useful when the camera will not start."""
        info = dict(self._platform.describe())
        info["secure"] = "OK" if self._platform.is_secure_context() else "NO (HTTPS/localhost)"
        info["embedded"] = "yes" if self._platform.in_embedded_frame() else "no"
        info["permissions_api"] = "yes" if self._platform.supports_permission_query() else "no"
        info["state"] = self.state.value
        info["facing"] = self.facing.value
        return info

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _probe_permission(self) -> PermissionState:
        if not self._platform.supports_permission_query():
            return PermissionState.UNKNOWN
        try:
            return PermissionState(self._platform.query_permission())
        except Exception:
            logger.debug("Permission query failed; treating as unknown", exc_info=True)
            return PermissionState.UNKNOWN

    def _remediation(self, kind: CameraErrorKind) -> str:
        if kind == CameraErrorKind.PERMISSION_DENIED:
            return not_allowed_help(self._language, self._platform.family)
        return self._messages[_ERROR_MESSAGE_IDS[kind]]

    def _fail(self, kind: CameraErrorKind, status: str, title: str, text: str) -> bool:
        self._release()
        self.state = SessionState.ERROR
        self.last_error = kind
        self._status.set_status(status, StatusKind.ERR)
        self._status.show_overlay(title, text)
        return False

    def _release(self) -> None:
        if self._stream is None:
            return
        try:
            self._stream.stop()
        finally:
            self._stream = None
            logger.info("Camera stream released.")
