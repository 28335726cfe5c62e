# =============================================================================
# Camera Vision Analyzer - Shared Error Taxonomy
# =============================================================================
# Exceptions raised by the vision request path (server side) and the relay
# client (analyzer side). Each maps to one user-visible outcome; none is
# retried automatically.
# =============================================================================

from typing import Optional


class VisionError(Exception):
    """Base class for all analysis-path failures."""


class ConfigError(VisionError):
    """The inference credential (or another required setting) is missing."""


class ValidationError(VisionError):
    """Client input is malformed and must be fixed by the caller."""


class UpstreamError(VisionError):
    """
    The inference provider answered with a non-success status.

    Args:
        status_code: HTTP status returned by the provider (0 when the body,
                     not the status, was unusable).
        body:        Raw response body, kept for diagnostics.
    """

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Upstream error {status_code}")


class NetworkError(VisionError):
    """Transport failure: DNS, connection reset, or timeout."""


class RelayError(VisionError):
    """
    The relay server answered the analyzer with a non-success status.

    Args:
        message:     The relay's ``error`` field, or ``HTTP <status>``.
        status_code: HTTP status of the relay reply.
        result:      Partial description/recommendations carried in the
                     error body (usually empty).
    """

    def __init__(self, message: str, status_code: int, result: Optional[object] = None):
        self.status_code = status_code
        self.result = result
        super().__init__(message)
