# =============================================================================
# Camera Vision Analyzer - Relay HTTP Client
# =============================================================================
# Provides the RelayClient class that POSTs a captured frame (as a data URL)
# to the relay's /api/vision endpoint and turns the reply into an
# AnalysisResult. One attempt per capture; re-capturing is the retry.
# =============================================================================

import logging

import requests

from shared.errors import NetworkError, RelayError
from shared.schemas import AnalysisResult

logger = logging.getLogger(__name__)


class RelayClient:
    """
    HTTP client for the analysis relay.

    Args:
        server_url: Base URL of the relay (e.g., "http://127.0.0.1:8000").
        timeout:    Seconds to wait for the whole request.
    """

    def __init__(self, server_url: str, timeout: float = 60.0):
        self._server_url = server_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    def analyze(self, image_data_url: str, language: str) -> AnalysisResult:
        """
        Ask the relay to describe one frame.

        Args:
            image_data_url: The frame as an image data URL.
            language:       Reply language ("es", "en" or "pt").

        Returns:
            AnalysisResult with both fields as strings.

        Raises:
            RelayError:   The relay answered with a non-success status.
            NetworkError: The relay could not be reached.
        """
        url = f"{self._server_url}/api/vision"
        payload = {"image_data_url": image_data_url, "language": language}

        try:
            response = self._session.post(url, json=payload, timeout=self._timeout)
        except requests.exceptions.RequestException as exc:
            logger.error("Relay request to %s failed: %s", url, exc)
            raise NetworkError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        result = AnalysisResult(
            description=str(body.get("description") or ""),
            recommendations=str(body.get("recommendations") or ""),
        )

        if not response.ok:
            message = body.get("error") or f"HTTP {response.status_code}"
            logger.warning("Relay answered %d: %s", response.status_code, message)
            raise RelayError(str(message), response.status_code, result)

        logger.info(
            "Relay answered %d (%d chars description, %d chars recommendations)",
            response.status_code, len(result.description), len(result.recommendations),
        )
        return result
