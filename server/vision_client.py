# =============================================================================
# Camera Vision Analyzer - Vision Request Client
# =============================================================================
# Provides the VisionRequestClient class that sends one captured frame plus
# the instruction prompt to a hosted multimodal model and returns the raw
# text completion.
#
# The wire format is delegated to a transport so the same client serves:
#   - OpenAI-compatible chat completions (direct provider or AI gateway)
#   - The OpenAI "responses" API (input_text / input_image parts)
#
# Each call is a single attempt with one timeout bound; there are no retries.
# =============================================================================

import logging
from typing import Any, Dict, Optional

import requests

from shared.errors import ConfigError, NetworkError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)


class ChatCompletionsTransport:
    """
    OpenAI-compatible ``/v1/chat/completions`` wire format.

    The prompt and image travel as interleaved ``text`` and ``image_url``
    content parts of a single user message.
    """

    name = "chat_completions"

    def build_payload(
        self,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
        detail: str,
    ) -> Dict[str, Any]:
        return {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {
                            "type": "image_url",
                            "image_url": {"url": image_data_url, "detail": detail},
                        },
                    ],
                }
            ],
        }

    def extract_text(self, body: Dict[str, Any]) -> str:
        """
        Pull the completion text out of a chat completions body.

        ``message.content`` is usually a string but some providers return a
        list of typed parts; text parts are concatenated in order.
        """
        try:
            content = body["choices"][0]["message"].get("content")
        except (KeyError, IndexError, TypeError, AttributeError):
            return ""
        if isinstance(content, list):
            return "".join(
                part.get("text") or ""
                for part in content
                if isinstance(part, dict) and part.get("type") in ("text", "output_text")
            )
        return content if isinstance(content, str) else ""


class ResponsesTransport:
    """
    OpenAI ``/v1/responses`` wire format.

    Uses ``input_text`` / ``input_image`` parts and reads ``output_text``,
    falling back to walking the ``output`` item list.
    """

    name = "responses"

    def build_payload(
        self,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
        detail: str,
    ) -> Dict[str, Any]:
        return {
            "model": model,
            "max_output_tokens": max_tokens,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_data_url, "detail": detail},
                    ],
                }
            ],
        }

    def extract_text(self, body: Dict[str, Any]) -> str:
        if isinstance(body.get("output_text"), str):
            return body["output_text"]
        chunks = []
        for item in body.get("output") or []:
            if not isinstance(item, dict):
                continue
            for part in item.get("content") or []:
                if isinstance(part, dict) and part.get("type") == "output_text":
                    chunks.append(part.get("text") or "")
        return "".join(chunks)


# provider name -> (transport class, default endpoint, default model)
TRANSPORTS = {
    "gateway": (
        ChatCompletionsTransport,
        "https://gateway.ai.vercel.app/v1/chat/completions",
        "openai/gpt-4o-mini",
    ),
    "openai": (
        ChatCompletionsTransport,
        "https://api.openai.com/v1/chat/completions",
        "gpt-4o-mini",
    ),
    "responses": (
        ResponsesTransport,
        "https://api.openai.com/v1/responses",
        "gpt-4.1-mini",
    ),
}


class VisionRequestClient:
    """
    Single-attempt HTTP client for the upstream vision model.

    Args:
        transport:      Object with ``build_payload`` and ``extract_text``.
        endpoint_url:   Full URL of the model endpoint.
        model:          Model identifier sent in the payload.
        config:         Config instance; used to read the credential at
                        call time and for token/timeout/size limits.
        session:        Optional requests.Session (injected by tests).
    """

    def __init__(self, transport, endpoint_url: str, model: str, config, session: Optional[requests.Session] = None):
        self._transport = transport
        self._endpoint_url = endpoint_url
        self._model = model
        self._config = config
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    @property
    def model(self) -> str:
        return self._model

    @property
    def transport_name(self) -> str:
        return self._transport.name

    def send(self, image_data_url: str, prompt: str) -> str:
        """
        Send one frame and prompt to the model.

        Args:
            image_data_url: The frame as an image data URL.
            prompt:         Non-empty instruction text.

        Returns:
            The stripped text completion (possibly empty).

        Raises:
            ValidationError: Empty prompt or oversized image.
            ConfigError:     No credential configured; nothing is sent.
            UpstreamError:   Non-2xx status or undecodable body.
            NetworkError:    DNS, connection or timeout failure.
        """
        if not prompt:
            raise ValidationError("Prompt must not be empty")
        if len(image_data_url) > self._config.max_image_bytes:
            raise ValidationError(
                f"Image too large ({len(image_data_url)} > {self._config.max_image_bytes} bytes)"
            )

        api_key = self._config.read_api_key()
        if api_key is None:
            raise ConfigError(f"{self._config.api_key_env} is not configured")

        payload = self._transport.build_payload(
            model=self._model,
            prompt=prompt,
            image_data_url=image_data_url,
            max_tokens=self._config.max_tokens,
            detail=self._config.image_detail,
        )

        logger.info(
            "Calling %s (%s, model=%s) with image length %d",
            self._endpoint_url, self._transport.name, self._model, len(image_data_url),
        )
        try:
            response = self._session.post(
                self._endpoint_url,
                json=payload,
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=self._config.request_timeout_seconds,
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Request to %s failed: %s", self._endpoint_url, exc)
            raise NetworkError(str(exc)) from exc

        logger.info("Upstream status: %d", response.status_code)
        if not response.ok:
            logger.error("Upstream error body: %s", response.text)
            raise UpstreamError(response.status_code, response.text)

        try:
            body = response.json()
        except ValueError as exc:
            logger.error("Upstream returned non-JSON body: %s", response.text[:300])
            raise UpstreamError(response.status_code, response.text) from exc
        if not isinstance(body, dict):
            raise UpstreamError(response.status_code, response.text)

        text = self._transport.extract_text(body).strip()
        logger.info("Model reply preview: %s", text[:300])
        return text


def build_vision_client(config, session: Optional[requests.Session] = None) -> VisionRequestClient:
    """
    Build a VisionRequestClient for ``config.provider``.

    The configured ``endpoint_url`` and ``model`` win; when empty the
    provider defaults are used.

    Raises:
        ConfigError: If the provider name is unknown.
    """
    try:
        transport_cls, default_endpoint, default_model = TRANSPORTS[config.provider]
    except KeyError:
        raise ConfigError(
            f"Unknown provider {config.provider!r} (expected one of {sorted(TRANSPORTS)})"
        ) from None
    return VisionRequestClient(
        transport=transport_cls(),
        endpoint_url=config.endpoint_url or default_endpoint,
        model=config.model or default_model,
        config=config,
        session=session,
    )
