# =============================================================================
# Camera Vision Analyzer - FastAPI Relay Application
# =============================================================================
# Defines the HTTP API endpoints for receiving a captured frame from the
# analyzer, forwarding it with the instruction prompt to the hosted vision
# model, normalizing the reply into description/recommendations, and
# answering CORS preflights for known external origins.
# =============================================================================

import json
import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

import pydantic
from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from config import get_config
from server.normalize import normalize
from server.prompts import build_prompt
from server.vision_client import VisionRequestClient, build_vision_client
from shared.errors import ConfigError, NetworkError, UpstreamError, ValidationError
from shared.schemas import AnalysisRequest, AnalysisResult, ErrorResponse

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Global reference populated during lifespan startup (or on first use)
# ---------------------------------------------------------------------------
_vision_client: Optional[VisionRequestClient] = None


def _get_vision_client() -> VisionRequestClient:
    global _vision_client
    if _vision_client is None:
        _vision_client = build_vision_client(get_config())
    return _vision_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    On startup builds the upstream client for the configured provider and
    warns when the credential is missing (requests will fail with 500 until
    it is set; it is re-read on every call).
    """
    config = get_config()
    client = _get_vision_client()
    logger.info(
        "Relay ready: provider=%s transport=%s model=%s",
        config.provider, client.transport_name, client.model,
    )
    if config.read_api_key() is None:
        logger.warning("%s is missing; /api/vision will answer 500", config.api_key_env)
    yield
    logger.info("Shutting down relay...")


# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Camera Vision Analyzer Relay",
    description=(
        "Receives a captured camera frame as an image data URL, asks a hosted "
        "vision-language model for a description and complementary "
        "recommendations, and returns both as plain text fields."
    ),
    version="1.0.0",
    lifespan=lifespan,
)


def _cors_headers(request: Request) -> Dict[str, str]:
    """
    CORS headers for the request's Origin, if that origin is allowed.

    ``*`` in ``allowed_origins`` allows every origin.
    """
    allowed = get_config().allowed_origins
    origin = request.headers.get("origin")
    if "*" in allowed:
        allow_origin = "*"
    elif origin and origin in allowed:
        allow_origin = origin
    else:
        return {}
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Vary": "Origin",
    }


def _error(status_code: int, message: str, request: Request, with_fields: bool = True) -> JSONResponse:
    if with_fields:
        content = ErrorResponse(error=message).model_dump()
    else:
        content = {"error": message}
    return JSONResponse(status_code=status_code, content=content, headers=_cors_headers(request))


@app.get("/health")
def health_check():
    """
    Health check endpoint.

    Reports the configured provider and whether a credential is present.
    """
    config = get_config()
    client = _get_vision_client()
    return {
        "status": "ok",
        "provider": config.provider,
        "model": client.model,
        "credential_configured": config.read_api_key() is not None,
    }


@app.options("/api/vision")
def vision_preflight(request: Request):
    """Answer the CORS preflight for POST /api/vision."""
    return Response(status_code=204, headers=_cors_headers(request))


@app.post("/api/vision", response_model=AnalysisResult)
async def analyze_image(request: Request):
    """
    Analyze one captured frame.

    Validates the JSON body, builds the prompt for the requested language,
    makes a single upstream call and normalizes the reply.

    Returns:
        200 with description/recommendations, 400 on bad input, 500 when the
        credential is missing, 502 when the upstream call fails.
    """
    config = get_config()

    try:
        body = json.loads(await request.body())
    except ValueError:
        return _error(400, "Invalid JSON body", request, with_fields=False)
    if not isinstance(body, dict):
        return _error(400, "Invalid JSON body", request, with_fields=False)

    if body.get("language") is None:
        body["language"] = config.default_language
    try:
        payload = AnalysisRequest.model_validate(body)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "body"
        message = f"Invalid {field}: {first.get('msg', 'invalid value')}"
        logger.info("Rejected request: %s", message)
        return _error(400, message, request, with_fields=False)

    logger.info(
        "Analyzing image (length=%d, language=%s)",
        len(payload.image_data_url), payload.language,
    )

    try:
        prompt = build_prompt(payload.language)
        raw_text = await run_in_threadpool(
            _get_vision_client().send, payload.image_data_url, prompt
        )
    except ValidationError as exc:
        return _error(400, str(exc), request, with_fields=False)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return _error(500, str(exc), request)
    except UpstreamError as exc:
        detail = f": {exc.body[:300]}" if exc.body else ""
        return _error(502, f"Upstream error {exc.status_code}{detail}", request)
    except NetworkError as exc:
        return _error(502, f"Network error: {exc}", request)

    result = normalize(raw_text)
    return JSONResponse(content=result.model_dump(), headers=_cors_headers(request))

