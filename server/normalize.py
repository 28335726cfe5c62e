# =============================================================================
# Camera Vision Analyzer - Response Normalizer
# =============================================================================
# Turns the model's free-text reply into an AnalysisResult. The model is told
# to answer with bare JSON but routinely wraps it in prose or markdown fences,
# so parsing degrades in three steps:
#   1. Parse the whole reply as JSON.
#   2. Parse the widest {...} span (first "{" to last "}").
#   3. Use the reply verbatim as the description.
# The function never raises; a degraded result is still a complete result.
# =============================================================================

import json
import logging
from typing import Any, Optional

from shared.schemas import AnalysisResult

logger = logging.getLogger(__name__)


def _coerce(value: Any) -> str:
    """Render a JSON value as display text; null becomes empty."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


def _parse_object(text: str) -> Optional[dict]:
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _from_object(obj: dict) -> AnalysisResult:
    return AnalysisResult(
        description=_coerce(obj.get("description")),
        recommendations=_coerce(obj.get("recommendations")),
    )


def normalize(raw_text: str) -> AnalysisResult:
    """
    Extract description and recommendations from a raw model reply.

    Args:
        raw_text: The model's text completion, possibly empty.

    Returns:
        AnalysisResult with both fields set to strings.
    """
    if not raw_text:
        return AnalysisResult()

    obj = _parse_object(raw_text)
    if obj is not None:
        return _from_object(obj)

    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start != -1 and end > start:
        obj = _parse_object(raw_text[start:end + 1])
        if obj is not None:
            logger.debug("Recovered JSON object embedded in reply (chars %d-%d)", start, end)
            return _from_object(obj)

    logger.debug("No JSON object in reply; using raw text as description")
    return AnalysisResult(description=raw_text, recommendations="")
