# =============================================================================
# Camera Vision Analyzer - Prompt Builder
# =============================================================================
# Fixed instruction strings, one per supported language, asking the vision
# model for a strict JSON-only reply with exactly two string fields:
# "description" and "recommendations". The reply must use the requested
# language in an informal, conversational register.
# =============================================================================

from shared.errors import ValidationError

SUPPORTED_LANGUAGES = ("es", "en", "pt")

_JSON_SHAPE = (
    "{\n"
    '  "description": "%s",\n'
    '  "recommendations": "%s"\n'
    "}"
)

_PROMPTS = {
    "es": (
        "Sos un asistente cercano y buena onda. Analiza la imagen que te mando. "
        "Responde SOLAMENTE con un JSON puro (sin markdown, sin backticks, sin texto extra). "
        "El JSON tiene que tener estos dos campos exactos:\n"
        + _JSON_SHAPE % (
            "Descripcion detallada de lo que ves (2-4 oraciones, en espanol informal)",
            "Recomendaciones utiles y complementarias basadas en lo que ves (en espanol informal)",
        )
        + "\nLas recomendaciones tienen que ser complementos tipicos. "
        "Por ejemplo: si ves fideos, sugeri salsa, queso rallado y pan; "
        "si ves cafe, sugeri algo dulce para acompanar."
    ),
    "en": (
        "You are a friendly, laid-back assistant. Analyze the image I am sending you. "
        "Reply ONLY with raw JSON (no markdown, no backticks, no extra text). "
        "The JSON must have exactly these two fields:\n"
        + _JSON_SHAPE % (
            "Detailed description of what you see (2-4 sentences, casual English)",
            "Useful, complementary recommendations based on what you see (casual English)",
        )
        + "\nRecommendations should be typical complements. "
        "For example: if you see pasta, suggest sauce, grated cheese and bread; "
        "if you see coffee, suggest a pastry to go with it."
    ),
    "pt": (
        "Voce e um assistente simpatico e descontraido. Analise a imagem que estou enviando. "
        "Responda SOMENTE com um JSON puro (sem markdown, sem crases, sem texto extra). "
        "O JSON deve ter exatamente estes dois campos:\n"
        + _JSON_SHAPE % (
            "Descricao detalhada do que voce ve (2-4 frases, em portugues informal)",
            "Recomendacoes uteis e complementares com base no que voce ve (em portugues informal)",
        )
        + "\nAs recomendacoes devem ser complementos tipicos. "
        "Por exemplo: se vir macarrao, sugira molho, queijo ralado e pao; "
        "se vir cafe, sugira algo doce para acompanhar."
    ),
}


def build_prompt(language: str) -> str:
    """
    Return the instruction text for the given reply language.

    Args:
        language: One of SUPPORTED_LANGUAGES.

    Returns:
        The fixed prompt string for that language.

    Raises:
        ValidationError: If the language is not supported.
    """
    try:
        return _PROMPTS[language]
    except KeyError:
        raise ValidationError(f"Unsupported language: {language!r}") from None
