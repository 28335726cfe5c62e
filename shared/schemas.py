# =============================================================================
# Camera Vision Analyzer - Shared API Schemas
# =============================================================================
# Pydantic models defining the data contracts between the analyzer client
# and the relay server. These schemas are used for request/response
# validation and serialization across the HTTP API boundary.
#
# The analyzer sends a single downscaled JPEG frame as a data URL; the relay
# answers with exactly two text fields.
# =============================================================================

from typing import Literal

from pydantic import BaseModel, Field, field_validator

DATA_URL_IMAGE_PREFIX = "data:image/"

Language = Literal["es", "en", "pt"]


class AnalysisRequest(BaseModel):
    """
    Payload sent from the analyzer to the relay for one captured frame.

    Attributes:
        image_data_url: The frame as a ``data:image/...;base64,...`` string.
        language:       Language the model must answer in.
    """

    image_data_url: str = Field(..., description="Frame encoded as an image data URL")
    language: Language = Field(default="es", description="Reply language")

    @field_validator("image_data_url")
    @classmethod
    def _must_be_image_data_url(cls, value: str) -> str:
        if not value.startswith(DATA_URL_IMAGE_PREFIX):
            raise ValueError("image_data_url must start with data:image/")
        return value


class AnalysisResult(BaseModel):
    """
    Normalized model reply.

    Both fields are always strings; an unrecoverable field is empty.

    Attributes:
        description:     What the model sees in the frame.
        recommendations: Complementary suggestions based on the frame.
    """

    description: str = ""
    recommendations: str = ""


class ErrorResponse(AnalysisResult):
    """
    Error body returned by the relay.

    Carries empty analysis fields so clients can render it like a result.

    Attributes:
        error: Human-readable failure reason.
    """

    error: str
