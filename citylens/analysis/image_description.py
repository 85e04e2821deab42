"""Image description service: one vision-model round trip per photo."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from citylens.analysis.prompts import (
    IMAGE_DESCRIPTION_SYSTEM_PROMPT,
    IMAGE_DESCRIPTION_USER_PROMPT,
)
from citylens.errors import EmptyAnalysisResultError
from citylens.providers.base import VisionProvider
from citylens.report.data_uri import parse_data_uri, summarize_data_uri

logger = logging.getLogger(__name__)


class GenerateImageDescriptionInput(BaseModel):
    """Input accepted by :func:`generate_image_description`."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    photo_data_uri: str = Field(
        ...,
        alias="photoDataUri",
        description=(
            "A photo of the urban issue, as a data URI that must include a MIME type and "
            "use Base64 encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'."
        ),
    )

    @field_validator("photo_data_uri")
    @classmethod
    def _check_data_uri(cls, value: str) -> str:
        # InvalidDataUriError is a ValueError, so pydantic reports it as a field error.
        return str(parse_data_uri(value))


class GenerateImageDescriptionOutput(BaseModel):
    """Output produced by :func:`generate_image_description`."""

    description: str = Field(
        ...,
        description="A textual description of the image, highlighting potential urban issues.",
    )


def generate_image_description(
    payload: GenerateImageDescriptionInput,
    provider: VisionProvider,
) -> GenerateImageDescriptionOutput:
    """Describe the photo with the configured provider.

    Raises :class:`EmptyAnalysisResultError` when the model response does not
    carry a non-blank ``description``. Provider errors propagate unchanged.
    """
    logger.info(
        "Requesting image description for %s", summarize_data_uri(payload.photo_data_uri)
    )
    raw = provider.generate_json(
        IMAGE_DESCRIPTION_SYSTEM_PROMPT,
        IMAGE_DESCRIPTION_USER_PROMPT,
        image_data_uri=payload.photo_data_uri,
    )
    try:
        output = GenerateImageDescriptionOutput.model_validate(raw)
    except ValidationError as exc:
        raise EmptyAnalysisResultError("AI did not return a description.") from exc
    if not output.description.strip():
        raise EmptyAnalysisResultError("AI did not return a description.")
    return output
