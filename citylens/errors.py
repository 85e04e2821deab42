"""Exception hierarchy shared by the report workflow and its adapters."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from citylens.report.schemas import FieldErrorReason


class CityLensError(RuntimeError):
    """Base class for recoverable CityLens failures."""


class InvalidFileTypeError(CityLensError):
    """Raised when a selected or dropped file is not an image."""

    def __init__(self, media_type: str) -> None:
        super().__init__("Please upload an image file.")
        self.media_type = media_type


class InvalidDataUriError(CityLensError, ValueError):
    """Raised when a string is not a base64 data URI."""


class EmptyAnalysisResultError(CityLensError):
    """Raised when the model response carries no usable description."""


class ActionUnavailableError(CityLensError):
    """Raised when a controller action is not allowed in the current state."""


class DraftNotFoundError(CityLensError, KeyError):
    """Raised when a draft session id is unknown."""


class GeolocationErrorCode(str, Enum):
    """Failure reasons reported by a location provider."""

    permission_denied = "permission_denied"
    position_unavailable = "position_unavailable"
    timeout = "timeout"
    unsupported = "unsupported"
    unknown = "unknown"


class GeolocationError(CityLensError):
    """Raised when the current position cannot be resolved."""

    def __init__(self, code: GeolocationErrorCode, detail: str | None = None) -> None:
        super().__init__(detail or code.value)
        self.code = code


class ReportValidationError(CityLensError):
    """Raised when a draft fails form validation."""

    def __init__(self, errors: Mapping[str, FieldErrorReason]) -> None:
        fields = ", ".join(sorted(errors))
        super().__init__(f"Report validation failed for: {fields}")
        self.errors = dict(errors)
