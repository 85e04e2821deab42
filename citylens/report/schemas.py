"""Report form shape and validation rules."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Final

from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

MIN_DESCRIPTION_LENGTH: Final[int] = 20
MIN_LOCATION_LENGTH: Final[int] = 5

DESCRIPTION_FIELD: Final[str] = "description"
LOCATION_FIELD: Final[str] = "location"
EMAIL_FIELD: Final[str] = "email"
COMMENTS_FIELD: Final[str] = "comments"
LOCAL_POLICE_FIELD: Final[str] = "send_to_local_police"
CITY_HALL_FIELD: Final[str] = "send_to_city_hall"


class FieldErrorReason(str, Enum):
    """Why a report form field failed validation."""

    description_too_short = "description_too_short"
    location_too_short = "location_too_short"
    invalid_email = "invalid_email"
    no_recipient = "no_recipient"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: Final[dict[FieldErrorReason, str]] = {
    FieldErrorReason.description_too_short: (
        f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters."
    ),
    FieldErrorReason.location_too_short: (
        f"Photo location must be at least {MIN_LOCATION_LENGTH} characters."
    ),
    FieldErrorReason.invalid_email: "Please enter a valid email address.",
    FieldErrorReason.no_recipient: (
        "Please select at least one recipient (Local Police or City Hall)."
    ),
}


@dataclass(frozen=True)
class ReportFormValues:
    """Candidate values of the report form."""

    description: str = ""
    location: str = ""
    email: str = ""
    comments: str = ""
    send_to_local_police: bool = False
    send_to_city_hall: bool = False

    @property
    def recipients(self) -> tuple[str, ...]:
        selected: list[str] = []
        if self.send_to_local_police:
            selected.append("local_police")
        if self.send_to_city_hall:
            selected.append("city_hall")
        return tuple(selected)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def is_valid_email(value: str) -> bool:
    """Return whether ``value`` is a bare, syntactically valid email address.

    Display-name forms such as ``Jane <jane@example.com>`` and values with
    surrounding or embedded whitespace are rejected.
    """
    if any(char.isspace() or char in "<>" for char in value):
        return False
    try:
        validate_email(value)
    except PydanticCustomError:
        return False
    return True


def validate_field(values: ReportFormValues, field: str) -> FieldErrorReason | None:
    """Evaluate the rule attached to a single field."""
    if field == DESCRIPTION_FIELD and len(values.description) < MIN_DESCRIPTION_LENGTH:
        return FieldErrorReason.description_too_short
    if field == LOCATION_FIELD and len(values.location) < MIN_LOCATION_LENGTH:
        return FieldErrorReason.location_too_short
    if field == EMAIL_FIELD and values.email != "" and not is_valid_email(values.email):
        return FieldErrorReason.invalid_email
    if field == LOCAL_POLICE_FIELD and not (
        values.send_to_local_police or values.send_to_city_hall
    ):
        # The recipients rule spans both checkboxes; it is reported on the first one.
        return FieldErrorReason.no_recipient
    return None


def validate_report_form(values: ReportFormValues) -> dict[str, FieldErrorReason]:
    """Return a mapping of field name to error reason; empty when the form is valid."""
    errors: dict[str, FieldErrorReason] = {}
    for field in (DESCRIPTION_FIELD, LOCATION_FIELD, EMAIL_FIELD, LOCAL_POLICE_FIELD):
        reason = validate_field(values, field)
        if reason is not None:
            errors[field] = reason
    return errors


def error_messages(errors: dict[str, FieldErrorReason]) -> dict[str, str]:
    """Render field errors as display messages."""
    return {field: reason.message for field, reason in errors.items()}
