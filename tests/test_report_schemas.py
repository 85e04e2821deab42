"""Tests for report form validation rules."""

from __future__ import annotations

import pytest

from citylens.report.schemas import (
    MIN_DESCRIPTION_LENGTH,
    MIN_LOCATION_LENGTH,
    FieldErrorReason,
    ReportFormValues,
    error_messages,
    is_valid_email,
    validate_field,
    validate_report_form,
)


def _valid(**overrides: object) -> ReportFormValues:
    values: dict[str, object] = {
        "description": "A pothole is visible in the center of the road.",
        "location": "Main St & Park Ave",
        "email": "",
        "comments": "",
        "send_to_local_police": False,
        "send_to_city_hall": True,
    }
    values.update(overrides)
    return ReportFormValues(**values)  # type: ignore[arg-type]


def test_valid_form_has_no_errors() -> None:
    assert validate_report_form(_valid()) == {}


def test_description_boundary() -> None:
    assert validate_report_form(_valid(description="x" * MIN_DESCRIPTION_LENGTH)) == {}
    errors = validate_report_form(_valid(description="x" * (MIN_DESCRIPTION_LENGTH - 1)))
    assert errors == {"description": FieldErrorReason.description_too_short}


def test_location_boundary() -> None:
    assert validate_report_form(_valid(location="x" * MIN_LOCATION_LENGTH)) == {}
    errors = validate_report_form(_valid(location="Main"))
    assert errors == {"location": FieldErrorReason.location_too_short}


def test_lengths_count_whitespace_without_trimming() -> None:
    """Whitespace counts toward the minimum lengths."""
    assert validate_field(_valid(location="     "), "location") is None


def test_invalid_email_is_rejected() -> None:
    errors = validate_report_form(_valid(email="not-an-email"))
    assert errors == {"email": FieldErrorReason.invalid_email}
    assert errors["email"].message == "Please enter a valid email address."


@pytest.mark.parametrize(
    "email",
    [
        "John <john@example.com>",
        "<john@example.com>",
        "john@example.com ",
        " john@example.com",
        "john @example.com",
        "john@example.com\n",
    ],
)
def test_display_names_and_whitespace_are_rejected(email: str) -> None:
    assert not is_valid_email(email)
    errors = validate_report_form(_valid(email=email, send_to_local_police=True))
    assert errors == {"email": FieldErrorReason.invalid_email}


def test_empty_email_is_optional() -> None:
    assert validate_report_form(_valid(email="")) == {}
    assert validate_report_form(_valid(email="resident@example.org")) == {}


def test_missing_recipient_is_reported_on_local_police() -> None:
    errors = validate_report_form(_valid(send_to_local_police=False, send_to_city_hall=False))
    assert errors == {"send_to_local_police": FieldErrorReason.no_recipient}
    assert error_messages(errors) == {
        "send_to_local_police": (
            "Please select at least one recipient (Local Police or City Hall)."
        )
    }


@pytest.mark.parametrize(
    ("police", "city_hall", "expected"),
    [
        (True, False, ("local_police",)),
        (False, True, ("city_hall",)),
        (True, True, ("local_police", "city_hall")),
        (False, False, ()),
    ],
)
def test_recipients(police: bool, city_hall: bool, expected: tuple[str, ...]) -> None:
    values = _valid(send_to_local_police=police, send_to_city_hall=city_hall)
    assert values.recipients == expected


def test_all_errors_reported_together() -> None:
    errors = validate_report_form(ReportFormValues(email="nope"))
    assert set(errors) == {"description", "location", "email", "send_to_local_police"}


def test_comments_are_never_validated() -> None:
    assert validate_field(_valid(comments=""), "comments") is None
    assert validate_field(_valid(comments="x" * 5000), "comments") is None


def test_is_valid_email() -> None:
    assert is_valid_email("jane.doe@example.com")
    assert not is_valid_email("jane.doe@")
    assert not is_valid_email("@example.com")


def test_error_messages_use_minimum_lengths() -> None:
    assert FieldErrorReason.description_too_short.message == (
        "Description must be at least 20 characters."
    )
    assert FieldErrorReason.location_too_short.message == (
        "Photo location must be at least 5 characters."
    )
