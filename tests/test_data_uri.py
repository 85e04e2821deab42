"""Tests for data URI helpers."""

from __future__ import annotations

import pytest

from citylens.errors import InvalidDataUriError
from citylens.report.data_uri import (
    encode_data_uri,
    is_image_media_type,
    parse_data_uri,
    summarize_data_uri,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_encode_data_uri_has_expected_shape() -> None:
    value = encode_data_uri(b"hello", "image/png")
    assert value == "data:image/png;base64,aGVsbG8="


def test_parse_data_uri_decodes_payload() -> None:
    parsed = parse_data_uri(encode_data_uri(PNG_BYTES, "image/PNG"))
    assert parsed.media_type == "image/png"
    assert parsed.decode() == PNG_BYTES


@pytest.mark.parametrize(
    "value",
    [
        "",
        "not a uri",
        "data:image/png,aGVsbG8=",
        "data:;base64,aGVsbG8=",
        "data:image/png;base64,***",
    ],
)
def test_parse_data_uri_rejects_malformed(value: str) -> None:
    with pytest.raises(InvalidDataUriError):
        parse_data_uri(value)


def test_encode_rejects_bare_media_type() -> None:
    with pytest.raises(InvalidDataUriError):
        encode_data_uri(b"x", "png")


@pytest.mark.parametrize(
    ("media_type", "expected"),
    [
        ("image/png", True),
        ("image/jpeg", True),
        ("IMAGE/GIF", True),
        ("application/pdf", False),
        ("text/plain", False),
        ("", False),
        (None, False),
    ],
)
def test_is_image_media_type(media_type: str | None, expected: bool) -> None:
    assert is_image_media_type(media_type) is expected


def test_summarize_data_uri_shortens_long_payloads() -> None:
    value = encode_data_uri(b"x" * 300, "image/png")
    summary = summarize_data_uri(value)
    assert summary.startswith("data:image/png;base64,")
    assert summary.endswith("chars)")
    assert len(summary) < len(value)
    assert summarize_data_uri("data:image/png;base64,eA==") == "data:image/png;base64,eA=="
