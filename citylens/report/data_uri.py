"""Conversion between raw image bytes and ``data:<mimetype>;base64,<data>`` strings."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Final

from citylens.errors import InvalidDataUriError

IMAGE_MEDIA_PREFIX: Final[str] = "image/"

DATA_URI_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^data:(?P<media_type>[A-Za-z0-9!#$&^_.+-]+/[A-Za-z0-9!#$&^_.+-]+);base64,(?P<payload>.+)$",
    flags=re.DOTALL,
)


@dataclass(frozen=True)
class DataUri:
    """A parsed base64 data URI."""

    media_type: str
    payload: str

    def decode(self) -> bytes:
        """Return the decoded binary content."""
        return base64.b64decode(self.payload, validate=True)

    def __str__(self) -> str:
        return f"data:{self.media_type};base64,{self.payload}"


def is_image_media_type(media_type: str | None) -> bool:
    """Return whether a declared media type names an image."""
    if not media_type:
        return False
    return media_type.strip().lower().startswith(IMAGE_MEDIA_PREFIX)


def encode_data_uri(content: bytes, media_type: str) -> str:
    """Render binary content as a self-describing data URI."""
    cleaned = media_type.strip().lower()
    if "/" not in cleaned:
        raise InvalidDataUriError(f"'{media_type}' is not a media type.")
    payload = base64.b64encode(content).decode("ascii")
    return f"data:{cleaned};base64,{payload}"


def parse_data_uri(value: str) -> DataUri:
    """Parse and validate a base64 data URI."""
    match = DATA_URI_PATTERN.match(value.strip())
    if match is None:
        raise InvalidDataUriError(
            "Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'."
        )
    parsed = DataUri(media_type=match.group("media_type").lower(), payload=match.group("payload"))
    try:
        parsed.decode()
    except (binascii.Error, ValueError) as exc:
        raise InvalidDataUriError("Data URI payload is not valid base64.") from exc
    return parsed


def summarize_data_uri(value: str, *, keep: int = 24) -> str:
    """Shorten a data URI for log lines."""
    head, sep, payload = value.partition(",")
    if not sep or len(payload) <= keep:
        return value
    return f"{head},{payload[:keep]}...({len(payload)} chars)"
