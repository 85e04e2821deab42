"""Redaction helpers applied before provider errors and reports reach the logs."""

from __future__ import annotations

import re
from typing import Final

POTENTIAL_SECRET_PATTERNS: tuple[tuple[str, str], ...] = (
    ("openai_api_key", r"sk-[A-Za-z0-9_-]{20,}"),
    ("bearer_token", r"(?i)bearer\s+[A-Za-z0-9._-]{16,}"),
    ("jwt_token", r"eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+"),
)

SENSITIVE_KEY_PATTERN: Final[str] = (
    r"[A-Za-z0-9_.-]*(?:token|secret|api[_-]?key|password)[A-Za-z0-9_.-]*"
)

_SENSITIVE_INLINE_VALUE_PATTERN: Final[re.Pattern[str]] = re.compile(
    rf"(?i)(\b{SENSITIVE_KEY_PATTERN}\b)(\s*[:=]\s*)([^\s,;]+)"
)
_SENSITIVE_QUERY_PARAM_PATTERN: Final[re.Pattern[str]] = re.compile(
    rf"(?i)([?&]{SENSITIVE_KEY_PATTERN}=)[^&#\s]+"
)
_EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^([^@\s])[^@\s]*(@[^@\s]+)$")


def redact_sensitive_text(text: str) -> str:
    """Replace secret-like values with redaction placeholders."""
    redacted = text
    for label, pattern in POTENTIAL_SECRET_PATTERNS:
        redacted = re.sub(pattern, f"[REDACTED:{label}]", redacted)
    redacted = _SENSITIVE_INLINE_VALUE_PATTERN.sub(
        lambda match: f"{match.group(1)}{match.group(2)}[REDACTED:value]",
        redacted,
    )
    redacted = _SENSITIVE_QUERY_PARAM_PATTERN.sub(r"\1[REDACTED:value]", redacted)
    return redacted


def mask_email(email: str) -> str:
    """Keep the first character and domain of an address, e.g. ``j***@example.org``."""
    match = _EMAIL_PATTERN.match(email.strip())
    if match is None:
        return email
    return f"{match.group(1)}***{match.group(2)}"
