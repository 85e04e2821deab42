"""Runtime settings for the CityLens server and CLI."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

from citylens.config_validation import (
    require_non_negative_float,
    require_positive_float,
    require_positive_int,
    validate_provider_name,
)

DEFAULT_MODEL = "gpt-4o-mini"
SUBMIT_DELAY_SECONDS = 1.5
GEOLOCATION_TIMEOUT_SECONDS = 10.0
MAX_DRAFTS = 200
DEFAULT_MOCK_DESCRIPTION = (
    "A pothole is visible in the center of the road, with loose gravel around its edges."
)


@dataclass(frozen=True)
class CityLensSettings:
    """Settings resolved from environment variables and CLI overrides."""

    provider: str = "openai"
    model: str = DEFAULT_MODEL
    submit_delay_seconds: float = SUBMIT_DELAY_SECONDS
    geolocation_timeout_seconds: float = GEOLOCATION_TIMEOUT_SECONDS
    mock_description: str = DEFAULT_MOCK_DESCRIPTION
    max_drafts: int = MAX_DRAFTS

    def __post_init__(self) -> None:
        validate_provider_name(self.provider)
        if not self.model.strip():
            raise ValueError("model must be non-empty.")
        require_non_negative_float(self.submit_delay_seconds, "submit_delay_seconds")
        require_positive_float(self.geolocation_timeout_seconds, "geolocation_timeout_seconds")
        require_positive_int(self.max_drafts, "max_drafts")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CityLensSettings:
        """Build settings from ``CITYLENS_*`` environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            provider=env.get("CITYLENS_PROVIDER", "openai").strip().lower(),
            model=env.get("CITYLENS_MODEL", DEFAULT_MODEL).strip(),
            submit_delay_seconds=_read_float(
                env, "CITYLENS_SUBMIT_DELAY_SECONDS", SUBMIT_DELAY_SECONDS
            ),
            geolocation_timeout_seconds=_read_float(
                env, "CITYLENS_GEOLOCATION_TIMEOUT_SECONDS", GEOLOCATION_TIMEOUT_SECONDS
            ),
            mock_description=env.get("CITYLENS_MOCK_DESCRIPTION", DEFAULT_MOCK_DESCRIPTION),
            max_drafts=_read_int(env, "CITYLENS_MAX_DRAFTS", MAX_DRAFTS),
        )

    def with_overrides(self, **overrides: object) -> CityLensSettings:
        """Return a copy with non-None overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)  # type: ignore[arg-type]


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number.") from exc


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc
