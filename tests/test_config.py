"""Tests for settings and config validation helpers."""

from __future__ import annotations

import pytest

from citylens.config import (
    DEFAULT_MODEL,
    GEOLOCATION_TIMEOUT_SECONDS,
    SUBMIT_DELAY_SECONDS,
    CityLensSettings,
)
from citylens.config_validation import (
    require_non_negative_float,
    require_positive_float,
    validate_port,
    validate_provider_name,
)


def test_defaults_match_documented_constants() -> None:
    settings = CityLensSettings.from_env({})
    assert settings.provider == "openai"
    assert settings.model == DEFAULT_MODEL
    assert settings.submit_delay_seconds == SUBMIT_DELAY_SECONDS == 1.5
    assert settings.geolocation_timeout_seconds == GEOLOCATION_TIMEOUT_SECONDS == 10.0


def test_from_env_reads_overrides() -> None:
    settings = CityLensSettings.from_env(
        {
            "CITYLENS_PROVIDER": " Mock ",
            "CITYLENS_MODEL": "gpt-4o",
            "CITYLENS_SUBMIT_DELAY_SECONDS": "0",
            "CITYLENS_GEOLOCATION_TIMEOUT_SECONDS": "2.5",
            "CITYLENS_MOCK_DESCRIPTION": "Abandoned car on the curb.",
            "CITYLENS_MAX_DRAFTS": "25",
        }
    )
    assert settings.provider == "mock"
    assert settings.model == "gpt-4o"
    assert settings.submit_delay_seconds == 0.0
    assert settings.geolocation_timeout_seconds == 2.5
    assert settings.mock_description == "Abandoned car on the curb."
    assert settings.max_drafts == 25


def test_from_env_rejects_bad_values() -> None:
    with pytest.raises(ValueError, match="provider"):
        CityLensSettings.from_env({"CITYLENS_PROVIDER": "anthropic"})
    with pytest.raises(ValueError, match="must be a number"):
        CityLensSettings.from_env({"CITYLENS_SUBMIT_DELAY_SECONDS": "soon"})
    with pytest.raises(ValueError):
        CityLensSettings.from_env({"CITYLENS_GEOLOCATION_TIMEOUT_SECONDS": "0"})
    with pytest.raises(ValueError, match="must be an integer"):
        CityLensSettings.from_env({"CITYLENS_MAX_DRAFTS": "many"})
    with pytest.raises(ValueError, match="max_drafts"):
        CityLensSettings.from_env({"CITYLENS_MAX_DRAFTS": "0"})


def test_with_overrides_ignores_none() -> None:
    settings = CityLensSettings(provider="mock")
    updated = settings.with_overrides(provider=None, model="gpt-4o")
    assert updated.provider == "mock"
    assert updated.model == "gpt-4o"


def test_validate_provider_name() -> None:
    assert validate_provider_name("mock") == "mock"
    with pytest.raises(ValueError):
        validate_provider_name("other")


@pytest.mark.parametrize("port", [0, -1, 65536])
def test_validate_port_rejects_out_of_range(port: int) -> None:
    with pytest.raises(ValueError):
        validate_port(port)


def test_float_validators() -> None:
    assert require_non_negative_float(0.0, "delay") == 0.0
    assert require_positive_float(0.5, "timeout") == 0.5
    with pytest.raises(ValueError):
        require_non_negative_float(-0.1, "delay")
    with pytest.raises(ValueError):
        require_positive_float(0.0, "timeout")
