"""Tests for location lookup helpers."""

from __future__ import annotations

import asyncio

import pytest

from citylens.errors import GeolocationError, GeolocationErrorCode
from citylens.report.geolocation import (
    Coordinates,
    ReportedLocationProvider,
    StaticLocationProvider,
    UnsupportedLocationProvider,
    geolocation_message,
    lookup_location,
)


class SlowLocationProvider:
    async def current_position(self) -> Coordinates:
        await asyncio.sleep(1)
        return Coordinates(0.0, 0.0)


def test_coordinates_format_uses_five_decimals() -> None:
    assert Coordinates(40.7128, -74.006).format() == "40.71280, -74.00600"
    assert Coordinates(-33.868820, 151.209296).format() == "-33.86882, 151.20930"


@pytest.mark.parametrize(("lat", "lon"), [(91.0, 0.0), (-91.0, 0.0), (0.0, 181.0)])
def test_coordinates_reject_out_of_range(lat: float, lon: float) -> None:
    with pytest.raises(ValueError):
        Coordinates(lat, lon)


def test_lookup_returns_static_position() -> None:
    coordinates = asyncio.run(
        lookup_location(StaticLocationProvider(1.5, 2.5), timeout_seconds=1.0)
    )
    assert coordinates == Coordinates(1.5, 2.5)


def test_lookup_times_out() -> None:
    with pytest.raises(GeolocationError) as excinfo:
        asyncio.run(lookup_location(SlowLocationProvider(), timeout_seconds=0.01))
    assert excinfo.value.code is GeolocationErrorCode.timeout


def test_unsupported_provider_raises_unsupported() -> None:
    with pytest.raises(GeolocationError) as excinfo:
        asyncio.run(lookup_location(UnsupportedLocationProvider(), timeout_seconds=1.0))
    assert excinfo.value.code is GeolocationErrorCode.unsupported


def test_reported_provider_requires_exactly_one_outcome() -> None:
    with pytest.raises(ValueError):
        ReportedLocationProvider()
    with pytest.raises(ValueError):
        ReportedLocationProvider(
            coordinates=Coordinates(0.0, 0.0),
            error_code=GeolocationErrorCode.timeout,
        )


def test_reported_provider_relays_error_code() -> None:
    provider = ReportedLocationProvider(error_code=GeolocationErrorCode.position_unavailable)
    with pytest.raises(GeolocationError) as excinfo:
        asyncio.run(provider.current_position())
    assert excinfo.value.code is GeolocationErrorCode.position_unavailable


def test_every_error_code_has_a_message() -> None:
    for code in GeolocationErrorCode:
        assert geolocation_message(code)
    assert geolocation_message(GeolocationErrorCode.timeout) == "Location request timed out."
