"""Location lookup: provider protocol, timeout handling and user-facing messages."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol

from citylens.errors import GeolocationError, GeolocationErrorCode

GEOLOCATION_MESSAGES: dict[GeolocationErrorCode, str] = {
    GeolocationErrorCode.permission_denied: (
        "Location access denied. Please enable it in your browser settings."
    ),
    GeolocationErrorCode.position_unavailable: "Location information is unavailable.",
    GeolocationErrorCode.timeout: "Location request timed out.",
    GeolocationErrorCode.unsupported: "Your browser does not support geolocation.",
    GeolocationErrorCode.unknown: "Could not retrieve location.",
}


@dataclass(frozen=True)
class Coordinates:
    """A resolved position."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError("latitude must be between -90 and 90.")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError("longitude must be between -180 and 180.")

    def format(self) -> str:
        """Render as the fixed ``lat, long`` string written into the location field."""
        return f"{self.latitude:.5f}, {self.longitude:.5f}"


class LocationProvider(Protocol):
    """Source of the device's current position."""

    async def current_position(self) -> Coordinates:
        """Return coordinates or raise :class:`GeolocationError`."""
        ...


class StaticLocationProvider:
    """Returns a fixed position; used for demos and tests."""

    def __init__(self, latitude: float, longitude: float) -> None:
        self._coordinates = Coordinates(latitude=latitude, longitude=longitude)

    async def current_position(self) -> Coordinates:
        return self._coordinates


class UnsupportedLocationProvider:
    """Stands in for platforms without a geolocation capability."""

    async def current_position(self) -> Coordinates:
        raise GeolocationError(GeolocationErrorCode.unsupported)


class ReportedLocationProvider:
    """Wraps the outcome the browser already obtained from ``navigator.geolocation``."""

    def __init__(
        self,
        *,
        coordinates: Coordinates | None = None,
        error_code: GeolocationErrorCode | None = None,
    ) -> None:
        if (coordinates is None) == (error_code is None):
            raise ValueError("Provide exactly one of coordinates or error_code.")
        self._coordinates = coordinates
        self._error_code = error_code

    async def current_position(self) -> Coordinates:
        if self._coordinates is None:
            raise GeolocationError(self._error_code or GeolocationErrorCode.unknown)
        return self._coordinates


async def lookup_location(provider: LocationProvider, *, timeout_seconds: float) -> Coordinates:
    """Resolve the current position, mapping a slow provider to a timeout error."""
    try:
        return await asyncio.wait_for(provider.current_position(), timeout=timeout_seconds)
    except TimeoutError as exc:
        raise GeolocationError(GeolocationErrorCode.timeout) from exc


def geolocation_message(code: GeolocationErrorCode) -> str:
    """Return the user-facing message for a failure code."""
    return GEOLOCATION_MESSAGES[code]
