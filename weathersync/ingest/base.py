"""Capability interfaces the sync core needs from the network layer."""

from typing import Protocol

from weathersync.models.forecast import ForecastBundle
from weathersync.models.location import CityCoordinates


class CityResolver(Protocol):
    def resolve_city(self, name: str) -> CityCoordinates:
        """Return the best geocoder match, or raise NotFoundError."""
        ...

    def reverse_geocode(self, latitude: float, longitude: float) -> str | None:
        """Return a locality name for the coordinates, None if there is none."""
        ...


class ForecastSource(Protocol):
    def fetch_forecast(self, latitude: float, longitude: float) -> ForecastBundle:
        """Return current, hourly and daily forecast for the coordinates."""
        ...
