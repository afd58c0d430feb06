"""Tracked location models."""

from dataclasses import dataclass, replace

from weathersync.models.common import EpochMillis, LocationId
from weathersync.models.forecast import ForecastBundle


@dataclass(frozen=True)
class CityCoordinates:
    name: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class TrackedLocation:
    city: CityCoordinates
    forecast: ForecastBundle
    is_current_location: bool = False
    id: LocationId | None = None  # assigned by the store on first persist
    last_updated: EpochMillis = 0

    @property
    def name(self) -> str:
        return self.city.name

    @property
    def latitude(self) -> float:
        return self.city.latitude

    @property
    def longitude(self) -> float:
        return self.city.longitude

    def with_forecast(self, forecast: ForecastBundle, fetched_at: EpochMillis) -> "TrackedLocation":
        """Copy with a freshly fetched bundle. last_updated never moves backwards."""
        return replace(
            self, forecast=forecast, last_updated=max(self.last_updated, fetched_at)
        )

    def with_id(self, location_id: LocationId) -> "TrackedLocation":
        return replace(self, id=location_id)

    def with_current_flag(self, flag: bool) -> "TrackedLocation":
        return replace(self, is_current_location=flag)
