"""Reporting and operational health models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthStatus:
    db_connected: bool
    geocoding_api_reachable: bool
    forecast_api_reachable: bool
    tracked_locations: int
    stale_locations: int

    @property
    def ok(self) -> bool:
        return (
            self.db_connected
            and self.geocoding_api_reachable
            and self.forecast_api_reachable
        )
