"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

GEOCODING_BASE_URL = "https://geocoding-api.open-meteo.com"
REVERSE_GEOCODING_BASE_URL = "https://nominatim.openstreetmap.org"
FORECAST_BASE_URL = "https://api.open-meteo.com"
DEFAULT_USER_AGENT = "weathersync/0.1.0"


class FetchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    geocoding_url: str = GEOCODING_BASE_URL
    reverse_geocoding_url: str = REVERSE_GEOCODING_BASE_URL
    forecast_url: str = FORECAST_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = Field(default=15.0, gt=0.0)
    forecast_days: int = Field(default=7, ge=1, le=16)
    forecast_hours: int = Field(default=24, ge=1, le=384)


class SyncConfig(BaseModel):
    model_config = {"extra": "forbid"}

    ttl_seconds: int = Field(default=120, ge=0)
    nearby_threshold_km: float = Field(default=10.0, gt=0.0)
    current_location_fallback: str = "Current Location"
    unknown_location_fallback: str = "Unknown Location"

    @property
    def ttl_ms(self) -> int:
        return self.ttl_seconds * 1000


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/weathersync.db"
    legacy_json_path: str = "data/locations.json"


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    fetch: FetchConfig = FetchConfig()
    sync: SyncConfig = SyncConfig()
    storage: StorageConfig = StorageConfig()
