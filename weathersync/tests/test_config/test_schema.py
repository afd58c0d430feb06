"""Tests for config schema validation."""

import pytest
from pydantic import ValidationError

from weathersync.config.schema import (
    FORECAST_BASE_URL,
    AppConfig,
    FetchConfig,
    StorageConfig,
    SyncConfig,
)


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.sync.ttl_seconds == 120
        assert config.sync.ttl_ms == 120_000
        assert config.sync.nearby_threshold_km == 10.0
        assert config.fetch.forecast_url == FORECAST_BASE_URL
        assert config.fetch.timeout_seconds == 15.0

    def test_extra_fields_rejected(self):
        with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
            AppConfig(unknown_field="bad")

    def test_nested_extra_fields_rejected(self):
        with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
            SyncConfig(ttl_seconds=60, bogus=True)


class TestSyncConfig:
    def test_fallback_names(self):
        config = SyncConfig()
        assert config.current_location_fallback == "Current Location"
        assert config.unknown_location_fallback == "Unknown Location"

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValidationError):
            SyncConfig(ttl_seconds=-1)

    def test_zero_threshold_rejected(self):
        with pytest.raises(ValidationError):
            SyncConfig(nearby_threshold_km=0.0)


class TestFetchConfig:
    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            FetchConfig(timeout_seconds=0)

    @pytest.mark.parametrize("days", [0, 17])
    def test_forecast_days_bounds(self, days: int):
        with pytest.raises(ValidationError):
            FetchConfig(forecast_days=days)


class TestStorageConfig:
    def test_defaults(self):
        config = StorageConfig()
        assert config.db_path == "data/weathersync.db"
        assert config.legacy_json_path == "data/locations.json"
