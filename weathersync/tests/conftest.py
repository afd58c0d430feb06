"""Shared test fixtures."""

import json
import sqlite3
from collections.abc import Callable
from pathlib import Path

import pytest
import yaml

from weathersync.config.schema import AppConfig
from weathersync.models.forecast import (
    CurrentConditions,
    DailySeries,
    ForecastBundle,
    HourlySeries,
)
from weathersync.models.location import CityCoordinates, TrackedLocation
from weathersync.storage.database import connect, run_migrations

FIXTURE_DIR = Path(__file__).parent / "fixtures"


class FakeClock:
    """Epoch-millis clock that only moves when told to."""

    def __init__(self, start: int = 1_760_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


def make_bundle(temperature: float = 20.0, latitude: float = 35.6895, longitude: float = 139.6917) -> ForecastBundle:
    return ForecastBundle(
        latitude=latitude,
        longitude=longitude,
        current=CurrentConditions(
            temperature=temperature,
            humidity=64,
            apparent_temperature=temperature - 0.7,
            wind_speed=7.9,
            is_day=1,
            weather_code=2,
            pressure_msl=1016.2,
        ),
        hourly=HourlySeries(
            time=[f"2026-10-18T{h:02d}:00" for h in range(24)],
            temperature=[temperature + h * 0.1 for h in range(24)],
            humidity=[60 + h for h in range(24)],
            wind_speed=[3.0 + h / 7 for h in range(24)],
        ),
        daily=DailySeries(
            time=[f"2026-10-{18 + d}" for d in range(7)],
            temperature_max=[temperature + 2.4 + d for d in range(7)],
            temperature_min=[temperature - 7.9 + d for d in range(7)],
            wind_speed_max=[10.7 + d for d in range(7)],
        ),
    )


def make_location(
    name: str = "Tokyo",
    latitude: float = 35.6895,
    longitude: float = 139.6917,
    temperature: float = 20.0,
    is_current_location: bool = False,
    last_updated: int = 0,
    location_id: int | None = None,
) -> TrackedLocation:
    return TrackedLocation(
        city=CityCoordinates(name, latitude, longitude),
        forecast=make_bundle(temperature, latitude, longitude),
        is_current_location=is_current_location,
        id=location_id,
        last_updated=last_updated,
    )


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    """A migrated SQLite database in a temp directory."""
    conn = connect(tmp_path / "test.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bundle_factory() -> Callable[..., ForecastBundle]:
    return make_bundle


@pytest.fixture
def location_factory() -> Callable[..., TrackedLocation]:
    return make_location


@pytest.fixture
def default_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "sync": {"ttl_seconds": 300},
        "fetch": {"timeout_seconds": 5.0},
        "storage": {"db_path": str(tmp_path / "weathersync.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def forecast_payload() -> dict:
    with open(FIXTURE_DIR / "open_meteo_forecast_tokyo.json") as f:
        return json.load(f)
