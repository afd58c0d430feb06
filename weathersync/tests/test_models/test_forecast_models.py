"""Tests for forecast, location and status models."""

import dataclasses

import pytest

from weathersync.errors import ParseError, SeriesLengthError
from weathersync.models.forecast import DailySeries, ForecastBundle, HourlySeries
from weathersync.models.status import IDLE, StatusKind, TransientStatus

from conftest import make_bundle, make_location


class TestSeries:
    def test_equal_lengths_accepted(self):
        series = HourlySeries(
            time=["2026-10-18T00:00", "2026-10-18T01:00"],
            temperature=[10.0, 10.5],
            humidity=[70, 71],
            wind_speed=[3.2, 3.4],
        )
        assert len(series) == 2

    def test_short_array_rejected(self):
        with pytest.raises(SeriesLengthError, match="HourlySeries"):
            HourlySeries(
                time=["2026-10-18T00:00", "2026-10-18T01:00"],
                temperature=[10.0],
                humidity=[70, 71],
                wind_speed=[3.2, 3.4],
            )

    def test_daily_mismatch_is_parse_error(self):
        with pytest.raises(ParseError):
            DailySeries(
                time=["2026-10-18"],
                temperature_max=[20.0, 21.0],
                temperature_min=[10.0],
                wind_speed_max=[5.0],
            )

    def test_empty_series(self):
        assert len(DailySeries()) == 0


class TestForecastBundle:
    def test_dict_round_trip(self):
        bundle = make_bundle(temperature=17.3)
        assert ForecastBundle.from_dict(bundle.to_dict()) == bundle

    def test_from_dict_missing_key(self):
        data = make_bundle().to_dict()
        del data["current"]
        with pytest.raises(ParseError):
            ForecastBundle.from_dict(data)

    def test_from_dict_unknown_field(self):
        data = make_bundle().to_dict()
        data["current"]["uv_index"] = 3
        with pytest.raises(ParseError):
            ForecastBundle.from_dict(data)

    def test_from_dict_short_series(self):
        data = make_bundle().to_dict()
        data["hourly"]["humidity"] = data["hourly"]["humidity"][:5]
        with pytest.raises(SeriesLengthError):
            ForecastBundle.from_dict(data)


class TestTrackedLocation:
    def test_convenience_properties(self):
        loc = make_location("Lima", -12.0432, -77.0282)
        assert loc.name == "Lima"
        assert loc.latitude == -12.0432
        assert loc.longitude == -77.0282

    def test_frozen(self):
        loc = make_location()
        with pytest.raises(dataclasses.FrozenInstanceError):
            loc.last_updated = 5  # type: ignore[misc]

    def test_with_forecast_advances_timestamp(self):
        loc = make_location(last_updated=1_000)
        updated = loc.with_forecast(make_bundle(25.0), 2_000)
        assert updated.last_updated == 2_000
        assert updated.forecast.current.temperature == 25.0
        assert loc.last_updated == 1_000

    def test_with_forecast_never_rolls_back(self):
        loc = make_location(last_updated=5_000)
        updated = loc.with_forecast(make_bundle(), 4_000)
        assert updated.last_updated == 5_000

    def test_with_id_and_flag(self):
        loc = make_location().with_id(7).with_current_flag(True)
        assert loc.id == 7
        assert loc.is_current_location is True


class TestTransientStatus:
    def test_idle_constant(self):
        assert IDLE.kind == StatusKind.IDLE
        assert IDLE.is_idle

    def test_payloads(self):
        assert TransientStatus.success("Added Tokyo").message == "Added Tokyo"
        assert TransientStatus.error("boom").kind == StatusKind.ERROR
        nav = TransientStatus.navigate(3)
        assert nav.kind == StatusKind.NAVIGATE
        assert nav.page == 3
        assert not TransientStatus.loading().is_idle

    def test_value_equality(self):
        assert TransientStatus.navigate(0) == TransientStatus.navigate(0)
        assert TransientStatus.navigate(0) != TransientStatus.navigate(1)
