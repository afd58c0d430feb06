"""Forecast bundle models: current conditions plus hourly and daily series."""

from dataclasses import asdict, dataclass, field, fields
from typing import Any

from weathersync.errors import ParseError, SeriesLengthError


def _check_parallel(series: Any) -> None:
    lengths = {f.name: len(getattr(series, f.name)) for f in fields(series)}
    if len(set(lengths.values())) > 1:
        raise SeriesLengthError(
            f"{type(series).__name__} arrays differ in length: {lengths}"
        )


@dataclass(frozen=True)
class CurrentConditions:
    temperature: float
    humidity: int
    apparent_temperature: float
    wind_speed: float
    is_day: int
    weather_code: int
    pressure_msl: float


@dataclass(frozen=True)
class HourlySeries:
    time: list[str] = field(default_factory=list)
    temperature: list[float] = field(default_factory=list)
    humidity: list[int] = field(default_factory=list)
    wind_speed: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_parallel(self)

    def __len__(self) -> int:
        return len(self.time)


@dataclass(frozen=True)
class DailySeries:
    time: list[str] = field(default_factory=list)
    temperature_max: list[float] = field(default_factory=list)
    temperature_min: list[float] = field(default_factory=list)
    wind_speed_max: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_parallel(self)

    def __len__(self) -> int:
        return len(self.time)


@dataclass(frozen=True)
class ForecastBundle:
    latitude: float
    longitude: float
    current: CurrentConditions
    hourly: HourlySeries
    daily: DailySeries

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ForecastBundle":
        """Rebuild a bundle from its ``to_dict`` form.

        Raises ParseError when keys are missing or values have the wrong shape.
        """
        try:
            return cls(
                latitude=float(data["latitude"]),
                longitude=float(data["longitude"]),
                current=CurrentConditions(**data["current"]),
                hourly=HourlySeries(**data["hourly"]),
                daily=DailySeries(**data["daily"]),
            )
        except ParseError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError(f"Malformed forecast bundle: {e}") from e
