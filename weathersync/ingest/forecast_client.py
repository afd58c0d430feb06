"""Open-Meteo forecast API client."""

import logging
import math

import httpx

from weathersync.config.schema import DEFAULT_USER_AGENT, FORECAST_BASE_URL
from weathersync.errors import (
    InvalidArgumentError,
    ParseError,
    TransportError,
    UpstreamError,
)
from weathersync.models.forecast import (
    CurrentConditions,
    DailySeries,
    ForecastBundle,
    HourlySeries,
)

logger = logging.getLogger(__name__)

CURRENT_FIELDS = (
    "temperature_2m,apparent_temperature,relative_humidity_2m,wind_speed_10m,"
    "pressure_msl,is_day,weathercode"
)
HOURLY_FIELDS = "temperature_2m,relative_humidity_2m,wind_speed_10m"
DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,wind_speed_10m_max"


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Raise InvalidArgumentError for non-finite or out-of-range coordinates."""
    if not _in_range(latitude, 90.0):
        raise InvalidArgumentError(
            f"Latitude must be a valid number between -90 and 90, got {latitude}"
        )
    if not _in_range(longitude, 180.0):
        raise InvalidArgumentError(
            f"Longitude must be a valid number between -180 and 180, got {longitude}"
        )


def _in_range(value: float, bound: float) -> bool:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and -bound <= value <= bound


class ForecastClient:
    def __init__(
        self,
        base_url: str = FORECAST_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 15.0,
        forecast_days: int = 7,
        forecast_hours: int = 24,
    ):
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout
        self.forecast_days = forecast_days
        self.forecast_hours = forecast_hours

    def fetch_forecast(self, latitude: float, longitude: float) -> ForecastBundle:
        """Fetch current conditions, hourly and daily series for a point.

        Coordinates are validated before any request is made. No retries:
        every failure is raised once for the caller to handle.
        """
        validate_coordinates(latitude, longitude)

        url = f"{self.base_url}/v1/forecast"
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": CURRENT_FIELDS,
            "hourly": HOURLY_FIELDS,
            "daily": DAILY_FIELDS,
            "forecast_days": self.forecast_days,
            "forecast_hours": self.forecast_hours,
            "timezone": "auto",
        }
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        logger.debug("Fetching forecast for lat=%s lon=%s", latitude, longitude)

        try:
            resp = httpx.get(url, params=params, headers=headers, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error(
                "Forecast request failed for lat=%s, lon=%s: %s", latitude, longitude, e
            )
            raise TransportError(f"Request failed: {e}") from e

        if resp.status_code == 400:
            body = resp.text
            logger.error("Forecast API returned 400: %s", body)
            raise InvalidArgumentError(f"Invalid input: {body}")
        if resp.status_code >= 300:
            body = resp.text
            logger.error("Forecast API %d: %s", resp.status_code, body)
            raise UpstreamError(
                f"Failed to fetch weather: HTTP {resp.status_code}",
                resp.status_code,
                body,
            )

        try:
            raw = resp.json()
        except ValueError as e:
            raise ParseError(f"Forecast response is not JSON: {e}") from e
        return parse_forecast(raw)


def parse_forecast(raw: dict) -> ForecastBundle:
    """Map an Open-Meteo payload onto a ForecastBundle.

    Missing keys, wrong types and unequal series lengths raise ParseError.
    """
    try:
        current = raw["current"]
        hourly = raw["hourly"]
        daily = raw["daily"]
        return ForecastBundle(
            latitude=float(raw["latitude"]),
            longitude=float(raw["longitude"]),
            current=CurrentConditions(
                temperature=float(current["temperature_2m"]),
                humidity=int(current["relative_humidity_2m"]),
                apparent_temperature=float(current["apparent_temperature"]),
                wind_speed=float(current["wind_speed_10m"]),
                is_day=int(current["is_day"]),
                weather_code=int(current.get("weathercode", current.get("weather_code"))),
                pressure_msl=float(current["pressure_msl"]),
            ),
            hourly=HourlySeries(
                time=[str(t) for t in hourly["time"]],
                temperature=[float(v) for v in hourly["temperature_2m"]],
                humidity=[int(v) for v in hourly["relative_humidity_2m"]],
                wind_speed=[float(v) for v in hourly["wind_speed_10m"]],
            ),
            daily=DailySeries(
                time=[str(t) for t in daily["time"]],
                temperature_max=[float(v) for v in daily["temperature_2m_max"]],
                temperature_min=[float(v) for v in daily["temperature_2m_min"]],
                wind_speed_max=[float(v) for v in daily["wind_speed_10m_max"]],
            ),
        )
    except ParseError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Malformed forecast payload: {e}") from e
