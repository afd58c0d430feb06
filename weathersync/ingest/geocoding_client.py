"""Open-Meteo geocoding and Nominatim reverse geocoding client."""

import logging

import httpx

from weathersync.config.schema import (
    DEFAULT_USER_AGENT,
    GEOCODING_BASE_URL,
    REVERSE_GEOCODING_BASE_URL,
)
from weathersync.errors import NotFoundError, ParseError, TransportError, UpstreamError
from weathersync.models.location import CityCoordinates

logger = logging.getLogger(__name__)

LOCALITY_KEYS = ("city", "town", "village", "municipality", "hamlet")


class GeocodingClient:
    def __init__(
        self,
        base_url: str = GEOCODING_BASE_URL,
        reverse_base_url: str = REVERSE_GEOCODING_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 15.0,
    ):
        self.base_url = base_url
        self.reverse_base_url = reverse_base_url
        self.user_agent = user_agent
        self.timeout = timeout

    def resolve_city(self, name: str) -> CityCoordinates:
        """Resolve a free-text city name to its best match.

        Raises NotFoundError when the geocoder has no result.
        """
        query = name.strip()
        if not query:
            raise NotFoundError(f"City not found: {name}")

        data = self._get_json(
            f"{self.base_url}/v1/search", {"name": query, "count": 1}
        )
        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            logger.info("No geocoding match for %r", query)
            raise NotFoundError(f"City not found: {name}")

        first = results[0]
        try:
            city = CityCoordinates(
                name=str(first["name"]),
                latitude=float(first["latitude"]),
                longitude=float(first["longitude"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError(f"Malformed geocoding result: {e}") from e
        logger.debug("Resolved %r to %s", query, city)
        return city

    def reverse_geocode(self, latitude: float, longitude: float) -> str | None:
        """Look up the locality name for a coordinate pair."""
        data = self._get_json(
            f"{self.reverse_base_url}/reverse",
            {"format": "jsonv2", "lat": latitude, "lon": longitude, "zoom": 10},
        )
        address = data.get("address") if isinstance(data, dict) else None
        if not isinstance(address, dict):
            return None
        for key in LOCALITY_KEYS:
            if address.get(key):
                return str(address[key])
        return None

    def _get_json(self, url: str, params: dict) -> object:
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        try:
            resp = httpx.get(url, params=params, headers=headers, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error("Geocoding request failed: %s -> %s", url, e)
            raise TransportError(f"Request failed: {e}") from e
        if resp.status_code >= 400:
            body = resp.text
            logger.error("Geocoding API %d: %s -> %s", resp.status_code, url, body)
            raise UpstreamError(
                f"Geocoding failed: HTTP {resp.status_code}", resp.status_code, body
            )
        try:
            return resp.json()
        except ValueError as e:
            raise ParseError(f"Geocoding response is not JSON: {e}") from e
