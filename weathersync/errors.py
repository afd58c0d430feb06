"""Error taxonomy for fetch, parse and persistence failures."""


class WeatherSyncError(Exception):
    """Base class for all weathersync errors."""


class NotFoundError(WeatherSyncError):
    """Raised when the geocoder has no match for a city name."""


class InvalidArgumentError(WeatherSyncError, ValueError):
    """Raised for bad input, e.g. out-of-range coordinates."""


class TransportError(WeatherSyncError):
    """Raised on connectivity problems and timeouts."""


class UpstreamError(WeatherSyncError):
    """Raised when an API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ParseError(WeatherSyncError):
    """Raised for malformed API payloads or persisted data."""


class SeriesLengthError(ParseError):
    """Raised when parallel forecast arrays differ in length."""


class PersistenceError(WeatherSyncError):
    """Raised when the location store cannot read or write."""
