"""Synchronization core: owns the tracked location list and keeps it fresh.

All public operations run under one lock, so their read-modify-write of the
list never interleaves. Network calls are the only slow steps; failures end
the operation with a single Error status and leave other entries untouched.
Store writes are best effort: a failed write is logged and the in-memory
list stays the source of truth for the session.
"""

import logging
import threading
from collections.abc import Callable

from weathersync.config.schema import SyncConfig
from weathersync.errors import (
    InvalidArgumentError,
    NotFoundError,
    ParseError,
    PersistenceError,
    WeatherSyncError,
)
from weathersync.ingest.base import CityResolver, ForecastSource
from weathersync.ingest.forecast_client import validate_coordinates
from weathersync.models.common import EpochMillis, now_millis
from weathersync.models.forecast import ForecastBundle
from weathersync.models.location import CityCoordinates, TrackedLocation
from weathersync.models.status import IDLE, SyncSnapshot, TransientStatus
from weathersync.storage.store import LocationStore
from weathersync.sync.geo import is_nearby
from weathersync.sync.staleness import is_location_fresh
from weathersync.sync.visited import VisitedPages

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "An unknown network error occurred"

Listener = Callable[[SyncSnapshot], None]


class SyncCore:
    def __init__(
        self,
        store: LocationStore,
        resolver: CityResolver,
        forecasts: ForecastSource,
        config: SyncConfig | None = None,
        clock: Callable[[], EpochMillis] = now_millis,
    ):
        self.store = store
        self.resolver = resolver
        self.forecasts = forecasts
        self.config = config or SyncConfig()
        self._clock = clock
        self._lock = threading.RLock()
        self._locations: list[TrackedLocation] = []
        self._visited = VisitedPages()
        self._status: TransientStatus = IDLE
        self._listeners: list[Listener] = []

    # --- Observation ---

    @property
    def locations(self) -> tuple[TrackedLocation, ...]:
        with self._lock:
            return tuple(self._locations)

    @property
    def status(self) -> TransientStatus:
        return self._status

    @property
    def visited_pages(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._visited)

    def snapshot(self) -> SyncSnapshot:
        with self._lock:
            return SyncSnapshot(tuple(self._locations), self._status)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every change.

        Returns a function that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # --- Lifecycle ---

    def load(self) -> int:
        """Replace the in-memory list with the store's contents."""
        with self._lock:
            try:
                loaded = self.store.list_all()
            except (PersistenceError, ParseError):
                logger.exception("Failed to load saved locations, starting empty")
                loaded = []
            self._locations = list(loaded)
            self._visited.clear()
            logger.info("Loaded %d saved locations", len(self._locations))
            self._publish()
            return len(self._locations)

    def start(self) -> None:
        """Load saved locations and refresh the first page eagerly.

        Later pages stay as loaded until they are first shown.
        """
        with self._lock:
            self.load()
            if self._locations:
                self._update_location(0)
                self._visited.mark(0)

    def message_shown(self) -> None:
        with self._lock:
            self._set_status(IDLE)

    # --- Mutations ---

    def add_by_name(self, city_name: str) -> None:
        with self._lock:
            existing = self._find_by_name(city_name)
            if existing is not None:
                self._navigate_to(existing)
                return

            self._set_status(TransientStatus.loading())
            try:
                city = self.resolver.resolve_city(city_name)
            except NotFoundError:
                self._set_status(TransientStatus.error(f"City not found: {city_name}"))
                return
            except Exception as e:
                self._fail("Geocoding " + city_name, e)
                return

            forecast = self._fetch(city.latitude, city.longitude)
            if forecast is None:
                return

            self._append(
                TrackedLocation(
                    city=city,
                    forecast=forecast,
                    is_current_location=False,
                    last_updated=self._clock(),
                )
            )
            self._set_status(TransientStatus.success(f"Added {city_name}"))

    def add_current_location(self, latitude: float, longitude: float) -> None:
        with self._lock:
            try:
                validate_coordinates(latitude, longitude)
            except InvalidArgumentError as e:
                self._set_status(TransientStatus.error(str(e)))
                return

            existing = self._find_nearby(latitude, longitude)
            if existing is not None:
                if not self._locations[existing].is_current_location:
                    self._clear_current_flags()
                    self._locations[existing] = self._locations[existing].with_current_flag(True)
                    self._persist(existing)
                self._navigate_to(existing)
                return

            self._set_status(TransientStatus.loading())
            name = self._reverse_geocode(latitude, longitude)
            self._clear_current_flags()

            forecast = self._fetch(latitude, longitude)
            if forecast is None:
                return

            self._append(
                TrackedLocation(
                    city=CityCoordinates(name, latitude, longitude),
                    forecast=forecast,
                    is_current_location=True,
                    last_updated=self._clock(),
                )
            )
            self._set_status(TransientStatus.success("Added current location"))

    def remove_location(self, index: int) -> TrackedLocation | None:
        """Drop the entry at ``index``. Returns it, or None when out of range."""
        with self._lock:
            if not self._in_bounds(index):
                return None
            loc = self._locations[index]
            if loc.id is not None:
                try:
                    self.store.delete_by_id(loc.id)
                except PersistenceError:
                    logger.exception("Failed to delete %s (id=%d) from store", loc.name, loc.id)
            del self._locations[index]
            self._visited.shift_after_removal(index)
            logger.info("Removed %s at index %d", loc.name, index)
            self._publish()
            return loc

    def refresh_location(self, index: int) -> None:
        """Refresh a page on request, still honouring the freshness window."""
        with self._lock:
            if not self._in_bounds(index):
                return
            self._update_location(index)
            self._visited.mark(index)

    def on_page_changed(self, index: int) -> None:
        """Refresh a page the first time it is shown this session."""
        with self._lock:
            if index in self._visited or not self._in_bounds(index):
                return
            self._update_location(index)
            self._visited.mark(index)

    # --- Internals ---

    def _navigate_to(self, index: int) -> None:
        self._set_status(TransientStatus.navigate(index))
        if index not in self._visited:
            self._update_location(index)
            self._visited.mark(index)

    def _update_location(self, index: int) -> None:
        if not self._in_bounds(index):
            return
        loc = self._locations[index]
        now = self._clock()
        if is_location_fresh(loc.last_updated, self.config.ttl_ms, now):
            self._set_status(TransientStatus.success("Already up to date"))
            return

        self._set_status(TransientStatus.loading())
        forecast = self._fetch(
            loc.latitude, loc.longitude, failure_message=f"Failed to refresh {loc.name}"
        )
        if forecast is None:
            return
        self._locations[index] = loc.with_forecast(forecast, self._clock())
        self._persist(index)
        self._set_status(TransientStatus.success(f"Updated {loc.name}"))

    def _fetch(
        self, latitude: float, longitude: float, failure_message: str | None = None
    ) -> ForecastBundle | None:
        """Fetch a forecast, or set an Error status and return None."""
        try:
            return self.forecasts.fetch_forecast(latitude, longitude)
        except Exception as e:
            self._fail(f"Forecast for {latitude},{longitude}", e, failure_message)
            return None

    def _fail(self, what: str, exc: Exception, message: str | None = None) -> None:
        if isinstance(exc, WeatherSyncError):
            logger.warning("%s failed: %s", what, exc)
        else:
            logger.exception("%s failed unexpectedly", what)
        self._set_status(TransientStatus.error(message or str(exc) or UNKNOWN_ERROR))

    def _reverse_geocode(self, latitude: float, longitude: float) -> str:
        try:
            name = self.resolver.reverse_geocode(latitude, longitude)
        except Exception as e:
            logger.warning("Reverse geocoding %s,%s failed: %s", latitude, longitude, e)
            return self.config.unknown_location_fallback
        return name or self.config.current_location_fallback

    def _append(self, loc: TrackedLocation) -> int:
        self._locations.append(loc)
        index = len(self._locations) - 1
        self._persist(index)
        self._visited.mark(index)
        logger.info("Added %s at index %d", loc.name, index)
        return index

    def _persist(self, index: int) -> None:
        """Write the entry at ``index`` to the store, capturing a new id."""
        loc = self._locations[index]
        try:
            if loc.id is None:
                self._locations[index] = loc.with_id(self.store.insert(loc))
            else:
                self.store.update(loc)
        except PersistenceError:
            logger.exception("Failed to save %s, keeping in-memory copy", loc.name)

    def _clear_current_flags(self) -> None:
        for i, loc in enumerate(self._locations):
            if loc.is_current_location:
                self._locations[i] = loc.with_current_flag(False)
                self._persist(i)

    def _find_by_name(self, city_name: str) -> int | None:
        wanted = city_name.strip().casefold()
        for i, loc in enumerate(self._locations):
            if loc.name.casefold() == wanted:
                return i
        return None

    def _find_nearby(self, latitude: float, longitude: float) -> int | None:
        for i, loc in enumerate(self._locations):
            if is_nearby(
                loc.latitude, loc.longitude, latitude, longitude,
                self.config.nearby_threshold_km,
            ):
                return i
        return None

    def _in_bounds(self, index: int) -> bool:
        return 0 <= index < len(self._locations)

    def _set_status(self, status: TransientStatus) -> None:
        self._status = status
        self._publish()

    def _publish(self) -> None:
        snapshot = SyncSnapshot(tuple(self._locations), self._status)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener %r raised", listener)
