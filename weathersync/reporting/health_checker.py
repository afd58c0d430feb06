"""Health checker: DB connectivity, API reachability, data freshness."""

import sqlite3

import httpx

from weathersync.config.schema import AppConfig
from weathersync.models.common import EpochMillis, now_millis
from weathersync.models.reporting import HealthStatus
from weathersync.storage import location_repo
from weathersync.sync.staleness import is_location_stale


class HealthChecker:
    def __init__(self, conn: sqlite3.Connection, config: AppConfig):
        self.conn = conn
        self.config = config

    def check(self, now: EpochMillis | None = None) -> HealthStatus:
        db_ok = self._check_db()
        tracked, stale = self._freshness(now) if db_ok else (0, 0)
        return HealthStatus(
            db_connected=db_ok,
            geocoding_api_reachable=self._reachable(
                f"{self.config.fetch.geocoding_url}/v1/search",
                {"name": "London", "count": 1},
            ),
            forecast_api_reachable=self._reachable(
                f"{self.config.fetch.forecast_url}/v1/forecast",
                {"latitude": 0, "longitude": 0, "current": "temperature_2m"},
            ),
            tracked_locations=tracked,
            stale_locations=stale,
        )

    def _check_db(self) -> bool:
        try:
            self.conn.execute("SELECT 1 FROM locations LIMIT 1")
            return True
        except sqlite3.Error:
            return False

    def _freshness(self, now: EpochMillis | None) -> tuple[int, int]:
        now = now if now is not None else now_millis()
        locations = location_repo.list_locations(self.conn)
        stale = sum(
            1 for loc in locations
            if is_location_stale(loc.last_updated, self.config.sync.ttl_ms, now)
        )
        return len(locations), stale

    def _reachable(self, url: str, params: dict) -> bool:
        try:
            resp = httpx.get(
                url,
                params=params,
                headers={"User-Agent": self.config.fetch.user_agent},
                timeout=self.config.fetch.timeout_seconds,
            )
            return resp.status_code == 200
        except httpx.HTTPError:
            return False
