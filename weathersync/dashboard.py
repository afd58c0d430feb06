"""Location dashboard: FastAPI backend exposing the sync core over JSON."""

import sqlite3

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from weathersync.config.schema import AppConfig
from weathersync.models.location import TrackedLocation
from weathersync.models.status import TransientStatus
from weathersync.reporting.health_checker import HealthChecker
from weathersync.sync.core import SyncCore


class AddCity(BaseModel):
    name: str = Field(min_length=1)


class CurrentPosition(BaseModel):
    latitude: float
    longitude: float


def _location_json(index: int, loc: TrackedLocation) -> dict:
    return {
        "index": index,
        "id": loc.id,
        "name": loc.name,
        "latitude": loc.latitude,
        "longitude": loc.longitude,
        "is_current_location": loc.is_current_location,
        "last_updated": loc.last_updated,
        "forecast": loc.forecast.to_dict(),
    }


def _status_json(status: TransientStatus) -> dict:
    return {"kind": str(status.kind), "message": status.message, "page": status.page}


def create_app(core: SyncCore, conn: sqlite3.Connection, config: AppConfig) -> FastAPI:
    """Build the app around an already wired core.

    Every mutating endpoint answers with the status the operation left
    behind; clients acknowledge it via ``POST /api/status/ack``.
    """
    app = FastAPI(title="Weather Location Dashboard", version="0.1.0")

    def _check_index(index: int) -> None:
        if not 0 <= index < len(core.locations):
            raise HTTPException(404, f"No location at index {index}")

    # ── Data endpoints ──────────────────────────────────────────

    @app.get("/api/locations")
    def get_locations():
        return [_location_json(i, loc) for i, loc in enumerate(core.locations)]

    @app.get("/api/locations/{index}")
    def get_location(index: int):
        locations = core.locations
        if not 0 <= index < len(locations):
            raise HTTPException(404, f"No location at index {index}")
        return _location_json(index, locations[index])

    @app.get("/api/status")
    def get_status():
        return _status_json(core.status)

    @app.get("/api/health")
    def get_health():
        status = HealthChecker(conn, config).check()
        return {
            "ok": status.ok,
            "db_connected": status.db_connected,
            "geocoding_api_reachable": status.geocoding_api_reachable,
            "forecast_api_reachable": status.forecast_api_reachable,
            "tracked_locations": status.tracked_locations,
            "stale_locations": status.stale_locations,
        }

    # ── Control endpoints ───────────────────────────────────────

    @app.post("/api/locations")
    def add_location(body: AddCity):
        core.add_by_name(body.name)
        return _status_json(core.status)

    @app.post("/api/locations/current")
    def add_current_location(body: CurrentPosition):
        core.add_current_location(body.latitude, body.longitude)
        return _status_json(core.status)

    @app.delete("/api/locations/{index}")
    def remove_location(index: int):
        removed = core.remove_location(index)
        if removed is None:
            raise HTTPException(404, f"No location at index {index}")
        return {"removed": removed.name}

    @app.post("/api/locations/{index}/refresh")
    def refresh_location(index: int):
        _check_index(index)
        core.refresh_location(index)
        return _status_json(core.status)

    @app.post("/api/pages/{index}")
    def page_changed(index: int):
        _check_index(index)
        core.on_page_changed(index)
        return _status_json(core.status)

    @app.post("/api/status/ack")
    def ack_status():
        core.message_shown()
        return _status_json(core.status)

    return app
