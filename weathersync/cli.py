"""CLI entry point for the location sync engine."""

import argparse
import logging
import sqlite3

from weathersync.config.loader import (
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from weathersync.config.schema import AppConfig
from weathersync.errors import PersistenceError
from weathersync.ingest.forecast_client import ForecastClient
from weathersync.ingest.geocoding_client import GeocodingClient
from weathersync.models.common import now_millis
from weathersync.models.status import IDLE, StatusKind, SyncSnapshot
from weathersync.reporting.formatters import (
    format_locations_json,
    format_locations_text,
    format_status,
)
from weathersync.reporting.health_checker import HealthChecker
from weathersync.storage.database import connect, run_migrations
from weathersync.storage.migrate import migrate_json_to_sqlite
from weathersync.storage.store import SqliteLocationStore
from weathersync.sync.core import SyncCore

DEFAULT_CONFIG = "config/weathersync.yaml"

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weathersync",
        description="Track cities and keep their forecasts fresh",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config YAML path")
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    list_p = sub.add_parser("list", help="Show saved locations")
    list_p.add_argument("--json", action="store_true", help="JSON output")

    sub.add_parser("sync", help="Load saved locations and refresh the first page")

    add_p = sub.add_parser("add", help="Add a city by name")
    add_p.add_argument("name", help="City name")

    locate_p = sub.add_parser("locate", help="Add or select the current location")
    locate_p.add_argument("latitude", type=float)
    locate_p.add_argument("longitude", type=float)

    remove_p = sub.add_parser("remove", help="Remove the location at a page index")
    remove_p.add_argument("index", type=int)

    refresh_p = sub.add_parser("refresh", help="Refresh the location at a page index")
    refresh_p.add_argument("index", type=int)

    migrate_p = sub.add_parser("migrate", help="Import a legacy locations.json")
    migrate_p.add_argument("--json", dest="json_path", default=None, help="Legacy file path")

    sub.add_parser("health", help="Run health checks")

    serve_p = sub.add_parser("serve", help="Run the JSON dashboard")
    serve_p.add_argument("--host", default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8777)

    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.command == "config":
        return _cmd_config(config, args)

    if args.db:
        config = config.model_copy(
            update={"storage": config.storage.model_copy(update={"db_path": args.db})}
        )
    if args.command == "migrate":
        return _cmd_migrate(config, args)
    if args.command == "health":
        return _cmd_health(config)

    conn = open_database(config)
    try:
        core = build_core(config, conn)
        if args.command == "serve":
            return _cmd_serve(core, conn, config, args)
        if args.command == "list":
            return _cmd_list(core, config, args)

        _echo_statuses(core)
        if args.command == "sync":
            core.start()
        elif args.command == "add":
            core.load()
            core.add_by_name(args.name)
        elif args.command == "locate":
            core.load()
            core.add_current_location(args.latitude, args.longitude)
        elif args.command == "remove":
            core.load()
            removed = core.remove_location(args.index)
            if removed is None:
                print(f"Error: no location at index {args.index}")
                return 1
            print(f"Removed {removed.name}")
            return 0
        elif args.command == "refresh":
            core.load()
            if not 0 <= args.index < len(core.locations):
                print(f"Error: no location at index {args.index}")
                return 1
            core.refresh_location(args.index)
        else:
            parser.print_help()
            return 1
        return _report(core)
    finally:
        conn.close()


def open_database(config: AppConfig) -> sqlite3.Connection:
    """Connect, apply migrations and import the legacy JSON file if present."""
    conn = connect(config.storage.db_path)
    run_migrations(conn)
    try:
        migrate_json_to_sqlite(config.storage.legacy_json_path, conn)
    except PersistenceError:
        logger.exception("Legacy import failed, continuing with database contents")
    return conn


def build_core(config: AppConfig, conn: sqlite3.Connection) -> SyncCore:
    fetch = config.fetch
    geocoder = GeocodingClient(
        base_url=fetch.geocoding_url,
        reverse_base_url=fetch.reverse_geocoding_url,
        user_agent=fetch.user_agent,
        timeout=fetch.timeout_seconds,
    )
    forecasts = ForecastClient(
        base_url=fetch.forecast_url,
        user_agent=fetch.user_agent,
        timeout=fetch.timeout_seconds,
        forecast_days=fetch.forecast_days,
        forecast_hours=fetch.forecast_hours,
    )
    return SyncCore(SqliteLocationStore(conn), geocoder, forecasts, config.sync)


def _echo_statuses(core: SyncCore) -> None:
    """Print every status change except Idle and Loading as it happens."""
    last = IDLE

    def listener(snapshot: SyncSnapshot) -> None:
        nonlocal last
        if snapshot.status == last:
            return
        last = snapshot.status
        if snapshot.status.kind not in (StatusKind.IDLE, StatusKind.LOADING):
            print(format_status(snapshot.status))

    core.subscribe(listener)


def _report(core: SyncCore) -> int:
    failed = core.status.kind == StatusKind.ERROR
    core.message_shown()
    return 1 if failed else 0


def _cmd_list(core: SyncCore, config: AppConfig, args) -> int:
    core.load()
    if args.json:
        print(format_locations_json(core.locations))
    else:
        print(format_locations_text(core.locations, now_millis(), config.sync.ttl_ms))
    return 0


def _cmd_migrate(config: AppConfig, args) -> int:
    json_path = args.json_path or config.storage.legacy_json_path
    conn = connect(config.storage.db_path)
    try:
        run_migrations(conn)
        count = migrate_json_to_sqlite(json_path, conn)
    except PersistenceError as e:
        print(f"Error: {e}")
        return 1
    finally:
        conn.close()
    print(f"Imported {count} locations from {json_path}")
    return 0


def _cmd_serve(core: SyncCore, conn: sqlite3.Connection, config: AppConfig, args) -> int:
    import uvicorn

    from weathersync.dashboard import create_app

    core.start()
    uvicorn.run(create_app(core, conn, config), host=args.host, port=args.port)
    return 0


def _cmd_health(config: AppConfig) -> int:
    conn = connect(config.storage.db_path)
    run_migrations(conn)
    checker = HealthChecker(conn, config)
    status = checker.check()

    print(f"DB: {'OK' if status.db_connected else 'FAIL'}")
    print(f"Geocoding API: {'OK' if status.geocoding_api_reachable else 'FAIL'}")
    print(f"Forecast API: {'OK' if status.forecast_api_reachable else 'FAIL'}")
    print(f"Locations: {status.tracked_locations} ({status.stale_locations} stale)")
    conn.close()
    return 0 if status.ok else 1


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
        except (KeyError, TypeError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key.strip()} = {get_config_value(new_config, key.strip())}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1
