"""CLI entry point for the nimbus weather aggregator."""

import argparse
import asyncio
import logging

from nimbus.config.credentials import API_KEY, STATION_ID, SettingsLookup
from nimbus.config.loader import get_config_value, load_config, save_config, set_config_value
from nimbus.config.schema import NimbusConfig
from nimbus.ingest.alerts_client import AlertsClient
from nimbus.ingest.forecast_client import ForecastClient
from nimbus.ingest.noaa_client import NoaaClient
from nimbus.ingest.pws_client import PwsClient
from nimbus.models.common import Coordinate, SourceSelector
from nimbus.pipeline.forecast_pipeline import ForecastPipeline
from nimbus.pipeline.refresh_coordinator import RefreshCoordinator
from nimbus.reporting import formatters
from nimbus.storage import settings_repo
from nimbus.storage.database import connect, run_migrations
from nimbus.storage.snapshot_cache import SnapshotCache

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "nimbus.yaml"
SETTING_KEYS = (STATION_ID, API_KEY)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="nimbus",
        description="Current conditions and forecasts from NOAA or a personal weather station",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config YAML path")
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # current
    cur_p = sub.add_parser("current", help="Refresh current conditions")
    cur_p.add_argument(
        "--source",
        choices=[s.value for s in SourceSelector],
        default=SourceSelector.AUTOMATIC_STATION.value,
    )
    _add_location_args(cur_p, required=False)
    cur_p.add_argument("--label", default=None, help="Location label to display")
    cur_p.add_argument("--force", action="store_true", help="Force a refresh")
    cur_p.add_argument("--json", action="store_true", help="Print the snapshot as JSON")

    # forecast / alerts
    fc_p = sub.add_parser(
        "forecast",
        help="Show the daily forecast and alerts (defaults to the cached station location)",
    )
    _add_location_args(fc_p, required=False)
    al_p = sub.add_parser("alerts", help="Show active alerts")
    _add_location_args(al_p, required=True)
    al_p.add_argument("--json", action="store_true", help="Print alerts as JSON")

    # cached
    cached_p = sub.add_parser("cached", help="Show the cached snapshot without fetching")
    cached_p.add_argument("--clear", action="store_true", help="Drop the cached snapshot")

    # settings show / set / clear
    settings_p = sub.add_parser("settings", help="Personal station settings")
    settings_sub = settings_p.add_subparsers(dest="settings_command")
    settings_sub.add_parser("show", help="Display stored settings")
    sset_p = settings_sub.add_parser("set", help="Store a setting")
    sset_p.add_argument("key", choices=SETTING_KEYS)
    sset_p.add_argument("value")
    sclear_p = settings_sub.add_parser("clear", help="Remove a stored setting")
    sclear_p.add_argument("key", choices=SETTING_KEYS)

    # config show / config set
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
    if args.db:
        config = config.model_copy(
            update={"storage": config.storage.model_copy(update={"db_path": args.db})}
        )

    if args.command == "current":
        return _cmd_current(config, args)
    elif args.command == "forecast":
        return _cmd_forecast(config, args)
    elif args.command == "alerts":
        return _cmd_alerts(config, args)
    elif args.command == "cached":
        return _cmd_cached(config, args)
    elif args.command == "settings":
        return _cmd_settings(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _add_location_args(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument("--lat", type=float, required=required, help="Latitude")
    p.add_argument("--lon", type=float, required=required, help="Longitude")


def _location(args) -> Coordinate | None:
    if args.lat is None or args.lon is None:
        return None
    return Coordinate(args.lat, args.lon)


def build_noaa_client(config: NimbusConfig) -> NoaaClient:
    return NoaaClient(
        base_url=config.noaa.base_url,
        user_agent=config.noaa.user_agent,
        timeout=config.noaa.timeout_seconds,
    )


def build_coordinator(config: NimbusConfig, conn) -> RefreshCoordinator:
    return RefreshCoordinator(
        noaa=build_noaa_client(config),
        pws=PwsClient(
            base_url=config.pws.base_url,
            timeout=config.pws.timeout_seconds,
            user_agent=config.noaa.user_agent,
        ),
        cache=SnapshotCache(conn),
        config=SettingsLookup(conn, config.pws),
        location_placeholder=config.display.location_placeholder,
        stale_after_seconds=config.display.stale_after_seconds,
    )


def _open_db(config: NimbusConfig):
    conn = connect(config.storage.db_path)
    run_migrations(conn)
    return conn


def _cmd_current(config: NimbusConfig, args) -> int:
    conn = _open_db(config)
    try:
        coordinator = build_coordinator(config, conn)
        coordinator.load_cached()
        ok = asyncio.run(
            coordinator.refresh(
                SourceSelector(args.source),
                location=_location(args),
                location_label=args.label,
                force=args.force,
            )
        )
        state = coordinator.state
        if args.json and state.snapshot is not None:
            print(formatters.format_snapshot_json(state.snapshot))
        else:
            print(
                formatters.format_conditions_text(
                    state, coordinator.last_updated_text(), coordinator.is_stale()
                )
            )
        return 0 if ok else 1
    finally:
        conn.close()


def _cmd_forecast(config: NimbusConfig, args) -> int:
    location = _location(args) or _cached_station_location(config)
    if location is None:
        print("Error: pass --lat/--lon or refresh a station that reports its location")
        return 1
    noaa = build_noaa_client(config)
    pipeline = ForecastPipeline(ForecastClient(noaa), AlertsClient(noaa))
    ok = asyncio.run(pipeline.refresh(location))
    if not ok:
        print(f"Error: {pipeline.error_message}")
        return 1
    print(formatters.format_forecast_text(pipeline.daily))
    print()
    print(formatters.format_alerts_text(pipeline.alerts))
    return 0


def _cmd_alerts(config: NimbusConfig, args) -> int:
    client = AlertsClient(build_noaa_client(config))
    try:
        alerts = asyncio.run(client.get_active_alerts(Coordinate(args.lat, args.lon)))
    except Exception as e:
        logger.warning("Alerts fetch failed: %s", e)
        print("Error: alerts unavailable")
        return 1
    if args.json:
        print(formatters.format_alerts_json(alerts))
    else:
        print(formatters.format_alerts_text(alerts))
    return 0


def _cmd_cached(config: NimbusConfig, args) -> int:
    conn = _open_db(config)
    try:
        cache = SnapshotCache(conn)
        if args.clear:
            cache.clear()
            print("Cleared cached snapshot")
            return 0
        snapshot = cache.load()
    finally:
        conn.close()
    if snapshot is None:
        print("No cached snapshot")
        return 1
    print(formatters.format_snapshot_json(snapshot))
    return 0


def _cmd_settings(config: NimbusConfig, args) -> int:
    conn = _open_db(config)
    try:
        if args.settings_command == "show":
            lookup = SettingsLookup(conn, config.pws)
            stored = settings_repo.list_settings(conn)
            for key in SETTING_KEYS:
                value = lookup.get(key)
                if not value:
                    print(f"{key}: (not set)")
                    continue
                origin = "stored" if (stored.get(key) or "").strip() else "config"
                shown = _masked(value) if key == API_KEY else value
                print(f"{key}: {shown} ({origin})")
            return 0
        elif args.settings_command == "set":
            settings_repo.set_setting(conn, args.key, args.value.strip())
            print(f"Stored {args.key}")
            return 0
        elif args.settings_command == "clear":
            settings_repo.delete_setting(conn, args.key)
            print(f"Cleared {args.key}")
            return 0
        else:
            print("Use: settings show | settings set KEY VALUE | settings clear KEY")
            return 1
    finally:
        conn.close()


def _cmd_config(config: NimbusConfig, args) -> int:
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
        except Exception as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key} = {get_config_value(new_config, key.strip())}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1


def _masked(key: str) -> str:
    if len(key) <= 4:
        return "****"
    return f"{'*' * (len(key) - 4)}{key[-4:]}"


def _cached_station_location(config: NimbusConfig) -> Coordinate | None:
    """Coordinate reported by the last cached station, used to anchor the forecast."""
    conn = _open_db(config)
    try:
        snapshot = SnapshotCache(conn).load()
    finally:
        conn.close()
    if snapshot is None or snapshot.latitude is None or snapshot.longitude is None:
        return None
    return Coordinate(snapshot.latitude, snapshot.longitude)
