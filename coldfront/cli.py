"""CLI entry point for cold front alerts."""

import argparse
import logging

from coldfront.analysis.numeric import coerce_number
from coldfront.analysis.record_tracker import (
    COLD_FRONT_THRESHOLD_KEY,
    RECORD_HIGH_KEY,
    RECORD_LOW_KEY,
)
from coldfront.config.loader import (
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from coldfront.config.schema import NotifyMode
from coldfront.daemon import CheckDaemon, daemon_status, stop_daemon
from coldfront.models.errors import InvalidNumericInput
from coldfront.pipeline.check_pipeline import DEFAULT_DB, CheckPipeline
from coldfront.reporting.formatters import format_summary_text
from coldfront.storage import alert_repo, state_repo
from coldfront.storage.database import connect, run_migrations

DEFAULT_CONFIG = "ops/configs/default.yaml"
NUMERIC_KEYS = (RECORD_LOW_KEY, RECORD_HIGH_KEY, COLD_FRONT_THRESHOLD_KEY)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="coldfront",
        description="Cold front and cold record forecast alerts",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config YAML path")
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite DB path")

    sub = parser.add_subparsers(dest="command")

    # check
    check_p = sub.add_parser("check", help="Run one forecast check")
    check_p.add_argument(
        "--dry-run", action="store_true", help="Log alerts instead of pushing them"
    )

    # status
    sub.add_parser("status", help="Show thresholds, last run and recent alerts")

    # state show / state set
    state_p = sub.add_parser("state", help="Persisted threshold operations")
    state_sub = state_p.add_subparsers(dest="state_command")
    state_sub.add_parser("show", help="Display persisted state")
    state_set_p = state_sub.add_parser("set", help="Set a state value")
    state_set_p.add_argument("keyvalue", help="KEY=VALUE to set")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    config_set_p = config_sub.add_parser("set", help="Set a config value")
    config_set_p.add_argument("keyvalue", help="key=value to set")

    # daemon
    daemon_p = sub.add_parser("daemon", help="Run checks on an interval")
    daemon_p.add_argument("--interval", type=int, help="Seconds between checks")
    daemon_p.add_argument("--stop", action="store_true", help="Stop a running daemon")
    daemon_p.add_argument("--status", action="store_true", help="Show daemon status")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "check":
        return _cmd_check(args)
    elif args.command == "status":
        return _cmd_status(args)
    elif args.command == "state":
        return _cmd_state(args)
    elif args.command == "config":
        return _cmd_config(args)
    elif args.command == "daemon":
        return _cmd_daemon(args)
    else:
        parser.print_help()
        return 1


def _split_keyvalue(kv: str) -> tuple[str, str] | None:
    if "=" not in kv:
        print("Error: use key=value format")
        return None
    key, value = kv.split("=", 1)
    return key.strip(), value.strip()


def _cmd_check(args) -> int:
    config = load_config(args.config)
    if args.dry_run:
        config = config.model_copy(
            update={"notify": config.notify.model_copy(update={"mode": NotifyMode.DRY_RUN})}
        )
    summary = CheckPipeline(config, args.db).run()
    print(format_summary_text(summary))
    return 0 if not summary.errors else 1


def _cmd_status(args) -> int:
    conn = connect(args.db)
    run_migrations(conn)
    for key in NUMERIC_KEYS:
        print(f"{key}: {state_repo.get_system_state(conn, key) or '(not set)'}")

    run = state_repo.get_latest_run(conn)
    if run is None:
        print("Last run: never")
    else:
        print(f"Last run: {run['started_at']} {run['status']} ({run['mode']})")
        if run["error_message"]:
            print(f"  Error: {run['error_message']}")

    alerts = alert_repo.get_recent_alerts(conn, limit=5)
    print(f"Recent alerts: {len(alerts)}")
    for a in alerts:
        print(f"  {a['dispatched_at']} {a['alert_type']} {a['status']}: {a['body']}")
    conn.close()
    return 0


def _cmd_state(args) -> int:
    conn = connect(args.db)
    run_migrations(conn)
    try:
        if args.state_command == "show":
            state = state_repo.get_all_system_state(conn)
            if not state:
                print("No state set")
            for key, value in state.items():
                print(f"{key}={value}")
            return 0
        elif args.state_command == "set":
            kv = _split_keyvalue(args.keyvalue)
            if kv is None:
                return 1
            key, value = kv
            if key in NUMERIC_KEYS:
                try:
                    coerce_number(value, key)
                except InvalidNumericInput as e:
                    print(f"Error: {e}")
                    return 1
            state_repo.SqliteStateStore(conn).set(key, value)
            state_repo.log_operator_command(
                conn, "state-set", args=f"{key}={value}", result="ok"
            )
            print(f"Set {key} = {value}")
            return 0
        else:
            print("Use: state show | state set KEY=VALUE")
            return 1
    finally:
        conn.close()


def _cmd_config(args) -> int:
    config = load_config(args.config)
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = _split_keyvalue(args.keyvalue)
        if kv is None:
            return 1
        key, value = kv
        try:
            new_config = set_config_value(config, key, value)
        except Exception as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key} = {get_config_value(new_config, key)}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1


def _cmd_daemon(args) -> int:
    if args.stop:
        return stop_daemon()
    if args.status:
        return daemon_status()
    config = load_config(args.config)
    CheckDaemon(config, args.db, interval=args.interval).start()
    return 0
