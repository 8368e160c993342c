import argparse
import logging
import sys
from typing import List, Optional

from .app import App
from .commands import execute
from .config import Config, ConfigError, load_config
from .habit import parse_date
from .storage import StorageError, load_tracker, save_tracker
from .sync import SyncError, get_connection, pull_tracker, sync_tracker
from .tracker import WEEKDAYS, Tracker, week_window_start
from .ui import cell_text, run as run_ui

logger = logging.getLogger(__name__)


def _configure_logging(config: Config, verbose: bool, interactive: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    if config.log_file:
        logging.basicConfig(level=level, format=fmt, filename=config.log_file)
    elif interactive:
        logging.basicConfig(level=logging.ERROR, format=fmt)
    else:
        logging.basicConfig(level=level, format=fmt)


def _save(tracker: Tracker, config: Config) -> int:
    try:
        save_tracker(tracker, config.data_path)
    except StorageError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


def format_week(tracker: Tracker) -> List[str]:
    dates = tracker.date_range()
    width = max([len(label) for label in tracker.labels()] + [5]) + 4
    lines = [f"{tracker.month_label()} {dates[0].isoformat()} → {dates[-1].isoformat()}"]
    lines.append(" " * width + "".join(tracker.header_labels()))
    for row, (label, values) in enumerate(zip(tracker.labels(), tracker.values())):
        lines.append(f"{row:>2} {label}".ljust(width) + "".join(cell_text(v) for v in values))
    return lines


def join_arguments(parts: List[str]) -> str:
    if len(parts) == 1:
        return parts[0]
    quoted = []
    for part in parts:
        if any(c.isspace() for c in part):
            if '"' not in part:
                part = f'"{part}"'
            elif "'" not in part:
                part = f"'{part}'"
        quoted.append(part)
    return " ".join(quoted)


def cmd_tui(args: argparse.Namespace, config: Config) -> int:
    tracker = load_tracker(config.data_path, config.week_start)
    app = App(tracker)
    run_ui(app)
    return _save(tracker, config)


def cmd_run(args: argparse.Namespace, config: Config) -> int:
    tracker = load_tracker(config.data_path, config.week_start)
    result = execute(tracker, join_arguments(args.line))
    if result.message:
        print(result.message)
    if result.changed:
        return _save(tracker, config)
    return 0


def cmd_show(args: argparse.Namespace, config: Config) -> int:
    tracker = load_tracker(config.data_path, config.week_start)
    if args.date:
        try:
            target = parse_date(args.date)
        except ValueError:
            print(f"Invalid date '{args.date}', use YYYY-MM-DD.", file=sys.stderr)
            return 1
        tracker.week_start = week_window_start(target, config.week_start)
    if not tracker.habits:
        print("No habits yet.")
        return 0
    for line in format_week(tracker):
        print(line)
    return 0


def cmd_sync(args: argparse.Namespace, config: Config) -> int:
    tracker = load_tracker(config.data_path, config.week_start)
    if not tracker.habits:
        print("No habits to sync.")
        return 0
    try:
        count = sync_tracker(tracker, get_connection(config.db_url), config.profile)
    except SyncError as e:
        print(e, file=sys.stderr)
        return 1
    print(f"Synced {count} habit(s) to profile '{config.profile}'.")
    return 0


def cmd_pull(args: argparse.Namespace, config: Config) -> int:
    tracker = load_tracker(config.data_path, config.week_start)
    try:
        count = pull_tracker(tracker, get_connection(config.db_url), config.profile)
    except SyncError as e:
        print(e, file=sys.stderr)
        return 1
    if count == 0:
        print(f"No habits found for profile '{config.profile}'.")
        return 0
    print(f"Pulled {count} habit(s) from profile '{config.profile}' into local store.")
    return _save(tracker, config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rabit", description="Terminal habit tracking grid")
    parser.add_argument("--file", help="Habit data file (default: ~/.config/rabit/habit.json)")
    parser.add_argument("--week-start", choices=WEEKDAYS, help="First day of the week")
    parser.add_argument("--log-file", help="Write logs to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.set_defaults(func=cmd_tui)
    sub = parser.add_subparsers(dest="command")

    tui = sub.add_parser("tui", help="Open the habit grid (default)")
    tui.set_defaults(func=cmd_tui)

    run_cmd = sub.add_parser("run", help="Run one command, e.g. add 'Drink Water' 8")
    run_cmd.add_argument("line", nargs="+", help="Command line to execute")
    run_cmd.set_defaults(func=cmd_run)

    show = sub.add_parser("show", help="Print the week grid")
    show.add_argument("--date", help="Show the week containing this date (YYYY-MM-DD)")
    show.set_defaults(func=cmd_show)

    sync = sub.add_parser("sync", help="Sync local habits to Postgres")
    sync.set_defaults(func=cmd_sync)

    pull = sub.add_parser("pull", help="Pull habits from Postgres into local store")
    pull.set_defaults(func=cmd_pull)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = load_config(data_path=args.file, week_start=args.week_start, log_file=args.log_file)
    except ConfigError as e:
        print(e, file=sys.stderr)
        return 2
    _configure_logging(config, args.verbose, interactive=args.func is cmd_tui)
    logger.debug("Using data file %s", config.data_path)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
