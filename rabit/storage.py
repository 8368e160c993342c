import json
import logging
import os
import tempfile
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from .habit import DONE_VALUE, Habit, HabitType, date_key, parse_date, valid_record
from .tracker import Tracker

logger = logging.getLogger(__name__)

LEGACY_TYPES = {
    "BIT": HabitType.BOOLEAN,
    "COUNT": HabitType.COUNTER,
    "ALPHA": HabitType.CHARACTER,
}


class StorageError(Exception):
    pass


def _parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        if value.endswith("Z"):
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _format_week_start(value: date) -> str:
    return f"{value.isoformat()}T00:00:00Z"


def _parse_week_start(value: Any) -> Optional[date]:
    parsed = _parse_iso_datetime(value)
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def normalize_key(raw: Any) -> Optional[str]:
    # Older files used keys like "2023-01-02 00:00:00 UTC".
    if not isinstance(raw, str) or len(raw) < 10:
        return None
    try:
        return date_key(parse_date(raw[:10]))
    except ValueError:
        return None


def habit_type_from_name(raw: Any) -> HabitType:
    if not isinstance(raw, str):
        return HabitType.BOOLEAN
    if raw in LEGACY_TYPES:
        return LEGACY_TYPES[raw]
    try:
        return HabitType(raw)
    except ValueError:
        return HabitType.BOOLEAN


def habit_from_dict(item: Dict[str, Any]) -> Optional[Habit]:
    label = item.get("label")
    if not isinstance(label, str):
        return None
    habit_type = habit_type_from_name(item.get("habit_type"))
    raw_records = item.get("records", item.get("stats"))
    if not isinstance(raw_records, dict):
        raw_records = {}
    records: Dict[str, str] = {}
    for raw_key, value in raw_records.items():
        key = normalize_key(raw_key)
        if key is None or not valid_record(habit_type, value):
            logger.warning("Dropping invalid record %r=%r for habit '%s'", raw_key, value, label)
            continue
        records[key] = value
    done_dates = item.get("done_dates")
    if isinstance(done_dates, list) and habit_type is HabitType.BOOLEAN:
        for raw_key in done_dates:
            key = normalize_key(raw_key)
            if key is not None:
                records.setdefault(key, DONE_VALUE)
    return Habit(label=label, habit_type=habit_type, records=records)


def tracker_from_dict(data: Any, default: Tracker) -> Tracker:
    if not isinstance(data, dict):
        return default
    week_start = _parse_week_start(data.get("week_start", data.get("start_date")))
    raw_habits = data.get("habits")
    habits: List[Habit] = []
    if isinstance(raw_habits, list):
        for item in raw_habits:
            if not isinstance(item, dict):
                continue
            habit = habit_from_dict(item)
            if habit is not None:
                habits.append(habit)
    return Tracker(week_start=week_start or default.week_start, habits=habits)


def habit_to_dict(habit: Habit) -> Dict[str, Any]:
    return {
        "label": habit.label,
        "habit_type": habit.habit_type.value,
        "records": dict(sorted(habit.records.items())),
    }


def tracker_to_dict(tracker: Tracker) -> Dict[str, Any]:
    return {
        "week_start": _format_week_start(tracker.week_start),
        "habits": [habit_to_dict(habit) for habit in tracker.habits],
    }


def load_tracker(path: str, week_start: str = "mon", today: Optional[date] = None) -> Tracker:
    default = Tracker.default(today=today, week_start=week_start)
    if not os.path.exists(path):
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s, starting fresh: %s", path, e)
        return default
    return tracker_from_dict(data, default)


def save_tracker(tracker: Tracker, path: str) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".habit-", suffix=".json", dir=directory)
    except OSError as e:
        raise StorageError(f"Could not save habits to {path}: {e}") from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(tracker_to_dict(tracker), f, indent=2)
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise StorageError(f"Could not save habits to {path}: {e}") from e
