import json
import logging
from typing import Any, List, Optional

from .habit import Habit
from .storage import habit_from_dict
from .tracker import Tracker

logger = logging.getLogger(__name__)


class SyncError(Exception):
    pass


def get_connection(db_url: Optional[str]):
    if not db_url:
        raise SyncError("Database sync needs DATABASE_URL or RABIT_DB_URL.")
    try:
        import psycopg
    except ImportError as e:
        raise SyncError("Database sync needs psycopg installed (pip install 'rabit[sync]').") from e
    try:
        return psycopg.connect(db_url)
    except psycopg.Error as e:
        raise SyncError(f"Could not connect to the database: {e}") from e


def _ensure_table(cursor) -> None:
    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS rabit_habits (
            profile TEXT NOT NULL,
            position INTEGER NOT NULL,
            label TEXT NOT NULL,
            habit_type TEXT NOT NULL,
            records JSONB,
            PRIMARY KEY (profile, position)
        )
        """
    )


def _row_records(raw: Any) -> dict:
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str) and raw:
        return json.loads(raw)
    return {}


def sync_tracker(tracker: Tracker, conn, profile: str) -> int:
    with conn:
        with conn.cursor() as cursor:
            _ensure_table(cursor)
            cursor.execute("DELETE FROM rabit_habits WHERE profile = %s", (profile,))
            for position, habit in enumerate(tracker.habits):
                cursor.execute(
                    """
                    INSERT INTO rabit_habits (profile, position, label, habit_type, records)
                    VALUES (%(profile)s, %(position)s, %(label)s, %(habit_type)s, %(records)s::jsonb)
                    """,
                    {
                        "profile": profile,
                        "position": position,
                        "label": habit.label,
                        "habit_type": habit.habit_type.value,
                        "records": json.dumps(habit.records, sort_keys=True),
                    },
                )
    logger.debug("Synced %d habit(s) for profile '%s'", len(tracker.habits), profile)
    return len(tracker.habits)


def pull_tracker(tracker: Tracker, conn, profile: str) -> int:
    with conn:
        with conn.cursor() as cursor:
            _ensure_table(cursor)
            cursor.execute(
                """
                SELECT label, habit_type, records
                FROM rabit_habits
                WHERE profile = %s
                ORDER BY position
                """,
                (profile,),
            )
            rows = cursor.fetchall()
    if not rows:
        return 0
    habits: List[Habit] = []
    for label, habit_type, raw_records in rows:
        habit = habit_from_dict(
            {"label": label, "habit_type": habit_type, "records": _row_records(raw_records)}
        )
        if habit is not None:
            habits.append(habit)
    tracker.habits = habits
    logger.debug("Pulled %d habit(s) for profile '%s'", len(habits), profile)
    return len(habits)
