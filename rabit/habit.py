from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional

DONE_VALUE = "true"


class HabitError(ValueError):
    pass


class HabitType(Enum):
    BOOLEAN = "Boolean"
    COUNTER = "Counter"
    CHARACTER = "Character"


def date_key(value: date) -> str:
    return value.isoformat()


def parse_date(value: str) -> date:
    return datetime.strptime(value, "%Y-%m-%d").date()


def _is_count(value: str) -> bool:
    return value.isascii() and value.isdigit()


def valid_record(habit_type: HabitType, value: str) -> bool:
    if not isinstance(value, str):
        return False
    if habit_type is HabitType.COUNTER:
        return _is_count(value)
    if habit_type is HabitType.CHARACTER:
        return len(value) == 1
    return True


@dataclass
class Habit:
    label: str
    habit_type: HabitType = HabitType.BOOLEAN
    records: Dict[str, str] = field(default_factory=dict)

    def mark(self, key: str, value: Optional[str] = None) -> None:
        """Record the habit for the day ``key``.

        Boolean habits toggle, counters count up from ``"0"`` and
        character habits store ``value``, which must be one character.
        """
        existing = self.records.get(key)
        if self.habit_type is HabitType.BOOLEAN:
            if existing is None:
                self.records[key] = DONE_VALUE
            else:
                del self.records[key]
        elif self.habit_type is HabitType.COUNTER:
            self.records[key] = "0" if existing is None else str(int(existing) + 1)
        else:
            if value is None or len(value) != 1:
                raise HabitError(f"Habit '{self.label}' needs a single character, got {value!r}")
            self.records[key] = value

    def value_on(self, day: date) -> Optional[str]:
        return self.records.get(date_key(day))
