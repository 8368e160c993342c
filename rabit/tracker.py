from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from .habit import Habit, HabitType, date_key

WEEKDAYS = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]
WEEK_LENGTH = 7

MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def _today_utc() -> date:
    return datetime.now(timezone.utc).date()


def _today_local() -> date:
    return datetime.now().date()


def weekday_index(label: str) -> int:
    return WEEKDAYS.index(label)


def week_window_start(day: date, week_start: str = "mon") -> date:
    delta = (day.weekday() - weekday_index(week_start)) % WEEK_LENGTH
    return day - timedelta(days=delta)


@dataclass
class Tracker:
    week_start: date
    habits: List[Habit] = field(default_factory=list)

    @classmethod
    def default(cls, today: Optional[date] = None, week_start: str = "mon") -> "Tracker":
        target = _today_utc() if today is None else today
        return cls(week_start=week_window_start(target, week_start))

    def next_week(self) -> None:
        self.week_start += timedelta(days=WEEK_LENGTH)

    def previous_week(self) -> None:
        self.week_start -= timedelta(days=WEEK_LENGTH)

    advance_week = next_week
    retreat_week = previous_week

    def date_range(self) -> List[date]:
        return [self.week_start + timedelta(days=offset) for offset in range(WEEK_LENGTH)]

    def header_labels(self) -> List[str]:
        return [f"{day.day:^3}" for day in self.date_range()]

    def values(self) -> List[List[Optional[str]]]:
        days = self.date_range()
        return [[habit.value_on(day) for day in days] for habit in self.habits]

    def labels(self) -> List[str]:
        return [habit.label for habit in self.habits]

    def month_label(self) -> str:
        return MONTHS[self.week_start.month - 1]

    def today_column(self, today: Optional[date] = None) -> Optional[int]:
        target = _today_local() if today is None else today
        offset = (target - self.week_start).days
        if 0 <= offset < WEEK_LENGTH:
            return offset
        return None

    def add_habit(self, label: str, habit_type: HabitType = HabitType.BOOLEAN) -> Habit:
        habit = Habit(label=label, habit_type=habit_type)
        self.habits.append(habit)
        return habit

    def rename_habit(self, index: int, label: str) -> bool:
        if not 0 <= index < len(self.habits):
            return False
        self.habits[index].label = label
        return True

    def remove_habit(self, index: int) -> bool:
        if not 0 <= index < len(self.habits):
            return False
        del self.habits[index]
        return True

    def mark(self, row: int, col: int, value: Optional[str] = None) -> None:
        day = self.date_range()[col]
        self.habits[row].mark(date_key(day), value)
