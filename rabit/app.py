from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from .commands import CommandResult, execute
from .habit import HabitType
from .tracker import WEEK_LENGTH, Tracker

ESC = "esc"
ENTER = "enter"
BACKSPACE = "backspace"
UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"


class Mode(Enum):
    NORMAL = "NORMAL"
    COMMAND = "COMMAND"
    VALUE = "VALUE"


class App:
    """Selection cursor, input mode and command buffer around one Tracker."""

    def __init__(self, tracker: Tracker) -> None:
        self.tracker = tracker
        self.mode = Mode.NORMAL
        self.input = ""
        self.running = True
        self.last_result: Optional[CommandResult] = None
        self._selection: Optional[Tuple[int, int]] = None

    def selected(self) -> Optional[Tuple[int, int]]:
        return self._selection

    def select(self, row: int, col: int) -> None:
        self._selection = (row, col)

    def move_cursor_down(self) -> None:
        count = len(self.tracker.habits)
        if count < 2:
            return
        if self._selection is None:
            self.select(0, 0)
            return
        row, col = self._selection
        self.select(0 if row == count - 1 else row + 1, col)

    def move_cursor_up(self) -> None:
        count = len(self.tracker.habits)
        if count < 2:
            return
        if self._selection is None:
            self.select(0, 0)
            return
        row, col = self._selection
        self.select(count - 1 if row == 0 else row - 1, col)

    def move_cursor_left(self) -> None:
        if not self.tracker.habits:
            return
        if self._selection is None:
            self.select(0, 0)
            return
        row, col = self._selection
        if col == 0:
            self.tracker.previous_week()
            self.select(row, WEEK_LENGTH - 1)
        else:
            self.select(row, col - 1)

    def move_cursor_right(self) -> None:
        if not self.tracker.habits:
            return
        if self._selection is None:
            self.select(0, 0)
            return
        row, col = self._selection
        if col == WEEK_LENGTH - 1:
            self.tracker.next_week()
            self.select(row, 0)
        else:
            self.select(row, col + 1)

    def mark_habit(self) -> None:
        if self._selection is None:
            return
        row, col = self._selection
        if self.tracker.habits[row].habit_type is HabitType.CHARACTER:
            self.input = ""
            self.mode = Mode.VALUE
            return
        self.tracker.mark(row, col)

    def enter_command_mode(self) -> None:
        self.input = ""
        self.mode = Mode.COMMAND

    def cancel(self) -> None:
        self.input = ""
        self.mode = Mode.NORMAL

    def quit(self) -> None:
        self.running = False

    def execute_input(self) -> CommandResult:
        result = execute(self.tracker, self.input)
        self.input = "" if result.ok else result.message
        self.last_result = result
        self.mode = Mode.NORMAL
        self._clamp_selection()
        return result

    def _clamp_selection(self) -> None:
        if self._selection is None:
            return
        count = len(self.tracker.habits)
        if count == 0:
            self._selection = None
            return
        row, col = self._selection
        if row >= count:
            self._selection = (count - 1, col)

    def _append_input(self, char: str) -> None:
        self.input += char

    def _delete_input(self) -> None:
        self.input = self.input[:-1]

    def _enter_value(self, char: str) -> None:
        if self._selection is None:
            self.cancel()
            return
        row, col = self._selection
        self.tracker.mark(row, col, char)
        self.cancel()

    def handle_key(self, key: str) -> None:
        """Dispatch one key name for the current mode.

        Single printable characters are passed through as themselves,
        special keys use the names defined in this module.
        """
        action = _TRANSITIONS.get((self.mode, key))
        if action is not None:
            action(self)
            return
        if len(key) != 1 or not key.isprintable():
            return
        if self.mode is Mode.COMMAND:
            self._append_input(key)
        elif self.mode is Mode.VALUE:
            self._enter_value(key)


_TRANSITIONS: Dict[Tuple[Mode, str], Callable[[App], object]] = {
    (Mode.NORMAL, "q"): App.quit,
    (Mode.NORMAL, "k"): App.move_cursor_up,
    (Mode.NORMAL, UP): App.move_cursor_up,
    (Mode.NORMAL, "j"): App.move_cursor_down,
    (Mode.NORMAL, DOWN): App.move_cursor_down,
    (Mode.NORMAL, "h"): App.move_cursor_left,
    (Mode.NORMAL, LEFT): App.move_cursor_left,
    (Mode.NORMAL, "l"): App.move_cursor_right,
    (Mode.NORMAL, RIGHT): App.move_cursor_right,
    (Mode.NORMAL, " "): App.mark_habit,
    (Mode.NORMAL, ":"): App.enter_command_mode,
    (Mode.COMMAND, ESC): App.cancel,
    (Mode.COMMAND, ENTER): App.execute_input,
    (Mode.COMMAND, BACKSPACE): App._delete_input,
    (Mode.VALUE, ESC): App.cancel,
}
