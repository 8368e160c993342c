import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .habit import HabitType
from .tokenizer import Token, TokenizeError, tokenize
from .tracker import Tracker

ADD_HINT = "Error! please use format `add 'habit name' [type]`"
EDIT_HINT = "Error! please use format `edit 1 'habit name'`"
DELETE_HINT = "Error! please use format `delete 1`"
VERB_HINT = "Error! only add, edit & delete are supported"

_INTEGER = re.compile(r"[+-]?[0-9]+")


class Outcome(Enum):
    ADDED = "added"
    EDITED = "edited"
    DELETED = "deleted"
    IGNORED = "ignored"
    ERROR = "error"


@dataclass(frozen=True)
class CommandResult:
    outcome: Outcome
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is not Outcome.ERROR

    @property
    def changed(self) -> bool:
        return self.outcome in (Outcome.ADDED, Outcome.EDITED, Outcome.DELETED)


def _error(message: str) -> CommandResult:
    return CommandResult(Outcome.ERROR, message)


def _strip_whitespace(tokens: List[Token]) -> List[Token]:
    start = 0
    end = len(tokens)
    while start < end and tokens[start].is_whitespace:
        start += 1
    while end > start and tokens[end - 1].is_whitespace:
        end -= 1
    return tokens[start:end]


def _arguments(tokens: List[Token], counts: tuple) -> Optional[List[Token]]:
    """Return the argument tokens after the verb, or None on bad arity.

    Arguments sit at even indices; every odd index must be whitespace.
    """
    if len(tokens) not in counts:
        return None
    for idx, token in enumerate(tokens):
        if token.is_whitespace != (idx % 2 == 1):
            return None
    return tokens[2::2]


def _habit_type(hint: Optional[Token]) -> HabitType:
    if hint is None:
        return HabitType.BOOLEAN
    if _INTEGER.fullmatch(hint.text):
        return HabitType.COUNTER
    return HabitType.CHARACTER


def _parse_index(token: Token) -> Optional[int]:
    if not (token.text.isascii() and token.text.isdigit()):
        return None
    return int(token.text)


def _cmd_add(tracker: Tracker, tokens: List[Token]) -> CommandResult:
    args = _arguments(tokens, (3, 5))
    if args is None or not args[0].text:
        return _error(ADD_HINT)
    hint = args[1] if len(args) > 1 else None
    habit = tracker.add_habit(args[0].text, _habit_type(hint))
    return CommandResult(Outcome.ADDED, f"Added habit #{len(tracker.habits) - 1}: {habit.label}")


def _cmd_edit(tracker: Tracker, tokens: List[Token]) -> CommandResult:
    args = _arguments(tokens, (5,))
    if args is None or not args[1].text:
        return _error(EDIT_HINT)
    index = _parse_index(args[0])
    if index is None:
        return _error(f"Error! '{args[0].text}' is not a valid habit index")
    if not tracker.rename_habit(index, args[1].text):
        return CommandResult(Outcome.IGNORED, f"No habit #{index}.")
    return CommandResult(Outcome.EDITED, f"Renamed habit #{index}: {args[1].text}")


def _cmd_delete(tracker: Tracker, tokens: List[Token]) -> CommandResult:
    args = _arguments(tokens, (3,))
    if args is None:
        return _error(DELETE_HINT)
    index = _parse_index(args[0])
    if index is None:
        return _error(f"Error! '{args[0].text}' is not a valid habit index")
    if not tracker.remove_habit(index):
        return CommandResult(Outcome.IGNORED, f"No habit #{index}.")
    return CommandResult(Outcome.DELETED, f"Deleted habit #{index}.")


COMMANDS = {
    "add": _cmd_add,
    "edit": _cmd_edit,
    "delete": _cmd_delete,
}


def interpret(tracker: Tracker, tokens: List[Token]) -> CommandResult:
    tokens = _strip_whitespace(tokens)
    if not tokens:
        return _error(VERB_HINT)
    handler = COMMANDS.get(tokens[0].text)
    if handler is None:
        return _error(VERB_HINT)
    return handler(tracker, tokens)


def execute(tracker: Tracker, line: str) -> CommandResult:
    try:
        tokens = tokenize(line)
    except TokenizeError as e:
        return _error(f"Error! {e}")
    return interpret(tracker, tokens)
