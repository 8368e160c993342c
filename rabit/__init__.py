from .commands import CommandResult, Outcome, execute, interpret
from .habit import Habit, HabitError, HabitType, date_key
from .tokenizer import Token, TokenKind, TokenizeError, UnterminatedQuote, tokenize
from .tracker import Tracker

__version__ = "0.3.0"

__all__ = [
    "CommandResult",
    "Habit",
    "HabitError",
    "HabitType",
    "Outcome",
    "Token",
    "TokenKind",
    "TokenizeError",
    "Tracker",
    "UnterminatedQuote",
    "date_key",
    "execute",
    "interpret",
    "tokenize",
]
