from dataclasses import dataclass
from enum import Enum
from typing import List

QUOTES = ("'", '"')


class TokenizeError(ValueError):
    pass


class UnterminatedQuote(TokenizeError):
    def __init__(self, column: int, quote: str) -> None:
        super().__init__(f"unterminated quote at column {column}")
        self.column = column
        self.quote = quote


class TokenKind(Enum):
    WORD = "word"
    WHITESPACE = "whitespace"
    QUOTED = "quoted"


@dataclass(frozen=True)
class Token:
    text: str
    kind: TokenKind

    @property
    def is_whitespace(self) -> bool:
        return self.kind is TokenKind.WHITESPACE


def tokenize(line: str) -> List[Token]:
    """Split a command line into word, whitespace and quoted tokens.

    Whitespace runs are kept as their own tokens so callers can check
    argument positions. Quotes are stripped from quoted tokens.
    """
    tokens: List[Token] = []
    pos = 0
    length = len(line)
    while pos < length:
        char = line[pos]
        if char in QUOTES:
            end = line.find(char, pos + 1)
            if end == -1:
                raise UnterminatedQuote(pos, char)
            tokens.append(Token(line[pos + 1:end], TokenKind.QUOTED))
            pos = end + 1
            continue
        start = pos
        if char.isspace():
            while pos < length and line[pos].isspace():
                pos += 1
            tokens.append(Token(line[start:pos], TokenKind.WHITESPACE))
            continue
        while pos < length and not line[pos].isspace() and line[pos] not in QUOTES:
            pos += 1
        tokens.append(Token(line[start:pos], TokenKind.WORD))
    return tokens
