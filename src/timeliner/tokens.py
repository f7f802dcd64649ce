"""Token types and source position data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    WHITESPACE = auto()
    COMMENT = auto()  # value is the text after '#'
    KEYWORD = auto()  # fixed keywords and net sync log types
    IDENTIFIER = auto()
    STRING_LITERAL = auto()  # value is the decoded string
    NUMERIC_LITERAL = auto()  # value is the numeric text
    REGULAR_EXPRESSION = auto()  # value is the pattern between the slashes
    PUNCTUATOR = auto()  # , :
    BRACE = auto()  # { }
    UNKNOWN = auto()  # zero width, raw is the unconsumed remainder

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line, 0-based column and offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with decoded value and original source text."""

    type: TokenType
    value: str
    raw: str
    span: Span


KEYWORDS: tuple[str, ...] = (
    "sync",
    "window",
    "jump",
    "duration",
    "hideall",
    "alertall",
    "before",
    "sound",
    "define",
    "infotext",
    "alerttext",
    "alarmtext",
)


def describe(tok: Token) -> str:
    """Short human-readable description of a token for error messages."""
    if tok.type == TokenType.EOF:
        return "end of input"
    kind = tok.type.name.lower().replace("_", " ")
    return f"{kind} '{tok.raw}'"
