"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    PUNCTUATOR = auto()  # { } ( ) ; , = => ...
    IDENTIFIER = auto()
    KEYWORD = auto()
    NUMBER = auto()
    STRING = auto()  # '...' or "..."
    TEMPLATE = auto()  # `...` including any ${ } expressions
    REGEX = auto()  # /body/flags

    # Comments: value is the body without delimiters
    BLOCK_COMMENT = auto()  # /* ... */
    LINE_COMMENT = auto()  # // ...

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position (end is exclusive)."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with its value and original source text."""

    type: TokenType
    value: str
    raw: str
    span: Span


# \n, \r, LINE SEPARATOR, PARAGRAPH SEPARATOR
LINEBREAKS = frozenset("\n\r\u2028\u2029")

LINEBREAK_PATTERN = re.compile("\r\n|[\n\r\u2028\u2029]")

KEYWORDS = frozenset(
    {
        "await", "break", "case", "catch", "class", "const", "continue",
        "debugger", "default", "delete", "do", "else", "export", "extends",
        "false", "finally", "for", "function", "if", "import", "in",
        "instanceof", "let", "new", "null", "of", "return", "super", "switch",
        "this", "throw", "true", "try", "typeof", "var", "void", "while",
        "with", "yield",
    }
)  # fmt: skip


def is_comment(token: Token) -> bool:
    """Return True if token is a block or line comment."""
    return token.type in (TokenType.BLOCK_COMMENT, TokenType.LINE_COMMENT)


def same_line(left: Token, right: Token) -> bool:
    """Return True if left ends on the line where right starts."""
    return left.span.end.line == right.span.start.line


_IDENT_SPECIAL = frozenset("_$")
_IDENT_JOINERS = frozenset("\u200c\u200d")


def is_ident_start(ch: str) -> bool:
    """Return True if ch can start an identifier."""
    return ch.isalpha() or ch in _IDENT_SPECIAL


def is_ident_char(ch: str) -> bool:
    """Return True if ch can continue an identifier."""
    return ch.isalnum() or ch in _IDENT_SPECIAL or ch in _IDENT_JOINERS
