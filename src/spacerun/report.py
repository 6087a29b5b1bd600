"""Diagnostics and fixes for reported runs."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from spacerun.errors import format_snippet
from spacerun.scanner import WhitespaceRun
from spacerun.tokens import LINEBREAK_PATTERN, Position, Span, Token, TokenType

MESSAGE = "Multiple spaces found before '{value}'."

# Longest comment first line shown untruncated in a message, in UTF-16
# code units as an editor counts them
_COMMENT_PREVIEW = 12


@dataclass(frozen=True, slots=True)
class TextReplacement:
    """Replace source[start:end] with text."""

    start: int
    end: int
    text: str


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A reported run.

    ``span`` locates the token after the run; ``run_span`` covers the
    characters the fix replaces.
    """

    message: str
    value: str
    span: Span
    run_span: Span
    fix: TextReplacement | None

    def format(self, source: str, filename: str = "input.js") -> str:
        start = self.run_span.start
        return format_snippet(
            "warning",
            self.message,
            source,
            filename,
            start.line,
            start.column,
            self.run_span.end.column - start.column,
        )


def format_comment_value(token: Token) -> str:
    """Return the first line of a comment body, shortened for a message."""
    lines = LINEBREAK_PATTERN.split(token.value)
    first = lines[0]
    if len(lines) == 1 and _utf16_len(first) <= _COMMENT_PREVIEW:
        return first
    trailer = " " if token.type == TokenType.BLOCK_COMMENT else ""
    return f"{_utf16_prefix(first, _COMMENT_PREVIEW)} ...{trailer}"


def _utf16_len(text: str) -> int:
    """Return the length of text in UTF-16 code units."""
    return len(text.encode("utf-16-le")) // 2


def _utf16_prefix(text: str, units: int) -> str:
    # Stops before a surrogate pair that would not fit whole
    used = 0
    for i, ch in enumerate(text):
        used += 2 if ord(ch) > 0xFFFF else 1
        if used > units:
            return text[:i]
    return text


def format_value(token: Token) -> str:
    """Render a token for the message: raw text, or a comment preview."""
    if token.type == TokenType.BLOCK_COMMENT:
        return f"/*{format_comment_value(token)}*/"
    if token.type == TokenType.LINE_COMMENT:
        return f"//{format_comment_value(token)}"
    return token.value


def build_diagnostic(token: Token, previous: Token | None, run: WhitespaceRun) -> Diagnostic:
    """Report the run ending at token; the fix collapses the gap to one space.

    The gap is everything between the previous token and token, which may be
    wider than the run when a tab sits in front of it. When the previous token
    is on an earlier line (the anchor was whitespace the lexer skips, such as a
    no-break space) only the run itself is replaced, so the gap never spans a
    line break and its columns can be derived from token's position.
    """
    if previous is not None and previous.span.end.line == token.span.start.line:
        start = previous.span.end.offset
    else:
        start = run.start
    end = token.span.start.offset
    at = token.span.start

    def _position(offset: int) -> Position:
        return Position(at.line, at.column - (end - offset), offset)

    value = format_value(token)
    return Diagnostic(
        message=MESSAGE.format(value=value),
        value=value,
        span=token.span,
        run_span=Span(_position(start), at),
        fix=TextReplacement(start, end, " "),
    )


def apply_fixes(source: str, diagnostics: Iterable[Diagnostic]) -> str:
    """Apply every fix in offset order, skipping any that overlaps an earlier one."""
    fixes = sorted((d.fix for d in diagnostics if d.fix is not None), key=lambda f: f.start)
    parts: list[str] = []
    last = 0
    for fix in fixes:
        if fix.start < last:
            continue
        parts.append(source[last : fix.start])
        parts.append(fix.text)
        last = fix.end
    parts.append(source[last:])
    return "".join(parts)
