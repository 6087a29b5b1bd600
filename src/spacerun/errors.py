"""Error types with formatted source context."""

from __future__ import annotations

from pathlib import Path

from spacerun.tokens import LINEBREAK_PATTERN, Position, Span


def format_snippet(
    level: str,
    message: str,
    source: str,
    filename: str,
    line: int,
    column: int,
    width: int,
) -> str:
    """Render a message with the offending source line and a caret underline.

    ``line`` and ``column`` are 1-based; ``width`` is clamped to at least one
    caret.
    """
    lines = LINEBREAK_PATTERN.split(source)
    line_idx = line - 1
    source_line = lines[line_idx] if 0 <= line_idx < len(lines) else ""

    pad = " " * (column - 1)
    carets = "^" * max(1, width)

    line_num = str(line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"{level}: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{line}:{column}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(Exception):
    """Raised on the first lexing error, with position and source context."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.js") -> str:
        return format_snippet(
            "error",
            self.message,
            self.source,
            filename,
            self.position.line,
            self.position.column,
            1,
        )


class ParseError(Exception):
    """Raised on the first bracket mismatch, with span and source context."""

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.js") -> str:
        # Underline the full span when on one line, otherwise a single caret
        if self.span.end.line == self.span.start.line:
            width = self.span.end.column - self.span.start.column
        else:
            width = 1
        return format_snippet(
            "error",
            self.message,
            self.source,
            filename,
            self.span.start.line,
            self.span.start.column,
            width,
        )


class ConfigError(Exception):
    """Raised when a configuration mapping does not match the option schema."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(self.format())

    def format(self) -> str:
        if self.path is None:
            return f"error: {self.message}"
        return f"error: {self.message}\n  --> {self.path}"
