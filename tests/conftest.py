"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from spacerun import lint
from spacerun.lexer import tokenize
from spacerun.policy import EolMode, merge_exceptions
from spacerun.report import Diagnostic
from spacerun.rule import Options
from spacerun.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def run_rule():
    """Return a helper that lints source with the given options."""

    def _run(
        source: str,
        exceptions: dict[str, bool] | None = None,
        ignore_eol_comments: bool = True,
        eol_mode: EolMode = EolMode.SKIP,
    ) -> list[Diagnostic]:
        options = Options(
            exceptions=merge_exceptions(exceptions or {}),
            ignore_eol_comments=ignore_eol_comments,
            eol_mode=eol_mode,
        )
        return lint(source, "test.js", options)

    return _run


def messages(diagnostics: list[Diagnostic]) -> list[str]:
    """Return the message of each diagnostic."""
    return [d.message for d in diagnostics]


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"
