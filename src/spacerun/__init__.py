"""Detect and collapse runs of multiple spaces between tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spacerun.report import Diagnostic
    from spacerun.rule import Options

__version__ = "0.1.0"


def lint(
    source: str,
    filename: str = "input.js",
    options: Options | None = None,
) -> list[Diagnostic]:
    """Tokenize, parse, and check source, returning its diagnostics."""
    from spacerun.index import TokenIndex
    from spacerun.parser import parse
    from spacerun.rule import check

    doc = parse(source, filename)
    return check(source, doc.comments, TokenIndex.from_document(doc), options)


def fix(
    source: str,
    filename: str = "input.js",
    options: Options | None = None,
) -> str:
    """Return source with every reported run collapsed to one space."""
    from spacerun.report import apply_fixes

    return apply_fixes(source, lint(source, filename, options))
