"""--debug token and syntax tree dumps to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from spacerun.ast import Node
from spacerun.tokens import Span, Token


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token: location, type, and raw text."""
    for tok in tokens:
        file.write(f"{_where(tok.span)} {tok.type.name} {tok.raw!r}\n")


def dump_tree(node: Node, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable syntax tree to *file*."""
    _dump_node(node, 0, file)


def _where(span: Span) -> str:
    return f"{span.start.line}:{span.start.column}-{span.end.line}:{span.end.column}"


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    f.write(f"{'  ' * depth}{node.type} {_where(node.span)}\n")
    for child in node.children:
        _dump_node(child, depth + 1, f)
