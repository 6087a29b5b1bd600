"""Offset-indexed access to tokens, comments, and syntax nodes.

The rule core only ever talks to a ``SourceIndex``; ``TokenIndex`` is the
implementation backed by the bundled lexer and parser. Another host
can supply its own tokens and tree by implementing the protocol.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterable
from typing import Protocol

from spacerun.ast import Document, Node
from spacerun.tokens import Token, TokenType


class SourceIndex(Protocol):
    """Range queries over one tokenized source text."""

    def token_at(self, offset: int) -> Token | None:
        """Return the token or comment whose range starts exactly at offset."""
        ...

    def token_before(self, token: Token) -> Token | None:
        """Return the token or comment immediately preceding token."""
        ...

    def token_after(self, token: Token) -> Token | None:
        """Return the token or comment immediately following token."""
        ...

    def node_at(self, offset: int) -> Node | None:
        """Return the smallest node whose range contains offset."""
        ...


class TokenIndex:
    """SourceIndex over a token list (comments included) and a syntax tree.

    Token lookups are binary searches over start offsets. Node lookup descends
    from the root, at each level picking the child whose range contains the
    offset; siblings never overlap, so at most one child qualifies.
    """

    def __init__(self, tokens: Iterable[Token], program: Node | None = None) -> None:
        self._tokens = [t for t in tokens if t.type != TokenType.EOF]
        self._starts = [t.span.start.offset for t in self._tokens]
        self._program = program
        # id of each inner node -> start offsets of its children
        self._child_starts: dict[int, list[int]] = {}
        if program is not None:
            self._collect_starts(program)

    @classmethod
    def from_document(cls, doc: Document) -> TokenIndex:
        return cls(doc.tokens, doc.program)

    def token_at(self, offset: int) -> Token | None:
        i = bisect_left(self._starts, offset)
        if i < len(self._starts) and self._starts[i] == offset:
            return self._tokens[i]
        return None

    def token_before(self, token: Token) -> Token | None:
        i = bisect_left(self._starts, token.span.start.offset)
        if i > 0:
            return self._tokens[i - 1]
        return None

    def token_after(self, token: Token) -> Token | None:
        i = bisect_right(self._starts, token.span.start.offset)
        if i < len(self._tokens):
            return self._tokens[i]
        return None

    def node_at(self, offset: int) -> Node | None:
        node = self._program
        if node is None or not node.contains(offset):
            return None
        while True:
            if not node.children:
                return node
            i = bisect_right(self._child_starts[id(node)], offset) - 1
            if i < 0 or not node.children[i].contains(offset):
                return node
            node = node.children[i]

    def _collect_starts(self, root: Node) -> None:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.children:
                self._child_starts[id(node)] = [c.span.start.offset for c in node.children]
                stack.extend(node.children)
