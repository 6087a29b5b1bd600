"""Forward-only cursor answering "is this offset inside a comment"."""

from __future__ import annotations

from collections.abc import Sequence

from spacerun.tokens import Token


class CommentCursor:
    """Walk a list of comments sorted by start offset, one scan at a time.

    ``inside`` must be called with non-decreasing offsets: once a comment ends
    before the queried offset it is dropped for good, which keeps a full scan
    linear in the number of comments. Create a new cursor for every scan.
    """

    def __init__(self, comments: Sequence[Token]) -> None:
        self._comments = comments
        self._index = 0

    @property
    def index(self) -> int:
        """Position of the first comment not yet passed."""
        return self._index

    def inside(self, offset: int) -> bool:
        """Return True if offset lies strictly between a comment's start and end."""
        comments = self._comments
        while self._index < len(comments) and offset > comments[self._index].span.end.offset:
            self._index += 1
        if self._index == len(comments):
            return False
        span = comments[self._index].span
        return span.start.offset < offset < span.end.offset
