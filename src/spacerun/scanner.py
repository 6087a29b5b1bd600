"""Locate runs of two or more spaces that follow a non-blank character."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

# An anchor that is not a space, tab or line break, then an optional filler
# character (never a line break), then the run itself. The filler excludes
# spaces so that group 2 always starts at the first space of the run.
_RUN_PATTERN = re.compile("([^ \t\n\r\u2028\u2029])[^ \n\r\u2028\u2029]?( {2,})")


@dataclass(frozen=True, slots=True)
class WhitespaceRun:
    """A run of spaces: [start, end) offsets and the anchoring character."""

    start: int
    end: int
    preceding: str

    @property
    def width(self) -> int:
        return self.end - self.start


def iter_runs(source: str) -> Iterator[WhitespaceRun]:
    """Yield each run in order, resuming the search at the previous run's end.

    A run preceded only by indentation never matches, since its anchor must
    sit on the same line.
    """
    pos = 0
    while True:
        m = _RUN_PATTERN.search(source, pos)
        if m is None:
            return
        yield WhitespaceRun(m.start(2), m.end(2), m.group(1))
        pos = m.end()
