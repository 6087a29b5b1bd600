"""Rules that suppress an otherwise reportable run."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from spacerun.index import SourceIndex
from spacerun.scanner import WhitespaceRun
from spacerun.tokens import Token, is_comment, same_line

DEFAULT_EXCEPTIONS: Mapping[str, bool] = {"Property": True}


class EolMode(Enum):
    """What a suppressed end-of-line comment does to the rest of the scan."""

    SKIP = "skip"  # skip the run before the comment, keep scanning
    ABORT = "abort"  # stop scanning the file (legacy behavior)


def merge_exceptions(*overrides: Mapping[str, bool]) -> frozenset[str]:
    """Apply overrides in order on top of the defaults.

    ``True`` adds or keeps a node type, ``False`` removes it.
    """
    merged = {name for name, enabled in DEFAULT_EXCEPTIONS.items() if enabled}
    for override in overrides:
        for name, enabled in override.items():
            if enabled:
                merged.add(name)
            else:
                merged.discard(name)
    return frozenset(merged)


class ExceptionPolicy:
    """Decide whether a run is exempt from reporting.

    The two rules are independent; the caller checks ``is_eol_comment`` first
    because in ABORT mode its outcome ends the scan.
    """

    def __init__(self, exceptions: frozenset[str], ignore_eol_comments: bool = True) -> None:
        self.exceptions = exceptions
        self.ignore_eol_comments = ignore_eol_comments

    def is_eol_comment(self, token: Token, index: SourceIndex) -> bool:
        """Return True if token is a comment ending its line and those are ignored."""
        if not self.ignore_eol_comments or not is_comment(token):
            return False
        following = index.token_after(token)
        return following is None or not same_line(token, following)

    def is_excepted(self, run: WhitespaceRun, index: SourceIndex) -> bool:
        """Return True if the node enclosing the run's last space is an exception."""
        if not self.exceptions:
            return False
        node = index.node_at(run.end - 1)
        return node is not None and node.type in self.exceptions

    def should_suppress(self, run: WhitespaceRun, token: Token, index: SourceIndex) -> bool:
        return self.is_eol_comment(token, index) or self.is_excepted(run, index)
