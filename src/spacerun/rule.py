"""The multiple-spaces rule: one pass over a source text."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from spacerun.comments import CommentCursor
from spacerun.index import SourceIndex
from spacerun.policy import EolMode, ExceptionPolicy, merge_exceptions
from spacerun.report import Diagnostic, build_diagnostic
from spacerun.scanner import iter_runs
from spacerun.tokens import Token


@dataclass(frozen=True, slots=True)
class Options:
    """Rule options, fixed for the duration of a scan."""

    exceptions: frozenset[str] = field(default_factory=merge_exceptions)
    ignore_eol_comments: bool = True
    eol_mode: EolMode = EolMode.SKIP

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], *overrides: Mapping[str, bool]) -> Options:
        """Build options from a validated config mapping.

        ``overrides`` are further exception mappings applied after the
        config's own, e.g. from the command line.
        """
        return cls(
            exceptions=merge_exceptions(raw.get("exceptions", {}), *overrides),
            ignore_eol_comments=raw.get("ignore_eol_comments", True),
            eol_mode=EolMode(raw.get("eol_mode", EolMode.SKIP.value)),
        )


def scan(
    source: str,
    comments: Sequence[Token],
    index: SourceIndex,
    options: Options,
    report: Callable[[Diagnostic], None],
) -> None:
    """Report every multiple-space run in source that no rule exempts.

    ``comments`` must be sorted by start offset. Runs ending inside a comment
    are skipped, as are runs not followed directly by a token (trailing
    spaces, or spaces inside a string or regex).
    """
    cursor = CommentCursor(comments)
    policy = ExceptionPolicy(options.exceptions, options.ignore_eol_comments)

    for run in iter_runs(source):
        if cursor.inside(run.end):
            continue

        token = index.token_at(run.end)
        if token is None:
            continue

        if options.eol_mode is EolMode.ABORT and policy.is_eol_comment(token, index):
            return

        if policy.should_suppress(run, token, index):
            continue

        report(build_diagnostic(token, index.token_before(token), run))


def check(
    source: str,
    comments: Sequence[Token],
    index: SourceIndex,
    options: Options | None = None,
) -> list[Diagnostic]:
    """Run the rule and return the diagnostics in source order."""
    diagnostics: list[Diagnostic] = []
    scan(source, comments, index, options or Options(), diagnostics.append)
    return diagnostics
