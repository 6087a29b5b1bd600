"""Property-based tests for the rule using Hypothesis.

Sources are built from lines of simple tokens joined by gaps of known
width, so the expected findings can be counted from the gaps alone.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from spacerun import fix, lint
from spacerun.scanner import iter_runs

TOKENS = ["a", "foo", "bar_1", "$x", "1", "42", "=", "+", ";", ",", "*"]

gaps = st.integers(min_value=1, max_value=4)


@st.composite
def lines(draw) -> tuple[str, str, int]:
    """Return (line, collapsed line, number of wide gaps)."""
    words = draw(st.lists(st.sampled_from(TOKENS), min_size=1, max_size=8))
    widths = [draw(gaps) for _ in words[1:]]
    indent = " " * draw(st.integers(min_value=0, max_value=8))
    trailing = " " * draw(st.integers(min_value=0, max_value=3))

    line = words[0]
    for word, width in zip(words[1:], widths):
        line += " " * width + word
    collapsed = indent + " ".join(words) + trailing
    return indent + line + trailing, collapsed, sum(1 for w in widths if w >= 2)


sources = st.lists(lines(), min_size=1, max_size=6)


class TestRuleProperties:
    @given(sources)
    @settings(max_examples=200)
    def test_one_finding_per_wide_gap(self, parts) -> None:
        source = "\n".join(p[0] for p in parts)
        assert len(lint(source)) == sum(p[2] for p in parts)

    @given(sources)
    @settings(max_examples=200)
    def test_fix_collapses_gaps_only(self, parts) -> None:
        source = "\n".join(p[0] for p in parts)
        assert fix(source) == "\n".join(p[1] for p in parts)

    @given(sources)
    @settings(max_examples=100)
    def test_fixed_source_is_clean(self, parts) -> None:
        source = "\n".join(p[0] for p in parts)
        assert lint(fix(source)) == []

    @given(sources)
    @settings(max_examples=100)
    def test_findings_in_source_order(self, parts) -> None:
        source = "\n".join(p[0] for p in parts)
        offsets = [d.span.start.offset for d in lint(source)]
        assert offsets == sorted(offsets)
        assert len(set(offsets)) == len(offsets)

    @given(sources)
    @settings(max_examples=100)
    def test_indentation_never_reported(self, parts) -> None:
        source = "\n".join(p[0] for p in parts)
        for d in lint(source):
            assert d.run_span.start.column > 1


class TestScannerProperties:
    @given(st.text(alphabet="ab; \t\n\r", max_size=300))
    @settings(max_examples=200)
    def test_runs_are_spaces_only(self, source: str) -> None:
        for run in iter_runs(source):
            assert run.width >= 2
            assert source[run.start : run.end] == " " * run.width
            assert run.preceding not in (" ", "\t", "\n", "\r")

    @given(st.text(alphabet="ab; \t\n", max_size=300))
    @settings(max_examples=100)
    def test_runs_do_not_overlap(self, source: str) -> None:
        ends = -1
        for run in iter_runs(source):
            assert run.start > ends
            ends = run.end
