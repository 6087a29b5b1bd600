"""Test run detection over raw text."""

from spacerun.scanner import WhitespaceRun, iter_runs


def runs(source: str) -> list[tuple[int, int]]:
    return [(r.start, r.end) for r in iter_runs(source)]


class TestMatches:
    def test_no_runs(self):
        assert runs("a = 1;") == []

    def test_single_run(self):
        assert runs("a = 1;  b = 2;") == [(6, 8)]

    def test_run_is_maximal(self):
        assert runs("a     b") == [(1, 6)]

    def test_width(self):
        run = next(iter_runs("a    b"))
        assert run.width == 4

    def test_several_runs_in_order(self):
        assert runs("a  b  c") == [(1, 3), (4, 6)]

    def test_anchor_character(self):
        assert next(iter_runs("x;  y")).preceding == "x"
        assert next(iter_runs(";  y")).preceding == ";"

    def test_tab_filler(self):
        # the tab is consumed as the filler between anchor and run
        assert runs("a\t  b") == [(2, 4)]

    def test_returns_dataclass(self):
        assert list(iter_runs("a  b")) == [WhitespaceRun(1, 3, "a")]


class TestNonMatches:
    def test_single_spaces(self):
        assert runs("a b c d") == []

    def test_indentation(self):
        assert runs("a\n    b") == []

    def test_indentation_after_tab(self):
        assert runs("a\n\t    b") == []

    def test_crlf_indentation(self):
        assert runs("a\r\n    b") == []

    def test_unicode_separator_indentation(self):
        assert runs("a\u2028    b") == []

    def test_leading_spaces(self):
        assert runs("    a") == []

    def test_tabs_only(self):
        assert runs("a\t\tb") == []

    def test_trailing_spaces_still_match(self):
        assert runs("a  \nb") == [(1, 3)]
