"""Test error messages, position accuracy, and context snippets."""

import pytest

from spacerun.errors import ConfigError, LexError, ParseError
from spacerun.lexer import tokenize
from spacerun.parser import parse


class TestErrorPositions:
    def test_unterminated_string_position(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a = 'abc")
        err = exc_info.value
        assert err.position.line == 1
        assert err.position.column == 5

    def test_error_on_second_line(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a;\n/* open")
        err = exc_info.value
        assert err.position.line == 2
        assert err.position.column == 1

    def test_parse_error_span(self):
        with pytest.raises(ParseError) as exc_info:
            parse("f(a]", "test.js")
        err = exc_info.value
        assert err.span.start.column == 4


class TestErrorFormatting:
    def test_format_contains_line(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("some = 'text\nmore")
        formatted = exc_info.value.format()
        assert "some = 'text" in formatted

    def test_format_contains_caret(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("abc = 'x")
        formatted = exc_info.value.format()
        assert "^" in formatted

    def test_format_contains_filename(self):
        with pytest.raises(ParseError) as exc_info:
            parse("(a", "app.js")
        formatted = exc_info.value.format("app.js")
        assert "app.js:1:1" in formatted
        assert formatted.startswith("error: unclosed '('")

    def test_underline_width(self):
        with pytest.raises(ParseError) as exc_info:
            parse("a >>> )", "test.js")
        last_line = exc_info.value.format().splitlines()[-1]
        assert last_line.endswith("      ^")

    def test_default_filename(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("'x")
        assert "input.js:1:1" in str(exc_info.value)


class TestConfigError:
    def test_without_path(self):
        err = ConfigError("bad option")
        assert str(err) == "error: bad option"

    def test_with_path(self, tmp_path):
        path = tmp_path / "spacerun.toml"
        err = ConfigError("bad option", path)
        assert str(err) == f"error: bad option\n  --> {path}"
