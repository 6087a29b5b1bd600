"""Tests for the CLI module: arg parsing, exit codes, fixing, end-to-end."""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from spacerun.cli import build_parser, check_file, main, parse_exception_arg, resolve_options

# ---------------------------------------------------------------------------
# Argument parsing helpers
# ---------------------------------------------------------------------------


class TestParseHelpers:
    def test_parse_exception_true(self) -> None:
        assert parse_exception_arg("ArrayExpression=true") == ("ArrayExpression", True)

    def test_parse_exception_false(self) -> None:
        assert parse_exception_arg("Property=off") == ("Property", False)

    def test_parse_exception_case_insensitive(self) -> None:
        assert parse_exception_arg("Property=FALSE") == ("Property", False)

    def test_parse_exception_no_equals_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_exception_arg("Property")

    def test_parse_exception_bad_bool_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError, match="invalid boolean"):
            parse_exception_arg("Property=maybe")

    def test_parse_exception_bad_name_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError, match="invalid node type"):
            parse_exception_arg("property=true")

    def test_parse_exception_unsupported_name_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError, match="unsupported node type 'JSXElement'"):
            parse_exception_arg("JSXElement=true")


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_files_only(self) -> None:
        ns = build_parser().parse_args(["a.js", "b.js"])
        assert ns.files == ["a.js", "b.js"]
        assert ns.fix is False
        assert ns.ignore_eol_comments is None
        assert ns.eol_mode is None

    def test_exception_flags(self) -> None:
        ns = build_parser().parse_args(["a.js", "-x", "A=true", "--exception", "B=false"])
        assert ns.exception == ["A=true", "B=false"]

    def test_eol_flags(self) -> None:
        ns = build_parser().parse_args(["a.js", "--ignore-eol-comments", "--eol-mode", "abort"])
        assert ns.ignore_eol_comments is True
        assert ns.eol_mode == "abort"

    def test_bad_eol_mode_exits(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["a.js", "--eol-mode", "stop"])

    def test_requires_a_file(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------


class TestMain:
    def test_clean_file(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "clean.js"
        src.write_text("var a = 1;\n")
        assert main([str(src)]) == 0
        assert capsys.readouterr().out == ""

    def test_reports_diagnostics(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "app.js"
        src.write_text("var a =  1;\n")
        assert main([str(src)]) == 1
        out = capsys.readouterr().out
        assert "warning: Multiple spaces found before '1'." in out
        assert f"{src}:1:8" in out

    def test_fix_rewrites_file(self, tmp_path: Path) -> None:
        src = tmp_path / "app.js"
        src.write_text("var a =  1,  b = 2;\n")
        assert main([str(src), "--fix"]) == 0
        assert src.read_text() == "var a = 1, b = 2;\n"

    def test_fix_keeps_crlf(self, tmp_path: Path) -> None:
        src = tmp_path / "app.js"
        src.write_bytes(b"var a =  1;\r\nvar b = 2;\r\n")
        assert main([str(src), "--fix"]) == 0
        assert src.read_bytes() == b"var a = 1;\r\nvar b = 2;\r\n"

    def test_exception_flag(self, tmp_path: Path) -> None:
        src = tmp_path / "app.js"
        src.write_text("var o = { a:  1 };\n")
        assert main([str(src)]) == 0
        assert main([str(src), "-x", "Property=false"]) == 1

    def test_eol_mode_flag(self, tmp_path: Path) -> None:
        src = tmp_path / "app.js"
        src.write_text("x;  // note\ny =  2;\n")
        assert main([str(src)]) == 1
        assert main([str(src), "--eol-mode", "abort"]) == 0

    def test_lex_error_exit_code(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "bad.js"
        src.write_text("var s = 'open\n")
        assert main([str(src)]) == 2
        err = capsys.readouterr().err
        assert "unterminated string" in err
        assert f"{src}:1:9" in err

    def test_parse_error_exit_code(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "bad.js"
        src.write_text("f(a\n")
        assert main([str(src)]) == 2
        assert "unclosed" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "nope.js")]) == 2
        assert "cannot read" in capsys.readouterr().err

    def test_bad_exception_arg_exit_code(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "app.js"
        src.write_text("")
        assert main([str(src), "-x", "Property"]) == 2
        assert "expected NODE=BOOL" in capsys.readouterr().err

    def test_bad_config_exit_code(self, tmp_path: Path, capsys) -> None:
        (tmp_path / "spacerun.toml").write_text("colour = true\n")
        src = tmp_path / "app.js"
        src.write_text("")
        assert main([str(src)]) == 2
        assert "unknown option 'colour'" in capsys.readouterr().err

    def test_worst_status_wins(self, tmp_path: Path) -> None:
        good = tmp_path / "good.js"
        good.write_text("a  = 1;\n")
        bad = tmp_path / "bad.js"
        bad.write_text("(\n")
        assert main([str(good), str(bad)]) == 2

    def test_debug_dumps_to_stderr(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "app.js"
        src.write_text("f({ a: 1 });\n")
        assert main([str(src), "--debug"]) == 0
        err = capsys.readouterr().err
        assert "IDENTIFIER 'f'" in err
        assert "CallExpression" in err
        assert "    Property" in err


class TestCheckFile:
    def test_returns_source_and_diagnostics(self, tmp_path: Path) -> None:
        src = tmp_path / "app.js"
        src.write_text("a  = 1;\n")
        opts = resolve_options(build_parser().parse_args([str(src)]))
        source, diagnostics = check_file(src, opts)
        assert source == "a  = 1;\n"
        assert [d.value for d in diagnostics] == ["="]
