"""Command-line interface for spacerun."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

from spacerun.config import check_node_type, load_config
from spacerun.errors import ConfigError, LexError, ParseError
from spacerun.report import Diagnostic
from spacerun.rule import Options

_TRUE = frozenset({"true", "yes", "on", "1"})
_FALSE = frozenset({"false", "no", "off", "0"})


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    files: list[Path]
    rule: Options
    fix: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="spacerun",
        description="Report and collapse runs of multiple spaces between tokens",
    )
    p.add_argument("files", nargs="+", metavar="FILE", help="Source files to check")
    p.add_argument("--fix", action="store_true", help="Rewrite files with runs collapsed")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover spacerun.toml)",
    )
    p.add_argument(
        "-x",
        "--exception",
        action="append",
        default=[],
        metavar="NODE=BOOL",
        help="Enable or disable a node-type exception (repeatable)",
    )
    p.add_argument(
        "--ignore-eol-comments",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Ignore runs before a comment that ends its line (default: on)",
    )
    p.add_argument(
        "--eol-mode",
        choices=["skip", "abort"],
        default=None,
        help="On an ignored end-of-line comment, skip it or stop checking the file",
    )
    p.add_argument("--debug", action="store_true", help="Dump tokens and syntax tree to stderr")
    return p


def parse_exception_arg(s: str) -> tuple[str, bool]:
    """Parse a NODE=BOOL string into (node type, enabled)."""
    if "=" not in s:
        raise argparse.ArgumentTypeError(f"invalid exception format (expected NODE=BOOL): {s}")
    name, _, value = s.partition("=")
    try:
        check_node_type(name)
    except ConfigError as exc:
        raise argparse.ArgumentTypeError(exc.message) from exc
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return name, True
    if lowered in _FALSE:
        return name, False
    raise argparse.ArgumentTypeError(f"invalid boolean for exception '{name}': {value}")


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    files = [Path(f) for f in args.files]
    input_dir = files[0].parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = dict(load_config(config_path, input_dir))

    if args.ignore_eol_comments is not None:
        config["ignore_eol_comments"] = args.ignore_eol_comments
    if args.eol_mode is not None:
        config["eol_mode"] = args.eol_mode

    cli_exceptions = dict(parse_exception_arg(raw) for raw in args.exception)

    return CliOptions(
        files=files,
        rule=Options.from_mapping(config, cli_exceptions),
        fix=args.fix,
        debug=args.debug,
    )


def check_file(path: Path, options: CliOptions) -> tuple[str, list[Diagnostic]]:
    """Read and check one file, returning its source and diagnostics."""
    from spacerun.debug import dump_tokens, dump_tree
    from spacerun.index import TokenIndex
    from spacerun.parser import parse
    from spacerun.rule import check

    # newline="" keeps \r\n intact so offsets match the file on disk
    with open(path, encoding="utf-8", newline="") as f:
        source = f.read()
    doc = parse(source, str(path))

    if options.debug:
        dump_tokens(doc.tokens)
        dump_tree(doc.program)

    diagnostics = check(source, doc.comments, TokenIndex.from_document(doc), options.rule)
    return source, diagnostics


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    from spacerun.report import apply_fixes

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    status = 0
    for path in options.files:
        try:
            source, diagnostics = check_file(path, options)
        except (LexError, ParseError) as exc:
            print(exc.format(str(path)), file=sys.stderr)
            status = 2
            continue
        except OSError as exc:
            print(f"error: cannot read {path}: {exc.strerror}", file=sys.stderr)
            status = 2
            continue

        if options.fix and diagnostics:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(apply_fixes(source, diagnostics))
            print(f"Fixed {len(diagnostics)} run(s) in {path}", file=sys.stderr)
            continue

        for diag in diagnostics:
            print(diag.format(source, str(path)))
        if diagnostics:
            status = max(status, 1)

    return status
