"""Configuration file loading and validation."""

from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Any

from spacerun.ast import NODE_TYPES
from spacerun.errors import ConfigError
from spacerun.policy import EolMode

CONFIG_NAME = "spacerun.toml"

# Node type names are CamelCase words: Property, VariableDeclarator, ...
NODE_TYPE_PATTERN = re.compile(r"^([A-Z][a-z]*)+$")

_KNOWN_KEYS = frozenset({"exceptions", "ignore_eol_comments", "eol_mode"})


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML: {exc}", path) from exc
    return validate(raw, path)


def validate(raw: dict[str, Any], path: Path | None = None) -> dict[str, Any]:
    """Check raw against the option schema and return it unchanged.

    Raises ConfigError naming the first offending key.
    """
    for key in raw:
        if key not in _KNOWN_KEYS:
            raise ConfigError(f"unknown option '{key}'", path)

    exceptions = raw.get("exceptions", {})
    if not isinstance(exceptions, dict):
        raise ConfigError("'exceptions' must be a table of node types", path)
    for name, enabled in exceptions.items():
        check_node_type(name, path)
        if not isinstance(enabled, bool):
            raise ConfigError(f"exception '{name}' must be true or false", path)

    ignore = raw.get("ignore_eol_comments", True)
    if not isinstance(ignore, bool):
        raise ConfigError("'ignore_eol_comments' must be true or false", path)

    mode = raw.get("eol_mode", EolMode.SKIP.value)
    if mode not in {m.value for m in EolMode}:
        choices = ", ".join(repr(m.value) for m in EolMode)
        raise ConfigError(f"'eol_mode' must be one of {choices}", path)

    return raw


def check_node_type(name: str, path: Path | None = None) -> None:
    """Raise ConfigError unless name is a node type the parser produces."""
    if not NODE_TYPE_PATTERN.match(name):
        raise ConfigError(f"invalid node type '{name}' (expected e.g. 'Property')", path)
    if name not in NODE_TYPES:
        supported = ", ".join(sorted(NODE_TYPES))
        raise ConfigError(f"unsupported node type '{name}' (supported: {supported})", path)
