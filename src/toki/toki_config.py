"""
Parse configuration for the toki lexer and grammar.

The configuration is passed explicitly to `Lexer`, `Grammar` and `parse`;
nothing is read from global state.

Classes:
    - ParseConfig: Immutable set of parsing options.
    - ConfigError: Raised when a configuration file or mapping is invalid.

Functions:
    - load_config(path): Reads a `ParseConfig` from a JSON file.
    - recursion_limit(limit): Context manager raising the recursion limit.

Example JSON structure:
    {
        "xAlaXPartialParsing": true,
        "max_nesting_depth": 8
    }
"""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Any


class ConfigError(Exception):
    """Raised when a parse configuration is invalid.

    Attributes:
        problems (list[str]): Every invalid key or value found.

    Example:
        raise ConfigError("Invalid configuration", ["'max_nesting_depth' must be ≥ 1"])
    """

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or []


@dataclass(frozen=True)
class ParseConfig:
    """Options consulted while lexing and parsing.

    Attributes:
        x_ala_x_partial_parsing (bool): When true the lexer does not fold
            "x ala x" into a single token; the grammar parses the three words.
        max_nesting_depth (int): Deepest quotation nesting accepted.
        recursion_limit (int): Interpreter recursion limit used while parsing.
    """

    x_ala_x_partial_parsing: bool = False
    max_nesting_depth: int = 16
    recursion_limit: int = 20000

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParseConfig:
        """Builds a config from a mapping, accepting snake_case or camelCase keys.

        Raises:
            ConfigError: On unknown keys or values of the wrong type.
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a JSON object")

        known = {field.name: field.type for field in fields(cls)}
        values: dict[str, Any] = {}
        problems: list[str] = []
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                problems.append(f"'{key}' is not a configuration option")
                continue
            if known[name] == "bool":
                if not isinstance(value, bool):
                    problems.append(f"'{key}' must be true or false")
                    continue
            elif isinstance(value, bool) or not isinstance(value, int) or value < 1:
                problems.append(f"'{key}' must be a positive integer")
                continue
            values[name] = value

        if problems:
            raise ConfigError("Invalid configuration", problems)
        return cls(**values)

    def with_options(self, **changes: Any) -> ParseConfig:
        """Returns a copy with the given options replaced."""
        return replace(self, **changes)


_ALIASES = {
    "xAlaXPartialParsing": "x_ala_x_partial_parsing",
    "maxNestingDepth": "max_nesting_depth",
    "recursionLimit": "recursion_limit",
}


def load_config(path: str) -> ParseConfig:
    """Loads a `ParseConfig` from a JSON file.

    Args:
        path: Path to the JSON configuration file.

    Returns:
        The parsed configuration; missing keys keep their defaults.

    Raises:
        ConfigError: If the file cannot be read or holds invalid options.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to load config file: {e}") from e
    return ParseConfig.from_dict(data)


DEFAULT_CONFIG = ParseConfig()


@contextmanager
def recursion_limit(limit: int) -> Iterator[None]:
    """Raises the interpreter recursion limit to `limit` for the duration of a block.

    The limit is never lowered; the previous value is restored on exit.
    """
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous, limit))
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)
