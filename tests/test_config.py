import json
import sys
from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from toki.toki_config import (
    DEFAULT_CONFIG,
    ConfigError,
    ParseConfig,
    load_config,
    recursion_limit,
)


def test_defaults() -> None:
    assert DEFAULT_CONFIG == ParseConfig()
    assert DEFAULT_CONFIG.x_ala_x_partial_parsing is False
    assert DEFAULT_CONFIG.max_nesting_depth == 16


def test_from_dict_accepts_both_spellings() -> None:
    config = ParseConfig.from_dict({"xAlaXPartialParsing": True, "max_nesting_depth": 4})
    assert config == ParseConfig(x_ala_x_partial_parsing=True, max_nesting_depth=4)


def test_from_dict_reports_every_problem() -> None:
    with pytest.raises(ConfigError) as e:
        ParseConfig.from_dict(
            {"xAlaXPartialParsing": "yes", "maxNestingDepth": 0, "colour": "red"}
        )
    assert e.value.problems == [
        "'xAlaXPartialParsing' must be true or false",
        "'maxNestingDepth' must be a positive integer",
        "'colour' is not a configuration option",
    ]


def test_from_dict_rejects_bool_as_integer() -> None:
    with pytest.raises(ConfigError):
        ParseConfig.from_dict({"recursion_limit": True})


def test_from_dict_requires_object() -> None:
    with pytest.raises(ConfigError, match="JSON object"):
        ParseConfig.from_dict(["max_nesting_depth"])  # type: ignore[arg-type]


@given(st.integers(min_value=1, max_value=10_000))  # type: ignore[misc]
def test_positive_depth_round_trips(depth: int) -> None:
    assert ParseConfig.from_dict({"maxNestingDepth": depth}).max_nesting_depth == depth


def test_with_options_returns_copy() -> None:
    config = ParseConfig()
    changed = config.with_options(x_ala_x_partial_parsing=True)
    assert changed.x_ala_x_partial_parsing is True
    assert config.x_ala_x_partial_parsing is False


def test_load_config(tmp_path: Path) -> None:
    path = tmp_path / "toki.json"
    path.write_text(json.dumps({"recursionLimit": 5000}), encoding="utf-8")
    assert load_config(str(path)).recursion_limit == 5000


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Failed to load config file"):
        load_config(str(tmp_path / "missing.json"))


def test_load_config_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_recursion_limit_restores_previous() -> None:
    previous = sys.getrecursionlimit()
    with recursion_limit(previous + 1000):
        assert sys.getrecursionlimit() == previous + 1000
    assert sys.getrecursionlimit() == previous


def test_recursion_limit_never_lowers() -> None:
    previous = sys.getrecursionlimit()
    with recursion_limit(10):
        assert sys.getrecursionlimit() == previous
    assert sys.getrecursionlimit() == previous
