"""Tests for custom pattern configuration."""

import json
from pathlib import Path

import pytest

from marginalia.config import load_custom_patterns, resolve_pattern_file
from marginalia.models.pattern import CustomPattern


def test_load_custom_patterns(tmp_path: Path) -> None:
    path = tmp_path / "patterns.json"
    path.write_text(
        json.dumps(
            [
                {"name": "dashes", "pattern": "--(.+?)--", "color": "#00ff00"},
                {"name": "stars", "pattern": r"\*\*\*(.+?)\*\*\*"},
            ]
        )
    )

    patterns = load_custom_patterns(path)

    assert patterns == [
        CustomPattern(name="dashes", pattern="--(.+?)--", color="#00ff00"),
        CustomPattern(name="stars", pattern=r"\*\*\*(.+?)\*\*\*"),
    ]


def test_load_custom_patterns_requires_list(tmp_path: Path) -> None:
    path = tmp_path / "patterns.json"
    path.write_text(json.dumps({"name": "dashes"}))
    with pytest.raises(ValueError, match="Expected a list"):
        load_custom_patterns(path)


def test_resolve_pattern_file_picks_first_existing(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    missing = tmp_path / "missing.json"
    present = tmp_path / "present.json"
    present.write_text("[]")
    monkeypatch.setattr("marginalia.config.CUSTOM_PATTERN_FILES", [missing, present])

    assert resolve_pattern_file() == present


def test_resolve_pattern_file_none_when_absent(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("marginalia.config.CUSTOM_PATTERN_FILES", [tmp_path / "nope.json"])
    assert resolve_pattern_file() is None
