"""Configuration constants for marginalia."""

import json
import os
from pathlib import Path

from marginalia.models.pattern import CustomPattern

# Query parser limits. Each grammar rule entry counts as one level of depth.
MAX_PARSE_DEPTH: int = 50
MAX_LOOP_ITERATIONS: int = 100

# <mark> elements carry no color of their own.
MARK_DEFAULT_COLOR: str = "#ffff00"

NAMED_COLORS: dict[str, str] = {
    "yellow": "#ffff00",
    "red": "#ff0000",
    "green": "#008000",
    "blue": "#0000ff",
    "orange": "#ffa500",
    "purple": "#800080",
    "pink": "#ffc0cb",
    "cyan": "#00ffff",
    "magenta": "#ff00ff",
    "lime": "#00ff00",
    "brown": "#a52a2a",
    "gray": "#808080",
    "grey": "#808080",
    "black": "#000000",
    "white": "#ffffff",
}

# Custom highlight pattern files. First file found is used.
CUSTOM_PATTERN_FILES: list[Path] = [
    Path(os.environ.get("MARGINALIA_PATTERNS", "~/.config/marginalia/patterns.json")).expanduser(),
    Path("~/.marginalia/patterns.json").expanduser(),
]


def resolve_pattern_file() -> Path | None:
    """Return the first existing custom pattern file, or None."""
    for candidate in CUSTOM_PATTERN_FILES:
        if candidate.is_file():
            return candidate
    return None


def load_custom_patterns(path: Path) -> list[CustomPattern]:
    """Read custom highlight patterns from a JSON file.

    The file holds a list of objects with ``name``, ``pattern`` and an
    optional ``color``. Patterns are not compiled here; invalid ones are
    skipped at scan time.

    Args:
        path: JSON file to read.

    Returns:
        The patterns in file order.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        msg = f"Expected a list of patterns in {path}, got {type(data).__name__}"
        raise ValueError(msg)
    return [
        CustomPattern(name=item["name"], pattern=item["pattern"], color=item.get("color"))
        for item in data
    ]
