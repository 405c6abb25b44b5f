"""Normalize CSS color expressions to ``#rrggbb``."""

import re

from marginalia.config import NAMED_COLORS

_HEX_RE = re.compile(r"#([0-9a-f]{3}|[0-9a-f]{6})")
_RGB_RE = re.compile(
    r"rgba?\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([0-9.]+%?)\s*)?\)"
)


def normalize_color(value: str) -> str | None:
    """Convert a named, hex or ``rgb()``/``rgba()`` color to canonical hex.

    Returns None for anything else, including channels above 255.
    """
    color = value.strip().lower()

    if color in NAMED_COLORS:
        return NAMED_COLORS[color]

    hex_match = _HEX_RE.fullmatch(color)
    if hex_match:
        digits = hex_match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return f"#{digits}"

    rgb_match = _RGB_RE.fullmatch(color)
    if rgb_match:
        channels = [int(rgb_match.group(i)) for i in (1, 2, 3)]
        if any(c > 255 for c in channels):
            return None
        return "#" + "".join(f"{c:02x}" for c in channels)

    return None


def is_transparent(value: str) -> bool:
    """Return True for ``transparent`` and zero-alpha ``rgba()`` values."""
    color = value.strip().lower()
    if color == "transparent":
        return True
    rgb_match = _RGB_RE.fullmatch(color)
    if rgb_match and rgb_match.group(4) is not None:
        alpha = rgb_match.group(4).rstrip("%")
        try:
            return float(alpha) == 0
        except ValueError:
            return False
    return False
