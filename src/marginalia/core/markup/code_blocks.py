"""Find code regions of a Markdown document, where markup is literal."""

import re
from collections.abc import Iterable

from marginalia.models.annotation import TextRange

_FENCED_CODE_RE = re.compile(r"^(```|~~~).*?\n([\s\S]*?)\n\1\s*$", re.MULTILINE)
_INLINE_CODE_RE = re.compile(r"`([^`\n]+?)`")


def get_code_block_ranges(content: str) -> list[TextRange]:
    """Return the ranges of fenced code blocks and inline code spans."""
    ranges = [TextRange(m.start(), m.end()) for m in _FENCED_CODE_RE.finditer(content)]
    ranges.extend(TextRange(m.start(), m.end()) for m in _INLINE_CODE_RE.finditer(content))
    return ranges


def is_excluded(start: int, end: int, ranges: Iterable[TextRange]) -> bool:
    """Return True if ``[start, end)`` lies fully inside any of ``ranges``."""
    return any(r.contains(start, end) for r in ranges)
