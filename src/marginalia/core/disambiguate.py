"""Pick the occurrence of a repeated markup nearest to a hint offset.

Annotations are stored with the offsets they had when they were scanned.
When the same text is highlighted several times, those stale offsets are
the only way to tell the occurrences apart, so every lookup goes through
``closest_to``.
"""

import re
from collections.abc import Callable, Iterable, Iterator
from typing import TypeVar

from marginalia.models.annotation import TextRange

T = TypeVar("T")

Matcher = Callable[[str], Iterable[TextRange]]
Target = str | re.Pattern[str] | Matcher


def iter_literal(text: str, needle: str) -> Iterator[TextRange]:
    """Yield non-overlapping occurrences of ``needle`` in ``text``."""
    if not needle:
        return
    pos = text.find(needle)
    while pos != -1:
        yield TextRange(pos, pos + len(needle))
        pos = text.find(needle, pos + len(needle))


def iter_pattern(text: str, pattern: re.Pattern[str]) -> Iterator[TextRange]:
    """Yield non-empty, non-overlapping matches of ``pattern`` in ``text``."""
    for match in pattern.finditer(text):
        if match.end() > match.start():
            yield TextRange(match.start(), match.end())


def iter_matches(text: str, target: Target) -> Iterable[TextRange]:
    if isinstance(target, str):
        return iter_literal(text, target)
    if isinstance(target, re.Pattern):
        return iter_pattern(text, target)
    return target(text)


def closest_to(
    candidates: Iterable[T],
    hint: int,
    *,
    key: Callable[[T], int],
) -> T | None:
    """Return the candidate whose start (``key``) is nearest to ``hint``.

    Ties keep the earliest candidate. Returns None if there are none.
    """
    best: T | None = None
    best_distance = 0
    for candidate in candidates:
        distance = abs(key(candidate) - hint)
        if best is None or distance < best_distance:
            best = candidate
            best_distance = distance
    return best


def find_closest(text: str, target: Target, hint: int) -> TextRange | None:
    """Find the occurrence of ``target`` in ``text`` that starts nearest ``hint``.

    Args:
        text: Document text.
        target: A literal string, a compiled pattern, or a callable that
            enumerates matches as ``TextRange`` objects.
        hint: Approximate, possibly stale, start offset.

    Returns:
        The closest match, or None if there is no match at all.
    """
    return closest_to(iter_matches(text, target), hint, key=lambda r: r.start)
