"""Scan runs of footnote markers: ``[^key]`` references and ``^[inline]`` notes.

A run is a sequence of markers separated only by whitespace. Inline notes may
contain brackets (``^[see [[Other note]]]``), so they are matched by counting
bracket depth rather than with a regular expression.
"""

import re
from collections.abc import Iterator

from marginalia.models.annotation import FootnoteSpan, MarkerKind

_STANDARD_MARKER_RE = re.compile(r"\[\^([\w-]+)\](?!:)")
_WHITESPACE_RE = re.compile(r"\s+")
_DEFINITION_RE = re.compile(r"^\[\^(\w+)\]:\s*(.+)$", re.MULTILINE)


def match_inline_marker(text: str, pos: int, limit: int | None = None) -> int | None:
    """Return the end of the ``^[...]`` marker starting at ``pos``.

    The closing bracket is the first one not balanced by an opening bracket
    inside the note. Returns None if there is no marker at ``pos`` or it is
    not closed before ``limit``.
    """
    stop = len(text) if limit is None else limit
    if pos + 2 > stop or not text.startswith("^[", pos):
        return None
    depth = 1
    i = pos + 2
    while i < stop:
        ch = text[i]
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return None


def iter_marker_run(text: str, start: int = 0, end: int | None = None) -> Iterator[FootnoteSpan]:
    """Yield the markers of the run beginning at ``start``.

    Stops at the first character that is neither whitespace nor the start of
    a complete marker. Offsets are absolute positions in ``text``.
    """
    stop = len(text) if end is None else end
    pos = start
    while pos < stop:
        space = _WHITESPACE_RE.match(text, pos, stop)
        if space:
            pos = space.end()
            if pos >= stop:
                return

        standard = _STANDARD_MARKER_RE.match(text, pos, stop)
        if standard:
            yield FootnoteSpan(standard.group(1), pos, standard.end(), MarkerKind.STANDARD)
            pos = standard.end()
            continue

        inline_end = match_inline_marker(text, pos, stop)
        if inline_end is not None:
            yield FootnoteSpan(text[pos + 2 : inline_end - 1], pos, inline_end, MarkerKind.INLINE)
            pos = inline_end
            continue

        return


def marker_run_length(text: str, start: int = 0, end: int | None = None) -> int:
    """Length of the marker run at ``start``, excluding trailing whitespace."""
    run_end = start
    for span in iter_marker_run(text, start, end):
        run_end = span.end_offset
    return run_end - start


def is_valid_marker_run(segment: str) -> bool:
    """Return True if ``segment`` is only markers and whitespace."""
    run_length = marker_run_length(segment)
    return not segment[run_length:].strip()


def extract_footnote_definitions(content: str) -> dict[str, str]:
    """Map footnote keys to the text of their ``[^key]: text`` definitions."""
    return {m.group(1): m.group(2).strip() for m in _DEFINITION_RE.finditer(content)}
