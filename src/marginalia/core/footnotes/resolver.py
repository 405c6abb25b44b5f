"""Relocate an annotation in edited text and work out where its footnotes go.

New inline footnotes are appended after any markers already attached to the
annotation, and always on the annotation's own line: a highlight at the end
of a line gets its marker before the line break, never on the next line.
"""

import re

from loguru import logger

from marginalia.core.disambiguate import find_closest
from marginalia.core.footnotes.markers import (
    is_valid_marker_run,
    iter_marker_run,
    marker_run_length,
)
from marginalia.core.markup.colors import normalize_color
from marginalia.core.markup.html_scanner import find_annotation_at_offset
from marginalia.errors import AnnotationNotFoundError
from marginalia.models.annotation import (
    AdjacentComment,
    AnnotationDescriptor,
    AnnotationKind,
    FootnoteInsertion,
    FootnoteSpan,
    MarkerKind,
    TextRange,
)
from marginalia.protocols import ClassColorResolver

_LINE_END_RE = re.compile(r"[\r\n]")
_GAP_RE = re.compile(r"\s*")
_BLANK_LINE_RE = re.compile(r"\n[ \t\r\f\v]*\n")
_COMMENT_RE = re.compile(r"%%([^%](?:[^%]|%[^%])*?)%%|<!--(.*?)-->", re.DOTALL)
_COMMENT_COLOR_RE = re.compile(r"\s*@(\w+)\s+(.*?)\s*", re.DOTALL)


def split_comment_color(body: str) -> tuple[str, str | None]:
    """Split an ``@color`` prefix off an HTML comment body.

    ``" @purple some note "`` gives ``("some note", "#800080")``. Bodies
    without a recognised color prefix are returned stripped, with no color.
    """
    match = _COMMENT_COLOR_RE.fullmatch(body)
    if match:
        color = normalize_color(match.group(1))
        if color is not None:
            return match.group(2), color
    return body.strip(), None


def locate_annotation(
    content: str,
    descriptor: AnnotationDescriptor,
    hint_offset: int,
    *,
    class_color_resolver: ClassColorResolver | None = None,
) -> TextRange | None:
    """Find the current full markup range of an annotation.

    Among several identical occurrences the one starting nearest to
    ``hint_offset`` wins. Returns None if the markup no longer exists.
    """
    text = descriptor.text
    kind = descriptor.kind

    if kind == AnnotationKind.MARKDOWN_HIGHLIGHT:
        return find_closest(content, f"=={text}==", hint_offset)

    if kind == AnnotationKind.NATIVE_COMMENT:
        located = find_closest(content, f"%%{text}%%", hint_offset)
        if located is None:
            html_comment = re.compile(rf"<!--\s*(?:@\w+\s+)?{re.escape(text)}\s*-->")
            located = find_closest(content, html_comment, hint_offset)
        return located

    if kind == AnnotationKind.HTML_SPAN:
        annotation = find_annotation_at_offset(
            content, text, hint_offset, class_color_resolver=class_color_resolver
        )
        if annotation is None:
            return None
        return TextRange(annotation.start_offset, annotation.end_offset)

    if kind == AnnotationKind.CUSTOM_PATTERN:
        if not descriptor.full_match:
            logger.debug("Custom-pattern annotation {!r} has no serialized markup", text)
            return None
        return find_closest(content, descriptor.full_match, hint_offset)

    msg = f"Unknown annotation kind: {kind!r}"
    raise ValueError(msg)


def _line_end(content: str, pos: int) -> int:
    match = _LINE_END_RE.search(content, pos)
    return match.start() if match else len(content)


def insertion_offset_after(content: str, markup_end: int) -> int:
    """Return where a new footnote marker goes for markup ending at ``markup_end``.

    The marker goes after the run of existing markers on the same line. When
    the rest of the line is nothing but that run and whitespace, it goes at
    the end of the line. Without existing markers it goes directly after
    the markup.
    """
    line_end = _line_end(content, markup_end)
    run_length = marker_run_length(content, markup_end, line_end)
    if run_length and is_valid_marker_run(content[markup_end:line_end]):
        return line_end
    return markup_end + run_length


def resolve_insertion_offset(
    content: str,
    descriptor: AnnotationDescriptor,
    hint_offset: int,
    *,
    class_color_resolver: ClassColorResolver | None = None,
) -> int:
    """Relocate an annotation and return the offset for a new footnote marker.

    Args:
        content: Current document text.
        descriptor: Kind and text of the annotation.
        hint_offset: Start offset recorded when the annotation was scanned.
        class_color_resolver: Needed to relocate ``<span class>`` highlights.

    Returns:
        Offset into ``content`` at which to insert the marker.

    Raises:
        AnnotationNotFoundError: The markup is no longer in ``content``.
    """
    located = locate_annotation(
        content, descriptor, hint_offset, class_color_resolver=class_color_resolver
    )
    if located is None:
        raise AnnotationNotFoundError(descriptor, hint_offset)
    return insertion_offset_after(content, located.end)


def insert_inline_footnote(
    content: str,
    descriptor: AnnotationDescriptor,
    hint_offset: int,
    footnote: str = "",
    *,
    class_color_resolver: ClassColorResolver | None = None,
) -> FootnoteInsertion:
    """Insert ``^[footnote]`` after an annotation and return the new text.

    ``cursor_offset`` points just before the closing bracket, where an
    editor would place the caret to keep typing the note.

    Raises:
        AnnotationNotFoundError: The markup is no longer in ``content``.
    """
    offset = resolve_insertion_offset(
        content, descriptor, hint_offset, class_color_resolver=class_color_resolver
    )
    marker = f"^[{footnote}]"
    return FootnoteInsertion(
        content=content[:offset] + marker + content[offset:],
        offset=offset,
        cursor_offset=offset + 2 + len(footnote),
    )


def extract_adjacent_footnotes(content: str, from_offset: int) -> list[FootnoteSpan]:
    """Return the markers attached at ``from_offset``, in text order.

    The run ends at the first character that is not whitespace or part of a
    complete marker; an unterminated ``^[`` ends it at the last full marker.
    """
    return list(iter_marker_run(content, from_offset))


def collect_footnote_contents(
    content: str,
    from_offset: int,
    definitions: dict[str, str],
) -> list[str]:
    """Resolve the markers attached at ``from_offset`` to their note text.

    Inline notes contribute their own text; ``[^key]`` references contribute
    the matching definition. Empty notes and unknown keys are skipped.
    """
    contents: list[str] = []
    for span in iter_marker_run(content, from_offset):
        if span.marker_kind == MarkerKind.INLINE:
            note = span.content.strip()
        else:
            note = definitions.get(span.content, "").strip()
        if note:
            contents.append(note)
    return contents


def find_adjacent_comment(content: str, from_offset: int) -> AdjacentComment | None:
    """Return a comment that follows the markers at ``from_offset``.

    The comment may be separated from the markers by whitespace, including a
    single line break, but not by a blank line or any other text.
    """
    pos = from_offset + marker_run_length(content, from_offset)
    gap = _GAP_RE.match(content, pos)
    if gap is None or _BLANK_LINE_RE.search(gap.group(0)):
        return None

    match = _COMMENT_RE.match(content, gap.end())
    if match is None:
        return None

    if match.group(1) is not None:
        text, color = match.group(1).strip(), None
    else:
        text, color = split_comment_color(match.group(2))
    return AdjacentComment(content=text, start_offset=match.start(), end_offset=match.end(), color=color)
