"""Scan a whole document for every kind of annotation."""

import re
from collections.abc import Iterable, Sequence

from loguru import logger

from marginalia.core.footnotes.markers import extract_footnote_definitions
from marginalia.core.footnotes.resolver import (
    collect_footnote_contents,
    find_adjacent_comment,
    split_comment_color,
)
from marginalia.core.markup.code_blocks import get_code_block_ranges, is_excluded
from marginalia.core.markup.colors import normalize_color
from marginalia.core.markup.html_scanner import scan_html_annotations
from marginalia.errors import InvalidPatternError
from marginalia.models.annotation import Annotation, AnnotationKind, TextRange
from marginalia.models.pattern import CustomPattern
from marginalia.protocols import ClassColorResolver, ExcludedRangeProvider

_HIGHLIGHT_RE = re.compile(r"==([^=](?:[^=]|=[^=])*?)==")
_NATIVE_COMMENT_RE = re.compile(r"%%([^%](?:[^%]|%[^%])*?)%%")
_HTML_COMMENT_RE = re.compile(r"<!--(.*?)-->", re.DOTALL)


def _delimited(
    content: str,
    pattern: re.Pattern[str],
    delimiter: str,
    excluded: list[TextRange],
) -> Iterable[re.Match[str]]:
    """Matches of ``pattern`` outside code, not padded by extra delimiter chars."""
    for match in pattern.finditer(content):
        if is_excluded(match.start(), match.end(), excluded):
            continue
        before = content[match.start() - 1] if match.start() > 0 else ""
        after = content[match.end()] if match.end() < len(content) else ""
        if before == delimiter or after == delimiter:
            continue
        if match.group(1).strip():
            yield match


def _scan_comments(content: str, excluded: list[TextRange]) -> list[Annotation]:
    comments = [
        Annotation(
            text=m.group(1),
            kind=AnnotationKind.NATIVE_COMMENT,
            start_offset=m.start(),
            end_offset=m.end(),
            footnote_contents=(m.group(1).strip(),),
            full_match=m.group(0),
        )
        for m in _delimited(content, _NATIVE_COMMENT_RE, "%", excluded)
    ]

    for m in _HTML_COMMENT_RE.finditer(content):
        if is_excluded(m.start(), m.end(), excluded):
            continue
        text, color = split_comment_color(m.group(1))
        if not text:
            continue
        comments.append(
            Annotation(
                text=text,
                kind=AnnotationKind.NATIVE_COMMENT,
                start_offset=m.start(),
                end_offset=m.end(),
                color=color,
                footnote_contents=(text,),
                full_match=m.group(0),
            )
        )
    return comments


def _scan_custom(
    content: str,
    patterns: Sequence[CustomPattern],
    excluded: list[TextRange],
) -> list[Annotation]:
    found: list[Annotation] = []
    for custom in patterns:
        try:
            compiled = custom.compile()
        except InvalidPatternError as exc:
            logger.warning("Skipping custom pattern: {}", exc)
            continue

        color = normalize_color(custom.color) if custom.color else None
        for m in compiled.finditer(content):
            text = m.group(1)
            if not text or not text.strip() or m.end() <= m.start():
                continue
            if is_excluded(m.start(), m.end(), excluded):
                continue
            found.append(
                Annotation(
                    text=text,
                    kind=AnnotationKind.CUSTOM_PATTERN,
                    start_offset=m.start(),
                    end_offset=m.end(),
                    color=color,
                    full_match=m.group(0),
                )
            )
    return found


def _with_footnotes(
    content: str,
    annotation: Annotation,
    definitions: dict[str, str],
    *,
    merge_adjacent_comments: bool,
) -> tuple[Annotation, TextRange | None]:
    """Attach footnote text to a highlight; return the merged comment's range, if any."""
    notes = collect_footnote_contents(content, annotation.end_offset, definitions)
    merged: TextRange | None = None
    if merge_adjacent_comments:
        comment = find_adjacent_comment(content, annotation.end_offset)
        if comment is not None and comment.content:
            notes.append(comment.content)
            merged = TextRange(comment.start_offset, comment.end_offset)
    return (
        Annotation(
            text=annotation.text,
            kind=annotation.kind,
            start_offset=annotation.start_offset,
            end_offset=annotation.end_offset,
            color=annotation.color,
            footnote_contents=tuple(notes),
            full_match=annotation.full_match,
            tag_type=annotation.tag_type,
        ),
        merged,
    )


def scan_annotations(
    content: str,
    *,
    excluded_ranges: Iterable[TextRange] | None = None,
    custom_patterns: Sequence[CustomPattern] = (),
    class_color_resolver: ClassColorResolver | None = None,
    merge_adjacent_comments: bool = False,
    range_provider: ExcludedRangeProvider = get_code_block_ranges,
) -> list[Annotation]:
    """Find highlights, comments, HTML highlights and custom-pattern matches.

    Args:
        content: Document text.
        excluded_ranges: Regions to skip. Defaults to whatever
            ``range_provider`` returns for the document.
        custom_patterns: Extra highlight syntaxes. Invalid ones are logged
            and skipped.
        class_color_resolver: Resolves ``<span class>`` colors.
        merge_adjacent_comments: Fold a comment that directly follows a
            highlight into the highlight's footnotes instead of reporting it
            separately.
        range_provider: Finds code regions when ``excluded_ranges`` is
            not given.

    Returns:
        Annotations ordered by start offset.
    """
    excluded = list(range_provider(content) if excluded_ranges is None else excluded_ranges)
    definitions = extract_footnote_definitions(content)

    highlights = [
        Annotation(
            text=m.group(1),
            kind=AnnotationKind.MARKDOWN_HIGHLIGHT,
            start_offset=m.start(),
            end_offset=m.end(),
            full_match=m.group(0),
        )
        for m in _delimited(content, _HIGHLIGHT_RE, "=", excluded)
    ]
    highlights.extend(
        scan_html_annotations(content, excluded, class_color_resolver=class_color_resolver)
    )
    highlights.extend(_scan_custom(content, custom_patterns, excluded))

    results: list[Annotation] = []
    merged_comments: set[TextRange] = set()
    for highlight in highlights:
        annotated, merged = _with_footnotes(
            content, highlight, definitions, merge_adjacent_comments=merge_adjacent_comments
        )
        results.append(annotated)
        if merged is not None:
            merged_comments.add(merged)

    for comment in _scan_comments(content, excluded):
        if TextRange(comment.start_offset, comment.end_offset) not in merged_comments:
            results.append(comment)

    results.sort(key=lambda a: a.start_offset)
    logger.debug("Found {} annotations", len(results))
    return results
