"""Find colored HTML highlights: ``<span style>``, ``<span class>``, ``<font>``, ``<mark>``."""

import re
from collections.abc import Iterable

from bs4 import BeautifulSoup
from bs4.element import Tag
from loguru import logger

from marginalia.config import MARK_DEFAULT_COLOR
from marginalia.core.disambiguate import closest_to
from marginalia.core.markup.code_blocks import is_excluded
from marginalia.core.markup.colors import is_transparent, normalize_color
from marginalia.models.annotation import Annotation, AnnotationKind, HtmlTagType, TextRange
from marginalia.protocols import ClassColorResolver

_HTML_TAG_RE = re.compile(r"<(span|font|mark)\b[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)
_BACKGROUND_RE = re.compile(r"background(?:-color)?\s*:\s*([^;]+)", re.IGNORECASE)


def _element_color(
    element: Tag,
    class_color_resolver: ClassColorResolver | None,
) -> tuple[str | None, HtmlTagType | None]:
    tag_name = element.name.lower()

    if tag_name == "span":
        style = element.get("style") or ""
        background = _BACKGROUND_RE.search(str(style))
        if background:
            return normalize_color(background.group(1)), HtmlTagType.SPAN_BACKGROUND

        class_attr = element.get("class")
        if class_attr:
            class_name = " ".join(class_attr) if isinstance(class_attr, list) else str(class_attr)
            if class_color_resolver is None:
                return None, HtmlTagType.SPAN_CLASS
            resolved = class_color_resolver(class_name)
            if not resolved or is_transparent(resolved):
                return None, HtmlTagType.SPAN_CLASS
            return normalize_color(resolved), HtmlTagType.SPAN_CLASS

        return None, None

    if tag_name == "font":
        color_attr = element.get("color")
        if color_attr:
            return normalize_color(str(color_attr)), HtmlTagType.FONT_COLOR
        return None, None

    if tag_name == "mark":
        return MARK_DEFAULT_COLOR, HtmlTagType.MARK

    return None, None


def parse_html_element(
    markup: str,
    start_offset: int,
    *,
    class_color_resolver: ClassColorResolver | None = None,
) -> Annotation | None:
    """Turn one matched element into an annotation.

    Returns None when the element has no text or no usable color.
    """
    soup = BeautifulSoup(markup, "html.parser")
    element = soup.find(True)
    if not isinstance(element, Tag):
        return None

    text = element.get_text()
    if not text.strip():
        return None

    color, tag_type = _element_color(element, class_color_resolver)
    if color is None or tag_type is None:
        logger.debug("Dropping HTML highlight without a usable color: {}", markup[:80])
        return None

    return Annotation(
        text=text,
        kind=AnnotationKind.HTML_SPAN,
        start_offset=start_offset,
        end_offset=start_offset + len(markup),
        color=color,
        full_match=markup,
        tag_type=tag_type,
    )


def scan_html_annotations(
    content: str,
    excluded_ranges: Iterable[TextRange] = (),
    *,
    class_color_resolver: ClassColorResolver | None = None,
) -> list[Annotation]:
    """Find all colored HTML highlights in ``content``.

    Args:
        content: Document text, Markdown with embedded HTML.
        excluded_ranges: Code regions; elements fully inside one are skipped.
        class_color_resolver: Looks up the background color of a CSS class
            for ``<span class="...">``. Without it such spans are skipped.

    Returns:
        Annotations in document order.
    """
    excluded = list(excluded_ranges)
    annotations: list[Annotation] = []

    for match in _HTML_TAG_RE.finditer(content):
        if is_excluded(match.start(), match.end(), excluded):
            continue
        annotation = parse_html_element(
            match.group(0), match.start(), class_color_resolver=class_color_resolver
        )
        if annotation is not None:
            annotations.append(annotation)

    return annotations


def find_annotation_at_offset(
    content: str,
    text: str,
    hint_offset: int,
    excluded_ranges: Iterable[TextRange] = (),
    *,
    class_color_resolver: ClassColorResolver | None = None,
) -> Annotation | None:
    """Find the HTML highlight with exact ``text`` that starts nearest ``hint_offset``."""
    candidates = [
        a
        for a in scan_html_annotations(
            content, excluded_ranges, class_color_resolver=class_color_resolver
        )
        if a.text == text
    ]
    return closest_to(candidates, hint_offset, key=lambda a: a.start_offset)
