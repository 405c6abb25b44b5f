"""Domain models for annotations found in document text."""

from dataclasses import dataclass
from enum import StrEnum


class AnnotationKind(StrEnum):
    """How an annotation is marked up in the source text."""

    MARKDOWN_HIGHLIGHT = "markdown-highlight"
    HTML_SPAN = "html-span"
    NATIVE_COMMENT = "native-comment"
    CUSTOM_PATTERN = "custom-pattern"


class HtmlTagType(StrEnum):
    """Which HTML construct carried the color of an html-span annotation."""

    SPAN_BACKGROUND = "span-background"
    SPAN_CLASS = "span-class"
    FONT_COLOR = "font-color"
    MARK = "mark"


class MarkerKind(StrEnum):
    """Footnote marker syntax: ``[^key]`` or ``^[content]``."""

    STANDARD = "standard"
    INLINE = "inline"


@dataclass(frozen=True)
class TextRange:
    """A half-open ``[start, end)`` range of string offsets."""

    start: int
    end: int

    def contains(self, start: int, end: int) -> bool:
        """Return True if ``[start, end)`` lies fully inside this range."""
        return start >= self.start and end <= self.end


@dataclass(frozen=True)
class AnnotationDescriptor:
    """What is needed to find an annotation again in edited text.

    ``full_match`` is the exact serialized markup; it is required for
    custom-pattern annotations, whose delimiters are user-defined.
    """

    kind: AnnotationKind
    text: str
    full_match: str | None = None


@dataclass(frozen=True)
class Annotation:
    """A located span of marked-up text.

    Offsets cover the full markup, delimiters included, at the time of the
    scan. They are a hint only: the document may have changed since.
    """

    text: str
    kind: AnnotationKind
    start_offset: int
    end_offset: int
    color: str | None = None
    footnote_contents: tuple[str, ...] = ()
    full_match: str = ""
    tag_type: HtmlTagType | None = None

    def __post_init__(self) -> None:
        if self.end_offset <= self.start_offset:
            msg = f"Annotation end ({self.end_offset}) must be after start ({self.start_offset})"
            raise ValueError(msg)
        if not self.text.strip():
            msg = "Annotation text must not be blank"
            raise ValueError(msg)
        if any(not c.strip() for c in self.footnote_contents):
            object.__setattr__(
                self, "footnote_contents", tuple(c for c in self.footnote_contents if c.strip())
            )

    @property
    def descriptor(self) -> AnnotationDescriptor:
        return AnnotationDescriptor(
            kind=self.kind,
            text=self.text,
            full_match=self.full_match or None,
        )


@dataclass(frozen=True)
class FootnoteSpan:
    """A footnote marker attached after an annotation.

    For standard markers ``content`` is the reference key; for inline
    markers it is the text between the brackets.
    """

    content: str
    start_offset: int
    end_offset: int
    marker_kind: MarkerKind


@dataclass(frozen=True)
class AdjacentComment:
    """A comment block that directly follows an annotation and its footnotes."""

    content: str
    start_offset: int
    end_offset: int
    color: str | None = None


@dataclass(frozen=True)
class FootnoteInsertion:
    """Result of inserting an inline footnote into document text."""

    content: str
    offset: int
    cursor_offset: int
