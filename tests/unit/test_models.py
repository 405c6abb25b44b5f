"""Tests for domain models."""

import dataclasses

import pytest

from marginalia.errors import InvalidPatternError
from marginalia.models.annotation import (
    Annotation,
    AnnotationDescriptor,
    AnnotationKind,
    TextRange,
)
from marginalia.models.pattern import CustomPattern


def test_annotation_is_frozen() -> None:
    annotation = Annotation(
        text="hi", kind=AnnotationKind.MARKDOWN_HIGHLIGHT, start_offset=0, end_offset=6
    )
    with pytest.raises(dataclasses.FrozenInstanceError):
        annotation.text = "changed"  # type: ignore[misc]


def test_annotation_rejects_empty_range() -> None:
    with pytest.raises(ValueError, match="must be after start"):
        Annotation(text="hi", kind=AnnotationKind.MARKDOWN_HIGHLIGHT, start_offset=5, end_offset=5)


def test_annotation_rejects_blank_text() -> None:
    with pytest.raises(ValueError, match="blank"):
        Annotation(text="  ", kind=AnnotationKind.NATIVE_COMMENT, start_offset=0, end_offset=6)


def test_annotation_drops_blank_footnotes() -> None:
    annotation = Annotation(
        text="hi",
        kind=AnnotationKind.MARKDOWN_HIGHLIGHT,
        start_offset=0,
        end_offset=6,
        footnote_contents=("note", "  ", ""),
    )
    assert annotation.footnote_contents == ("note",)


def test_descriptor_carries_full_match() -> None:
    custom = Annotation(
        text="test",
        kind=AnnotationKind.CUSTOM_PATTERN,
        start_offset=0,
        end_offset=8,
        full_match="--test--",
    )
    assert custom.descriptor == AnnotationDescriptor(
        AnnotationKind.CUSTOM_PATTERN, "test", "--test--"
    )

    plain = Annotation(
        text="hi", kind=AnnotationKind.MARKDOWN_HIGHLIGHT, start_offset=0, end_offset=6
    )
    assert plain.descriptor.full_match is None


def test_text_range_contains() -> None:
    outer = TextRange(10, 20)
    assert outer.contains(10, 20)
    assert outer.contains(12, 15)
    assert not outer.contains(5, 15)
    assert not outer.contains(15, 25)


def test_kind_values_are_strings() -> None:
    assert AnnotationKind.HTML_SPAN == "html-span"
    assert AnnotationKind("native-comment") is AnnotationKind.NATIVE_COMMENT


def test_custom_pattern_compiles() -> None:
    compiled = CustomPattern(name="dashes", pattern=r"--(.+?)--").compile()
    assert compiled.search("a --b-- c").group(1) == "b"


@pytest.mark.parametrize("pattern", [r"--(unclosed", r"--.+?--"])
def test_custom_pattern_rejects_unusable(pattern: str) -> None:
    with pytest.raises(InvalidPatternError):
        CustomPattern(name="bad", pattern=pattern).compile()
