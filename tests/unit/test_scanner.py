"""Tests for whole-document annotation scanning."""

from marginalia.core.markup.scanner import scan_annotations
from marginalia.models.annotation import AnnotationKind, TextRange
from marginalia.models.pattern import CustomPattern


def test_sample_note_annotations(sample_note: str) -> None:
    annotations = scan_annotations(sample_note)
    assert [(a.kind, a.text) for a in annotations] == [
        (AnnotationKind.MARKDOWN_HIGHLIGHT, "Markets are conversations"),
        (AnnotationKind.HTML_SPAN, "red passage"),
        (AnnotationKind.NATIVE_COMMENT, "remember to revisit"),
        (AnnotationKind.MARKDOWN_HIGHLIGHT, "trailing highlight"),
        (AnnotationKind.NATIVE_COMMENT, "a colored comment"),
    ]


def test_footnotes_are_attached_in_order(sample_note: str) -> None:
    by_text = {a.text: a for a in scan_annotations(sample_note)}
    assert by_text["Markets are conversations"].footnote_contents == ("see #economics",)
    assert by_text["red passage"].footnote_contents == ("Footnote about #history",)
    assert by_text["red passage"].color == "#ff0000"
    assert by_text["remember to revisit"].footnote_contents == ("remember to revisit",)


def test_html_comment_color_prefix(sample_note: str) -> None:
    by_text = {a.text: a for a in scan_annotations(sample_note)}
    assert by_text["a colored comment"].color == "#800080"


def test_code_is_excluded_by_default(sample_note: str) -> None:
    texts = {a.text for a in scan_annotations(sample_note)}
    assert "not a highlight" not in texts
    assert "ignored" not in texts


def test_explicit_excluded_ranges_replace_defaults() -> None:
    content = "`==inside==` ==outside=="
    texts = [a.text for a in scan_annotations(content, excluded_ranges=[])]
    assert texts == ["inside", "outside"]
    texts = [a.text for a in scan_annotations(content, excluded_ranges=[TextRange(0, 25)])]
    assert texts == []


def test_merge_adjacent_comments(sample_note: str) -> None:
    annotations = scan_annotations(sample_note, merge_adjacent_comments=True)
    by_text = {a.text: a for a in annotations}
    assert "a colored comment" not in by_text
    assert by_text["trailing highlight"].footnote_contents == ("a colored comment",)


def test_comment_after_blank_line_is_not_merged() -> None:
    content = "==highlight==\n\n%%separate%%"
    annotations = scan_annotations(content, merge_adjacent_comments=True)
    assert [a.text for a in annotations] == ["highlight", "separate"]
    assert annotations[0].footnote_contents == ()


def test_mixed_markers_resolve_standard_definitions() -> None:
    content = "==text==[^a]^[inline] [^b] ^[]\n\n[^a]: first def\n[^b]: second def\n"
    [annotation] = scan_annotations(content)
    assert annotation.footnote_contents == ("first def", "inline", "second def")


def test_padded_delimiters_are_not_highlights() -> None:
    assert scan_annotations("===text=== and %%%note%%%") == []


def test_blank_highlights_are_skipped() -> None:
    assert scan_annotations("== == and %%  %%") == []


def test_custom_pattern() -> None:
    pattern = CustomPattern(name="dashes", pattern=r"--(.+?)--", color="pink")
    [annotation] = scan_annotations("This is --custom text-- here.", custom_patterns=[pattern])
    assert annotation.kind == AnnotationKind.CUSTOM_PATTERN
    assert annotation.text == "custom text"
    assert annotation.full_match == "--custom text--"
    assert annotation.color == "#ffc0cb"
    assert annotation.start_offset == 8


def test_invalid_custom_patterns_are_skipped() -> None:
    patterns = [
        CustomPattern(name="broken", pattern=r"//(.+"),
        CustomPattern(name="no-group", pattern=r"//.+?//"),
        CustomPattern(name="good", pattern=r"\{\{(.+?)\}\}"),
    ]
    annotations = scan_annotations("//x// {{template}}", custom_patterns=patterns)
    assert [a.text for a in annotations] == ["template"]


def test_custom_range_provider() -> None:
    calls: list[str] = []

    def first_line_only(text: str) -> list[TextRange]:
        calls.append(text)
        return [TextRange(0, text.index("\n"))]

    content = "==hidden==\n==shown=="
    annotations = scan_annotations(content, range_provider=first_line_only)
    assert [a.text for a in annotations] == ["shown"]
    assert calls == [content]
