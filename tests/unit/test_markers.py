"""Tests for footnote marker run scanning."""

from marginalia.core.footnotes.markers import (
    extract_footnote_definitions,
    is_valid_marker_run,
    iter_marker_run,
    marker_run_length,
    match_inline_marker,
)
from marginalia.models.annotation import MarkerKind


def test_single_inline_marker_length() -> None:
    assert marker_run_length("^[comment] after") == 10


def test_multiple_inline_markers_length() -> None:
    assert marker_run_length("^[first]^[second] after") == 17


def test_nested_brackets_length() -> None:
    assert marker_run_length("^[comment with [nested] brackets] after") == 33


def test_no_markers_length() -> None:
    assert marker_run_length("no footnotes here") == 0


def test_run_stops_at_first_text() -> None:
    assert marker_run_length("^[first]some text^[second]") == 8


def test_trailing_whitespace_is_not_part_of_run() -> None:
    assert marker_run_length("[^1] ^[two]   ") == 11


def test_unterminated_inline_marker_backs_off() -> None:
    assert marker_run_length("^[ok] ^[never closed") == 5
    assert match_inline_marker("^[never closed", 0) is None


def test_limit_bounds_inline_marker() -> None:
    assert match_inline_marker("^[abc]", 0, limit=4) is None
    assert match_inline_marker("^[abc]", 0) == 6


def test_run_yields_both_marker_kinds() -> None:
    spans = list(iter_marker_run("xx[^ref]^[First] ^[Second]", 2))
    assert [(s.marker_kind, s.content) for s in spans] == [
        (MarkerKind.STANDARD, "ref"),
        (MarkerKind.INLINE, "First"),
        (MarkerKind.INLINE, "Second"),
    ]
    assert spans[0].start_offset == 2


def test_definition_is_not_a_reference() -> None:
    assert marker_run_length("[^1]: definition") == 0


def test_valid_marker_runs() -> None:
    assert is_valid_marker_run("")
    assert is_valid_marker_run("  [^1] ^[two [nested]]  ")
    assert not is_valid_marker_run("[^1] text ^[x]")
    assert not is_valid_marker_run("^[open")


def test_extract_definitions() -> None:
    content = "Body[^1]\n\n[^1]: First note  \n[^key]: Second\nnot [^x]: inline"
    assert extract_footnote_definitions(content) == {"1": "First note", "key": "Second"}
