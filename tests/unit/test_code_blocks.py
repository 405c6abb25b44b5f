"""Tests for code region detection."""

from marginalia.core.markup.code_blocks import get_code_block_ranges, is_excluded
from marginalia.models.annotation import TextRange


def test_fenced_block_is_a_range() -> None:
    content = "before\n```\n==x==\n```\nafter"
    [fenced] = get_code_block_ranges(content)
    assert content[fenced.start : fenced.end].startswith("```\n==x==\n```")
    assert is_excluded(content.index("==x=="), content.index("==x==") + 5, [fenced])


def test_tilde_fence_with_language() -> None:
    content = "~~~js\nlet a = 1;\n~~~\n"
    assert len(get_code_block_ranges(content)) == 1


def test_inline_code_is_a_range() -> None:
    content = "text `==code==` text"
    assert get_code_block_ranges(content) == [TextRange(5, 15)]


def test_containment_requires_both_ends() -> None:
    ranges = [TextRange(10, 20)]
    assert is_excluded(10, 20, ranges)
    assert not is_excluded(9, 15, ranges)
    assert not is_excluded(15, 21, ranges)
