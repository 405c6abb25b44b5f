"""Decide whether an annotation satisfies a parsed search query."""

import re
from collections.abc import Callable, Iterable
from pathlib import PurePath

from marginalia.models.annotation import Annotation
from marginalia.models.query import FilterNode, FilterType, Operator, OperatorNode, QueryNode
from marginalia.protocols import MembershipLookup

_HASHTAG_RE = re.compile(r"#([\w/-]+)")


def evaluate(
    ast: QueryNode | None,
    annotation: Annotation,
    tags_of: MembershipLookup,
    collections_of: MembershipLookup,
    *,
    label: str = "",
) -> bool:
    """Return True if ``annotation`` matches the query tree ``ast``.

    Args:
        ast: Parsed query; None matches everything.
        annotation: The annotation to test.
        tags_of: Tag names of an annotation.
        collections_of: Collection names of an annotation.
        label: Secondary text also searched by free-text terms, typically
            the source file name.
    """
    if ast is None:
        return True

    if isinstance(ast, FilterNode):
        lookup = tags_of if ast.filter_type == FilterType.TAG else collections_of
        matched = ast.value in set(lookup(annotation))
        return not matched if ast.exclude else matched

    if isinstance(ast, OperatorNode):
        left = evaluate(ast.left, annotation, tags_of, collections_of, label=label)
        right = evaluate(ast.right, annotation, tags_of, collections_of, label=label)
        if ast.operator == Operator.AND:
            return left and right
        return left or right

    needle = ast.value.lower()
    return needle in annotation.text.lower() or needle in label.lower()


def filter_annotations(
    ast: QueryNode | None,
    annotations: Iterable[Annotation],
    tags_of: MembershipLookup,
    collections_of: MembershipLookup,
    *,
    label_of: Callable[[Annotation], str] | None = None,
) -> list[Annotation]:
    """Keep the annotations matching ``ast``, preserving order."""
    return [
        a
        for a in annotations
        if evaluate(ast, a, tags_of, collections_of, label=label_of(a) if label_of else "")
    ]


def tags_from_footnotes(annotation: Annotation) -> list[str]:
    """Collect ``#hashtags`` from an annotation's footnotes, first seen first."""
    tags: list[str] = []
    for note in annotation.footnote_contents:
        for tag in _HASHTAG_RE.findall(note):
            if tag not in tags:
                tags.append(tag)
    return tags


def no_collections(annotation: Annotation) -> list[str]:
    """Membership lookup for callers that keep no collections."""
    return []


def label_from_path(path: str) -> str:
    """File name without its extension: ``notes/Reading.md`` gives ``Reading``."""
    return PurePath(path).stem
