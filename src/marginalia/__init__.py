"""Annotation extraction and query engine for Markdown notes."""

from marginalia.core.footnotes.resolver import (
    extract_adjacent_footnotes,
    insert_inline_footnote,
    locate_annotation,
    resolve_insertion_offset,
)
from marginalia.core.markup.html_scanner import find_annotation_at_offset, scan_html_annotations
from marginalia.core.markup.scanner import scan_annotations
from marginalia.core.search.evaluator import evaluate, filter_annotations
from marginalia.core.search.parser import flatten_to_tokens, parse_query
from marginalia.errors import AnnotationNotFoundError, MarginaliaError

__all__ = [
    "AnnotationNotFoundError",
    "MarginaliaError",
    "evaluate",
    "extract_adjacent_footnotes",
    "filter_annotations",
    "find_annotation_at_offset",
    "flatten_to_tokens",
    "insert_inline_footnote",
    "locate_annotation",
    "parse_query",
    "resolve_insertion_offset",
    "scan_annotations",
    "scan_html_annotations",
]
