"""Query expression tree produced by the search parser."""

from dataclasses import dataclass
from enum import StrEnum


class FilterType(StrEnum):
    TAG = "tag"
    COLLECTION = "collection"


class Operator(StrEnum):
    AND = "AND"
    OR = "OR"


@dataclass(frozen=True)
class FilterNode:
    """Match annotations carrying a tag (``#name``) or in a collection (``@name``)."""

    filter_type: FilterType
    value: str
    exclude: bool = False


@dataclass(frozen=True)
class TextNode:
    """Case-insensitive free-text match."""

    value: str


@dataclass(frozen=True)
class OperatorNode:
    """Boolean combination of two subtrees."""

    operator: Operator
    left: "QueryNode"
    right: "QueryNode"


QueryNode = FilterNode | TextNode | OperatorNode


@dataclass(frozen=True)
class SearchToken:
    """A flattened query leaf, in the order it appears in the query."""

    kind: str
    value: str
    exclude: bool = False
