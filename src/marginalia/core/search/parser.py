"""Parse annotation search queries into an expression tree.

Query syntax::

    #tag  -#tag  @collection  -@collection  free text
    a AND b    a OR b    a b (implicit AND)    ( ... )

``AND`` binds tighter than ``OR``. Keywords are case-sensitive and only
count when followed by whitespace or the end of the query. A query that is
empty or cannot be parsed yields None, which matches every annotation.
"""

import re
from dataclasses import dataclass
from enum import StrEnum

from loguru import logger

from marginalia.config import MAX_LOOP_ITERATIONS, MAX_PARSE_DEPTH
from marginalia.errors import ParseRecursionError
from marginalia.models.query import (
    FilterNode,
    FilterType,
    Operator,
    OperatorNode,
    QueryNode,
    SearchToken,
    TextNode,
)

_FILTER_RE = re.compile(r"(-?)(?:#([\w/-]+)|@([\w-]+))")
_KEYWORDS = (Operator.AND.value, Operator.OR.value)


class TokenType(StrEnum):
    FILTER = "FILTER"
    TEXT = "TEXT"
    AND = "AND"
    OR = "OR"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    filter_type: FilterType | None = None
    exclude: bool = False


def _keyword_at(query: str, pos: int) -> str | None:
    for keyword in _KEYWORDS:
        end = pos + len(keyword)
        if query.startswith(keyword, pos) and (end >= len(query) or query[end].isspace()):
            return keyword
    return None


def _ends_text(query: str, pos: int) -> bool:
    ch = query[pos]
    return (
        ch.isspace()
        or ch in "()"
        or _FILTER_RE.match(query, pos) is not None
        or _keyword_at(query, pos) is not None
    )


def tokenize(query: str) -> list[Token]:
    """Split a query into tokens; always terminates, never raises."""
    tokens: list[Token] = []
    i = 0
    while i < len(query):
        ch = query[i]
        if ch.isspace():
            i += 1
            continue

        if ch == "(":
            tokens.append(Token(TokenType.LPAREN, ch))
            i += 1
            continue
        if ch == ")":
            tokens.append(Token(TokenType.RPAREN, ch))
            i += 1
            continue

        keyword = _keyword_at(query, i)
        if keyword is not None:
            tokens.append(Token(TokenType(keyword), keyword))
            i += len(keyword)
            continue

        match = _FILTER_RE.match(query, i)
        if match:
            if match.group(2) is not None:
                filter_type, value = FilterType.TAG, match.group(2)
            else:
                filter_type, value = FilterType.COLLECTION, match.group(3)
            tokens.append(
                Token(TokenType.FILTER, value, filter_type=filter_type, exclude=match.group(1) == "-")
            )
            i = match.end()
            continue

        start = i
        i += 1
        while i < len(query) and not _ends_text(query, i):
            i += 1
        tokens.append(Token(TokenType.TEXT, query[start:i]))

    return tokens


class _Parser:
    """Recursive-descent parser over one token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._position = 0
        self._depth = 0

    def parse(self) -> QueryNode | None:
        result = self._parse_expression()
        # Leftovers follow an unmatched ")" or a loop that hit its limit.
        while self._current() is not None:
            token = self._tokens[self._position]
            start = self._position
            operator = Operator.OR if token.type == TokenType.OR else Operator.AND
            if token.type == TokenType.RPAREN:
                self._advance()
            rest = self._parse_expression()
            result = self._combine(operator, result, rest)
            if self._position == start:
                self._advance()
        return result

    def _current(self) -> Token | None:
        if self._position < len(self._tokens):
            return self._tokens[self._position]
        return None

    def _advance(self) -> None:
        self._position += 1

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > MAX_PARSE_DEPTH:
            msg = f"Query nesting exceeds {MAX_PARSE_DEPTH} levels"
            raise ParseRecursionError(msg)

    def _leave(self) -> None:
        self._depth -= 1

    @staticmethod
    def _combine(
        operator: Operator, left: QueryNode | None, right: QueryNode | None
    ) -> QueryNode | None:
        if left is None:
            return right
        if right is None:
            return left
        return OperatorNode(operator, left, right)

    def _is_implicit_and(self) -> bool:
        token = self._current()
        return token is not None and token.type in (
            TokenType.FILTER,
            TokenType.TEXT,
            TokenType.LPAREN,
        )

    def _parse_expression(self) -> QueryNode | None:
        self._enter()
        left = self._parse_and_expression()
        iterations = 0
        while iterations < MAX_LOOP_ITERATIONS:
            token = self._current()
            if token is None or token.type != TokenType.OR:
                break
            self._advance()
            right = self._parse_and_expression()
            if right is None:
                break
            left = self._combine(Operator.OR, left, right)
            iterations += 1
        self._leave()
        return left

    def _parse_and_expression(self) -> QueryNode | None:
        self._enter()
        left = self._parse_primary()
        iterations = 0
        while iterations < MAX_LOOP_ITERATIONS:
            token = self._current()
            if token is not None and token.type == TokenType.AND:
                self._advance()
            elif not self._is_implicit_and():
                break
            right = self._parse_primary()
            if right is None:
                break
            left = self._combine(Operator.AND, left, right)
            iterations += 1
        self._leave()
        return left

    def _parse_primary(self) -> QueryNode | None:
        self._enter()
        token = self._current()
        result: QueryNode | None = None

        if token is None:
            pass
        elif token.type == TokenType.LPAREN:
            self._advance()
            result = self._parse_expression()
            closing = self._current()
            if closing is not None and closing.type == TokenType.RPAREN:
                self._advance()
        elif token.type == TokenType.FILTER and token.filter_type is not None:
            self._advance()
            result = FilterNode(token.filter_type, token.value, token.exclude)
        elif token.type == TokenType.TEXT:
            self._advance()
            result = TextNode(token.value)

        self._leave()
        return result


def parse_query(query: str) -> QueryNode | None:
    """Parse a search query.

    Returns None for an empty query and for any query that cannot be
    parsed (for instance nesting beyond the depth limit); callers treat
    None as "no filtering".
    """
    if not query.strip():
        return None
    try:
        return _Parser(tokenize(query)).parse()
    except Exception as exc:
        logger.debug("Search query could not be parsed, not filtering: {}", exc)
        return None


def flatten_to_tokens(ast: QueryNode | None) -> list[SearchToken]:
    """List the filter and text leaves of a tree, depth-first, left to right."""
    tokens: list[SearchToken] = []
    stack: list[QueryNode] = [] if ast is None else [ast]
    while stack:
        node = stack.pop()
        if isinstance(node, OperatorNode):
            stack.append(node.right)
            stack.append(node.left)
        elif isinstance(node, FilterNode):
            tokens.append(SearchToken(node.filter_type.value, node.value, node.exclude))
        else:
            tokens.append(SearchToken("text", node.value))
    return tokens


def tokens_from_query(query: str) -> list[SearchToken]:
    """Parse ``query`` and flatten it; an unparseable query gives no tokens."""
    return flatten_to_tokens(parse_query(query))
