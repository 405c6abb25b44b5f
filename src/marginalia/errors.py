"""Exception types raised by the annotation engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from marginalia.models.annotation import AnnotationDescriptor


class MarginaliaError(Exception):
    """Base class for all errors raised by marginalia."""


class ParseRecursionError(MarginaliaError):
    """Query nesting exceeded the parser's depth limit."""


class InvalidPatternError(MarginaliaError, ValueError):
    """A custom highlight pattern does not compile or has no capture group."""


class AnnotationNotFoundError(MarginaliaError, LookupError):
    """An annotation's markup could not be relocated in the current text."""

    def __init__(self, descriptor: AnnotationDescriptor, hint_offset: int) -> None:
        self.descriptor = descriptor
        self.hint_offset = hint_offset
        super().__init__(
            f"Annotation {descriptor.text!r} ({descriptor.kind}) not found near offset {hint_offset}"
        )
