"""Protocols for collaborators supplied by the host application."""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from marginalia.models.annotation import Annotation, TextRange


@runtime_checkable
class ExcludedRangeProvider(Protocol):
    """Return ranges of the text (code blocks) in which nothing is scanned."""

    def __call__(self, text: str) -> Iterable[TextRange]: ...


@runtime_checkable
class ClassColorResolver(Protocol):
    """Resolve the effective background color of a CSS class, if any."""

    def __call__(self, class_name: str) -> str | None: ...


@runtime_checkable
class MembershipLookup(Protocol):
    """Return the tag or collection names an annotation belongs to."""

    def __call__(self, annotation: Annotation) -> Iterable[str]: ...
