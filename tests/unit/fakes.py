"""Fake collaborators for testing the query evaluator."""

from collections.abc import Iterable

from marginalia.models.annotation import Annotation


class FakeMembership:
    """In-memory tag or collection store keyed by annotation text.

    Records every lookup so tests can assert how often it was consulted.
    """

    def __init__(self, memberships: dict[str, Iterable[str]] | None = None) -> None:
        self.memberships: dict[str, set[str]] = {
            text: set(names) for text, names in (memberships or {}).items()
        }
        self.calls: list[str] = []

    def add(self, text: str, *names: str) -> None:
        """Register names for the annotation with the given text."""
        self.memberships.setdefault(text, set()).update(names)

    def __call__(self, annotation: Annotation) -> set[str]:
        self.calls.append(annotation.text)
        return self.memberships.get(annotation.text, set())


class FakeClassColors:
    """Resolve CSS class names from a fixed table."""

    def __init__(self, colors: dict[str, str]) -> None:
        self.colors = colors
        self.calls: list[str] = []

    def __call__(self, class_name: str) -> str | None:
        self.calls.append(class_name)
        return self.colors.get(class_name)
