"""User-defined highlight syntax."""

import re
from dataclasses import dataclass

from marginalia.errors import InvalidPatternError


@dataclass(frozen=True)
class CustomPattern:
    """A regular expression whose first capture group is the highlighted text."""

    name: str
    pattern: str
    color: str | None = None

    def compile(self) -> re.Pattern[str]:
        """Compile the pattern, raising InvalidPatternError if it is unusable."""
        try:
            compiled = re.compile(self.pattern)
        except re.error as exc:
            msg = f"Custom pattern {self.name!r} is not a valid regular expression: {exc}"
            raise InvalidPatternError(msg) from exc
        if compiled.groups < 1:
            msg = f"Custom pattern {self.name!r} has no capture group"
            raise InvalidPatternError(msg)
        return compiled
