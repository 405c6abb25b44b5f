"""Shared test fixtures."""

from pathlib import Path

import pytest

SAMPLE_NOTE = """# Reading notes

==Markets are conversations==^[see #economics] and more text.

The <font color="red">red passage</font>[^1] matters.

%%remember to revisit%%

```python
x = "==not a highlight=="
```

Inline code `<mark>ignored</mark>` stays literal.

==trailing highlight==
<!-- @purple a colored comment -->

[^1]: Footnote about #history
"""


@pytest.fixture
def sample_note() -> str:
    return SAMPLE_NOTE


@pytest.fixture
def note_file(tmp_path: Path) -> Path:
    """Write the sample note to disk for CLI tests."""
    path = tmp_path / "Reading.md"
    path.write_text(SAMPLE_NOTE, encoding="utf-8")
    return path
