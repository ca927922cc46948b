"""Output rendering abstraction for the enes CLI.

File: src/enes/ui/render.py

Purpose
- Provide a thin rendering layer for CLI listings that are not metric reports.

Functional requirements
- Plain-text rendering must always work without external dependencies.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import TextIO


class CLIRenderer:
    """Thin CLI output renderer producing deterministic plain text."""

    def __init__(self, *, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def text(self, line: str) -> None:
        """Print a plain text line."""

        print(line, file=self.stream)

    def table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        *,
        title: str | None = None,
    ) -> None:
        """Print a formatted ASCII table."""

        if not rows:
            return

        col_count = len(headers)
        widths = [len(h) for h in headers]
        for row in rows:
            for i in range(min(len(row), col_count)):
                widths[i] = max(widths[i], len(str(row[i])))

        def _pad(cells: Sequence[str]) -> str:
            parts: list[str] = []
            for i in range(col_count):
                cell = str(cells[i]) if i < len(cells) else ""
                parts.append(cell.ljust(widths[i]))
            return "  ".join(parts).rstrip()

        if title:
            self.text(title)
        self.text(f"  {_pad(list(headers))}")
        self.text(f"  {'  '.join('-' * w for w in widths)}")
        for row in rows:
            self.text(f"  {_pad(list(row))}")


def create_renderer(*, stream: TextIO | None = None) -> CLIRenderer:
    """Create a CLI renderer writing to ``stream`` (default: stdout)."""

    return CLIRenderer(stream=stream)


__all__ = ["CLIRenderer", "create_renderer"]
