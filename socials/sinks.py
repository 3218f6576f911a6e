"""
Output and status sinks the monitor writes to.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional, Protocol

from rich.console import Console
from rich.text import Text


class OutputSink(Protocol):
    """Append-only log of console markup lines."""

    def write(self, line: str) -> None:
        ...

    def clear(self) -> None:
        ...


class StatusSink(Protocol):
    """Single-line summary of fetch state and keywords."""

    def update(self, text: str) -> None:
        ...


class BufferSink:
    """Keeps the most recent lines in memory (headless mode, tests)."""

    def __init__(self, max_lines: int = 2000):
        self.lines: Deque[str] = deque(maxlen=max_lines)
        self.status: str = ""
        self._mark = 0
        self._written = 0

    def write(self, line: str) -> None:
        self.lines.append(line)
        self._written += 1

    def clear(self) -> None:
        self.lines.clear()
        self._written = 0
        self._mark = 0

    def update(self, text: str) -> None:
        self.status = text

    def mark(self) -> None:
        """Remember the current position for ``since_mark``."""
        self._mark = self._written

    def since_mark(self) -> List[str]:
        count = min(self._written - self._mark, len(self.lines))
        return list(self.lines)[len(self.lines) - count:] if count > 0 else []

    def plain(self) -> List[str]:
        return [Text.from_markup(line).plain for line in self.lines]


class ConsoleSink:
    """Prints markup lines to a rich Console; status changes print as a rule."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(highlight=False)
        self._status = ""

    def write(self, line: str) -> None:
        self.console.print(line, soft_wrap=True)

    def clear(self) -> None:
        self.console.clear()

    def update(self, text: str) -> None:
        if text == self._status:
            return
        self._status = text
        self.console.rule(text, align="left", style="blue")
