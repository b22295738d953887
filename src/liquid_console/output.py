"""Append-only line buffer shared by commands, errors and sub-evaluations."""

from __future__ import annotations

from typing import Iterator, List, Optional

from .types import Line, Severity


class OutputChannel:
    def __init__(self) -> None:
        self._lines: List[Line] = []

    def emit(self, text: str, severity: Severity = Severity.NORMAL) -> None:
        self._lines.append(Line(text, severity))

    def pop_last(self) -> Optional[Line]:
        """Remove the newest line; used to take a sub-evaluation's value."""
        if not self._lines:
            return None

        return self._lines.pop()

    def drain(self) -> List[Line]:
        lines = self._lines
        self._lines = []
        return lines

    def clear(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(list(self._lines))
