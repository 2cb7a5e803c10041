"""In-memory line source and sink."""

from __future__ import annotations

from collections.abc import Iterable, Sequence


class ListLineSource:
    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = list(lines)

    def read_lines(self) -> list[str]:
        return list(self._lines)


class ListLineSink:
    def __init__(self) -> None:
        self.lines: list[str] = []
        self.writes = 0

    def write_lines(self, lines: Sequence[str]) -> None:
        self.lines = list(lines)
        self.writes += 1
