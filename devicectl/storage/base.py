"""Line source and sink interfaces."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class LineSource(Protocol):
    def read_lines(self) -> list[str]:
        """Return every raw data line, in file order."""


class LineSink(Protocol):
    def write_lines(self, lines: Sequence[str]) -> None:
        """Persist `lines`, replacing any earlier content."""
