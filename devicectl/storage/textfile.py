"""Plain text file line source and sink."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from devicectl.core.errors import StorageError

LOGGER = logging.getLogger(__name__)


class TextFileLineSource:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def read_lines(self) -> list[str]:
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not read device file {self.path}: {exc}") from exc
        lines = content.splitlines()
        LOGGER.debug("Read %d lines from %s", len(lines), self.path)
        return lines


class TextFileLineSink:
    """Writes all lines at once through a temporary file.

    The target is only replaced after the temporary file is fully written,
    so a failed save leaves the previous content in place.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def write_lines(self, lines: Sequence[str]) -> None:
        content = "".join(f"{line}\n" for line in lines)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
        except OSError as exc:
            raise StorageError(f"Could not prepare device file {self.path}: {exc}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(content)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Could not write device file {self.path}: {exc}") from exc
        LOGGER.debug("Wrote %d lines to %s", len(lines), self.path)
