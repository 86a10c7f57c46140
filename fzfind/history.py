"""Query history kept in a file."""

from __future__ import annotations

import os
from pathlib import Path


class HistoryError(Exception):
    """The history file cannot be read or written."""


def _write(path: Path, text: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as handle:
        handle.write(text.encode("utf-8", "surrogateescape"))


class History:
    """Input history with a cursor for stepping through earlier entries.

    The last line is always the entry being edited. Edits to earlier
    entries are kept in memory only.
    """

    def __init__(self, path: str | os.PathLike[str], max_size: int) -> None:
        self.path = Path(path)
        self.max_size = max_size
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            data = b""
            try:
                _write(self.path, "")
            except OSError as exc:
                raise self._error(exc) from exc
        except OSError as exc:
            raise self._error(exc) from exc

        lines = data.decode("utf-8", "surrogateescape").strip("\n").split("\n")
        if lines[-1]:
            lines.append("")
        self.lines = lines
        self._modified: dict[int, str] = {}
        self._cursor = len(lines) - 1

    def _error(self, exc: OSError) -> HistoryError:
        if isinstance(exc, PermissionError):
            return HistoryError(f"permission denied: {self.path}")
        return HistoryError(f"invalid history file: {exc}")

    @property
    def cursor(self) -> int:
        return self._cursor

    def append(self, line: str) -> None:
        """Add ``line`` to the history and save it; empty lines are ignored."""
        if not line:
            return
        lines = self.lines[:-1] + [line]
        if len(lines) > self.max_size:
            lines = lines[len(lines) - self.max_size :]
        self.lines = lines + [""]
        try:
            _write(self.path, "\n".join(self.lines))
        except OSError as exc:
            raise self._error(exc) from exc

    def override(self, text: str) -> None:
        """Replace the entry under the cursor, without saving it."""
        last = len(self.lines) - 1
        if self._cursor == last:
            self.lines[self._cursor] = text
        elif self._cursor < last:
            self._modified[self._cursor] = text

    def current(self) -> str:
        """Return the entry under the cursor."""
        if self._cursor in self._modified:
            return self._modified[self._cursor]
        return self.lines[self._cursor]

    def previous(self) -> str:
        """Move to the earlier entry, if any, and return it."""
        if self._cursor > 0:
            self._cursor -= 1
        return self.current()

    def next(self) -> str:
        """Move to the later entry, if any, and return it."""
        if self._cursor < len(self.lines) - 1:
            self._cursor += 1
        return self.current()