"""Cursor-aware multi-line text buffer for the message composer."""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import CursorOutOfBoundsError


@dataclass(frozen=True)
class Cursor:
    """Zero-based cursor position inside the buffer."""

    row: int = 0
    column: int = 0


class TextBuffer:
    """Own the editable lines and the cursor position.

    Every mutation keeps ``lines`` non-empty and the cursor within the
    current line, so no operation needs to fail on user input.
    """

    def __init__(self) -> None:
        self._lines: list[str] = [""]
        self._cursor = Cursor()

    @property
    def lines(self) -> tuple[str, ...]:
        """Return a read-only snapshot of the buffer lines."""
        return tuple(self._lines)

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def current_line(self) -> str:
        return self._lines[self._cursor.row]

    def insert(self, char: str) -> None:
        """Splice ``char`` into the current line at the cursor."""
        if not char:
            return
        row, column = self._cursor.row, self._cursor.column
        line = self._lines[row]
        self._lines[row] = line[:column] + char + line[column:]
        self._set_cursor(row, column + len(char))

    def insert_text(self, text: str) -> None:
        """Insert arbitrary text, splitting lines on newlines."""
        normalized = text.replace("\r\n", "\n").replace("\r", "\n")
        first, *rest = normalized.split("\n")
        self.insert(first)
        for segment in rest:
            self._split_line()
            self.insert(segment)

    def delete_backward(self) -> None:
        """Remove the character before the cursor, joining lines at column 0."""
        row, column = self._cursor.row, self._cursor.column
        if column > 0:
            line = self._lines[row]
            self._lines[row] = line[: column - 1] + line[column:]
            self._set_cursor(row, column - 1)
            return
        if row == 0:
            return
        previous = self._lines[row - 1]
        self._lines[row - 1] = previous + self._lines[row]
        del self._lines[row]
        self._set_cursor(row - 1, len(previous))

    def move_cursor(self, direction: str) -> None:
        """Move the cursor one column left or right within the current line."""
        if direction == "left":
            delta = -1
        elif direction == "right":
            delta = 1
        else:
            return
        row = self._cursor.row
        column = min(max(self._cursor.column + delta, 0), len(self._lines[row]))
        self._set_cursor(row, column)

    def clear(self) -> None:
        self._lines = [""]
        self._set_cursor(0, 0)

    def to_text(self) -> str:
        return "\n".join(self._lines)

    def is_empty(self) -> bool:
        return not self.to_text().strip()

    def _split_line(self) -> None:
        row, column = self._cursor.row, self._cursor.column
        line = self._lines[row]
        self._lines[row : row + 1] = [line[:column], line[column:]]
        self._set_cursor(row + 1, 0)

    def _set_cursor(self, row: int, column: int) -> None:
        if not self._lines:
            raise CursorOutOfBoundsError("buffer has no lines")
        if not 0 <= row < len(self._lines):
            raise CursorOutOfBoundsError(
                f"row {row} outside [0, {len(self._lines)})"
            )
        if not 0 <= column <= len(self._lines[row]):
            raise CursorOutOfBoundsError(
                f"column {column} outside [0, {len(self._lines[row])}] on row {row}"
            )
        self._cursor = Cursor(row, column)

    def __repr__(self) -> str:
        return f"TextBuffer(lines={self._lines!r}, cursor={self._cursor!r})"
