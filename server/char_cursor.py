"""Character cursor used by the escape sequence parser.

The cursor never copies the string it scans; it only moves an index over it.
Python strings are indexed by code point, so every position is a valid
slice boundary.
"""

from __future__ import annotations

from typing import Callable


class CharCursor:
    __slots__ = ("_text", "_pos")

    def __init__(self, text: str, position: int = 0) -> None:
        if not 0 <= position <= len(text):
            raise ValueError(f"Position {position} is outside of 0..{len(text)}")
        self._text = text
        self._pos = position

    def __repr__(self) -> str:
        return f"CharCursor(position={self._pos}, remaining={len(self._text) - self._pos})"

    def position(self) -> int:
        """Current index into the scanned string."""
        return self._pos

    def seek(self, position: int) -> None:
        """Restore a position previously returned by :meth:`position`."""
        if not 0 <= position <= len(self._text):
            raise ValueError(f"Position {position} is outside of 0..{len(self._text)}")
        self._pos = position

    def at_end(self) -> bool:
        return self._pos >= len(self._text)

    def peek(self) -> str | None:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return None

    def peek_char(self, char: str) -> bool:
        """Check whether the next character is ``char`` without consuming it."""
        return self.peek() == char

    def read_char(self, char: str) -> bool:
        """Consume the next character only if it equals ``char``."""
        if self.peek() != char:
            return False
        self._pos += 1
        return True

    def read(self) -> str | None:
        """Consume and return the next character, ``None`` at the end."""
        char = self.peek()
        if char is not None:
            self._pos += 1
        return char

    def read_while(self, predicate: Callable[[str], bool]) -> None:
        text = self._text
        end = len(text)
        pos = self._pos
        while pos < end and predicate(text[pos]):
            pos += 1
        self._pos = pos

    def get(self, start: int, end: int) -> str | None:
        """Return ``text[start:end]``, or ``None`` if the range is invalid."""
        if not 0 <= start <= end <= len(self._text):
            return None
        return self._text[start:end]

    def remainder(self) -> str:
        return self._text[self._pos :]
