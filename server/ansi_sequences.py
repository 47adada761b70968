"""ANSI escape sequence parsing and marker scanning.

Only Control Sequence Introducer (``ESC [``) sequences with the SGR final
byte ``m`` produce a value. Anything else that starts with ``ESC`` is
consumed as far as the parser got and then dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from char_cursor import CharCursor
from graphic_rendition import MAX_PARAMETER, Sgr, parse_sgrs

log = logging.getLogger(__name__)

ESC = "\x1b"


def _is_space(char: str) -> bool:
    # SPACE and !"#$%&'()*+,-./
    return "\x20" <= char <= "\x2f"


def _is_parameter(char: str) -> bool:
    # 0-9:;<=>?
    return "\x30" <= char <= "\x3f"


def _is_final(char: str) -> bool:
    return "\x40" <= char <= "\x7e"


def _parse_code(param: str) -> int | None:
    if not param or not all("0" <= char <= "9" for char in param):
        return None
    code = int(param)
    if code > MAX_PARAMETER:
        return None
    return code


@dataclass(frozen=True, slots=True)
class Csi:
    """Control sequence. The only kind understood is SGR."""

    START = "["

    sgrs: tuple[Sgr, ...]

    @classmethod
    def peek(cls, cursor: CharCursor) -> bool:
        return cursor.peek_char(cls.START)

    @staticmethod
    def read_params(cursor: CharCursor) -> tuple[str, list[str]] | None:
        """Read parameters and the final byte.

        Returns the final byte and the raw parameter strings.
        """
        ranges: list[tuple[int, int]] = []
        start = end = cursor.position()
        while (char := cursor.peek()) is not None:
            if char == ";":
                ranges.append((start, end))
                cursor.read()
                start = end = cursor.position()
            elif _is_parameter(char):
                cursor.read()
                end = cursor.position()
            else:
                break
        if start != end:
            ranges.append((start, end))

        cursor.read_while(_is_space)

        final = cursor.read()
        if final is None or not _is_final(final):
            return None

        params = []
        for start, end in ranges:
            param = cursor.get(start, end)
            assert param is not None, f"invalid parameter range {start}..{end}"
            params.append(param)
        return final, params

    @classmethod
    def parse(cls, cursor: CharCursor) -> Csi | None:
        if not cursor.read_char(cls.START):
            return None
        result = cls.read_params(cursor)
        if result is None:
            return None
        final, params = result
        if final != "m":
            return None

        codes = []
        for param in params:
            code = _parse_code(param)
            if code is None:
                return None
            codes.append(code)
        return cls(tuple(parse_sgrs(codes or [0])))


@dataclass(frozen=True, slots=True)
class Escape:
    """ANSI escape sequence."""

    csi: Csi

    @classmethod
    def parse(cls, cursor: CharCursor) -> Escape | None:
        if not cursor.read_char(ESC):
            return None
        cursor.read_while(_is_space)
        if not Csi.peek(cursor):
            return None
        csi = Csi.parse(cursor)
        if csi is None:
            return None
        return cls(csi)


@dataclass(frozen=True, slots=True)
class TextMarker:
    """Raw text without any escape sequences."""

    text: str


@dataclass(frozen=True, slots=True)
class SequenceMarker:
    """A parsed escape sequence."""

    escape: Escape


Marker = Union[TextMarker, SequenceMarker]


def _scan(s: str, start: int) -> tuple[int, Escape | None, int]:
    """Find the next escape sequence in ``s`` from ``start``.

    Returns where the text before it ends, the escape (``None`` if invalid)
    and where scanning should continue.
    """
    index = s.find(ESC, start)
    if index == -1:
        return len(s), None, len(s)

    cursor = CharCursor(s, index)
    escape = Escape.parse(cursor)
    if escape is None:
        log.debug("Dropped malformed escape sequence %r", s[index : cursor.position()])
    return index, escape, cursor.position()


def read_next_sequence(s: str) -> tuple[str, Escape | None, str]:
    """Split ``s`` around its first escape sequence.

    Returns the text before the sequence, the parsed sequence and everything
    after it. The sequence is ``None`` when it is invalid; its characters are
    not part of either string. Without any escape the whole input is returned
    as the first item.
    """
    pre_end, escape, next_start = _scan(s, 0)
    return s[:pre_end], escape, s[next_start:]


def get_markers(s: str) -> list[Marker]:
    """Get all markers for the given string."""
    markers: list[Marker] = []
    position = 0
    while position < len(s):
        start = position
        pre_end, escape, position = _scan(s, start)
        if pre_end > start:
            markers.append(TextMarker(s[start:pre_end]))
        if escape is not None:
            markers.append(SequenceMarker(escape))
    return markers
