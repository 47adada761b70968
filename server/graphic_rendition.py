"""Select Graphic Rendition (SGR) commands and the cumulative effect they build.

``parse_sgrs`` turns the integer parameters of an ``ESC [ ... m`` sequence
into :class:`Sgr` commands; :class:`SgrEffect` folds those commands into the
rendition state that is active at a point in the text.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Callable, Iterable, Union

if TYPE_CHECKING:
    from ansi_style import ClassStyle, StyleBuilder


# (normal, bright) 24-bit values for the eight ANSI colors
_NAMED_RGB = (
    (0x000000, 0x808080),
    (0x800000, 0xFF0000),
    (0x008000, 0x00FF00),
    (0x808000, 0xFFFF00),
    (0x000080, 0x0000FF),
    (0x800080, 0xFF00FF),
    (0x008080, 0x00FFFF),
    (0xC0C0C0, 0xFFFFFF),
)

# xterm 6x6x6 color cube levels
_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)

MAX_PARAMETER = 0xFFFFFFFF


class ColorName(IntEnum):
    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7

    def rgb(self, bright: bool = False) -> int:
        """24-bit RGB value of this color as ``0xRRGGBB``."""
        return _NAMED_RGB[self][1 if bright else 0]


@dataclass(frozen=True, slots=True)
class Name:
    color: ColorName


@dataclass(frozen=True, slots=True)
class NameBright:
    color: ColorName


@dataclass(frozen=True, slots=True)
class Rgb:
    value: int


# ``None`` means the default color for the axis.
ColorEffect = Union[Name, NameBright, Rgb, None]


class SgrKind(Enum):
    RESET = "reset"
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    COLOR_FG_NAME = "color_fg_name"
    COLOR_BG_NAME = "color_bg_name"
    COLOR_FG_NAME_BRIGHT = "color_fg_name_bright"
    COLOR_BG_NAME_BRIGHT = "color_bg_name_bright"
    COLOR_FG = "color_fg"
    COLOR_BG = "color_bg"
    COLOR_FG_DEFAULT = "color_fg_default"
    COLOR_BG_DEFAULT = "color_bg_default"


@dataclass(frozen=True, slots=True)
class Sgr:
    """A single graphic rendition command.

    ``value`` holds a :class:`ColorName` for the named kinds and a
    ``0xRRGGBB`` integer for ``COLOR_FG``/``COLOR_BG``.
    """

    kind: SgrKind
    value: ColorName | int | None = None


RESET = Sgr(SgrKind.RESET)
BOLD = Sgr(SgrKind.BOLD)
ITALIC = Sgr(SgrKind.ITALIC)
UNDERLINE = Sgr(SgrKind.UNDERLINE)
COLOR_FG_DEFAULT = Sgr(SgrKind.COLOR_FG_DEFAULT)
COLOR_BG_DEFAULT = Sgr(SgrKind.COLOR_BG_DEFAULT)

_SIMPLE = {
    0: RESET,
    1: BOLD,
    3: ITALIC,
    4: UNDERLINE,
    39: COLOR_FG_DEFAULT,
    49: COLOR_BG_DEFAULT,
}


def _color_256(index: int, background: bool) -> Sgr | None:
    """Map an xterm 256-color index onto the supported color commands."""
    if index < 8:
        kind = SgrKind.COLOR_BG_NAME if background else SgrKind.COLOR_FG_NAME
        return Sgr(kind, ColorName(index))
    if index < 16:
        kind = SgrKind.COLOR_BG_NAME_BRIGHT if background else SgrKind.COLOR_FG_NAME_BRIGHT
        return Sgr(kind, ColorName(index - 8))

    kind = SgrKind.COLOR_BG if background else SgrKind.COLOR_FG
    if index <= 231:
        index -= 16
        r = _CUBE_LEVELS[index // 36]
        g = _CUBE_LEVELS[(index % 36) // 6]
        b = _CUBE_LEVELS[index % 6]
        return Sgr(kind, (r << 16) | (g << 8) | b)
    if index <= 255:
        v = 8 + (index - 232) * 10
        return Sgr(kind, (v << 16) | (v << 8) | v)
    return None


def _extended_color(params: list[int], i: int, background: bool) -> tuple[Sgr | None, int]:
    """Interpret ``38``/``48`` at ``params[i]``.

    Returns the command (if any) and the number of extra codes consumed.
    A truncated or unknown form consumes every remaining code, since its
    arguments are not commands.
    """
    remaining = len(params) - i - 1
    if remaining >= 2 and params[i + 1] == 5:
        return _color_256(params[i + 2], background), 2
    if remaining >= 4 and params[i + 1] == 2:
        r, g, b = params[i + 2], params[i + 3], params[i + 4]
        if max(r, g, b) > 0xFF:
            return None, 4
        kind = SgrKind.COLOR_BG if background else SgrKind.COLOR_FG
        return Sgr(kind, (r << 16) | (g << 8) | b), 4
    return None, remaining


def parse_sgrs(codes: Iterable[int]) -> list[Sgr]:
    """Convert SGR parameter codes into commands.

    Codes that are not understood are skipped. A ``38``/``48`` whose
    arguments are missing or whose mode is unknown ends interpretation of
    the list. This never fails.
    """
    params = list(codes)
    sgrs: list[Sgr] = []
    i = 0
    while i < len(params):
        p = params[i]
        if p in _SIMPLE:
            sgrs.append(_SIMPLE[p])
        elif 30 <= p <= 37:
            sgrs.append(Sgr(SgrKind.COLOR_FG_NAME, ColorName(p - 30)))
        elif 40 <= p <= 47:
            sgrs.append(Sgr(SgrKind.COLOR_BG_NAME, ColorName(p - 40)))
        elif 90 <= p <= 97:
            sgrs.append(Sgr(SgrKind.COLOR_FG_NAME_BRIGHT, ColorName(p - 90)))
        elif 100 <= p <= 107:
            sgrs.append(Sgr(SgrKind.COLOR_BG_NAME_BRIGHT, ColorName(p - 100)))
        elif p in (38, 48):
            sgr, consumed = _extended_color(params, i, background=p == 48)
            if sgr is not None:
                sgrs.append(sgr)
            i += consumed
        i += 1
    return sgrs


@dataclass
class SgrEffect:
    """Net rendition state after every command applied since the last reset."""

    bold: bool = False
    italic: bool = False
    underline: bool = False
    fg: ColorEffect = None
    bg: ColorEffect = None

    def reset(self) -> None:
        self.bold = False
        self.italic = False
        self.underline = False
        self.fg = None
        self.bg = None

    def copy(self) -> SgrEffect:
        return dataclasses.replace(self)

    def is_default(self) -> bool:
        return self == SgrEffect()

    def apply_sgrs(self, sgrs: Iterable[Sgr]) -> None:
        """Fold commands into the state, in order."""
        for sgr in sgrs:
            kind = sgr.kind
            if kind is SgrKind.RESET:
                self.reset()
            elif kind is SgrKind.BOLD:
                self.bold = True
            elif kind is SgrKind.ITALIC:
                self.italic = True
            elif kind is SgrKind.UNDERLINE:
                self.underline = True
            elif kind is SgrKind.COLOR_FG_NAME:
                self.fg = Name(sgr.value)
            elif kind is SgrKind.COLOR_BG_NAME:
                self.bg = Name(sgr.value)
            elif kind is SgrKind.COLOR_FG_NAME_BRIGHT:
                self.fg = NameBright(sgr.value)
            elif kind is SgrKind.COLOR_BG_NAME_BRIGHT:
                self.bg = NameBright(sgr.value)
            elif kind is SgrKind.COLOR_FG:
                self.fg = Rgb(sgr.value)
            elif kind is SgrKind.COLOR_BG:
                self.bg = Rgb(sgr.value)
            elif kind is SgrKind.COLOR_FG_DEFAULT:
                self.fg = None
            elif kind is SgrKind.COLOR_BG_DEFAULT:
                self.bg = None

    def to_class_style(self, builder_factory: Callable[[], StyleBuilder]) -> ClassStyle:
        """Describe this state using a fresh builder from ``builder_factory``."""
        builder = builder_factory()
        if self.bold:
            builder.bold()
        if self.italic:
            builder.italic()
        if self.underline:
            builder.underline()
        builder.fg_color(self.fg)
        builder.bg_color(self.bg)
        return builder.finish()
