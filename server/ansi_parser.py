"""ANSI SGR text to styled segments.

Converts raw terminal text (with escape codes) into (style, text) segments
and compact JSON runs:
  [{"t": "hello", "style": "color:#008000;"}, ...]
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

from ansi_sequences import SequenceMarker, TextMarker, get_markers
from ansi_style import ClassStyle, InlineStyle, StyleBuilder
from graphic_rendition import SgrEffect

BuilderFactory = Callable[[], StyleBuilder]


def iter_sgr_segments(text: str, effect: SgrEffect) -> Iterator[tuple[SgrEffect, str]]:
    """Yield ``(effect, text)`` for every text marker.

    ``effect`` is mutated in place as SGR sequences are passed and the same
    object is yielded each time, so it carries across calls.
    """
    for marker in get_markers(text):
        if isinstance(marker, TextMarker):
            yield effect, marker.text
        elif isinstance(marker, SequenceMarker):
            effect.apply_sgrs(marker.escape.csi.sgrs)


def get_sgr_segments(text: str) -> list[tuple[SgrEffect, str]]:
    """Split text into segments paired with a snapshot of their effect."""
    return [(effect.copy(), part) for effect, part in iter_sgr_segments(text, SgrEffect())]


def _styled(
    text: str, effect: SgrEffect, builder: BuilderFactory
) -> list[tuple[ClassStyle, str]]:
    return [(state.to_class_style(builder), part) for state, part in iter_sgr_segments(text, effect)]


def get_segments(
    text: str, builder: BuilderFactory = InlineStyle
) -> list[tuple[ClassStyle, str]]:
    """Split text into ``(ClassStyle, text)`` segments.

    Segments are not merged even when neighbours resolve to the same style.
    """
    return _styled(text, SgrEffect(), builder)


def to_run(class_style: ClassStyle, text: str) -> dict[str, Any]:
    """Build a compact run dict, omitting empty fields."""
    run: dict[str, Any] = {"t": text}
    if class_style.class_name:
        run["class"] = class_style.class_name
    if class_style.style:
        run["style"] = class_style.style
    return run


def parse_lines(raw: str, builder: BuilderFactory = InlineStyle) -> list[list[dict[str, Any]]]:
    """Parse multi-line raw terminal output into structured runs.

    Returns a list of lines, each line a list of run dicts. The rendition
    state carries across lines.
    """
    effect = SgrEffect()
    result: list[list[dict[str, Any]]] = []
    for line in raw.split("\n"):
        result.append([to_run(style, part) for style, part in _styled(line, effect, builder)])
    return result
