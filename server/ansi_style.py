"""Turn rendition state into class/style attribute pairs.

A :class:`StyleBuilder` receives the active effects one at a time and
produces a :class:`ClassStyle`. Rendering layers pick whichever builder
matches their output format.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from graphic_rendition import ColorEffect, ColorName, Name, NameBright, Rgb


@dataclass
class ClassStyle:
    """Combination of classes and inline styles.

    Inline styles alone can express everything; classes alone can not,
    because of the number of possible RGB values.
    """

    class_name: str | None = None
    style: str | None = None

    def push_class(self, new: str) -> None:
        """Append a class token. The token is not validated."""
        self.class_name = _push(self.class_name, new, " ")

    def push_style(self, new: str) -> None:
        """Append a style declaration. The declaration is not validated."""
        self.style = _push(self.style, new, ";")

    def is_empty(self) -> bool:
        return self.class_name is None and self.style is None


def _push(current: str | None, new: str, delimiter: str) -> str:
    if not current:
        return new
    if not current.endswith(delimiter):
        current += delimiter
    return current + new


class StyleBuilder(Protocol):
    def bold(self) -> None: ...

    def italic(self) -> None: ...

    def underline(self) -> None: ...

    def fg_color(self, color: ColorEffect) -> None: ...

    def bg_color(self, color: ColorEffect) -> None: ...

    def finish(self) -> ClassStyle: ...


def color_rgb(color: ColorEffect) -> int | None:
    """Resolve a color effect to ``0xRRGGBB``, ``None`` for the default color."""
    if isinstance(color, Name):
        return color.color.rgb(False)
    if isinstance(color, NameBright):
        return color.color.rgb(True)
    if isinstance(color, Rgb):
        return color.value
    return None


class InlineStyle:
    """Style builder using only inline style declarations."""

    CSS_BOLD = "font-weight:bold;"
    CSS_ITALIC = "font-style:italic;"
    CSS_UNDERLINE = "text-decoration:underline;"

    def __init__(self) -> None:
        self._class_style = ClassStyle()

    def _push_color(self, color: ColorEffect, background: bool) -> None:
        code = color_rgb(color)
        if code is None:
            return
        prop = "background-color" if background else "color"
        self._class_style.push_style(f"{prop}:#{code:06x};")

    def bold(self) -> None:
        self._class_style.push_style(self.CSS_BOLD)

    def italic(self) -> None:
        self._class_style.push_style(self.CSS_ITALIC)

    def underline(self) -> None:
        self._class_style.push_style(self.CSS_UNDERLINE)

    def fg_color(self, color: ColorEffect) -> None:
        self._push_color(color, background=False)

    def bg_color(self, color: ColorEffect) -> None:
        self._push_color(color, background=True)

    def finish(self) -> ClassStyle:
        return self._class_style


class ClassNameStyle:
    """Style builder using class tokens where it can.

    Named colors become ``ansi-fg-<name>`` / ``ansi-bg-bright-<name>`` style
    tokens; RGB colors have no class and fall back to inline declarations.
    Use :meth:`stylesheet` to get the CSS that defines the tokens.
    """

    PREFIX = "ansi"

    def __init__(self) -> None:
        self._class_style = ClassStyle()

    @classmethod
    def color_class(cls, color: ColorEffect, background: bool) -> str | None:
        if isinstance(color, Name):
            variant = color.color.name.lower()
        elif isinstance(color, NameBright):
            variant = f"bright-{color.color.name.lower()}"
        else:
            return None
        axis = "bg" if background else "fg"
        return f"{cls.PREFIX}-{axis}-{variant}"

    def _push_color(self, color: ColorEffect, background: bool) -> None:
        class_name = self.color_class(color, background)
        if class_name is not None:
            self._class_style.push_class(class_name)
            return
        code = color_rgb(color)
        if code is not None:
            prop = "background-color" if background else "color"
            self._class_style.push_style(f"{prop}:#{code:06x};")

    def bold(self) -> None:
        self._class_style.push_class(f"{self.PREFIX}-bold")

    def italic(self) -> None:
        self._class_style.push_class(f"{self.PREFIX}-italic")

    def underline(self) -> None:
        self._class_style.push_class(f"{self.PREFIX}-underline")

    def fg_color(self, color: ColorEffect) -> None:
        self._push_color(color, background=False)

    def bg_color(self, color: ColorEffect) -> None:
        self._push_color(color, background=True)

    def finish(self) -> ClassStyle:
        return self._class_style

    @classmethod
    def stylesheet(cls) -> str:
        """CSS rules for every class token this builder can emit."""
        prefix = cls.PREFIX
        rules = [
            f".{prefix}-bold {{ {InlineStyle.CSS_BOLD} }}",
            f".{prefix}-italic {{ {InlineStyle.CSS_ITALIC} }}",
            f".{prefix}-underline {{ {InlineStyle.CSS_UNDERLINE} }}",
        ]
        for color in ColorName:
            for effect in (Name(color), NameBright(color)):
                for background in (False, True):
                    prop = "background-color" if background else "color"
                    rules.append(
                        f".{cls.color_class(effect, background)} "
                        f"{{ {prop}:#{color_rgb(effect):06x}; }}"
                    )
        return "\n".join(rules) + "\n"


BUILDERS = {
    "inline": InlineStyle,
    "class": ClassNameStyle,
}
