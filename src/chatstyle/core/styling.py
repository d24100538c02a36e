"""
Inline formatting control codes and the style context.

Bold and underline are toggles: the same byte switches them on and off.
Colors are set with COLOR followed by "FF,BB" (two-digit codes, either
side may be omitted). When only one side is emitted, a double BOLD is
appended so a following literal digit or comma is never read as part of
the color code; ``normalize`` removes the pairs that turn out to be
unnecessary.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum

from chatstyle.core.errors import InvalidArgumentError

CODE_BOLD = "\x02"
CODE_COLOR = "\x03"
CODE_UNDERLINE = "\x1f"

# Boundary marker after a one-sided color code
COLOR_SEPARATOR = CODE_BOLD + CODE_BOLD


class Color(IntEnum):
    """mIRC color palette."""

    WHITE = 0
    BLACK = 1
    BLUE = 2
    GREEN = 3
    RED = 4
    BROWN = 5
    PURPLE = 6
    ORANGE = 7
    YELLOW = 8
    LIGHT_GREEN = 9
    TEAL = 10
    CYAN = 11
    LIGHT_BLUE = 12
    PINK = 13
    GREY = 14
    LIGHT_GREY = 15

    # Aliases
    NAVY = 2
    MAROON = 5
    MAGENTA = 6
    LIME = 9
    ROYAL = 12
    GRAY = 14
    LIGHT_GRAY = 15
    SILVER = 15


def color_code(value: str) -> str:
    """
    Turn an fg/bg attribute into a two-digit color code.

    Accepts a palette index 0-15 ("3", "03") or a color name ("green", "light-blue",
    "Light Grey").

    Raises:
        InvalidArgumentError: If the name is unknown or the number out of range.
    """
    value = value.replace(" ", "_").replace("-", "_")
    if value.isdigit():
        number = int(value)
        if number > Color.LIGHT_GREY:
            raise InvalidArgumentError(f'Invalid color "{value}"')
    else:
        try:
            number = Color[value.upper()].value
        except KeyError:
            raise InvalidArgumentError(f'Invalid color "{value}"') from None
    return f"{number:02d}"


@dataclass
class StyleContext:
    """Formatting attributes in effect at a point of the tree walk."""

    bold: bool = False
    underline: bool = False
    fg: str | None = None
    bg: str | None = None

    def copy(self) -> StyleContext:
        return replace(self)

    def restore(self, saved: StyleContext) -> None:
        self.bold = saved.bold
        self.underline = saved.underline
        self.fg = saved.fg
        self.bg = saved.bg


def _color_escape(fg: str, bg: str) -> str:
    """Encode the changed channels ('' = unchanged)."""
    if fg and bg:
        return f"{CODE_COLOR}{fg},{bg}"
    code = f"{fg},{bg}"
    if code == ",":
        return ""
    return CODE_COLOR + code.rstrip(",") + COLOR_SEPARATOR


def enter_bold(ctx: StyleContext) -> str:
    code = "" if ctx.bold else CODE_BOLD
    ctx.bold = True
    return code


def exit_bold(ctx: StyleContext, saved: StyleContext) -> str:
    ctx.bold = saved.bold
    return "" if saved.bold else CODE_BOLD


def enter_underline(ctx: StyleContext) -> str:
    code = "" if ctx.underline else CODE_UNDERLINE
    ctx.underline = True
    return code


def exit_underline(ctx: StyleContext, saved: StyleContext) -> str:
    ctx.underline = saved.underline
    return "" if saved.underline else CODE_UNDERLINE


def enter_color(ctx: StyleContext, fg: str | None, bg: str | None) -> str:
    """
    Apply fg/bg attributes and return the code for the channels that changed.

    Raises:
        InvalidArgumentError: If neither fg nor bg is given, or a color is invalid.
    """
    if not fg and not bg:
        raise InvalidArgumentError('The <color> tag needs an "fg" or a "bg" attribute')

    changed_fg = changed_bg = ""
    if fg:
        code = color_code(fg)
        if code != ctx.fg:
            changed_fg = code
        ctx.fg = code
    if bg:
        code = color_code(bg)
        if code != ctx.bg:
            changed_bg = code
        ctx.bg = code
    return _color_escape(changed_fg, changed_bg)


def exit_color(ctx: StyleContext, saved: StyleContext) -> str:
    """
    Restore the saved colors and return the code for that.

    Going back to "no color" emits nothing for that channel.
    """
    restored_fg = (saved.fg or "") if ctx.fg != saved.fg else ""
    restored_bg = (saved.bg or "") if ctx.bg != saved.bg else ""
    ctx.fg = saved.fg
    ctx.bg = saved.bg
    return _color_escape(restored_fg, restored_bg)
