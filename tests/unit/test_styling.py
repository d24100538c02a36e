"""Tests for control codes, colors, the style context and the normalizer."""

from __future__ import annotations

import pytest

from chatstyle.core.errors import InvalidArgumentError
from chatstyle.core.normalizer import normalize
from chatstyle.core.styling import (
    CODE_BOLD,
    CODE_COLOR,
    CODE_UNDERLINE,
    Color,
    StyleContext,
    color_code,
    enter_bold,
    enter_color,
    enter_underline,
    exit_bold,
    exit_color,
    exit_underline,
)


class TestColorCode:
    """fg/bg attribute values map to two-digit codes."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("green", "03"),
            ("GREEN", "03"),
            ("3", "03"),
            ("03", "03"),
            ("12", "12"),
            ("15", "15"),
            ("light green", "09"),
            ("light-grey", "15"),
            ("Light_Blue", "12"),
            ("white", "00"),
            ("gray", "14"),
        ],
    )
    def test_known(self, value: str, expected: str) -> None:
        assert color_code(value) == expected

    @pytest.mark.parametrize("value", ["notacolor", "123", "16", "20", "99", "#ff0000", "light"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(InvalidArgumentError):
            color_code(value)

    def test_palette_size(self) -> None:
        assert {c.value for c in Color} == set(range(16))


class TestToggles:
    """Bold and underline only emit on real transitions."""

    def test_bold_from_plain(self) -> None:
        ctx = StyleContext()
        saved = ctx.copy()
        assert enter_bold(ctx) == CODE_BOLD
        assert ctx.bold
        assert exit_bold(ctx, saved) == CODE_BOLD
        assert ctx == StyleContext()

    def test_bold_when_already_bold(self) -> None:
        ctx = StyleContext(bold=True)
        saved = ctx.copy()
        assert enter_bold(ctx) == ""
        assert exit_bold(ctx, saved) == ""
        assert ctx.bold

    def test_underline(self) -> None:
        ctx = StyleContext()
        saved = ctx.copy()
        assert enter_underline(ctx) == CODE_UNDERLINE
        assert exit_underline(ctx, saved) == CODE_UNDERLINE
        assert not ctx.underline


class TestColorEmission:
    """Color codes carry only the channels that changed."""

    def test_foreground_only(self) -> None:
        ctx = StyleContext()
        saved = ctx.copy()
        assert enter_color(ctx, "green", None) == CODE_COLOR + "03" + CODE_BOLD * 2
        assert ctx.fg == "03"
        # Back to "no color" emits nothing
        assert exit_color(ctx, saved) == ""
        assert ctx.fg is None

    def test_background_only(self) -> None:
        ctx = StyleContext()
        assert enter_color(ctx, None, "red") == CODE_COLOR + ",04" + CODE_BOLD * 2

    def test_both(self) -> None:
        ctx = StyleContext()
        assert enter_color(ctx, "green", "black") == CODE_COLOR + "03,01"

    def test_unchanged_channel_not_emitted(self) -> None:
        ctx = StyleContext(fg="03")
        assert enter_color(ctx, "green", "black") == CODE_COLOR + ",01" + CODE_BOLD * 2

    def test_nothing_changed(self) -> None:
        ctx = StyleContext(fg="03")
        assert enter_color(ctx, "3", None) == ""

    def test_restore_previous_color(self) -> None:
        ctx = StyleContext(fg="04")
        saved = ctx.copy()
        enter_color(ctx, "blue", None)
        assert exit_color(ctx, saved) == CODE_COLOR + "04" + CODE_BOLD * 2
        assert ctx.fg == "04"

    def test_restore_both(self) -> None:
        ctx = StyleContext(fg="04", bg="01")
        saved = ctx.copy()
        enter_color(ctx, "blue", "white")
        assert exit_color(ctx, saved) == CODE_COLOR + "04,01"

    def test_missing_attributes(self) -> None:
        with pytest.raises(InvalidArgumentError):
            enter_color(StyleContext(), None, None)

    def test_empty_attributes(self) -> None:
        with pytest.raises(InvalidArgumentError):
            enter_color(StyleContext(), "", "")


class TestNormalize:
    """Redundant color sequences are collapsed."""

    def test_drops_boundary_before_text(self) -> None:
        assert normalize("\x0303\x02\x02Clicky") == "\x0303Clicky"

    def test_keeps_boundary_before_comma(self) -> None:
        assert normalize("\x0303\x02\x02,x") == "\x0303\x02\x02,x"

    def test_keeps_boundary_before_digit_after_comma(self) -> None:
        assert normalize("\x03,04\x02\x025") == "\x03,04\x02\x025"

    def test_overridden_color_removed(self) -> None:
        assert normalize("\x0303,\x02\x02\x0304x") == "\x0304x"

    def test_bare_color_comma_removed(self) -> None:
        assert normalize("a\x03,b") == "ab"

    def test_plain_text_untouched(self) -> None:
        text = "no codes here, 1, 2, 3"
        assert normalize(text) == text

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "\x0303\x02\x02Clicky",
            "\x0304\x02\x02\x0302\x02\x02x\x0304\x02\x02y",
            "\x03,\x03,x",
            "\x0312\x02\x02\x03,,",
            "\x0312,\x03,\x02\x02y",
            "\x03,04\x02\x02x",
            "\x0312\x02\x02\x02\x02,",
            "\x03\x03\x03,,,\x02\x02\x02",
            "\x0301,02\x02\x02\x03,\x0303\x02\x021",
        ],
    )
    def test_idempotent(self, text: str) -> None:
        once = normalize(text)
        assert normalize(once) == once
