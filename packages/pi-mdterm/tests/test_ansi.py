"""Tests for pi.mdterm.ansi SGR writing and reading."""

from __future__ import annotations

from pi.mdterm.ansi import (
    RESET,
    ansi256_to_rgb,
    ansi_to_styled_text,
    fragment_to_ansi,
    fragments_to_ansi,
    rgb_to_ansi,
    rgb_to_ansi_bg,
)
from pi.mdterm.styled import Color, StyledFragment, TextAttribute


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


class TestWriting:
    def test_rgb_sequences(self) -> None:
        assert rgb_to_ansi(1, 2, 3) == "\x1b[38;2;1;2;3m"
        assert rgb_to_ansi_bg(4, 5, 6) == "\x1b[48;2;4;5;6m"

    def test_unstyled_fragment_is_bare_text(self) -> None:
        assert fragment_to_ansi(StyledFragment("plain")) == "plain"

    def test_attributes_then_colours(self) -> None:
        frag = StyledFragment(
            "x",
            fg=Color(1, 2, 3),
            bg=Color(4, 5, 6),
            attributes=TextAttribute.ITALIC | TextAttribute.BOLD,
        )
        assert fragment_to_ansi(frag) == (
            "\x1b[1m\x1b[3m\x1b[38;2;1;2;3m\x1b[48;2;4;5;6mx" + RESET
        )

    def test_strikethrough_code(self) -> None:
        frag = StyledFragment("old", attributes=TextAttribute.STRIKETHROUGH)
        assert fragment_to_ansi(frag) == "\x1b[9mold" + RESET

    def test_fragments_concatenate(self) -> None:
        frags = [StyledFragment("a"), StyledFragment("b", attributes=TextAttribute.DIM)]
        assert fragments_to_ansi(frags) == "a\x1b[2mb" + RESET


# ---------------------------------------------------------------------------
# 256-colour palette
# ---------------------------------------------------------------------------


class TestAnsi256:
    def test_base_colours(self) -> None:
        assert ansi256_to_rgb(0) == (0, 0, 0)
        assert ansi256_to_rgb(9) == (255, 0, 0)
        assert ansi256_to_rgb(15) == (255, 255, 255)

    def test_colour_cube(self) -> None:
        assert ansi256_to_rgb(16) == (0, 0, 0)
        assert ansi256_to_rgb(21) == (0, 0, 255)
        assert ansi256_to_rgb(196) == (255, 0, 0)
        assert ansi256_to_rgb(231) == (255, 255, 255)

    def test_grayscale_ramp(self) -> None:
        assert ansi256_to_rgb(232) == (8, 8, 8)
        assert ansi256_to_rgb(255) == (238, 238, 238)

    def test_out_of_range_is_clamped(self) -> None:
        assert ansi256_to_rgb(300) == ansi256_to_rgb(255)
        assert ansi256_to_rgb(-4) == ansi256_to_rgb(0)


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class TestAnsiToStyledText:
    def test_plain_text(self) -> None:
        styled = ansi_to_styled_text("hello")
        assert styled.fragments == [StyledFragment("hello")]

    def test_truecolor_foreground(self) -> None:
        (frag,) = ansi_to_styled_text("\x1b[38;2;10;20;30mhi\x1b[0m")
        assert frag == StyledFragment("hi", fg=Color(10, 20, 30))

    def test_basic_and_bright_colours(self) -> None:
        styled = ansi_to_styled_text("\x1b[31mred\x1b[0m\x1b[92mgreen\x1b[44mbg")
        frags = styled.fragments
        assert frags[0].fg == Color(205, 49, 49)
        assert frags[1].fg == Color(35, 209, 139)
        assert frags[2].bg == Color(36, 114, 200)
        assert frags[2].fg == Color(35, 209, 139)

    def test_256_colour(self) -> None:
        (frag,) = ansi_to_styled_text("\x1b[38;5;196mx")
        assert frag.fg == Color(255, 0, 0)

    def test_256_colour_background(self) -> None:
        (frag,) = ansi_to_styled_text("\x1b[48;5;232mx")
        assert frag.bg == Color(8, 8, 8)

    def test_attributes_accumulate_and_clear(self) -> None:
        styled = ansi_to_styled_text("\x1b[1;3mab\x1b[22mcd\x1b[23mef")
        assert [f.attributes for f in styled] == [
            TextAttribute.BOLD | TextAttribute.ITALIC,
            TextAttribute.ITALIC,
            TextAttribute.NONE,
        ]

    def test_default_colour_codes(self) -> None:
        styled = ansi_to_styled_text("\x1b[31;41mx\x1b[39my\x1b[49mz")
        frags = styled.fragments
        assert frags[1].fg is None and frags[1].bg is not None
        assert frags[2].bg is None

    def test_empty_params_reset(self) -> None:
        styled = ansi_to_styled_text("\x1b[1mbold\x1b[mplain")
        assert styled.fragments[1] == StyledFragment("plain")

    def test_unknown_codes_ignored(self) -> None:
        (frag,) = ansi_to_styled_text("\x1b[1;53mx")
        assert frag.attributes == TextAttribute.BOLD

    def test_written_output_reads_back(self) -> None:
        frags = [
            StyledFragment("a", fg=Color(1, 2, 3), attributes=TextAttribute.UNDERLINE),
            StyledFragment(" plain "),
            StyledFragment("b", bg=Color(9, 9, 9), attributes=TextAttribute.BOLD | TextAttribute.DIM),
        ]
        assert ansi_to_styled_text(fragments_to_ansi(frags)).fragments == frags

    def test_overlong_parameter_is_unknown_code(self) -> None:
        styled = ansi_to_styled_text("\x1b[" + "1" * 5000 + "mtext")
        assert styled.fragments == [StyledFragment("text")]

    def test_overlong_parameter_keeps_neighbours(self) -> None:
        (frag,) = ansi_to_styled_text("\x1b[1;" + "9" * 40 + ";3mx")
        assert frag.attributes == TextAttribute.BOLD | TextAttribute.ITALIC

    def test_out_of_range_truecolor_ignored(self) -> None:
        (frag,) = ansi_to_styled_text("\x1b[38;2;999;0;0;1mx")
        assert frag.fg is None
        assert frag.attributes == TextAttribute.BOLD

    def test_out_of_range_256_index_clamped(self) -> None:
        (frag,) = ansi_to_styled_text("\x1b[48;5;999mx")
        assert frag.bg == Color(238, 238, 238)
