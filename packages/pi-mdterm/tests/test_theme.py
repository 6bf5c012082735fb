"""Tests for pi.mdterm.styled colours and pi.mdterm.theme loading."""

from __future__ import annotations

import json
import logging

import pytest

from pi.mdterm.styled import WHITE, Color, StyledFragment, StyledText, TextAttribute
from pi.mdterm.theme import (
    MarkdownTheme,
    ThemeRole,
    available_themes,
    default_cli_theme,
    load_theme,
    load_theme_file,
    resolve_color,
    theme_from_data,
)


# ---------------------------------------------------------------------------
# Color
# ---------------------------------------------------------------------------


class TestColor:
    def test_from_hex(self) -> None:
        assert Color.from_hex("#7fd88f") == Color(127, 216, 143)

    def test_from_hex_without_hash(self) -> None:
        assert Color.from_hex("ffffff") == WHITE

    def test_from_hex_rejects_short_value(self) -> None:
        with pytest.raises(ValueError):
            Color.from_hex("#fff")

    def test_from_hex_rejects_non_hex(self) -> None:
        with pytest.raises(ValueError):
            Color.from_hex("#zzzzzz")

    def test_from_floats(self) -> None:
        assert Color.from_floats(1, 0.5, 0) == Color(255, 128, 0)

    def test_hex_property(self) -> None:
        assert Color(10, 0, 255).hex == "#0a00ff"

    def test_alpha_defaults_to_opaque(self) -> None:
        assert Color(1, 2, 3).a == 255


class TestTextAttribute:
    def test_bit_values(self) -> None:
        assert TextAttribute.BOLD == 1
        assert TextAttribute.DIM == 2
        assert TextAttribute.ITALIC == 4
        assert TextAttribute.UNDERLINE == 8
        assert TextAttribute.BLINK == 16
        assert TextAttribute.INVERSE == 32
        assert TextAttribute.HIDDEN == 64
        assert TextAttribute.STRIKETHROUGH == 128

    def test_flags_combine(self) -> None:
        combined = TextAttribute.BOLD | TextAttribute.ITALIC
        assert int(combined) == 5
        assert TextAttribute.ITALIC in combined


class TestStyledText:
    def test_empty_text_is_dropped(self) -> None:
        out = StyledText()
        out.add("")
        out.add("x")
        assert len(out) == 1
        assert out.plain_text == "x"

    def test_fragments_keep_order(self) -> None:
        out = StyledText()
        out.add("a", WHITE, TextAttribute.BOLD)
        out.add("b")
        assert [f.text for f in out] == ["a", "b"]
        assert out.fragments[0] == StyledFragment("a", WHITE, None, TextAttribute.BOLD)

    def test_is_styled(self) -> None:
        assert not StyledFragment("plain").is_styled
        assert StyledFragment("x", attributes=TextAttribute.DIM).is_styled
        assert StyledFragment("x", bg=WHITE).is_styled


# ---------------------------------------------------------------------------
# MarkdownTheme
# ---------------------------------------------------------------------------


class TestMarkdownTheme:
    def test_missing_role_resolves_to_white(self) -> None:
        theme = MarkdownTheme({})
        assert theme[ThemeRole.MARKDOWN_STRONG] == WHITE

    def test_unknown_key_resolves_to_white(self) -> None:
        theme = MarkdownTheme({ThemeRole.TEXT: Color(1, 2, 3)})
        assert theme["noSuchRole"] == WHITE

    def test_lookup_by_json_key_and_name(self) -> None:
        red = Color(255, 0, 0)
        theme = MarkdownTheme({"markdownStrong": red})
        assert theme[ThemeRole.MARKDOWN_STRONG] == red
        assert theme["markdownStrong"] == red
        assert theme["markdown_strong"] == red

    def test_contains_only_defined_roles(self) -> None:
        theme = MarkdownTheme({ThemeRole.TEXT: WHITE})
        assert ThemeRole.TEXT in theme
        assert ThemeRole.BORDER not in theme
        assert 42 not in theme

    def test_non_string_key_resolves_to_white(self) -> None:
        theme = MarkdownTheme({ThemeRole.TEXT: Color(1, 2, 3)})
        assert theme[5] == WHITE
        assert theme[None] == WHITE
        assert 5 not in theme

    def test_non_string_keys_dropped_on_construction(self) -> None:
        theme = MarkdownTheme({5: Color(1, 2, 3), "text": Color(4, 5, 6)})
        assert theme.defined_roles == frozenset({ThemeRole.TEXT})

    def test_iterates_every_role(self) -> None:
        theme = MarkdownTheme({})
        assert len(theme) == len(ThemeRole) == 22
        assert list(theme) == list(ThemeRole)

    def test_default_cli_theme_defines_every_role(self) -> None:
        theme = default_cli_theme()
        assert theme.defined_roles == frozenset(ThemeRole)


# ---------------------------------------------------------------------------
# JSON themes
# ---------------------------------------------------------------------------


class TestResolveColor:
    def test_plain_hex(self) -> None:
        assert resolve_color("#123456", {}, "dark") == "#123456"

    def test_def_reference(self) -> None:
        assert resolve_color("green", {"green": "#00ff00"}, "dark") == "#00ff00"

    def test_mode_pair(self) -> None:
        value = {"dark": "#000000", "light": "#ffffff"}
        assert resolve_color(value, {}, "light") == "#ffffff"
        assert resolve_color(value, {}, "dark") == "#000000"

    def test_mode_pair_falls_back_to_dark(self) -> None:
        assert resolve_color({"dark": "#010101"}, {}, "light") == "#010101"


class TestThemeFromData:
    def test_invalid_colour_is_skipped(self, caplog) -> None:
        data = {"theme": {"text": "notacolour", "border": "#111111"}}
        with caplog.at_level(logging.WARNING, logger="pi.mdterm.theme"):
            theme = theme_from_data(data)
        assert ThemeRole.TEXT not in theme
        assert theme[ThemeRole.TEXT] == WHITE
        assert theme[ThemeRole.BORDER] == Color(17, 17, 17)
        assert "invalid colour" in caplog.text

    def test_missing_sections(self) -> None:
        theme = theme_from_data({})
        assert theme.defined_roles == frozenset()

    @pytest.mark.parametrize("value", [123, [1, 2], {"dark": [1]}, {"dark": 7}, True])
    def test_non_string_colour_is_skipped(self, value, caplog) -> None:
        data = {"theme": {"text": value, "border": "#111111"}}
        with caplog.at_level(logging.WARNING, logger="pi.mdterm.theme"):
            theme = theme_from_data(data)
        assert ThemeRole.TEXT not in theme
        assert theme[ThemeRole.TEXT] == WHITE
        assert theme[ThemeRole.BORDER] == Color(17, 17, 17)
        assert "invalid colour" in caplog.text

    def test_non_string_def_is_skipped(self) -> None:
        theme = theme_from_data({"defs": {"blue": 5}, "theme": {"border": "blue"}})
        assert ThemeRole.BORDER not in theme

    @pytest.mark.parametrize("data", [[], [1, 2], "theme", 3])
    def test_non_object_document_rejected(self, data) -> None:
        with pytest.raises(ValueError, match="JSON object"):
            theme_from_data(data)

    @pytest.mark.parametrize("key", ["theme", "defs"])
    def test_non_object_section_rejected(self, key) -> None:
        with pytest.raises(ValueError, match=key):
            theme_from_data({key: ["#ffffff"]})

    def test_load_theme_file_top_level_array(self, tmp_path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_theme_file(path)


class TestBundledThemes:
    def test_available_themes(self) -> None:
        names = available_themes()
        for name in ("opencode", "dracula", "nord", "gruvbox"):
            assert name in names

    @pytest.mark.parametrize("name", ["opencode", "dracula", "nord", "gruvbox"])
    def test_bundled_theme_defines_every_role(self, name: str) -> None:
        theme = load_theme(name)
        assert theme.defined_roles == frozenset(ThemeRole)

    def test_opencode_dark_values(self) -> None:
        theme = load_theme("opencode")
        assert theme[ThemeRole.TEXT] == Color.from_hex("#eeeeee")
        assert theme[ThemeRole.DIFF_ADDED] == Color.from_hex("#7fd88f")

    def test_opencode_light_mode(self) -> None:
        theme = load_theme("opencode", mode="light")
        assert theme[ThemeRole.TEXT] == Color.from_hex("#1a1a1a")

    def test_nord_def_reference(self) -> None:
        assert load_theme("nord")[ThemeRole.DIFF_ADDED] == Color.from_hex("#a3be8c")

    def test_dracula_literal_hex(self) -> None:
        assert load_theme("dracula")[ThemeRole.BACKGROUND_PANEL] == Color.from_hex("#21222c")

    def test_unknown_name_falls_back(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="pi.mdterm.theme"):
            theme = load_theme("does-not-exist")
        assert theme[ThemeRole.TEXT] == load_theme("opencode")[ThemeRole.TEXT]
        assert "does-not-exist" in caplog.text

    def test_default_name_is_opencode(self) -> None:
        assert load_theme()[ThemeRole.TEXT] == load_theme("opencode")[ThemeRole.TEXT]

    def test_load_theme_file(self, tmp_path) -> None:
        path = tmp_path / "mine.json"
        path.write_text(
            json.dumps({"defs": {"pink": "#ff00ff"}, "theme": {"markdownHeading": "pink"}}),
            encoding="utf-8",
        )
        theme = load_theme_file(path)
        assert theme[ThemeRole.MARKDOWN_HEADING] == Color(255, 0, 255)
        assert theme[ThemeRole.TEXT] == WHITE
