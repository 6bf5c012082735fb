"""Markdown component for line-based terminal UIs.

The fragment stream from :func:`render_markdown_styled` is cut into
display lines at embedded newlines, serialized to ANSI and padded to the
requested width. One render is kept until the text, theme or width
changes.
"""

from __future__ import annotations

from pi.mdterm.ansi import fragments_to_ansi
from pi.mdterm.renderer import render_markdown_styled
from pi.mdterm.styled import StyledFragment, StyledText
from pi.mdterm.theme import MarkdownTheme, default_cli_theme
from pi.mdterm.utils import pad_right


class Markdown:
    """A block of markdown that renders itself to terminal lines."""

    def __init__(
        self,
        text: str = "",
        *,
        theme: MarkdownTheme | None = None,
        padding_x: int = 0,
    ) -> None:
        self._text = text
        self._theme = theme if theme is not None else default_cli_theme()
        self._padding_x = padding_x
        self._last: tuple[str, int, list[str]] | None = None

    @property
    def text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        if text == self._text:
            return
        self._text = text
        self._last = None

    def set_theme(self, theme: MarkdownTheme) -> None:
        self._theme = theme
        self._last = None

    def invalidate(self) -> None:
        self._last = None

    def render_fragments(self, width: int) -> StyledText:
        """Styled fragments laid out for the area inside the horizontal padding."""
        inner = max(1, width - 2 * self._padding_x)
        return render_markdown_styled(self._text, self._theme, cols=inner)

    def render(self, width: int) -> list[str]:
        """ANSI lines, each padded to *width* columns."""
        if self._last is not None:
            text, last_width, lines = self._last
            if text == self._text and last_width == width:
                return lines

        lines = self._layout(width)
        self._last = (self._text, width, lines)
        return lines

    def _layout(self, width: int) -> list[str]:
        if not self._text.strip():
            return []

        margin = " " * self._padding_x
        lines = [
            pad_right(margin + fragments_to_ansi(row), width)
            for row in _split_lines(self.render_fragments(width))
        ]
        while lines and not lines[-1].strip():
            lines.pop()
        return lines


def _split_lines(styled: StyledText) -> list[list[StyledFragment]]:
    """Group fragments into display lines at embedded newlines."""
    rows: list[list[StyledFragment]] = [[]]
    for fragment in styled:
        first, *rest = fragment.text.split("\n")
        if first:
            rows[-1].append(StyledFragment(first, fragment.fg, fragment.bg, fragment.attributes))
        for piece in rest:
            rows.append([])
            if piece:
                rows[-1].append(StyledFragment(piece, fragment.fg, fragment.bg, fragment.attributes))
    if not rows[-1]:
        rows.pop()
    return rows
