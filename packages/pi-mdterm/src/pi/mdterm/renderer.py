"""Terminal markdown renderer.

Turns a markdown document into :class:`StyledText` using theme colours,
or into an ANSI string for direct printing. Parsing is line based and
regex driven; there is no markdown AST.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Union

from pi.mdterm.ansi import RESET, fragments_to_ansi, rgb_to_ansi
from pi.mdterm.blocks import (
    BlankLine,
    Block,
    BlockQuote,
    CodeBlock,
    Heading,
    HorizontalRule,
    OrderedListItem,
    Paragraph,
    Table,
    TaskListItem,
    UnorderedListItem,
    is_fence,
    is_table_row,
    iter_blocks,
)
from pi.mdterm.inline import render_inline
from pi.mdterm.styled import Color, StyledText, TextAttribute
from pi.mdterm.table import Box, render_table
from pi.mdterm.theme import MarkdownTheme, ThemeRole, default_cli_theme
from pi.mdterm.utils import strip_ansi, terminal_columns

logger = logging.getLogger(__name__)

_SIMPLE_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_SIMPLE_HR_RE = re.compile(r"^(-{3,}|_{3,}|\*{3,})$")
_SIMPLE_LIST_RE = re.compile(r"^(\s*)[-*+]\s+(.+)$")
_BOX_RUN_RE = re.compile(r"[┌┐└┘├┤┬┴┼─│]+")


def _columns(cols: int | None) -> int:
    return cols if cols is not None else terminal_columns()


# ---------------------------------------------------------------------------
# Styled rendering
# ---------------------------------------------------------------------------


def render_markdown_styled(
    md: str,
    theme: MarkdownTheme | None = None,
    cols: int | None = None,
) -> StyledText:
    """Render *md* into styled fragments using *theme* colours."""
    theme = theme if theme is not None else default_cli_theme()
    cols = _columns(cols)
    out = StyledText()

    for block in iter_blocks(md):
        _render_block(block, theme, out, cols)

    return out


def _render_block(block: Block, theme: MarkdownTheme, out: StyledText, cols: int) -> None:
    if isinstance(block, CodeBlock):
        _render_code_block(block, theme, out)

    elif isinstance(block, Table):
        render_table(block.lines, theme, out, cols)

    elif isinstance(block, Heading):
        heading = theme[ThemeRole.MARKDOWN_HEADING]
        if block.level <= 2:
            panel = theme[ThemeRole.BACKGROUND_PANEL]
            out.add("  ", heading, TextAttribute.BOLD, bg=panel)
            render_inline(block.text, theme, out, heading, TextAttribute.BOLD)
            out.add("  \n", heading, TextAttribute.BOLD, bg=panel)
        else:
            render_inline(block.text, theme, out, heading, TextAttribute.BOLD)
            out.add("\n")

    elif isinstance(block, HorizontalRule):
        out.add(
            Box.HORIZONTAL * max(0, cols - 4) + "\n",
            theme[ThemeRole.MARKDOWN_HORIZONTAL_RULE],
            TextAttribute.DIM,
        )

    elif isinstance(block, BlockQuote):
        out.add("  " + Box.VERTICAL + " ", theme[ThemeRole.BORDER], TextAttribute.DIM)
        render_inline(
            block.text,
            theme,
            out,
            theme[ThemeRole.MARKDOWN_BLOCK_QUOTE],
            TextAttribute.ITALIC,
        )
        out.add("\n")

    elif isinstance(block, TaskListItem):
        item = theme[ThemeRole.MARKDOWN_LIST_ITEM]
        out.add(block.indent + "- ", item)
        out.add("[", item)
        if block.checked:
            out.add("x", theme[ThemeRole.DIFF_ADDED])
        else:
            out.add(" ", theme[ThemeRole.TEXT_MUTED])
        out.add("] ", item)
        render_inline(block.text, theme, out)
        out.add("\n")

    elif isinstance(block, UnorderedListItem):
        out.add(block.indent + "- ", theme[ThemeRole.MARKDOWN_LIST_ITEM])
        render_inline(block.text, theme, out)
        out.add("\n")

    elif isinstance(block, OrderedListItem):
        out.add(f"{block.indent}{block.number}. ", theme[ThemeRole.MARKDOWN_LIST_ENUMERATION])
        render_inline(block.text, theme, out)
        out.add("\n")

    elif isinstance(block, BlankLine):
        out.add("\n")

    elif isinstance(block, Paragraph):
        render_inline(block.text, theme, out)
        out.add("\n")


def _render_code_block(block: CodeBlock, theme: MarkdownTheme, out: StyledText) -> None:
    if not block.closed:
        logger.debug("Unterminated code fence, closing at end of document")
    code = theme[ThemeRole.MARKDOWN_CODE_BLOCK]

    if block.language == "diff":
        added = theme[ThemeRole.DIFF_ADDED]
        removed = theme[ThemeRole.DIFF_REMOVED]
        for line in block.lines:
            trimmed = line.strip()
            if trimmed.startswith("+"):
                color = added
            elif trimmed.startswith("-"):
                color = removed
            else:
                color = code
            out.add("  " + line + "\n", color)
        return

    for line in block.lines:
        out.add("  " + line + "\n", code, TextAttribute.ITALIC)


# ---------------------------------------------------------------------------
# String entry points
# ---------------------------------------------------------------------------


def render_markdown(
    md: str,
    *,
    cols: int | None = None,
    colors: bool = True,
    theme: MarkdownTheme | None = None,
    indent: str = "  ",
    list_prefix: str = "- ",
) -> str:
    """Render *md* for printing to a terminal.

    With ``colors=False`` the plain fallback renderer is used and the
    output contains no escape sequences, not even ones already in *md*.
    """
    cols = _columns(cols)
    if not colors:
        return strip_ansi(render_markdown_simple(md, cols=cols, indent=indent, list_prefix=list_prefix))
    return fragments_to_ansi(render_markdown_styled(md, theme, cols))


def render_markdown_simple(
    md: str,
    cols: int | None = None,
    indent: str = "  ",
    list_prefix: str = "- ",
) -> str:
    """Plain-text rendering: structure is simplified, nothing is styled.

    Tables are passed through untouched.
    """
    cols = _columns(cols)
    result: list[str] = []
    in_code_block = False
    code_lines: list[str] = []

    for line in md.split("\n"):
        if line.startswith("```"):
            if in_code_block:
                result.append(indent + ("\n" + indent).join(code_lines))
                code_lines = []
                in_code_block = False
            else:
                in_code_block = True
            continue

        if in_code_block:
            code_lines.append(line)
            continue

        m = _SIMPLE_HEADING_RE.match(line)
        if m:
            result.append("\n" + m.group(2) + "\n")
            continue

        if _SIMPLE_HR_RE.match(line.strip()):
            result.append("\n" + Box.HORIZONTAL * max(0, min(cols - 4, 60)) + "\n")
            continue

        m = _SIMPLE_LIST_RE.match(line)
        if m:
            depth = len(m.group(1)) // 2
            result.append(indent * depth + list_prefix + m.group(2))
            continue

        result.append(line)

    if in_code_block and code_lines:
        result.append(indent + ("\n" + indent).join(code_lines))

    return "\n".join(result)


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextSegment:
    content: str


@dataclass(frozen=True)
class CodeSegment:
    content: str
    language: str


MarkdownSegment = Union[TextSegment, CodeSegment]


def parse_markdown_segments(md: str) -> list[MarkdownSegment]:
    """Split *md* into prose and fenced-code segments.

    Lets a caller send code to a syntax highlighter while the prose goes
    through :func:`render_markdown_styled`. An unclosed fence with content
    becomes a final code segment.
    """
    segments: list[MarkdownSegment] = []
    text_lines: list[str] = []
    code_lines: list[str] = []
    language = ""
    in_code_block = False

    def flush_text() -> None:
        if text_lines:
            segments.append(TextSegment("\n".join(text_lines)))
            text_lines.clear()

    for line in md.split("\n"):
        trimmed = line.strip()
        if trimmed.startswith("```"):
            if in_code_block:
                segments.append(CodeSegment("\n".join(code_lines), language))
                code_lines = []
                language = ""
                in_code_block = False
            else:
                flush_text()
                in_code_block = True
                language = trimmed[3:].strip() or "text"
            continue

        if in_code_block:
            code_lines.append(line)
        else:
            text_lines.append(line)

    flush_text()

    if in_code_block and code_lines:
        segments.append(CodeSegment("\n".join(code_lines), language))

    return segments


# ---------------------------------------------------------------------------
# Table-only transform
# ---------------------------------------------------------------------------


def transform_tables(md: str, border_color: Color | None = None, cols: int | None = None) -> str:
    """Replace pipe tables in *md* with box-drawn tables.

    Every other line is returned unchanged. Cell contents are rendered as
    plain text; if *border_color* is given the borders are coloured.
    """
    cols = _columns(cols)
    theme = default_cli_theme()
    lines = md.split("\n")
    out: list[str] = []
    pending: list[str] = []
    in_code_block = False

    def flush_table() -> None:
        if not pending:
            return
        sink = StyledText()
        render_table(pending, theme, sink, cols)
        if sink.fragments:
            out.append(_color_borders(sink.plain_text.rstrip("\n"), border_color))
        else:
            out.extend(pending)
        pending.clear()

    for line in lines:
        if is_fence(line):
            flush_table()
            in_code_block = not in_code_block
            out.append(line)
            continue
        if not in_code_block and is_table_row(line):
            pending.append(line)
            continue
        flush_table()
        out.append(line)

    flush_table()
    return "\n".join(out)


def _color_borders(text: str, color: Color | None) -> str:
    if color is None:
        return text
    prefix = rgb_to_ansi(color.r, color.g, color.b)
    return _BOX_RUN_RE.sub(lambda m: prefix + m.group(0) + RESET, text)
