"""Pipe-table layout with box-drawing borders.

Columns start at their natural width (widest rendered cell). If the table
does not fit in ``cols - 4`` columns, the widest column is narrowed one
step at a time until it fits or every column has reached ``MIN_COL_WIDTH``.
Data cells that no longer fit are word-wrapped; the header is truncated.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from pi.mdterm.inline import render_inline, strip_inline_markdown
from pi.mdterm.styled import StyledText, TextAttribute
from pi.mdterm.theme import MarkdownTheme, ThemeRole
from pi.mdterm.utils import split_columns, truncate_to_width, visible_width

logger = logging.getLogger(__name__)

MIN_COL_WIDTH = 10
# Two spaces of padding plus one border per column.
COLUMN_OVERHEAD = 3


class Box:
    """Box-drawing glyphs."""

    TOP_LEFT = "┌"
    TOP_RIGHT = "┐"
    BOTTOM_LEFT = "└"
    BOTTOM_RIGHT = "┘"
    HORIZONTAL = "─"
    VERTICAL = "│"
    LEFT_T = "├"
    RIGHT_T = "┤"
    TOP_T = "┬"
    BOTTOM_T = "┴"
    CROSS = "┼"


_SEPARATOR_RE = re.compile(r"^\|[\s\-:|]+\|$")


@dataclass
class TableModel:
    header: list[str]
    rows: list[list[str]] = field(default_factory=list)
    widths: list[int] = field(default_factory=list)

    @property
    def num_cols(self) -> int:
        return len(self.header)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_row(row: str) -> list[str]:
    """Split a ``| a | b |`` row into trimmed cells.

    ``\\|`` is a literal pipe. The empty cells outside the outer pipes are
    discarded.
    """
    cells: list[str] = []
    cell: list[str] = []
    i = 0
    n = len(row)

    while i < n:
        ch = row[i]
        if ch == "\\" and i + 1 < n and row[i + 1] == "|":
            cell.append("|")
            i += 2
            continue
        if ch == "|":
            cells.append("".join(cell))
            cell = []
        else:
            cell.append(ch)
        i += 1
    cells.append("".join(cell))

    return [c.strip() for c in cells[1:-1]]


def is_separator_line(line: str) -> bool:
    """True for alignment rows such as ``|---|:--:|``."""
    return bool(_SEPARATOR_RE.match(line.strip()))


def build_table_model(lines: list[str] | tuple[str, ...]) -> TableModel | None:
    """Parse table lines; ``None`` when there is nothing to lay out."""
    if len(lines) < 2:
        return None

    header = parse_row(lines[0].strip())
    if not header:
        return None

    num_cols = len(header)
    rows: list[list[str]] = []
    for line in lines[1:]:
        if is_separator_line(line):
            continue
        cells = parse_row(line.strip())[:num_cols]
        cells.extend([""] * (num_cols - len(cells)))
        rows.append(cells)

    return TableModel(header=header, rows=rows)


# ---------------------------------------------------------------------------
# Widths
# ---------------------------------------------------------------------------


def visible_length(text: str) -> int:
    """Display width of *text* once its inline markdown is rendered."""
    return visible_width(strip_inline_markdown(text))


def natural_widths(model: TableModel) -> list[int]:
    widths: list[int] = []
    for col, head in enumerate(model.header):
        data_max = max((visible_length(row[col]) for row in model.rows), default=0)
        widths.append(max(visible_length(head), data_max))
    return widths


def table_width(widths: list[int]) -> int:
    """Total rendered width including borders and padding."""
    return sum(w + COLUMN_OVERHEAD for w in widths) + 1


def fit_widths(widths: list[int], max_width: int, floor: int = MIN_COL_WIDTH) -> list[int]:
    """Narrow the widest column until the table fits or all hit *floor*."""
    result = list(widths)
    while table_width(result) > max_width and any(w > floor for w in result):
        widest = max(result)
        idx = result.index(widest)
        result[idx] = max(floor, widest - 1)
    if result != widths:
        logger.debug("Shrunk table columns %s -> %s (budget %d)", widths, result, max_width)
    return result


# ---------------------------------------------------------------------------
# Word wrap
# ---------------------------------------------------------------------------


def _split_tokens(text: str) -> list[str]:
    """Split on spaces, keeping backtick-quoted sections whole.

    Each space becomes its own ``" "`` token.
    """
    tokens: list[str] = []
    current: list[str] = []
    in_backtick = False

    for ch in text:
        if ch == "`":
            in_backtick = not in_backtick
            current.append(ch)
        elif ch == " " and not in_backtick:
            if current:
                tokens.append("".join(current))
            tokens.append(" ")
            current = []
        else:
            current.append(ch)

    if current:
        tokens.append("".join(current))
    return tokens


def break_long_token(token: str, max_len: int) -> list[str]:
    """Break *token* after ``.`` or ``-`` near *max_len*.

    Backtick-quoted tokens are broken inside the quotes and each piece is
    re-quoted. Pieces that still do not fit are split by column.
    """
    if visible_width(token) <= max_len:
        return [token]

    is_quoted = len(token) >= 2 and token.startswith("`") and token.endswith("`")
    inner = token[1:-1] if is_quoted else token
    effective_max = max_len - 2 if is_quoted else max_len

    def quote(piece: str) -> str:
        return f"`{piece}`" if is_quoted else piece

    pieces: list[str] = []
    part = ""
    for i, ch in enumerate(inner):
        part += ch
        if visible_width(part) >= effective_max - 2 and ch in ".-" and i < len(inner) - 1:
            pieces.append(part)
            part = ""
    if part:
        pieces.append(part)

    parts: list[str] = []
    for piece in pieces:
        if visible_length(quote(piece)) <= max_len:
            parts.append(quote(piece))
            continue
        for chunk in split_columns(piece, max(1, effective_max)):
            parts.append(quote(chunk))
    return parts


def wrap_cell(text: str, width: int) -> list[str]:
    """Word-wrap one cell's markdown source to *width* rendered columns."""
    if visible_length(text) <= width:
        return [text]

    lines: list[str] = []
    line = ""

    for token in _split_tokens(text):
        if token == " ":
            if 0 < visible_length(line) < width:
                line += " "
            continue

        if visible_length(line) > 0:
            if visible_length(line + token) <= width:
                line += token
                continue
            lines.append(line.rstrip())
            line = ""

        if visible_length(token) <= width:
            line = token
            continue

        for part in break_long_token(token, width):
            if visible_length(line) == 0:
                line = part
            elif visible_length(line + part) <= width:
                line += part
            else:
                lines.append(line.rstrip())
                line = part

    if line:
        lines.append(line.rstrip())
    return lines or [""]


# ---------------------------------------------------------------------------
# Emission
# ---------------------------------------------------------------------------


def _border(left: str, join: str, right: str, widths: list[int]) -> str:
    return left + join.join(Box.HORIZONTAL * (w + 2) for w in widths) + right + "\n"


def _render_cell(text: str, width: int, theme: MarkdownTheme, sink: StyledText) -> None:
    text_color = theme[ThemeRole.MARKDOWN_TEXT]
    if not text:
        sink.add(" " * width, text_color)
        return
    cell = StyledText()
    render_inline(text, theme, cell)
    sink.extend(cell)
    used = visible_width(cell.plain_text)
    if used < width:
        sink.add(" " * (width - used), text_color)


def render_table(
    lines: list[str] | tuple[str, ...],
    theme: MarkdownTheme,
    sink: StyledText,
    cols: int,
) -> None:
    """Lay out a pipe table and append its fragments to *sink*."""
    model = build_table_model(lines)
    if model is None:
        return

    model.widths = fit_widths(natural_widths(model), cols - 4)
    widths = model.widths
    border = theme[ThemeRole.BORDER]
    heading = theme[ThemeRole.MARKDOWN_HEADING]

    sink.add(_border(Box.TOP_LEFT, Box.TOP_T, Box.TOP_RIGHT, widths), border)

    # Header: single line, truncated rather than wrapped.
    sink.add(Box.VERTICAL, border)
    for cell, width in zip(model.header, widths):
        sink.add(" ", border)
        text = truncate_to_width(strip_inline_markdown(cell), width)
        padding = " " * (width - visible_width(text))
        sink.add(text + padding, heading, TextAttribute.BOLD)
        sink.add(" " + Box.VERTICAL, border)
    sink.add("\n")

    sink.add(_border(Box.LEFT_T, Box.CROSS, Box.RIGHT_T, widths), border)

    for row in model.rows:
        wrapped = [wrap_cell(cell, width) for cell, width in zip(row, widths)]
        height = max(len(cell_lines) for cell_lines in wrapped)
        for line_idx in range(height):
            sink.add(Box.VERTICAL, border)
            for cell_lines, width in zip(wrapped, widths):
                sink.add(" ", border)
                text = cell_lines[line_idx] if line_idx < len(cell_lines) else ""
                _render_cell(text, width, theme, sink)
                sink.add(" " + Box.VERTICAL, border)
            sink.add("\n")

    sink.add(_border(Box.BOTTOM_LEFT, Box.BOTTOM_T, Box.BOTTOM_RIGHT, widths), border)
