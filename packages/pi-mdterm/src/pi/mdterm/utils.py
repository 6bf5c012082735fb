"""Display-width helpers shared by the renderer and the table engine.

Layout is computed in terminal columns, never in code points: ASCII takes
one column, CJK and emoji take two, and escape sequences and combining
marks take none. Everything that pads, truncates or wraps goes through
:func:`visible_width` so measured and painted widths agree.
"""

from __future__ import annotations

import logging
import os
import re
import sys
import unicodedata

import grapheme
import wcwidth as _wcwidth

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = 80
TAB_WIDTH = 3

_CSI = r"\x1b\[[0-9;]*[mGKHJ]"
_OSC8 = r"\x1b\]8;;[^\x07]*\x07"
_APC = r"\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"
_ESCAPE_RE = re.compile("|".join((_CSI, _OSC8, _APC)))

# Code points that make a multi-codepoint cluster render as a wide emoji.
_EMOJI_JOINERS = frozenset({0xFE0F, 0x200D})
_EMOJI_MODIFIER_RANGES = (
    (0x1F3FB, 0x1F3FF),  # skin tones
    (0x1F1E6, 0x1F1FF),  # regional indicators
)

_MEMO_LIMIT = 512
_memo: dict[str, int] = {}


def strip_ansi(text: str) -> str:
    """Remove CSI, OSC 8 hyperlink and APC sequences from *text*."""
    return _ESCAPE_RE.sub("", text)


# ---------------------------------------------------------------------------
# Measuring
# ---------------------------------------------------------------------------


def _is_control(cp: int) -> bool:
    return cp < 0x20 or 0x7F <= cp <= 0x9F


def _in_ranges(cp: int, ranges: tuple[tuple[int, int], ...]) -> bool:
    return any(lo <= cp <= hi for lo, hi in ranges)


def grapheme_width(g: str) -> int:
    """Columns occupied by one grapheme cluster (0, 1 or 2)."""
    if not g:
        return 0

    if len(g) == 1:
        if _is_control(ord(g)):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in _EMOJI_JOINERS or _in_ranges(cp, _EMOJI_MODIFIER_RANGES):
            return 2

    lead = g[0]
    lead_cp = ord(lead)
    if lead_cp >= 0x1F000 or 0x2600 <= lead_cp <= 0x27BF:
        return 2
    category = unicodedata.category(lead)
    if category == "Cf" or category.startswith("M"):
        return 0
    return max(_wcwidth.wcwidth(lead), 0)


def visible_width(text: str) -> int:
    """Columns *text* occupies once escape sequences are removed.

    A tab counts as ``TAB_WIDTH`` columns. Non-ASCII results are memoized.
    """
    plain = strip_ansi(text).replace("\t", " " * TAB_WIDTH)
    if not plain:
        return 0
    if plain.isascii() and plain.isprintable():
        return len(plain)

    known = _memo.get(plain)
    if known is not None:
        return known

    width = sum(grapheme_width(g) for g in grapheme.graphemes(plain))
    if len(_memo) >= _MEMO_LIMIT:
        _memo.clear()
    _memo[plain] = width
    return width


# ---------------------------------------------------------------------------
# Fitting text to columns
# ---------------------------------------------------------------------------


def pad_right(text: str, width: int, char: str = " ") -> str:
    """Right-pad *text* with *char* up to *width* display columns."""
    missing = width - visible_width(text)
    return text + char * missing if missing > 0 else text


def take_columns(text: str, max_cols: int) -> str:
    """Longest prefix of plain *text* that fits in *max_cols*."""
    used = 0
    kept: list[str] = []
    for g in grapheme.graphemes(text):
        used += grapheme_width(g)
        if used > max_cols:
            break
        kept.append(g)
    return "".join(kept)


def truncate_to_width(text: str, max_width: int, ellipsis: str = "") -> str:
    """Cut plain *text* to at most *max_width* columns.

    Cuts fall on grapheme boundaries; a wide glyph straddling the limit is
    dropped whole.
    """
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text
    room = max_width - visible_width(ellipsis)
    if room <= 0:
        return take_columns(ellipsis, max_width)
    return take_columns(text, room) + ellipsis


def split_columns(text: str, max_cols: int) -> list[str]:
    """Hard-split plain *text* into pieces of at most *max_cols* columns."""
    if max_cols <= 0:
        return [text]
    pieces: list[str] = []
    piece = ""
    piece_cols = 0
    for g in grapheme.graphemes(text):
        w = grapheme_width(g)
        if piece and piece_cols + w > max_cols:
            pieces.append(piece)
            piece, piece_cols = "", 0
        piece += g
        piece_cols += w
    if piece or not pieces:
        pieces.append(piece)
    return pieces


def terminal_columns(default: int = DEFAULT_COLUMNS) -> int:
    """Width of the terminal attached to stdout, or *default*."""
    try:
        return os.get_terminal_size(sys.stdout.fileno()).columns
    except (ValueError, OSError, AttributeError):
        logger.debug("No terminal size available, assuming %d columns", default)
        return default
