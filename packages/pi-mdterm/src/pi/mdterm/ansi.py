"""Conversion between styled fragments and ANSI SGR escape sequences.

:func:`fragments_to_ansi` writes 24-bit colour sequences;
:func:`ansi_to_styled_text` reads back the common SGR subset (16-colour,
256-colour, truecolor and the eight text attributes). Unknown codes are
ignored.
"""

from __future__ import annotations

import re
from typing import Iterable

from pi.mdterm.styled import Color, StyledFragment, StyledText, TextAttribute

RESET = "\x1b[0m"

_SGR_RE = re.compile(r"\x1b\[([0-9;]*)m")

# Order matters: this is the order codes are written in.
_ATTRIBUTE_CODES: list[tuple[TextAttribute, int]] = [
    (TextAttribute.BOLD, 1),
    (TextAttribute.DIM, 2),
    (TextAttribute.ITALIC, 3),
    (TextAttribute.UNDERLINE, 4),
    (TextAttribute.BLINK, 5),
    (TextAttribute.INVERSE, 7),
    (TextAttribute.HIDDEN, 8),
    (TextAttribute.STRIKETHROUGH, 9),
]

_CODE_TO_ATTRIBUTE = {code: attr for attr, code in _ATTRIBUTE_CODES}

# SGR "off" codes. 22 clears both bold and dim.
_ATTRIBUTE_OFF: dict[int, TextAttribute] = {
    22: TextAttribute.BOLD | TextAttribute.DIM,
    23: TextAttribute.ITALIC,
    24: TextAttribute.UNDERLINE,
    25: TextAttribute.BLINK,
    27: TextAttribute.INVERSE,
    28: TextAttribute.HIDDEN,
    29: TextAttribute.STRIKETHROUGH,
}

# Palette for 30-37 / 90-97 (and 40-47 / 100-107 after subtracting 10).
_ANSI_COLORS: dict[int, tuple[int, int, int]] = {
    30: (0, 0, 0),
    31: (205, 49, 49),
    32: (13, 188, 121),
    33: (229, 229, 16),
    34: (36, 114, 200),
    35: (188, 63, 188),
    36: (17, 168, 205),
    37: (229, 229, 229),
    90: (102, 102, 102),
    91: (241, 76, 76),
    92: (35, 209, 139),
    93: (245, 245, 67),
    94: (59, 142, 234),
    95: (214, 112, 214),
    96: (41, 184, 219),
    97: (229, 229, 229),
}

_BASE_256: list[tuple[int, int, int]] = [
    (0, 0, 0),
    (128, 0, 0),
    (0, 128, 0),
    (128, 128, 0),
    (0, 0, 128),
    (128, 0, 128),
    (0, 128, 128),
    (192, 192, 192),
    (128, 128, 128),
    (255, 0, 0),
    (0, 255, 0),
    (255, 255, 0),
    (0, 0, 255),
    (255, 0, 255),
    (0, 255, 255),
    (255, 255, 255),
]


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def rgb_to_ansi(r: int, g: int, b: int) -> str:
    """24-bit foreground sequence."""
    return f"\x1b[38;2;{r};{g};{b}m"


def rgb_to_ansi_bg(r: int, g: int, b: int) -> str:
    """24-bit background sequence."""
    return f"\x1b[48;2;{r};{g};{b}m"


def fragment_to_ansi(fragment: StyledFragment) -> str:
    codes: list[str] = []
    for attr, code in _ATTRIBUTE_CODES:
        if fragment.attributes & attr:
            codes.append(f"\x1b[{code}m")
    if fragment.fg is not None:
        codes.append(rgb_to_ansi(fragment.fg.r, fragment.fg.g, fragment.fg.b))
    if fragment.bg is not None:
        codes.append(rgb_to_ansi_bg(fragment.bg.r, fragment.bg.g, fragment.bg.b))

    prefix = "".join(codes)
    return prefix + fragment.text + (RESET if prefix else "")


def fragments_to_ansi(fragments: Iterable[StyledFragment]) -> str:
    """Serialize fragments to a string of text and SGR sequences."""
    return "".join(fragment_to_ansi(f) for f in fragments)


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def ansi256_to_rgb(n: int) -> tuple[int, int, int]:
    """Map a 256-colour palette index to RGB."""
    n = max(0, min(255, n))
    if n < 16:
        return _BASE_256[n]
    if n < 232:
        idx = n - 16
        r, g, b = idx // 36, (idx % 36) // 6, idx % 6
        return (
            r * 40 + 55 if r else 0,
            g * 40 + 55 if g else 0,
            b * 40 + 55 if b else 0,
        )
    gray = (n - 232) * 10 + 8
    return (gray, gray, gray)


def _param(params: list[int], i: int) -> int:
    return params[i] if i < len(params) else 0


_MAX_PARAM_DIGITS = 3
_UNKNOWN = -1


def _parse_params(raw: str) -> list[int]:
    # An empty parameter means 0 (ESC[m and ESC[;1m both reset). No SGR
    # parameter needs more than three digits; longer ones are unknown codes.
    params: list[int] = []
    for p in raw.split(";"):
        if not p:
            params.append(0)
        elif len(p) <= _MAX_PARAM_DIGITS:
            params.append(int(p))
        else:
            params.append(_UNKNOWN)
    return params


class _SgrState:
    """Current pen while reading an escaped string."""

    def __init__(self) -> None:
        self.fg: Color | None = None
        self.bg: Color | None = None
        self.attributes = TextAttribute.NONE

    def reset(self) -> None:
        self.fg = None
        self.bg = None
        self.attributes = TextAttribute.NONE

    def apply(self, params: list[int]) -> None:
        i = 0
        while i < len(params):
            code = params[i]

            if code == 0:
                self.reset()
            elif code in _CODE_TO_ATTRIBUTE:
                self.attributes |= _CODE_TO_ATTRIBUTE[code]
            elif code in _ATTRIBUTE_OFF:
                self.attributes &= ~_ATTRIBUTE_OFF[code]
            elif 30 <= code <= 37 or 90 <= code <= 97:
                self.fg = Color(*_ANSI_COLORS[code])
            elif 40 <= code <= 47 or 100 <= code <= 107:
                self.bg = Color(*_ANSI_COLORS[code - 10])
            elif code in (38, 48):
                mode = _param(params, i + 1)
                color: Color | None = None
                if mode == 2:
                    rgb = [_param(params, i + n) for n in (2, 3, 4)]
                    if all(0 <= c <= 255 for c in rgb):
                        color = Color(*rgb)
                    i += 4
                elif mode == 5:
                    color = Color(*ansi256_to_rgb(_param(params, i + 2)))
                    i += 2
                if color is not None:
                    if code == 38:
                        self.fg = color
                    else:
                        self.bg = color
            elif code == 39:
                self.fg = None
            elif code == 49:
                self.bg = None

            i += 1

    def fragment(self, text: str) -> StyledFragment:
        return StyledFragment(text, self.fg, self.bg, self.attributes)


def ansi_to_styled_text(text: str) -> StyledText:
    """Recover styled fragments from a string containing SGR sequences."""
    result = StyledText()
    state = _SgrState()
    last = 0

    for m in _SGR_RE.finditer(text):
        if m.start() > last:
            result.extend([state.fragment(text[last : m.start()])])
        state.apply(_parse_params(m.group(1)))
        last = m.end()

    if last < len(text):
        result.extend([state.fragment(text[last:])])

    return result
