"""Styled text model: colours, attribute flags and immutable fragments."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Iterator


# ---------------------------------------------------------------------------
# Color
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Color:
    """An RGBA colour with 0-255 integer components.

    Alpha is carried for theme fidelity only; terminals never blend it.
    """

    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """Parse ``#rrggbb`` (or ``rrggbb``) into an opaque colour."""
        cleaned = value.strip().lstrip("#")
        if len(cleaned) != 6:
            raise ValueError(f"Invalid hex colour: {value!r}")
        try:
            r = int(cleaned[0:2], 16)
            g = int(cleaned[2:4], 16)
            b = int(cleaned[4:6], 16)
        except ValueError:
            raise ValueError(f"Invalid hex colour: {value!r}") from None
        return cls(r, g, b)

    @classmethod
    def from_floats(cls, r: float, g: float, b: float, a: float = 1.0) -> Color:
        """Build a colour from 0-1 float components."""
        return cls(round(r * 255), round(g * 255), round(b * 255), round(a * 255))

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


WHITE = Color(255, 255, 255)


# ---------------------------------------------------------------------------
# TextAttribute
# ---------------------------------------------------------------------------


class TextAttribute(enum.IntFlag):
    """Text attribute bits. Values are shared with OpenTUI consumers."""

    NONE = 0
    BOLD = 1 << 0
    DIM = 1 << 1
    ITALIC = 1 << 2
    UNDERLINE = 1 << 3
    BLINK = 1 << 4
    INVERSE = 1 << 5
    HIDDEN = 1 << 6
    STRIKETHROUGH = 1 << 7


# ---------------------------------------------------------------------------
# StyledFragment / StyledText
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StyledFragment:
    """One run of literal text painted with a single style."""

    text: str
    fg: Color | None = None
    bg: Color | None = None
    attributes: TextAttribute = TextAttribute.NONE

    @property
    def is_styled(self) -> bool:
        return bool(self.attributes) or self.fg is not None or self.bg is not None


@dataclass
class StyledText:
    """An ordered, append-only sequence of :class:`StyledFragment`."""

    fragments: list[StyledFragment] = field(default_factory=list)

    def add(
        self,
        text: str,
        fg: Color | None = None,
        attributes: TextAttribute = TextAttribute.NONE,
        bg: Color | None = None,
    ) -> None:
        """Append a fragment; empty text is dropped."""
        if text:
            self.fragments.append(StyledFragment(text, fg, bg, attributes))

    def extend(self, fragments: Iterable[StyledFragment]) -> None:
        for fragment in fragments:
            if fragment.text:
                self.fragments.append(fragment)

    @property
    def plain_text(self) -> str:
        return "".join(f.text for f in self.fragments)

    def __iter__(self) -> Iterator[StyledFragment]:
        return iter(self.fragments)

    def __len__(self) -> int:
        return len(self.fragments)
