"""Block classification: turns document lines into typed blocks.

Most blocks are decided by looking at a single line. Code fences and
tables span several lines, so :class:`BlockScanner` carries an explicit
:class:`ScanState` between lines::

    TEXT --```--> CODE_FENCE --```--> TEXT
    TEXT --|row|--> TABLE --non-row line / EOF--> TEXT
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Iterator


# ---------------------------------------------------------------------------
# Block variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Block:
    """Base class for classified blocks."""


@dataclass(frozen=True)
class Heading(Block):
    level: int
    text: str


@dataclass(frozen=True)
class TaskListItem(Block):
    indent: str
    checked: bool
    text: str

    @property
    def depth(self) -> int:
        return len(self.indent) // 2


@dataclass(frozen=True)
class UnorderedListItem(Block):
    indent: str
    text: str

    @property
    def depth(self) -> int:
        return len(self.indent) // 2


@dataclass(frozen=True)
class OrderedListItem(Block):
    indent: str
    number: str
    text: str

    @property
    def depth(self) -> int:
        return len(self.indent) // 2


@dataclass(frozen=True)
class BlockQuote(Block):
    text: str


@dataclass(frozen=True)
class HorizontalRule(Block):
    pass


@dataclass(frozen=True)
class CodeBlock(Block):
    language: str
    lines: tuple[str, ...] = ()
    closed: bool = True


@dataclass(frozen=True)
class Table(Block):
    lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class BlankLine(Block):
    pass


@dataclass(frozen=True)
class Paragraph(Block):
    text: str


# ---------------------------------------------------------------------------
# Line patterns
# ---------------------------------------------------------------------------

_FENCE = "```"
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
_HR_RE = re.compile(r"^(-{3,}|_{3,}|\*{3,})$")
_BLOCKQUOTE_RE = re.compile(r"^>\s*")
_TASK_RE = re.compile(r"^[-*+]\s+\[([ xX])\]\s+(.*)$")
_UL_RE = re.compile(r"^[-*+]\s+(.*)$")
_OL_RE = re.compile(r"^(\d+)[.)]\s+(.*)$")
_INDENT_RE = re.compile(r"^(\s*)")


def is_fence(line: str) -> bool:
    return line.strip().startswith(_FENCE)


def is_table_row(line: str) -> bool:
    trimmed = line.strip()
    return len(trimmed) >= 1 and trimmed.startswith("|") and trimmed.endswith("|")


def _indent_of(line: str) -> str:
    m = _INDENT_RE.match(line)
    return m.group(1) if m else ""


def classify_line(line: str) -> Block:
    """Classify one line outside any fence or table.

    Fence and table rows are handled by :class:`BlockScanner`; this covers
    the line-local kinds in priority order, ending with the paragraph
    fallback.
    """
    trimmed = line.strip()

    m = _HEADING_RE.match(trimmed)
    if m:
        return Heading(len(m.group(1)), m.group(2))

    if _HR_RE.match(trimmed):
        return HorizontalRule()

    if trimmed.startswith(">"):
        return BlockQuote(_BLOCKQUOTE_RE.sub("", trimmed, count=1))

    m = _TASK_RE.match(trimmed)
    if m:
        return TaskListItem(_indent_of(line), m.group(1).lower() == "x", m.group(2))

    m = _UL_RE.match(trimmed)
    if m:
        return UnorderedListItem(_indent_of(line), m.group(1))

    m = _OL_RE.match(trimmed)
    if m:
        return OrderedListItem(_indent_of(line), m.group(1), m.group(2))

    if trimmed == "":
        return BlankLine()

    return Paragraph(line)


# ---------------------------------------------------------------------------
# Scanner state machine
# ---------------------------------------------------------------------------


class ScanState(enum.Enum):
    TEXT = "text"
    CODE_FENCE = "code_fence"
    TABLE = "table"


@dataclass
class BlockScanner:
    """Feeds lines one at a time and emits completed blocks."""

    state: ScanState = ScanState.TEXT
    language: str = ""
    pending: list[str] = field(default_factory=list)

    def feed(self, line: str) -> list[Block]:
        """Consume *line*; return the blocks it completes (possibly none)."""
        if self.state is ScanState.CODE_FENCE:
            if is_fence(line):
                return [self._close_fence(closed=True)]
            self.pending.append(line)
            return []

        blocks: list[Block] = []

        if self.state is ScanState.TABLE:
            if is_table_row(line):
                self.pending.append(line.strip())
                return []
            blocks.append(self._close_table())

        if is_fence(line):
            self.state = ScanState.CODE_FENCE
            self.language = line.strip()[len(_FENCE):].strip()
            self.pending = []
            return blocks

        if is_table_row(line):
            self.state = ScanState.TABLE
            self.pending = [line.strip()]
            return blocks

        blocks.append(classify_line(line))
        return blocks

    def finish(self) -> list[Block]:
        """Flush whatever is open at end of document."""
        if self.state is ScanState.CODE_FENCE:
            return [self._close_fence(closed=False)]
        if self.state is ScanState.TABLE:
            return [self._close_table()]
        return []

    def _close_fence(self, closed: bool) -> CodeBlock:
        block = CodeBlock(self.language, tuple(self.pending), closed=closed)
        self._reset()
        return block

    def _close_table(self) -> Table:
        block = Table(tuple(self.pending))
        self._reset()
        return block

    def _reset(self) -> None:
        self.state = ScanState.TEXT
        self.language = ""
        self.pending = []


def iter_blocks(document: str) -> Iterator[Block]:
    """Yield the blocks of *document* in order."""
    scanner = BlockScanner()
    for line in document.split("\n"):
        yield from scanner.feed(line)
    yield from scanner.finish()
