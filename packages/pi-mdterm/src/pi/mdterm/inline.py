"""Inline markdown: bold, italic, code, links and strikethrough.

A line is scanned left to right. At each step every construct in
``_PRECEDENCE`` is searched for; the earliest match wins and, when two
constructs start at the same column, the one listed first wins. Anything
that does not match (a lone ``*``, an unclosed backtick) stays literal.

Bold and italic resolve one level of nesting: ``**a *b* c**`` styles ``b``
as bold italic. Deeper nesting is left under-styled.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from pi.mdterm.styled import Color, StyledFragment, StyledText, TextAttribute
from pi.mdterm.theme import MarkdownTheme, ThemeRole


class SpanKind(enum.Enum):
    PLAIN = "plain"
    BOLD = "bold"
    ITALIC = "italic"
    BOLD_ITALIC = "bold_italic"
    CODE = "code"
    LINK = "link"
    STRIKETHROUGH = "strikethrough"


@dataclass(frozen=True)
class InlineSpan:
    """A run of text from one line with its inline construct."""

    kind: SpanKind
    text: str
    url: str | None = None


# Order is the tie-break for matches starting at the same column.
_PRECEDENCE: list[tuple[SpanKind, re.Pattern[str]]] = [
    (SpanKind.BOLD_ITALIC, re.compile(r"(\*\*\*|___)(.*?)\1")),
    (SpanKind.BOLD, re.compile(r"\*\*(.+?)\*\*")),
    (SpanKind.ITALIC, re.compile(r"\*(.+?)\*")),
    (SpanKind.CODE, re.compile(r"`([^`]+)`")),
    (SpanKind.LINK, re.compile(r"\[([^\]]+)\]\(([^)\s]+)(?:\s+\"[^\"]*\")?\)")),
    (SpanKind.STRIKETHROUGH, re.compile(r"~~(.+?)~~")),
]

_NESTED_ITALIC_RE = re.compile(r"^(.*)\*(.+?)\*(.*)$")
_NESTED_BOLD_RE = re.compile(r"^(.*)\*\*(.+?)\*\*(.*)$")


def _split_nested(
    content: str,
    pattern: re.Pattern[str],
    outer: SpanKind,
) -> list[InlineSpan]:
    nested = pattern.match(content)
    if nested is None:
        return [InlineSpan(outer, content)]
    pre, middle, post = nested.groups()
    spans = []
    if pre:
        spans.append(InlineSpan(outer, pre))
    spans.append(InlineSpan(SpanKind.BOLD_ITALIC, middle))
    if post:
        spans.append(InlineSpan(outer, post))
    return spans


def scan_spans(line: str) -> list[InlineSpan]:
    """Split *line* into inline spans in document order.

    Each construct's leftmost match is kept until the scan position moves
    past its start, so no pattern rescans text it has already searched.
    """
    spans: list[InlineSpan] = []
    pos = 0
    # Leftmost match per construct; None once a construct has no more matches.
    pending: list[re.Match[str] | None] = [p.search(line) for _, p in _PRECEDENCE]

    while pos < len(line):
        best = -1
        for idx, (_, pattern) in enumerate(_PRECEDENCE):
            cached = pending[idx]
            if cached is not None and cached.start() < pos:
                cached = pending[idx] = pattern.search(line, pos)
            if cached is None:
                continue
            if best < 0 or cached.start() < pending[best].start():
                best = idx
        if best < 0:
            break
        kind = _PRECEDENCE[best][0]
        m = pending[best]

        if m.start() > pos:
            spans.append(InlineSpan(SpanKind.PLAIN, line[pos : m.start()]))

        if kind is SpanKind.BOLD_ITALIC:
            spans.append(InlineSpan(kind, m.group(2)))
        elif kind is SpanKind.BOLD:
            spans.extend(_split_nested(m.group(1), _NESTED_ITALIC_RE, SpanKind.BOLD))
        elif kind is SpanKind.ITALIC:
            spans.extend(_split_nested(m.group(1), _NESTED_BOLD_RE, SpanKind.ITALIC))
        elif kind is SpanKind.LINK:
            spans.append(InlineSpan(kind, m.group(1), url=m.group(2)))
        else:
            spans.append(InlineSpan(kind, m.group(1)))

        # Zero-length matches cannot occur: every pattern consumes delimiters.
        pos = m.end()

    if pos < len(line):
        spans.append(InlineSpan(SpanKind.PLAIN, line[pos:]))

    return spans


def render_inline(
    line: str,
    theme: MarkdownTheme,
    sink: StyledText,
    default_color: Color | None = None,
    default_attributes: TextAttribute = TextAttribute.NONE,
) -> None:
    """Append the styled fragments of *line* to *sink*."""
    if default_color is None:
        default_color = theme[ThemeRole.MARKDOWN_TEXT]
    strong = theme[ThemeRole.MARKDOWN_STRONG]
    emph = theme[ThemeRole.MARKDOWN_EMPH]

    for span in scan_spans(line):
        kind = span.kind
        if kind is SpanKind.PLAIN:
            sink.add(span.text, default_color, default_attributes)
        elif kind is SpanKind.BOLD:
            sink.add(span.text, strong, TextAttribute.BOLD)
        elif kind is SpanKind.ITALIC:
            sink.add(span.text, emph, TextAttribute.ITALIC)
        elif kind is SpanKind.BOLD_ITALIC:
            sink.add(span.text, strong, TextAttribute.BOLD | TextAttribute.ITALIC)
        elif kind is SpanKind.CODE:
            sink.add(span.text, theme[ThemeRole.MARKDOWN_CODE])
        elif kind is SpanKind.LINK:
            sink.add(span.text, theme[ThemeRole.MARKDOWN_LINK_TEXT], TextAttribute.UNDERLINE)
            sink.add(" (", theme[ThemeRole.MARKDOWN_TEXT])
            sink.add(span.url or "", theme[ThemeRole.MARKDOWN_LINK], TextAttribute.UNDERLINE)
            sink.add(")", theme[ThemeRole.MARKDOWN_TEXT])
        elif kind is SpanKind.STRIKETHROUGH:
            sink.add(span.text, theme[ThemeRole.TEXT_MUTED], TextAttribute.STRIKETHROUGH)


def tokenize(
    line: str,
    theme: MarkdownTheme,
    default_color: Color | None = None,
    default_attributes: TextAttribute = TextAttribute.NONE,
) -> list[StyledFragment]:
    """Return the styled fragments for a single line of inline markdown."""
    sink = StyledText()
    render_inline(line, theme, sink, default_color, default_attributes)
    return sink.fragments


# ---------------------------------------------------------------------------
# Marker stripping (for width measurement)
# ---------------------------------------------------------------------------

def strip_inline_markdown(text: str) -> str:
    """Return *text* as it reads once inline markers are rendered away.

    Links become ``text (url)``. The result has exactly the characters
    :func:`render_inline` would emit, so it can be used for layout.
    """
    parts: list[str] = []
    for span in scan_spans(text):
        if span.kind is SpanKind.LINK:
            parts.append(f"{span.text} ({span.url})")
        else:
            parts.append(span.text)
    return "".join(parts)
