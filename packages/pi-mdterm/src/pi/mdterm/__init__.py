"""pi-mdterm: Markdown rendering for terminals and terminal UIs."""

# Escape-code conversion
from pi.mdterm.ansi import (
    ansi256_to_rgb,
    ansi_to_styled_text,
    fragments_to_ansi,
    rgb_to_ansi,
    rgb_to_ansi_bg,
)

# Block classification
from pi.mdterm.blocks import (
    BlankLine,
    Block,
    BlockQuote,
    BlockScanner,
    CodeBlock,
    Heading,
    HorizontalRule,
    OrderedListItem,
    Paragraph,
    ScanState,
    Table,
    TaskListItem,
    UnorderedListItem,
    classify_line,
    iter_blocks,
)

# Components
from pi.mdterm.components import Markdown

# Configuration
from pi.mdterm.config import MdtermConfig, load_config, save_config

# Inline spans
from pi.mdterm.inline import InlineSpan, SpanKind, scan_spans, strip_inline_markdown, tokenize

# Rendering
from pi.mdterm.renderer import (
    CodeSegment,
    MarkdownSegment,
    TextSegment,
    parse_markdown_segments,
    render_markdown,
    render_markdown_simple,
    render_markdown_styled,
    transform_tables,
)

# Styled text model
from pi.mdterm.styled import Color, StyledFragment, StyledText, TextAttribute

# Tables
from pi.mdterm.table import TableModel, render_table

# Themes
from pi.mdterm.theme import (
    MarkdownTheme,
    ThemeRole,
    available_themes,
    default_cli_theme,
    load_theme,
    load_theme_file,
)

# Width measurement
from pi.mdterm.utils import strip_ansi, visible_width

__all__ = [
    "BlankLine",
    "Block",
    "BlockQuote",
    "BlockScanner",
    "CodeBlock",
    "CodeSegment",
    "Color",
    "Heading",
    "HorizontalRule",
    "InlineSpan",
    "Markdown",
    "MarkdownSegment",
    "MarkdownTheme",
    "MdtermConfig",
    "OrderedListItem",
    "Paragraph",
    "ScanState",
    "SpanKind",
    "StyledFragment",
    "StyledText",
    "Table",
    "TableModel",
    "TaskListItem",
    "TextAttribute",
    "TextSegment",
    "ThemeRole",
    "UnorderedListItem",
    "ansi256_to_rgb",
    "ansi_to_styled_text",
    "available_themes",
    "classify_line",
    "default_cli_theme",
    "fragments_to_ansi",
    "iter_blocks",
    "load_config",
    "load_theme",
    "load_theme_file",
    "parse_markdown_segments",
    "render_markdown",
    "render_markdown_simple",
    "render_markdown_styled",
    "render_table",
    "rgb_to_ansi",
    "rgb_to_ansi_bg",
    "save_config",
    "scan_spans",
    "strip_ansi",
    "strip_inline_markdown",
    "tokenize",
    "transform_tables",
    "visible_width",
]
