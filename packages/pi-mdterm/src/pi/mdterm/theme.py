"""Markdown colour themes.

A theme maps each :class:`ThemeRole` to a :class:`Color`. Lookups never
fail: a role the theme does not define resolves to white. Bundled themes
live in ``themes/*.json`` and use the opencode theme format::

    {
      "defs": {"blue": "#5c9cf5"},
      "theme": {
        "markdownLink": "blue",
        "text": {"dark": "#eeeeee", "light": "#1a1a1a"}
      }
    }
"""

from __future__ import annotations

import enum
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterator, Union

from pi.mdterm.styled import WHITE, Color

logger = logging.getLogger(__name__)

THEMES_DIR = Path(__file__).parent / "themes"
DEFAULT_THEME_NAME = "opencode"

ColorValue = Union[str, dict]


class ThemeRole(str, enum.Enum):
    """Named colour roles. Values are the keys used in theme JSON files."""

    TEXT = "text"
    TEXT_MUTED = "textMuted"
    ACCENT = "accent"
    PRIMARY = "primary"
    BORDER = "border"
    BACKGROUND = "background"
    BACKGROUND_PANEL = "backgroundPanel"
    BACKGROUND_ELEMENT = "backgroundElement"
    MARKDOWN_TEXT = "markdownText"
    MARKDOWN_HEADING = "markdownHeading"
    MARKDOWN_LINK = "markdownLink"
    MARKDOWN_LINK_TEXT = "markdownLinkText"
    MARKDOWN_CODE = "markdownCode"
    MARKDOWN_CODE_BLOCK = "markdownCodeBlock"
    MARKDOWN_BLOCK_QUOTE = "markdownBlockQuote"
    MARKDOWN_EMPH = "markdownEmph"
    MARKDOWN_STRONG = "markdownStrong"
    MARKDOWN_LIST_ITEM = "markdownListItem"
    MARKDOWN_LIST_ENUMERATION = "markdownListEnumeration"
    MARKDOWN_HORIZONTAL_RULE = "markdownHorizontalRule"
    DIFF_ADDED = "diffAdded"
    DIFF_REMOVED = "diffRemoved"


def _to_role(key: object) -> ThemeRole | None:
    if isinstance(key, ThemeRole):
        return key
    if not isinstance(key, str):
        return None
    try:
        return ThemeRole(key)
    except ValueError:
        pass
    try:
        return ThemeRole[key.upper()]
    except KeyError:
        return None


class MarkdownTheme(Mapping):
    """Read-only role -> colour mapping with a white fallback.

    Keys may be given as :class:`ThemeRole` members, JSON keys
    (``"markdownStrong"``) or role names (``"markdown_strong"``).
    """

    def __init__(self, colors: Mapping[Any, Color] | None = None, default: Color = WHITE) -> None:
        self._default = default
        self._colors: dict[ThemeRole, Color] = {}
        for key, color in (colors or {}).items():
            role = _to_role(key)
            if role is None:
                logger.debug("Ignoring unknown theme role %r", key)
                continue
            self._colors[role] = color

    def __getitem__(self, key: ThemeRole | str) -> Color:
        role = _to_role(key)
        if role is None:
            return self._default
        return self._colors.get(role, self._default)

    def __contains__(self, key: object) -> bool:
        return _to_role(key) in self._colors

    def __iter__(self) -> Iterator[ThemeRole]:
        return iter(ThemeRole)

    def __len__(self) -> int:
        return len(ThemeRole)

    def __repr__(self) -> str:
        defined = ", ".join(f"{r.value}={c.hex}" for r, c in self._colors.items())
        return f"MarkdownTheme({defined})"

    @property
    def defined_roles(self) -> frozenset[ThemeRole]:
        return frozenset(self._colors)


# ---------------------------------------------------------------------------
# Default CLI theme
# ---------------------------------------------------------------------------


def default_cli_theme() -> MarkdownTheme:
    """Palette approximating the classic 16-colour ANSI terminal."""
    return MarkdownTheme(
        {
            ThemeRole.TEXT: Color(229, 229, 229),
            ThemeRole.TEXT_MUTED: Color(102, 102, 102),
            ThemeRole.ACCENT: Color(36, 114, 200),
            ThemeRole.PRIMARY: Color(36, 114, 200),
            ThemeRole.BORDER: Color(102, 102, 102),
            ThemeRole.BACKGROUND: Color(0, 0, 0),
            ThemeRole.BACKGROUND_PANEL: Color(60, 60, 60),
            ThemeRole.BACKGROUND_ELEMENT: Color(40, 40, 40),
            ThemeRole.MARKDOWN_TEXT: Color(229, 229, 229),
            ThemeRole.MARKDOWN_HEADING: Color(229, 229, 229),
            ThemeRole.MARKDOWN_LINK: Color(36, 114, 200),
            ThemeRole.MARKDOWN_LINK_TEXT: Color(17, 168, 205),
            ThemeRole.MARKDOWN_CODE: Color(13, 188, 121),
            ThemeRole.MARKDOWN_CODE_BLOCK: Color(229, 229, 229),
            ThemeRole.MARKDOWN_BLOCK_QUOTE: Color(229, 229, 16),
            ThemeRole.MARKDOWN_EMPH: Color(229, 229, 16),
            ThemeRole.MARKDOWN_STRONG: Color(229, 229, 229),
            ThemeRole.MARKDOWN_LIST_ITEM: Color(36, 114, 200),
            ThemeRole.MARKDOWN_LIST_ENUMERATION: Color(17, 168, 205),
            ThemeRole.MARKDOWN_HORIZONTAL_RULE: Color(102, 102, 102),
            ThemeRole.DIFF_ADDED: Color(13, 188, 121),
            ThemeRole.DIFF_REMOVED: Color(205, 49, 49),
        }
    )


# ---------------------------------------------------------------------------
# JSON theme loading
# ---------------------------------------------------------------------------


def resolve_color(value: ColorValue, defs: Mapping[str, str], mode: str) -> Any:
    """Resolve a theme value (hex, def reference or dark/light pair) to hex.

    Values of any other shape are returned unchanged for the caller to
    reject.
    """
    if isinstance(value, dict):
        value = value.get(mode) or value.get("dark") or ""
    if isinstance(value, str):
        return defs.get(value, value)
    return value


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"Theme {key!r} section must be an object")
    return section


def theme_from_data(data: Mapping[str, Any], mode: str = "dark") -> MarkdownTheme:
    """Build a theme from parsed theme JSON.

    Raises :class:`ValueError` if the document or its sections are not
    objects. Individual bad colours are logged and skipped.
    """
    if not isinstance(data, Mapping):
        raise ValueError("Theme file must contain a JSON object")
    defs = _section(data, "defs")
    entries = _section(data, "theme")
    colors: dict[ThemeRole, Color] = {}

    for role in ThemeRole:
        value = entries.get(role.value)
        if not value:
            continue
        hex_value = resolve_color(value, defs, mode)
        if not isinstance(hex_value, str):
            logger.warning("Theme role %s has invalid colour %r, using default", role.value, hex_value)
            continue
        try:
            colors[role] = Color.from_hex(hex_value)
        except ValueError:
            logger.warning("Theme role %s has invalid colour %r, using default", role.value, hex_value)

    return MarkdownTheme(colors)


def available_themes() -> list[str]:
    """Names of the bundled themes."""
    return sorted(p.stem for p in THEMES_DIR.glob("*.json"))


def load_theme_file(path: str | Path, mode: str = "dark") -> MarkdownTheme:
    """Load a theme from a JSON file on disk."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return theme_from_data(data, mode)


def load_theme(name: str | None = None, mode: str = "dark") -> MarkdownTheme:
    """Load a bundled theme by name, falling back to ``opencode``."""
    name = name or DEFAULT_THEME_NAME
    path = THEMES_DIR / f"{name}.json"
    if not path.is_file():
        logger.warning("Unknown theme %r, falling back to %r", name, DEFAULT_THEME_NAME)
        path = THEMES_DIR / f"{DEFAULT_THEME_NAME}.json"
    return load_theme_file(path, mode)
