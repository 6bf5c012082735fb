"""TUI components."""

from pi.mdterm.components.markdown import Markdown

__all__ = [
    "Markdown",
]
