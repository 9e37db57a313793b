"""ANSI rendering engine.

Provides:
- renderer: AnsiRenderer, the tree walk
- elements: node-to-element dispatch
- links / hyperlink: link formatter strategies and OSC-8 helpers
- table / table_links: grid layout and the footer link list
- writers / wordwrap / lists: the layout pipeline
"""

from tinta.ansi.context import RenderContext
from tinta.ansi.hyperlink import Hyperlink, format_hyperlink, supports_hyperlinks
from tinta.ansi.links import (
    DEFAULT_FORMATTER,
    HYPERLINK_FORMATTER,
    SMART_HYPERLINK_FORMATTER,
    TEXT_ONLY_FORMATTER,
    URL_ONLY_FORMATTER,
    LinkData,
    LinkFormatter,
)
from tinta.ansi.renderer import AnsiRenderer
from tinta.ansi.sequences import strip_ansi, visible_width

__all__ = [
    "DEFAULT_FORMATTER",
    "HYPERLINK_FORMATTER",
    "SMART_HYPERLINK_FORMATTER",
    "TEXT_ONLY_FORMATTER",
    "URL_ONLY_FORMATTER",
    "AnsiRenderer",
    "Hyperlink",
    "LinkData",
    "LinkFormatter",
    "RenderContext",
    "format_hyperlink",
    "strip_ansi",
    "supports_hyperlinks",
    "visible_width",
]
