"""
tinta — ANSI terminal renderer for Markdown document trees

Renders a typed, frozen document tree into styled terminal text: word
wrapping that keeps colors across lines, aligned tables with footer link
lists, OSC-8 hyperlinks and syntax-highlighted code blocks.

Quick Start:
    >>> from tinta import render_markdown
    >>> print(render_markdown("# Hello, **World**!", style="dark"))  # doctest: +SKIP

    >>> # Or render a hand-built tree
    >>> from tinta import Document, Paragraph, Text, render
    >>> text = render(Document((Paragraph((Text("Hi"),)),)), style="ascii")

    >>> # Or configure a reusable renderer
    >>> from tinta import TermRenderer
    >>> renderer = TermRenderer(style="dracula").with_word_wrap(100).with_hyperlinks()

Installation:
    pip install tinta              # Renderer (rich, pygments, jinja2)
    pip install tinta[markdown]    # + Markdown parsing via mistune
"""

from typing import Any

from tinta.ansi import (
    DEFAULT_FORMATTER,
    HYPERLINK_FORMATTER,
    SMART_HYPERLINK_FORMATTER,
    TEXT_ONLY_FORMATTER,
    URL_ONLY_FORMATTER,
    AnsiRenderer,
    Hyperlink,
    LinkData,
    LinkFormatter,
    RenderContext,
    format_hyperlink,
    strip_ansi,
    supports_hyperlinks,
    visible_width,
)
from tinta.config import RenderOptions
from tinta.errors import (
    FormatTemplateError,
    HyperlinkError,
    LinkFormatterError,
    RenderError,
    StyleError,
    TintaError,
)
from tinta.location import SourceLocation
from tinta.nodes import (
    Block,
    BlockQuote,
    CodeSpan,
    DefinitionDescription,
    DefinitionList,
    DefinitionTerm,
    Document,
    Emphasis,
    FencedCode,
    FrontMatter,
    Heading,
    HtmlBlock,
    HtmlInline,
    Image,
    IndentedCode,
    Inline,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    SoftBreak,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from tinta.renderer import STYLE_ENV_VAR, TermRenderer, style_from_environment
from tinta.styles import StyleConfig, get_style
from tinta.visitor import BaseVisitor

__version__ = "0.1.0"


def render(document: Document, style: str | StyleConfig = "auto", **options: Any) -> str:
    """Render a document tree to an ANSI string.

    Args:
        document: Document tree to render
        style: Style name, style file path, or StyleConfig
        **options: Any RenderOptions field (word_wrap, color_profile, ...)

    Example:
        >>> doc = Document((Heading(1, (Text("Title"),)),))
        >>> "# Title" in render(doc, style="ascii")
        True
    """
    return TermRenderer(style, **options).render(document)


def render_markdown(source: str, style: str | StyleConfig = "auto", **options: Any) -> str:
    """Parse Markdown with mistune and render it.

    Raises:
        ImportError: If the ``markdown`` extra is not installed
    """
    return TermRenderer(style, **options).render_markdown(source)


__all__ = [
    "DEFAULT_FORMATTER",
    "HYPERLINK_FORMATTER",
    "SMART_HYPERLINK_FORMATTER",
    "STYLE_ENV_VAR",
    "TEXT_ONLY_FORMATTER",
    "URL_ONLY_FORMATTER",
    "AnsiRenderer",
    "BaseVisitor",
    "Block",
    "BlockQuote",
    "CodeSpan",
    "DefinitionDescription",
    "DefinitionList",
    "DefinitionTerm",
    "Document",
    "Emphasis",
    "FencedCode",
    "FormatTemplateError",
    "FrontMatter",
    "Heading",
    "HtmlBlock",
    "HtmlInline",
    "Hyperlink",
    "HyperlinkError",
    "Image",
    "IndentedCode",
    "Inline",
    "LineBreak",
    "Link",
    "LinkData",
    "LinkFormatter",
    "LinkFormatterError",
    "List",
    "ListItem",
    "Node",
    "Paragraph",
    "RenderContext",
    "RenderError",
    "RenderOptions",
    "SoftBreak",
    "SourceLocation",
    "Strikethrough",
    "StyleConfig",
    "StyleError",
    "Strong",
    "Table",
    "TableCell",
    "TableRow",
    "TermRenderer",
    "Text",
    "ThematicBreak",
    "TintaError",
    "__version__",
    "format_hyperlink",
    "get_style",
    "render",
    "render_markdown",
    "strip_ansi",
    "style_from_environment",
    "supports_hyperlinks",
    "visible_width",
]
