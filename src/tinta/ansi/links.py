"""Link formatting strategies.

Every link is rendered by a LinkFormatter: an object with a
``format_link(data, ctx)`` method, or a plain callable with the same
signature. The formatter receives everything known about the link
(LinkData) plus the render context, and returns the final string.

Built-in formatters:

- DEFAULT_FORMATTER: ``text url``, each part styled on its own
- TEXT_ONLY_FORMATTER: text only, clickable where OSC-8 is supported
- URL_ONLY_FORMATTER: the URL only
- HYPERLINK_FORMATTER: text wrapped in OSC-8, unconditionally
- SMART_HYPERLINK_FORMATTER: hyperlink where supported, default elsewhere

Example:
    A callable works as a formatter:

        def brackets(data: LinkData, ctx: RenderContext) -> str:
            return f"[{data.text}]({data.url})"

        renderer = TermRenderer(link_formatter=brackets)

Thread Safety:
    Built-in formatters are stateless and shared.

"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable
from urllib.parse import urljoin, urlsplit

from tinta.ansi.base import BaseElement
from tinta.ansi.hyperlink import format_hyperlink
from tinta.ansi.sequences import has_ansi
from tinta.location import SourceLocation
from tinta.nodes import Inline
from tinta.stringbuilder import StringBuilder
from tinta.styles.cascade import EMPTY_PRIMITIVE
from tinta.styles.types import StylePrimitive
from tinta.utils.logger import get_logger

if TYPE_CHECKING:
    from tinta.ansi.context import RenderContext

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LinkData:
    """Everything a formatter knows about one link.

    Attributes:
        url: Destination as written in the document
        text: Plain link text
        title: Link title ("" when absent)
        base_url: Base for resolving relative URLs
        is_autolink: The link is an autolink (``<https://...>``)
        is_in_table: The link sits in a table cell
        children: The link's inline nodes
        link_style: Style for the URL part
        text_style: Style for the text part
        location: Source location of the link node

    """

    url: str
    text: str = ""
    title: str = ""
    base_url: str = ""
    is_autolink: bool = False
    is_in_table: bool = False
    children: tuple[Inline, ...] = ()
    link_style: StylePrimitive = EMPTY_PRIMITIVE
    text_style: StylePrimitive = EMPTY_PRIMITIVE
    location: SourceLocation | None = None

    @property
    def resolved_url(self) -> str:
        return resolve_relative_url(self.base_url, self.url)


@runtime_checkable
class LinkFormatter(Protocol):
    """Renders a link.

    Contract:
        - returns the complete rendered link (may be "")
        - raises on error; the renderer wraps the exception in
          LinkFormatterError
    """

    def format_link(self, data: LinkData, ctx: RenderContext) -> str: ...


type LinkFormatterFunc = Callable[[LinkData, RenderContext], str]


@dataclass(frozen=True, slots=True)
class FunctionFormatter:
    """Adapts a plain callable to the LinkFormatter protocol."""

    func: LinkFormatterFunc

    def format_link(self, data: LinkData, ctx: RenderContext) -> str:
        return self.func(data, ctx)


def is_fragment_only_url(url: str) -> bool:
    """True for in-page anchors like ``#usage``; False for unparseable URLs."""
    try:
        fragment = urlsplit(url).fragment
    except ValueError:
        return False
    return "#" + fragment == url


def resolve_relative_url(base_url: str, url: str) -> str:
    """Resolve ``url`` against ``base_url``.

    Absolute URLs, fragments and empty bases are returned unchanged;
    root-relative paths are appended to the base's path.

    Example:
        >>> resolve_relative_url("https://example.com/docs/", "/img/a.png")
        'https://example.com/docs/img/a.png'
        >>> resolve_relative_url("https://example.com/docs/", "#intro")
        '#intro'
    """
    if not base_url or not url or is_fragment_only_url(url):
        return url
    try:
        if urlsplit(url).scheme:
            return url
    except ValueError:
        return url
    if url.startswith("/"):
        return urljoin(base_url.rstrip("/") + "/", url.lstrip("/"))
    return urljoin(base_url, url)


def apply_style_to_text(text: str, style: StylePrimitive, ctx: RenderContext) -> str:
    """Style text like a token of the current block.

    Text that already carries escape sequences (a custom formatter's
    output) is returned as is.
    """
    if not text or has_ansi(text):
        return text
    out = StringBuilder()
    BaseElement(token=text, style=style).render(out, ctx)
    return out.build()


def _shows_url(data: LinkData) -> bool:
    return bool(data.url) and not is_fragment_only_url(data.url)


class DefaultFormatter:
    """``text url``; inside tables with a footer link list, text only."""

    def format_link(self, data: LinkData, ctx: RenderContext) -> str:
        parts: list[str] = []
        if data.text:
            parts.append(apply_style_to_text(data.text, data.text_style, ctx))
        footer = data.is_in_table and not ctx.options.inline_table_links
        if _shows_url(data) and not footer:
            if data.text:
                parts.append(" ")
            parts.append(apply_style_to_text(data.resolved_url, data.link_style, ctx))
        return "".join(parts)


class TextOnlyFormatter:
    """Link text only; a clickable hyperlink where the terminal supports it."""

    def format_link(self, data: LinkData, ctx: RenderContext) -> str:
        if not data.text:
            return ""
        styled = apply_style_to_text(data.text, data.text_style, ctx)
        if ctx.supports_hyperlinks():
            return format_hyperlink(styled, data.resolved_url)
        return styled


class URLOnlyFormatter:
    """The resolved URL only; fragment-only URLs render nothing."""

    def format_link(self, data: LinkData, ctx: RenderContext) -> str:
        if not _shows_url(data):
            return ""
        return apply_style_to_text(data.resolved_url, data.link_style, ctx)


class HyperlinkFormatter:
    """Link text wrapped in OSC-8, whether or not the terminal supports it."""

    def format_link(self, data: LinkData, ctx: RenderContext) -> str:
        if not data.text:
            return ""
        styled = apply_style_to_text(data.text, data.text_style, ctx)
        return format_hyperlink(styled, data.resolved_url)


class SmartHyperlinkFormatter:
    """Hyperlink where OSC-8 is supported, ``text url`` elsewhere."""

    def format_link(self, data: LinkData, ctx: RenderContext) -> str:
        if ctx.supports_hyperlinks():
            return HYPERLINK_FORMATTER.format_link(data, ctx)
        return DEFAULT_FORMATTER.format_link(data, ctx)


DEFAULT_FORMATTER = DefaultFormatter()
TEXT_ONLY_FORMATTER = TextOnlyFormatter()
URL_ONLY_FORMATTER = URLOnlyFormatter()
HYPERLINK_FORMATTER = HyperlinkFormatter()
SMART_HYPERLINK_FORMATTER = SmartHyperlinkFormatter()


def resolve_link_formatter(value: LinkFormatter | LinkFormatterFunc | None) -> LinkFormatter:
    """Normalize the ``link_formatter`` option to a LinkFormatter.

    Raises:
        TypeError: If value is neither a LinkFormatter nor callable
    """
    if value is None:
        return DEFAULT_FORMATTER
    if isinstance(value, LinkFormatter):
        return value
    if callable(value):
        logger.debug("using callable link formatter %r", value)
        return FunctionFormatter(value)
    raise TypeError(f"link_formatter must be a LinkFormatter or callable, got {value!r}")


__all__ = [
    "DEFAULT_FORMATTER",
    "HYPERLINK_FORMATTER",
    "SMART_HYPERLINK_FORMATTER",
    "TEXT_ONLY_FORMATTER",
    "URL_ONLY_FORMATTER",
    "FunctionFormatter",
    "LinkData",
    "LinkFormatter",
    "apply_style_to_text",
    "is_fragment_only_url",
    "resolve_link_formatter",
    "resolve_relative_url",
]
