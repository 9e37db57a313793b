"""Link collection and the footer link list for tables.

Table cells are too narrow for ``text url`` links. Unless links are
rendered inline, a table is walked once before any of its cells render;
every link and image found is recorded as a TableLink, duplicates are
dropped, and the cells show a short label instead. After the table body a
footer lists each link with its full URL:

    | Name | Docs    |
    |------|---------|
    | tinta| Guide[1]|

    [1]: Guide https://example.com/guide
    [2]: Guide https://example.com/other

The ``[n]`` suffix on a label appears only when two different links share
the same visible text.

Thread Safety:
    Collectors are created per table.

"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Literal
from urllib.parse import urlsplit

from tinta.ansi.autolink import detect_autolink
from tinta.ansi.base import BaseElement
from tinta.ansi.sequences import truncate, visible_width
from tinta.ansi.writers import TextSink
from tinta.nodes import Image, Link, Table
from tinta.stringbuilder import StringBuilder
from tinta.utils.text import extract_text, unescape_html
from tinta.visitor import BaseVisitor

if TYPE_CHECKING:
    from tinta.ansi.context import RenderContext

type LinkKind = Literal["auto", "image", "regular"]


@dataclass(frozen=True, slots=True)
class TableLink:
    """One footer entry. Equality is structural, which drives deduplication."""

    href: str
    title: str
    content: str
    kind: LinkKind


def link_domain(href: str) -> str:
    """Host of a URL, or "link" when there is none.

    Example:
        >>> link_domain("https://docs.example.com/a")
        'docs.example.com'
        >>> link_domain("http://[::1")
        'link'
    """
    try:
        host = urlsplit(href).hostname
    except ValueError:
        return "link"
    return host or "link"


def table_link(node: Link | Image) -> TableLink:
    """The footer entry for a link or image node."""
    match node:
        case Image():
            return TableLink(node.url, node.title or "", node.alt or link_domain(node.url), "image")
        case Link(autolink=True):
            content = detect_autolink(node.url) or link_domain(node.url)
            return TableLink(node.url, node.title or "", content, "auto")
        case _:
            content = unescape_html(extract_text(node.children))
            return TableLink(node.url, node.title or "", content, "regular")


class TableLinkCollector(BaseVisitor[None]):
    """Records every link and image below a node, in document order."""

    def __init__(self) -> None:
        self.links: list[TableLink] = []
        self.images: list[TableLink] = []

    def visit_link(self, node: Link) -> None:
        self.links.append(table_link(node))

    def visit_image(self, node: Image) -> None:
        self.images.append(table_link(node))


@dataclass(frozen=True, slots=True)
class TableLinks:
    """Deduplicated links and images of one table."""

    links: tuple[TableLink, ...] = ()
    images: tuple[TableLink, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.links or self.images)

    def _entries(self, link: TableLink) -> tuple[TableLink, ...]:
        return self.images if link.kind == "image" else self.links

    def position(self, link: TableLink) -> int | None:
        """1-based footer position of a link (None if not collected)."""
        entries = self._entries(link)
        if link not in entries:
            return None
        return entries.index(link) + 1

    def label(self, link: TableLink) -> str:
        """Cell label: the content, plus ``[n]`` when its text is ambiguous."""
        position = self.position(link)
        if position is None:
            return link.content
        same_text = sum(1 for entry in self._entries(link) if entry.content == link.content)
        if same_text < 2:
            return link.content
        return f"{link.content}[{position}]"


def collect_table_links(table: Table) -> TableLinks:
    """Walk a table once and collect its links and images."""
    collector = TableLinkCollector()
    collector.visit(table)
    return TableLinks(
        links=tuple(dict.fromkeys(collector.links)),
        images=tuple(dict.fromkeys(collector.images)),
    )


def _render_entry(
    out: TextSink, ctx: RenderContext, link: TableLink, position: int, digits: int
) -> None:
    styles = ctx.styles
    marker = f"{' ' * (digits - len(str(position)))}[{position}]: "
    if link.kind == "image":
        label = BaseElement(
            token=link.content,
            style=replace(styles.image_text, prefix=marker + styles.image_text.prefix),
        )
        href_style = styles.image
    else:
        label = BaseElement(token=marker + link.content, style=styles.link_text)
        href_style = styles.link
    rendered = StringBuilder()
    label.render(rendered, ctx)
    text = rendered.build()
    out.write(text)
    out.write(" ")
    limit = max(ctx.width - visible_width(text) - 1, 0)
    BaseElement(token=truncate(link.href, limit), style=href_style).render(out, ctx)


def render_table_links(out: TextSink, ctx: RenderContext, links: TableLinks) -> None:
    """Write the footer link list: links first, then images."""
    for entries in (links.links, links.images):
        if not entries:
            continue
        out.write("\n")
        digits = len(str(len(entries)))
        for position, link in enumerate(entries, 1):
            out.write("\n")
            _render_entry(out, ctx, link, position, digits)
