"""Element dispatch: one Element per document node.

new_element() maps a node, seen at a position in the tree, to the literals
and renderer/finisher pair the renderer drives while walking. Inline
containers (emphasis, links, table cells, definition terms) render their
own children through inline_element(); the walk does not descend into
them.

Block elements and what they do on finish:

- Heading: wrap to the block width, margin writer, heading suffix
- Paragraph: reflow, align, margin writer, trailing newline
- List: hanging-indent list wrap, margin writer
- Code block: highlighted or plain code through a margin writer
- Block quote, definition list, document: generic margin block

Thread Safety:
    Elements are created per node during one render() call.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from tinta.ansi.base import (
    BaseElement,
    BlockElement,
    Element,
    ElementRenderer,
    close_block,
    open_block,
    resolve_styles,
    target_width,
    write_framed,
)
from tinta.ansi.blockstack import BlockFrame
from tinta.ansi.links import LinkData, resolve_relative_url
from tinta.ansi.lists import wrap_list_content
from tinta.ansi.table import TableCellElement, TableElement, TableRowElement, is_header_row
from tinta.ansi.table_links import table_link
from tinta.ansi.text import style_text
from tinta.ansi.wordwrap import word_wrap
from tinta.ansi.writers import TextSink, align_text
from tinta.errors import LinkFormatterError, RenderError
from tinta.nodes import (
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
from tinta.stringbuilder import StringBuilder
from tinta.styles.cascade import (
    EMPTY_PRIMITIVE,
    apply_override,
    cascade_block,
    cascade_primitive,
    cascade_styles,
)
from tinta.styles.types import StylePrimitive
from tinta.utils.logger import get_logger
from tinta.utils.text import extract_text, unescape_html

if TYPE_CHECKING:
    from tinta.ansi.context import RenderContext

logger = get_logger(__name__)

DEFINITION_HANGING_INDENT = "  "


# =============================================================================
# Tree position
# =============================================================================


@dataclass(frozen=True, slots=True)
class NodePosition:
    """Where a node sits in the tree: its parent chain and its siblings.

    Example:
        >>> from tinta.nodes import Paragraph, Text
        >>> para = Paragraph((Text("a"), Text("b")))
        >>> root = NodePosition(para)
        >>> root.child(para.children[1], 1, para.children).last
        True
    """

    node: Node
    parent: NodePosition | None = None
    index: int = 0
    siblings: tuple[Node, ...] = ()

    @property
    def first(self) -> bool:
        return self.index == 0

    @property
    def last(self) -> bool:
        return self.index >= len(self.siblings) - 1

    @property
    def parent_node(self) -> Node | None:
        return self.parent.node if self.parent is not None else None

    def ancestors(self) -> Iterator[Node]:
        """Enclosing nodes, innermost first."""
        position = self.parent
        while position is not None:
            yield position.node
            position = position.parent

    def within(self, *kinds: type[Node]) -> bool:
        return any(isinstance(node, kinds) for node in self.ancestors())

    def child(self, node: Node, index: int, siblings: tuple[Node, ...]) -> NodePosition:
        return NodePosition(node, self, index, siblings)


# =============================================================================
# Leaf and inline elements
# =============================================================================


@dataclass(frozen=True, slots=True)
class LiteralElement:
    """Writes a fixed string, unstyled."""

    text: str

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        out.write(self.text)


BREAK_ELEMENT = LiteralElement("\n")


@dataclass(frozen=True, slots=True)
class StyledInlineElement:
    """Emphasis, strong, strikethrough, definition terms and descriptions.

    Children render with this element's colors and attributes laid over
    their own; the result is framed by this element's literals.
    """

    children: tuple[ElementRenderer, ...]
    style: StylePrimitive

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        block, style = resolve_styles(ctx, self.style, override)
        inner = cascade_primitive(override or EMPTY_PRIMITIVE, self.style)
        body = StringBuilder()
        for child in self.children:
            child.render(body, ctx, inner)
        write_framed(out, ctx, block, style, body.build())


def _in_table_footer_mode(ctx: RenderContext) -> bool:
    return ctx.table.active and ctx.table.links is not None


def _is_email(url: str) -> bool:
    return "@" in url and "://" not in url and not url.lower().startswith("mailto:")


@dataclass(frozen=True, slots=True)
class LinkElement:
    """Renders a link through the configured link formatter.

    Inside a table with a footer link list only the link's label is shown.
    """

    link: Link

    def _styles(
        self, ctx: RenderContext, override: StylePrimitive | None
    ) -> tuple[StylePrimitive, StylePrimitive]:
        link_style, text_style = ctx.styles.link, ctx.styles.link_text
        if override is not None:
            link_style = apply_override(link_style, override)
            text_style = apply_override(text_style, override)
        return link_style, text_style

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        node = self.link
        link_style, text_style = self._styles(ctx, override)
        if _in_table_footer_mode(ctx):
            label = ctx.table.links.label(table_link(node))  # type: ignore[union-attr]
            BaseElement(token=label, style=text_style).render(out, ctx)
            return

        text = unescape_html(extract_text(node.children))
        url = node.url
        if node.autolink:
            text = text or url
            if _is_email(url):
                url = "mailto:" + url
        data = LinkData(
            url=url,
            text=text,
            title=node.title or "",
            base_url=ctx.options.base_url,
            is_autolink=node.autolink,
            is_in_table=ctx.table.active,
            children=node.children,
            link_style=link_style,
            text_style=text_style,
            location=node.location,
        )
        try:
            rendered = ctx.link_formatter.format_link(data, ctx)
        except RenderError:
            raise
        except Exception as err:
            raise LinkFormatterError(url, str(err), node.location) from err
        out.write(rendered)


@dataclass(frozen=True, slots=True)
class ImageElement:
    """Alt text in the image_text style, then the resolved URL."""

    image: Image

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        styles = ctx.styles
        node = self.image
        if _in_table_footer_mode(ctx):
            label = ctx.table.links.label(table_link(node))  # type: ignore[union-attr]
            BaseElement(token=label, style=styles.image_text).render(out, ctx, override)
            return
        if node.alt:
            BaseElement(token=node.alt, style=styles.image_text).render(out, ctx, override)
        if node.url:
            BaseElement(
                token=resolve_relative_url(ctx.options.base_url, node.url),
                prefix=" ",
                style=styles.image,
            ).render(out, ctx, override)


@dataclass(frozen=True, slots=True)
class CodeSpanElement:
    """Inline code: the code style cascaded onto the current block, verbatim."""

    code: str

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        block = ctx.stack.current().style.primitive
        style = cascade_block(ctx.stack.current().style, ctx.styles.code).primitive
        if override is not None:
            block = apply_override(block, override)
            style = apply_override(style, override)
        write_framed(out, ctx, block, style, style_text(style, self.code, ctx.profile))


def inline_element(node: Inline, ctx: RenderContext) -> ElementRenderer:
    """The renderer for an inline node."""
    styles = ctx.styles
    match node:
        case Text():
            return BaseElement(token=unescape_html(node.content), style=styles.text)
        case SoftBreak() | LineBreak():
            return BREAK_ELEMENT
        case Emphasis():
            return StyledInlineElement(inline_children(node.children, ctx), styles.emph)
        case Strong():
            return StyledInlineElement(inline_children(node.children, ctx), styles.strong)
        case Strikethrough():
            return StyledInlineElement(inline_children(node.children, ctx), styles.strikethrough)
        case Link():
            return LinkElement(node)
        case Image():
            return ImageElement(node)
        case CodeSpan():
            return CodeSpanElement(node.code)
        case HtmlInline():
            return BaseElement(token=node.html, style=styles.html_span.primitive, unescape=False)
        case _:
            logger.warning("unhandled inline node %s", type(node).__name__)
            return LiteralElement("")


def inline_children(
    children: tuple[Inline, ...], ctx: RenderContext
) -> tuple[ElementRenderer, ...]:
    return tuple(inline_element(child, ctx) for child in children)


# =============================================================================
# Block elements
# =============================================================================


@dataclass(frozen=True, slots=True)
class HeadingElement:
    """Heading frame: ``heading`` and ``hN`` folded, wrapped to width."""

    level: int
    first: bool = False

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        styles = ctx.styles
        rules = cascade_styles(styles.heading, styles.heading_level(self.level))
        current = ctx.stack.current().style
        if not self.first:
            out.write(style_text(current.primitive, "\n", ctx.profile))
        open_block(out, ctx, BlockFrame(cascade_block(current, rules)))

    def finish(self, out: TextSink, ctx: RenderContext) -> None:
        frame = ctx.stack.current()
        style = frame.style
        text = word_wrap(frame.buffer.build(), target_width(ctx, style))
        ctx.margin_writer(out, style).write(align_text(text, ctx.width, style.align))
        close_block(out, ctx)


@dataclass(frozen=True, slots=True)
class ParagraphElement:
    """Paragraph frame: reflowed, aligned and written with a trailing newline."""

    first: bool = False

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        if not self.first:
            out.write("\n")
        current = ctx.stack.current().style
        open_block(out, ctx, BlockFrame(cascade_block(current, ctx.styles.paragraph)))

    def finish(self, out: TextSink, ctx: RenderContext) -> None:
        frame = ctx.stack.current()
        content = frame.buffer.build()
        if content.strip():
            style = frame.style
            text = word_wrap(
                content,
                target_width(ctx, style),
                keep_newlines=ctx.options.preserve_newlines,
            )
            writer = ctx.margin_writer(out, style)
            writer.write(align_text(text, ctx.width, style.align))
            writer.write("\n")
        close_block(out, ctx)


@dataclass(frozen=True, slots=True)
class ListElement:
    """List frame; nested lists indent by ``level_indent`` and end without newline."""

    nested: bool = False

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        rules = ctx.styles.list
        indent = rules.level_indent if self.nested else (rules.indent or 0)
        style = cascade_block(ctx.stack.current().style, replace(rules, indent=indent))
        open_block(out, ctx, BlockFrame(style, margin=True, newline=not self.nested))

    def finish(self, out: TextSink, ctx: RenderContext) -> None:
        frame = ctx.stack.current()
        text = wrap_list_content(frame.buffer.build(), ctx.width)
        writer = ctx.margin_writer(out, frame.style)
        writer.write(text)
        if not self.nested:
            writer.write("\n")
        close_block(out, ctx)


@dataclass(frozen=True, slots=True)
class ItemElement:
    """Bullet or enumeration marker of a list item."""

    ordered: bool = False
    number: int = 1

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        styles = ctx.styles
        if self.ordered:
            marker = BaseElement(prefix=str(self.number), style=styles.enumeration)
        else:
            marker = BaseElement(style=styles.item)
        marker.render(out, ctx, override)


@dataclass(frozen=True, slots=True)
class TaskElement:
    """Checkbox marker of a task-list item."""

    checked: bool = False

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        task = ctx.styles.task
        marker = task.ticked if self.checked else task.unticked
        BaseElement(prefix=marker, style=task.primitive).render(out, ctx, override)


@dataclass(frozen=True, slots=True)
class CodeBlockElement:
    """Fenced or indented code, highlighted when a highlighter is available."""

    code: str
    language: str = ""

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        ctx.stack.push(BlockFrame(ctx.styles.code_block))

    def finish(self, out: TextSink, ctx: RenderContext) -> None:
        rules = ctx.stack.current().style
        profile = ctx.profile
        writer = ctx.margin_writer(out, rules, padding=False)
        writer.write(style_text(rules.primitive, rules.block_prefix, profile))
        highlighter = ctx.highlighter()
        if highlighter is not None:
            writer.write(highlighter.highlight(self.code, self.language))
        else:
            writer.write(style_text(ctx.stack.with_style(rules), self.code, profile))
        writer.write(style_text(rules.primitive, rules.block_suffix, profile))
        ctx.stack.pop()


def _front_matter_value(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


@dataclass(frozen=True, slots=True)
class FrontMatterElement:
    """``key: value`` lines in the code block style."""

    data: dict[str, object]

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        if not self.data:
            return
        lines = [f"{key}: {_front_matter_value(value)}" for key, value in self.data.items()]
        style = ctx.stack.with_style(ctx.styles.code_block)
        out.write(style_text(style, "\n".join(lines), ctx.profile))
        out.write("\n")


def _item_element(item: ListItem, position: NodePosition) -> Element:
    parent = position.parent_node
    ordered = isinstance(parent, List) and parent.ordered
    start = parent.start if isinstance(parent, List) else 1
    exiting = "\n"
    if position.last or (item.children and isinstance(item.children[-1], List)):
        exiting = ""
    if item.checked is not None:
        return Element(exiting=exiting, renderer=TaskElement(item.checked))
    return Element(
        exiting=exiting,
        renderer=ItemElement(ordered=ordered, number=position.index + start),
    )


def _block(element: BlockElement | ListElement, entering: str = "") -> Element:
    return Element(entering=entering, renderer=element, finisher=element)


def new_element(node: Node, ctx: RenderContext, position: NodePosition) -> Element:
    """Map a node to its Element.

    Args:
        node: The node being entered
        ctx: Render context (the current frame is the node's enclosing block)
        position: The node's place in the tree

    Returns:
        Element describing literals, renderer and finisher for the node
    """
    styles = ctx.styles
    current = ctx.stack.current().style
    match node:
        case Document():
            return _block(BlockElement(styles.document, margin=True))
        case Heading():
            heading = HeadingElement(node.level, first=position.first)
            return Element(renderer=heading, finisher=heading)
        case Paragraph():
            if isinstance(position.parent_node, (ListItem, BlockQuote)):
                return Element(entering="" if position.first else "\n")
            paragraph = ParagraphElement(first=position.first)
            return Element(renderer=paragraph, finisher=paragraph)
        case BlockQuote():
            quote = BlockElement(cascade_block(current, styles.block_quote), margin=True)
            return _block(quote, entering="\n")
        case List():
            return _block(ListElement(nested=position.within(List)), entering="\n")
        case ListItem():
            return _item_element(node, position)
        case FencedCode() | IndentedCode():
            language = node.language if isinstance(node, FencedCode) else ""
            code = CodeBlockElement(node.code, language)
            return Element(entering="\n", renderer=code, finisher=code)
        case Table():
            table = TableElement(node)
            return Element(entering="\n", exiting="\n", renderer=table, finisher=table)
        case TableRow():
            table_node = position.parent_node
            header = isinstance(table_node, Table) and is_header_row(table_node, node)
            return Element(finisher=TableRowElement(header=header))
        case TableCell():
            row_position = position.parent
            header = False
            if row_position is not None and isinstance(row_position.node, TableRow):
                table_node = row_position.parent_node
                header = isinstance(table_node, Table) and is_header_row(
                    table_node, row_position.node
                )
            cell = TableCellElement(inline_children(node.children, ctx), header=header)
            return Element(renderer=cell, descend=False)
        case ThematicBreak():
            return Element(renderer=BaseElement(style=styles.hr))
        case HtmlBlock():
            html = BaseElement(token=node.html, style=styles.html_block.primitive, unescape=False)
            return Element(renderer=html)
        case DefinitionList():
            definitions = BlockElement(
                cascade_block(current, styles.definition_list),
                margin=True,
                newline=True,
                hanging=DEFINITION_HANGING_INDENT,
            )
            return _block(definitions)
        case DefinitionTerm():
            term = StyledInlineElement(inline_children(node.children, ctx), styles.definition_term)
            return Element(entering="\n", renderer=term, descend=False)
        case DefinitionDescription():
            description = StyledInlineElement(
                inline_children(node.children, ctx), styles.definition_description
            )
            return Element(exiting="\n", renderer=description, descend=False)
        case FrontMatter():
            if not ctx.options.show_front_matter:
                return Element()
            return Element(renderer=FrontMatterElement(node.data))
        case (
            Text()
            | SoftBreak()
            | LineBreak()
            | Emphasis()
            | Strong()
            | Strikethrough()
            | Link()
            | Image()
            | CodeSpan()
            | HtmlInline()
        ):
            return Element(renderer=inline_element(node, ctx), descend=False)
        case _:
            logger.warning("unhandled node %s", type(node).__name__)
            return Element()
