"""ANSI renderer: depth-first walk driving the element dispatcher.

For every node the walk asks new_element() for an Element, then:

1. writes the entering literal and calls the renderer with the current
   block buffer (the output stream while no block is open);
2. walks the node's children, unless the element renders them itself;
3. calls the finisher with that same buffer, which is where a node that
   opened its own frame flushes it;
4. writes the exiting literal to the current block buffer.

Thread Safety:
    All per-render state is encapsulated in RenderContext, created fresh for
    each render() call. Multiple threads can safely share a single
    AnsiRenderer instance and call render() concurrently without
    synchronization.

"""

from __future__ import annotations

from tinta.ansi.context import RenderContext
from tinta.ansi.elements import NodePosition, new_element
from tinta.ansi.writers import TextSink
from tinta.config import DEFAULT_OPTIONS, RenderOptions
from tinta.nodes import Node
from tinta.stringbuilder import StringBuilder
from tinta.utils.logger import get_logger
from tinta.visitor import iter_children

logger = get_logger(__name__)


class AnsiRenderer:
    """Render a document tree to ANSI-styled terminal text.

    Usage:
        >>> from tinta.nodes import Document, Paragraph, Text
        >>> from tinta.styles import get_style
        >>> renderer = AnsiRenderer(RenderOptions(styles=get_style("ascii")))
        >>> text = renderer.render(Document((Paragraph((Text("Hello"),)),)))
        >>> text.splitlines()[1].rstrip()
        '  Hello'

    """

    __slots__ = ("_options",)

    def __init__(self, options: RenderOptions | None = None) -> None:
        self._options = options or DEFAULT_OPTIONS

    @property
    def options(self) -> RenderOptions:
        return self._options

    def render(self, node: Node) -> str:
        """Render a node (normally a Document) to a string."""
        out = StringBuilder()
        self.render_to(node, out)
        return out.build()

    def render_to(self, node: Node, out: TextSink) -> None:
        """Render a node into ``out``; errors from ``out.write`` propagate."""
        ctx = RenderContext(self._options)
        logger.debug(
            "rendering %s at width %d (%s profile)",
            type(node).__name__,
            self._options.word_wrap,
            ctx.profile,
        )
        self._walk(NodePosition(node), out, ctx)

    def _walk(self, position: NodePosition, out: TextSink, ctx: RenderContext) -> None:
        node = position.node
        element = new_element(node, ctx, position)
        stack = ctx.stack

        target = stack.current().buffer if len(stack) else out
        if element.entering:
            target.write(element.entering)
        if element.renderer is not None:
            element.renderer.render(target, ctx)

        if element.descend:
            children = tuple(iter_children(node))
            for index, child in enumerate(children):
                self._walk(position.child(child, index, children), out, ctx)

        if element.finisher is not None:
            element.finisher.finish(target, ctx)
        if element.exiting:
            stack.current().buffer.write(element.exiting)
