"""Element protocols and the two building blocks every element is made of.

Each document node maps to an Element: optional literal strings written
when the walk enters and leaves the node, a renderer called on entry and
a finisher called on exit.

- BaseElement renders one styled token framed by its style's literals.
- BlockElement opens a frame on the block stack; children render into the
  frame's buffer, and on finish the buffer is wrapped, indented and padded
  into the parent.

Renderers take an optional ``override`` primitive. Containers that restyle
their children (emphasis, link text, table cells) pass their own colors
and attributes down this way; children keep their own literals.

Thread Safety:
    Elements are created per node during one render() call.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from tinta.ansi.blockstack import BlockFrame
from tinta.ansi.text import render_text, style_text
from tinta.ansi.wordwrap import wrap_with_indent
from tinta.ansi.writers import CENTER_WRAP_RATIO, TextSink, align_text
from tinta.styles.cascade import EMPTY_PRIMITIVE, apply_override
from tinta.styles.types import StyleBlock, StylePrimitive

if TYPE_CHECKING:
    from tinta.ansi.context import RenderContext


class ElementRenderer(Protocol):
    """Called when the walk enters a node."""

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None: ...


class ElementFinisher(Protocol):
    """Called when the walk leaves a node."""

    def finish(self, out: TextSink, ctx: RenderContext) -> None: ...


@dataclass(frozen=True, slots=True)
class Element:
    """How the renderer handles one node.

    Attributes:
        entering: Written to the current buffer before the renderer runs
        exiting: Written to the current buffer after the finisher runs
        renderer: Called on entry
        finisher: Called on exit
        descend: Walk the node's children (False when the renderer
            renders them itself)

    """

    entering: str = ""
    exiting: str = ""
    renderer: ElementRenderer | None = None
    finisher: ElementFinisher | None = None
    descend: bool = True


def resolve_styles(
    ctx: RenderContext, style: StylePrimitive, override: StylePrimitive | None
) -> tuple[StylePrimitive, StylePrimitive]:
    """(block style, element style) for an element rendered in the current frame."""
    block = ctx.stack.current().style.primitive
    effective = ctx.stack.with_style(style)
    if override is not None:
        block = apply_override(block, override)
        effective = apply_override(effective, override)
    return block, effective


def write_framed(
    out: TextSink,
    ctx: RenderContext,
    block: StylePrimitive,
    style: StylePrimitive,
    body: str,
    prefix: str = "",
    suffix: str = "",
) -> None:
    """Write a rendered body framed by element and style literals.

    Order: prefix and block_prefix in the block style, the styled prefix,
    the body, the styled suffix, then block_suffix and suffix in the block
    style.
    """
    profile = ctx.profile
    for rules, text in ((block, prefix), (block, style.block_prefix), (style, style.prefix)):
        if text:
            out.write(style_text(rules, text, profile))
    if body:
        out.write(body)
    for rules, text in ((style, style.suffix), (block, style.block_suffix), (block, suffix)):
        if text:
            out.write(style_text(rules, text, profile))


@dataclass(frozen=True, slots=True)
class BaseElement:
    """A single styled token.

    Attributes:
        token: The text to render
        prefix: Literal written before everything, in the block style
        suffix: Literal written after everything, in the block style
        style: Element style, cascaded onto the current frame's style
        unescape: Resolve Markdown backslash escapes and apply the style's
            format template (False for code, which is shown verbatim)

    """

    token: str = ""
    prefix: str = ""
    suffix: str = ""
    style: StylePrimitive = EMPTY_PRIMITIVE
    unescape: bool = True

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        block, style = resolve_styles(ctx, self.style, override)
        if self.unescape:
            body = render_text(style, self.token, ctx.profile)
        else:
            body = style_text(style, self.token, ctx.profile)
        write_framed(out, ctx, block, style, body, self.prefix, self.suffix)


def open_block(out: TextSink, ctx: RenderContext, frame: BlockFrame) -> None:
    """Push a frame; block_prefix goes to ``out``, prefix into the frame."""
    stack = ctx.stack
    stack.push(frame)
    style = frame.style
    if style.block_prefix:
        out.write(style_text(stack.parent().style.primitive, style.block_prefix, ctx.profile))
    if style.prefix:
        frame.buffer.write(style_text(style.primitive, style.prefix, ctx.profile))


def close_block(out: TextSink, ctx: RenderContext) -> None:
    """Write the current frame's suffix literals to ``out`` and pop it."""
    stack = ctx.stack
    style = stack.current().style
    if style.suffix:
        out.write(style_text(style.primitive, style.suffix, ctx.profile))
    if style.block_suffix:
        out.write(style_text(stack.parent().style.primitive, style.block_suffix, ctx.profile))
    stack.pop()


def target_width(ctx: RenderContext, style: StyleBlock) -> int:
    """Wrap width for a block: the stack width, narrowed for centered blocks."""
    available = ctx.width
    if style.align == "center":
        return max(int(available * CENTER_WRAP_RATIO), 1)
    return available


@dataclass(frozen=True, slots=True)
class BlockElement:
    """A block whose children render into their own frame.

    With ``margin`` the finished buffer is re-wrapped to the frame width
    (continuation lines indented by ``hanging``, or by the block's indent
    and left margin) and written through a margin writer; otherwise it is
    copied to the parent as is.

    Attributes:
        style: Effective style of the frame
        margin: Wrap, indent and pad on finish
        newline: Write a trailing newline after the block
        hanging: Continuation indent for wrapped lines

    """

    style: StyleBlock
    margin: bool = False
    newline: bool = False
    hanging: str | None = None

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        open_block(out, ctx, BlockFrame(self.style, margin=self.margin, newline=self.newline))

    def finish(self, out: TextSink, ctx: RenderContext) -> None:
        frame = ctx.stack.current()
        if self.margin:
            style = frame.style
            indent = self.hanging
            if indent is None:
                indent = " " * ((style.indent or 0) + (style.margin_left or 0))
            width = target_width(ctx, style)
            text = wrap_with_indent(frame.buffer.build(), width, indent)
            writer = ctx.margin_writer(out, style)
            writer.write(align_text(text, ctx.width, style.align))
            if self.newline:
                writer.write("\n")
        else:
            out.write(frame.buffer.build())
        close_block(out, ctx)
