"""Block stack: the frames of every block element currently being rendered.

Each structural element (document, block quote, list, paragraph, ...)
pushes a BlockFrame on entry. Its children render into the frame's
private buffer; when the element finishes, the buffer is wrapped,
indented and padded into the parent and the frame is popped.

The stack also answers layout questions: the combined indentation of all
open frames and the width left for content.

Thread Safety:
    A BlockStack belongs to one RenderContext, i.e. to one render() call.

"""

from __future__ import annotations

from dataclasses import dataclass, field

from tinta.stringbuilder import StringBuilder
from tinta.styles.cascade import EMPTY_BLOCK, cascade_primitive
from tinta.styles.types import StyleBlock, StylePrimitive

MIN_BLOCK_WIDTH = 10


@dataclass(slots=True)
class BlockFrame:
    """One open block element.

    Attributes:
        style: Effective (cascaded) style of the block
        buffer: Rendered output of the block's children
        margin: Finish through a margin writer (indent + padding)
        newline: Write a trailing newline after the block on finish

    """

    style: StyleBlock = EMPTY_BLOCK
    buffer: StringBuilder = field(default_factory=StringBuilder)
    margin: bool = False
    newline: bool = False


class BlockStack:
    """List-backed stack of BlockFrames.

    ``current()`` on an empty stack and ``parent()`` on a stack with fewer
    than two frames return a fresh empty frame standing in for the
    document root, so callers never special-case the top of the tree.

    Example:
        >>> from tinta.styles.types import StyleBlock
        >>> stack = BlockStack()
        >>> stack.push(BlockFrame(StyleBlock(margin=2)))
        >>> stack.width(80)
        78
    """

    __slots__ = ("_frames",)

    def __init__(self) -> None:
        self._frames: list[BlockFrame] = []

    def __len__(self) -> int:
        return len(self._frames)

    def push(self, frame: BlockFrame) -> None:
        self._frames.append(frame)

    def pop(self) -> BlockFrame | None:
        """Remove and return the current frame (None when empty)."""
        if not self._frames:
            return None
        return self._frames.pop()

    def current(self) -> BlockFrame:
        if not self._frames:
            return BlockFrame()
        return self._frames[-1]

    def parent(self) -> BlockFrame:
        if len(self._frames) < 2:
            return BlockFrame()
        return self._frames[-2]

    def indent(self) -> int:
        """Sum of indent over every open frame."""
        return sum(frame.style.indent or 0 for frame in self._frames)

    def margin(self) -> int:
        """Sum of margin, margin_left and margin_right over every open frame."""
        return sum(
            (frame.style.margin or 0)
            + (frame.style.margin_left or 0)
            + (frame.style.margin_right or 0)
            for frame in self._frames
        )

    def width(self, total: int) -> int:
        """Width left for content inside all open frames.

        Args:
            total: Configured word-wrap width

        Returns:
            ``total`` minus all indents and margins, never below
            ``min(MIN_BLOCK_WIDTH, total)`` and never below 1
        """
        floor = max(1, min(MIN_BLOCK_WIDTH, total))
        consumed = sum(frame.style.consumed_width for frame in self._frames)
        return max(total - consumed, floor)

    def with_style(self, style: StylePrimitive) -> StylePrimitive:
        """Cascade an element style onto the current frame's style."""
        return cascade_primitive(self.current().style, style)
