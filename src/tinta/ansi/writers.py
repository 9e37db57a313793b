"""Writer chain that lays a finished block out on the terminal.

A block's buffered content flows through:

    MarginWriter -> IndentWriter -> PaddingWriter -> destination

- IndentWriter writes the indent tokens before the first content of every
  line, in the *parent's* style, straight to the destination (so indent
  does not count toward padding). An open style or hyperlink is closed
  around the indent and re-opened afterwards.
- PaddingWriter pads every line to the block width with spaces in the
  block's own style, so background colors fill the whole line.

Each writer tracks open styles with its own Pen, fed with every escape
sequence passing through.

align_text() is the line-alignment pass applied before the chain.

Thread Safety:
    Writers are created per block finish and never shared.

"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from tinta.ansi.sequences import Pen, iter_segments, visible_width
from tinta.ansi.text import style_text
from tinta.styles.types import StyleBlock, StylePrimitive

CENTER_WRAP_RATIO = 0.7
JUSTIFY_MIN_RATIO = 0.6


class TextSink(Protocol):
    """Anything with a ``write(str)`` method (StringBuilder, io.StringIO, a file)."""

    def write(self, s: str, /) -> int: ...


class PaddingWriter:
    """Pads each finished line to ``width`` cells.

    States: ``{pen, line_width}``. Padding happens at every newline; a final
    line without a newline is left as is.
    """

    __slots__ = ("_dest", "_line_width", "_pad", "_pen", "width")

    def __init__(self, dest: TextSink, width: int, pad: Callable[[int], str]) -> None:
        self._dest = dest
        self.width = width
        self._pad = pad
        self._pen = Pen()
        self._line_width = 0

    def _end_line(self) -> None:
        missing = self.width - self._line_width
        if missing > 0:
            if self._pen.active:
                self._dest.write(self._pen.reset_sequence())
                self._dest.write(self._pad(missing))
                self._dest.write(self._pen.restore_sequence())
            else:
                self._dest.write(self._pad(missing))
        self._line_width = 0

    def write(self, s: str) -> int:
        for chunk, is_sequence in iter_segments(s):
            if is_sequence:
                self._pen.feed(chunk)
                self._dest.write(chunk)
                continue
            for i, part in enumerate(chunk.split("\n")):
                if i > 0:
                    self._end_line()
                    self._dest.write("\n")
                if part:
                    self._dest.write(part)
                    self._line_width += visible_width(part)
        return len(s)


class IndentWriter:
    """Writes an indent before the first content of every line.

    States: ``{pen, at_line_start}``. Content goes to ``inner``; the indent
    itself goes to ``dest`` directly.
    """

    __slots__ = ("_at_line_start", "_dest", "_indent", "_inner", "_pen")

    def __init__(self, inner: TextSink, dest: TextSink, indent: str) -> None:
        self._inner = inner
        self._dest = dest
        self._indent = indent
        self._pen = Pen()
        self._at_line_start = True

    def _write_indent(self) -> None:
        self._at_line_start = False
        if not self._indent:
            return
        reset = self._pen.reset_sequence()
        if reset:
            self._inner.write(reset)
        self._dest.write(self._indent)
        restore = self._pen.restore_sequence()
        if restore:
            self._inner.write(restore)

    def write(self, s: str) -> int:
        for chunk, is_sequence in iter_segments(s):
            if self._at_line_start:
                self._write_indent()
            if is_sequence:
                self._pen.feed(chunk)
                self._inner.write(chunk)
                continue
            for i, part in enumerate(chunk.split("\n")):
                if i > 0:
                    if self._at_line_start:
                        self._write_indent()
                    self._inner.write("\n")
                    self._at_line_start = True
                if part:
                    if self._at_line_start:
                        self._write_indent()
                    self._inner.write(part)
        return len(s)


class MarginWriter:
    """Indent over padding for one block.

    Args:
        dest: Where the laid-out block goes (usually the parent buffer)
        rules: The block's effective style
        parent: Style of the enclosing block, used for the indent tokens
        width: Content width of the block (padding target)
        profile: Color profile
        padding: Pad lines to ``width``

    """

    __slots__ = ("_writer",)

    def __init__(
        self,
        dest: TextSink,
        rules: StyleBlock,
        *,
        parent: StylePrimitive,
        width: int,
        profile: str,
        padding: bool = True,
    ) -> None:
        count = (rules.indent or 0) + (rules.margin or 0) + (rules.margin_left or 0)
        token = rules.indent_token if rules.indent_token is not None else " "
        indent = style_text(parent, token * count, profile) if count else ""
        inner: TextSink = dest
        if padding:
            block_style = rules.primitive
            inner = PaddingWriter(dest, width, lambda n: style_text(block_style, " " * n, profile))
        self._writer = IndentWriter(inner, dest, indent)

    def write(self, s: str) -> int:
        return self._writer.write(s)


def _justify_line(line: str, width: int) -> str:
    visible = visible_width(line)
    if visible >= width or visible < width * JUSTIFY_MIN_RATIO:
        return line
    words = line.split(" ")
    gaps = len(words) - 1
    if gaps < 1:
        return line
    base, extra = divmod(width - visible, gaps)
    parts: list[str] = []
    for i, word in enumerate(words):
        parts.append(word)
        if i < gaps:
            parts.append(" " * (1 + base + (1 if i < extra else 0)))
    return "".join(parts)


def align_text(text: str, width: int, align: str | None) -> str:
    """Align every line of text inside ``width`` cells.

    Args:
        text: Wrapped text
        width: Available width
        align: "center", "justify", or "left"/None (no change)

    Returns:
        Aligned text
    """
    if align not in ("center", "justify") or width < 1:
        return text
    lines = text.split("\n")
    if align == "center":
        lines = [
            " " * ((width - visible_width(line)) // 2) + line if line.strip() else line
            for line in lines
        ]
    else:
        lines = [_justify_line(line, width) for line in lines]
    return "\n".join(lines)
