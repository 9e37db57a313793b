"""Escape-aware word wrapping.

word_wrap() breaks at whitespace and at breakpoint characters, never inside
a word and never inside an escape sequence. A word longer than the limit
is kept whole on its own line.

wrap_with_indent() is the simpler whitespace-token variant used for block
and definition-list content: continuation lines get a hanging indent.

Example:
    >>> word_wrap("foo-foobar", 4)
    'foo-\\nfoobar'
    >>> wrap_with_indent("aaa bbb ccc", 7, "  ")
    'aaa bbb\\n  ccc'

Thread Safety:
    Pure functions; the wrapper state lives in a per-call object.

"""

from __future__ import annotations

from tinta.ansi.sequences import char_width, iter_segments, visible_width

BREAKPOINTS = ",.;-+|"


class _WordWrapper:
    """Streaming wrapper state: pending word, pending spaces, line length."""

    __slots__ = ("_buf", "_line_len", "_space", "_word", "_word_width", "breakpoints", "limit")

    def __init__(self, limit: int, breakpoints: str) -> None:
        self.limit = limit
        self.breakpoints = breakpoints
        self._buf: list[str] = []
        self._word: list[str] = []
        self._word_width = 0
        self._space: list[str] = []
        self._line_len = 0

    def _add_space(self) -> None:
        self._line_len += len(self._space)
        self._buf.extend(self._space)
        self._space.clear()

    def _add_word(self) -> None:
        if self._word:
            self._add_space()
            self._line_len += self._word_width
            self._buf.extend(self._word)
            self._word.clear()
            self._word_width = 0

    def _add_newline(self) -> None:
        self._buf.append("\n")
        self._line_len = 0
        self._space.clear()

    def feed(self, text: str) -> None:
        for chunk, is_sequence in iter_segments(text):
            if is_sequence:
                # zero-width, travels with the word it precedes
                self._word.append(chunk)
                continue
            for char in chunk:
                self._feed_char(char)

    def _feed_char(self, char: str) -> None:
        if char == "\n":
            if not self._word:
                if self._line_len + len(self._space) > self.limit:
                    self._space.clear()
                else:
                    self._add_space()
            self._add_word()
            self._add_newline()
        elif char.isspace():
            self._add_word()
            self._space.append(char)
        elif char in self.breakpoints:
            width = char_width(char)
            if (
                self._line_len > 0
                and self._line_len + len(self._space) + self._word_width + width > self.limit
            ):
                # the pending word moves down with its breakpoint
                self._add_newline()
            self._add_space()
            self._add_word()
            self._buf.append(char)
            self._line_len += width
        else:
            self._word.append(char)
            self._word_width += char_width(char)
            if (
                self._line_len > 0
                and self._line_len + len(self._space) + self._word_width > self.limit
            ):
                self._add_newline()

    def close(self) -> str:
        # trailing spaces are dropped
        self._add_word()
        return "".join(self._buf)


def word_wrap(
    text: str,
    width: int,
    breakpoints: str = BREAKPOINTS,
    keep_newlines: bool = True,
) -> str:
    """Wrap styled text to ``width`` cells.

    Args:
        text: Text, possibly containing escape sequences
        width: Line limit in cells; values below 1 disable wrapping
        breakpoints: Characters after which a line may break
        keep_newlines: Keep existing newlines; otherwise fold them into
            spaces first (paragraph reflow)

    Returns:
        Wrapped text
    """
    if width < 1:
        return text
    if not keep_newlines:
        text = text.strip().replace("\n", " ")
    wrapper = _WordWrapper(width, breakpoints)
    wrapper.feed(text)
    return wrapper.close()


def _wrap_line_with_indent(line: str, width: int, indent: str) -> list[str]:
    if visible_width(line) <= width:
        return [line]
    words = line.split()
    if not words:
        return [line]

    lines: list[str] = []
    current: list[str] = []
    current_width = 0
    last = len(words) - 1
    for i, word in enumerate(words):
        word_width = visible_width(word)
        needed = word_width + (1 if i < last else 0)
        if current_width + needed > width and len(current) > 0:
            lines.append(" ".join(current) if not lines else indent + " ".join(current))
            current = []
            current_width = visible_width(indent)
        if current:
            current_width += 1
        current.append(word)
        current_width += word_width
    if current:
        lines.append(" ".join(current) if not lines else indent + " ".join(current))
    return lines


def wrap_with_indent(text: str, width: int, indent: str) -> str:
    """Wrap each over-long line at whitespace, indenting continuation lines.

    Lines that fit are returned untouched; empty lines pass through.

    Args:
        text: Text, possibly containing escape sequences
        width: Line limit in cells; values below 1 disable wrapping
        indent: Prefix for every continuation line

    Returns:
        Wrapped text
    """
    if width <= 0:
        return text
    result: list[str] = []
    for line in text.split("\n"):
        if not line:
            result.append(line)
            continue
        result.extend(_wrap_line_with_indent(line, width, indent))
    return "\n".join(result)
