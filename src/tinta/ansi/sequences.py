"""Escape-sequence primitives: segmentation, stripping, width and the pen.

Everything that measures or splits styled text goes through this module
so that control sequences are always treated as zero-width atoms:

- CSI: ``ESC [`` parameters, final byte 0x40-0x7E (SGR ends in ``m``)
- OSC: ``ESC ]`` payload, terminated by BEL or ``ESC \\`` (OSC-8 links)
- two-byte escapes: ``ESC`` + one byte

Display width is measured with rich's cell tables, so wide CJK glyphs count
as two cells and combining marks as zero.

Thread Safety:
    Module-level functions are pure. Pen instances belong to one writer.

"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from rich.cells import cell_len, get_character_cell_size

ESC = "\x1b"
CSI = "\x1b["
OSC = "\x1b]"
ST = "\x1b\\"
BEL = "\x07"

RESET_STYLE = "\x1b[0m"
HYPERLINK_START = "\x1b]8;;"
HYPERLINK_MID = "\x1b\\"
HYPERLINK_END = "\x1b]8;;\x1b\\"

ELLIPSIS = "…"

_SEQUENCE_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"  # CSI
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"  # OSC
    r"|\x1b[@-Z\\-_a-z]"  # two-byte escapes
)


def iter_segments(text: str) -> Iterator[tuple[str, bool]]:
    """Split text into (chunk, is_sequence) pairs.

    Plain chunks are maximal runs between escape sequences; sequences are
    yielded whole.

    Example:
        >>> list(iter_segments("a\\x1b[1mb"))
        [('a', False), ('\\x1b[1m', True), ('b', False)]
    """
    if ESC not in text:
        if text:
            yield text, False
        return
    pos = 0
    for match in _SEQUENCE_RE.finditer(text):
        start, end = match.span()
        if start > pos:
            yield text[pos:start], False
        yield match.group(), True
        pos = end
    if pos < len(text):
        yield text[pos:], False


def strip_ansi(text: str) -> str:
    """Remove all escape sequences from text."""
    if ESC not in text:
        return text
    return _SEQUENCE_RE.sub("", text)


def has_ansi(text: str) -> bool:
    """True if text contains at least one escape sequence."""
    return ESC in text and _SEQUENCE_RE.search(text) is not None


def visible_width(text: str) -> int:
    """Terminal cell width of text, ignoring escape sequences."""
    return cell_len(strip_ansi(text))


def char_width(char: str) -> int:
    """Terminal cell width of a single character."""
    return get_character_cell_size(char)


def truncate(text: str, width: int, tail: str = ELLIPSIS) -> str:
    """Cut styled text to ``width`` cells, ending with ``tail``.

    Escape sequences are kept intact; when text was cut after a style was
    opened, a reset is appended so the style does not leak.

    Example:
        >>> truncate("https://example.com/a/b", 10)
        'https://e…'
    """
    if visible_width(text) <= width:
        return text
    budget = width - cell_len(tail)
    if budget < 0:
        return ""
    out: list[str] = []
    used = 0
    styled = False
    for chunk, is_sequence in iter_segments(text):
        if is_sequence:
            out.append(chunk)
            styled = True
            continue
        for char in chunk:
            size = char_width(char)
            if used + size > budget:
                out.append(tail)
                if styled:
                    out.append(RESET_STYLE)
                return "".join(out)
            out.append(char)
            used += size
    return "".join(out)


def _osc8_url(sequence: str) -> str | None:
    """URL of an OSC-8 sequence, "" for a closing one, None for other OSC."""
    if not sequence.startswith(OSC + "8;"):
        return None
    body = sequence[len(OSC) + 2 :]
    body = body.removesuffix(ST).removesuffix(BEL)
    _, _, url = body.partition(";")
    return url


@dataclass(slots=True)
class Pen:
    """Tracked terminal drawing state of a writer.

    Fed with every escape sequence that passes through a writer, the pen
    knows which SGR attributes and which OSC-8 hyperlink are active, so a
    writer can close them before inserting foreign content (indentation,
    padding) and re-open them afterwards.

    States:
        style: SGR sequences emitted since the last reset ("" = none)
        link: The OSC-8 opening sequence in effect ("" = none)

    """

    style: str = ""
    link: str = ""

    def feed(self, sequence: str) -> None:
        """Update state from one escape sequence."""
        if sequence.startswith(CSI) and sequence.endswith("m"):
            params = sequence[2:-1].split(";")
            if params[0] in ("", "0"):
                # reset, possibly followed by new attributes
                self.style = sequence if len(params) > 1 else ""
            else:
                self.style += sequence
            return
        url = _osc8_url(sequence)
        if url is not None:
            self.link = sequence if url else ""

    @property
    def active(self) -> bool:
        """True while a style or hyperlink is open."""
        return bool(self.style or self.link)

    def reset_sequence(self) -> str:
        """Sequences that close everything the pen has open."""
        return (RESET_STYLE if self.style else "") + (HYPERLINK_END if self.link else "")

    def restore_sequence(self) -> str:
        """Sequences that re-open the pen's style and hyperlink."""
        return self.style + self.link

    def clear(self) -> None:
        self.style = ""
        self.link = ""
