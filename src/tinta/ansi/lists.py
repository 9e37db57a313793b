"""Hanging-indent wrapping for rendered list blocks.

A finished list block is a sequence of lines such as ``"• some item text"``
(possibly styled). Each line that starts with a list marker is wrapped so
that continuation lines line up under the first character after the
marker:

    • Lorem ipsum dolor sit
      amet, consectetur

Markers are detected on the escape-stripped line after its leading spaces:
bullet glyphs, task checkboxes and ``N.`` enumerations.

Thread Safety:
    Pure functions.

"""

from __future__ import annotations

import re
from dataclasses import dataclass

from tinta.ansi.sequences import BEL, ESC, strip_ansi, visible_width
from tinta.ansi.wordwrap import BREAKPOINTS, word_wrap

BULLETS = ("• ", "◦ ", "▪ ", "▸ ", "‣ ", "⁃ ", "⁌ ", "⁍ ")
TASK_MARKERS = ("[✓] ", "[ ] ", "[x] ", "[X] ", "✓ ", "✗ ", "☑ ", "☐ ")
MIN_ITEM_WIDTH = 10

_NUMBERED_RE = re.compile(r"^(\d{1,3})\.\s")


@dataclass(frozen=True, slots=True)
class ListMarker:
    """A detected list marker.

    Attributes:
        width: Display width in cells
        length: Length in characters

    """

    width: int
    length: int


def detect_list_marker(plain_line: str) -> ListMarker | None:
    """Find the list marker at the start of an escape-free line.

    Example:
        >>> detect_list_marker("  • item")
        ListMarker(width=2, length=2)
        >>> detect_list_marker("12. item")
        ListMarker(width=4, length=4)
        >>> detect_list_marker("plain") is None
        True
    """
    trimmed = plain_line.lstrip(" ")
    if not trimmed:
        return None
    for marker in (*BULLETS, *TASK_MARKERS):
        if trimmed.startswith(marker):
            return ListMarker(visible_width(marker), len(marker))
    match = _NUMBERED_RE.match(trimmed)
    if match:
        found = match.group(0)
        return ListMarker(visible_width(found), len(found))
    return None


def _sequence_end(s: str, i: int) -> int:
    """Index just past the escape sequence starting at ``s[i]``."""
    n = len(s)
    i += 1
    if i >= n:
        return i
    kind = s[i]
    i += 1
    if kind == "[":
        while i < n and not 0x40 <= ord(s[i]) <= 0x7E:
            i += 1
        return min(i + 1, n)
    if kind == "]":
        while i < n:
            if s[i] == BEL:
                return i + 1
            if s[i] == ESC and i + 1 < n and s[i + 1] == "\\":
                return i + 2
            i += 1
        return i
    return i


def split_at_plain_offset(s: str, offset: int) -> tuple[str, str]:
    """Split styled text after ``offset`` visible characters.

    Escape sequences are never cut; sequences before the split point stay
    in the first half.

    Example:
        >>> split_at_plain_offset("\\x1b[1m• \\x1b[0mitem", 2)
        ('\\x1b[1m• \\x1b[0m', 'item')
    """
    if offset <= 0:
        return "", s
    if offset >= len(strip_ansi(s)):
        return s, ""
    i = 0
    seen = 0
    n = len(s)
    while i < n and seen < offset:
        if s[i] == ESC:
            i = _sequence_end(s, i)
        else:
            i += 1
            seen += 1
    # trailing sequences (e.g. a reset after the marker) belong to the first half
    while i < n and s[i] == ESC:
        i = _sequence_end(s, i)
    return s[:i], s[i:]


def _wrap_item(line: str, width: int, leading: int, marker: ListMarker) -> str:
    head, content = split_at_plain_offset(line, leading + marker.length)
    wrapped = word_wrap(content, width, BREAKPOINTS).split("\n")
    hanging = " " * (leading + marker.width)
    lines = [head + wrapped[0]]
    lines.extend(hanging + rest for rest in wrapped[1:] if rest.strip())
    return "\n".join(lines)


def wrap_list_content(content: str, width: int) -> str:
    """Wrap a rendered list block with hanging indents.

    Args:
        content: Rendered list lines
        width: Available width for the list block

    Returns:
        Wrapped list block
    """
    result: list[str] = []
    for line in content.split("\n"):
        if not line.strip():
            result.append(line)
            continue
        plain = strip_ansi(line)
        leading = len(plain) - len(plain.lstrip(" "))
        marker = detect_list_marker(plain)
        if marker is None:
            result.append(word_wrap(line, width, BREAKPOINTS))
            continue
        effective = width - leading - marker.width
        if effective < MIN_ITEM_WIDTH:
            effective = min(MIN_ITEM_WIDTH, max(width // 2, 5))
        result.append(_wrap_item(line, effective, leading, marker))
    return "\n".join(result)
