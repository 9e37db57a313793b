"""Text processing utilities for tinta.

Example:
    >>> from tinta.nodes import Emphasis, Text
    >>> from tinta.utils.text import extract_text
    >>> extract_text((Text("a "), Emphasis((Text("b"),))))
    'a b'
"""

from __future__ import annotations

import html as html_module

from tinta.nodes import (
    CodeSpan,
    Emphasis,
    HtmlInline,
    Image,
    Inline,
    LineBreak,
    Link,
    SoftBreak,
    Strikethrough,
    Strong,
    Text,
)


def unescape_html(text: str) -> str:
    """Decode HTML entities (``&amp;`` -> ``&``).

    Args:
        text: Text that may contain character references

    Returns:
        Text with entities resolved
    """
    if "&" not in text:
        return text
    return html_module.unescape(text)


def extract_text(inlines: tuple[Inline, ...]) -> str:
    """Extract plain text from inline nodes.

    Used for link labels and table footer references, where styling is
    applied to the whole label at once.

    Args:
        inlines: Inline nodes to flatten

    Returns:
        Concatenated text content (entities unresolved)
    """
    parts: list[str] = []
    for inline in inlines:
        match inline:
            case Text():
                parts.append(inline.content)
            case Emphasis() | Strong() | Strikethrough() | Link():
                parts.append(extract_text(inline.children))
            case Image():
                parts.append(inline.alt)
            case CodeSpan():
                parts.append(inline.code)
            case LineBreak() | SoftBreak():
                parts.append(" ")
            case HtmlInline():
                pass
    return "".join(parts)
