"""Typed document-tree nodes consumed by the tinta renderers.

All nodes are frozen dataclasses with slots for:
- Immutability: one tree can be rendered by several threads at once
- Memory efficiency: __slots__ reduces memory footprint
- Pattern matching: the renderers dispatch with match statements

Node Hierarchy:
Node (base)
├── Block (block-level elements)
│   ├── Document
│   ├── Heading
│   ├── Paragraph
│   ├── FencedCode
│   ├── IndentedCode
│   ├── BlockQuote
│   ├── List
│   ├── ListItem
│   ├── ThematicBreak
│   ├── HtmlBlock
│   ├── Table / TableRow / TableCell
│   ├── DefinitionList / DefinitionTerm / DefinitionDescription
│   └── FrontMatter
└── Inline (inline elements)
    ├── Text
    ├── Emphasis
    ├── Strong
    ├── Strikethrough
    ├── Link
    ├── Image
    ├── CodeSpan
    ├── LineBreak
    ├── SoftBreak
    └── HtmlInline

The tree is produced outside the renderer (see tinta.markdown for the
mistune front end); tests and callers may also build it by hand.

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from tinta.location import SourceLocation

type Alignment = Literal["left", "center", "right"] | None

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all document-tree nodes.

    ``location`` is keyword-only and optional so hand-built trees stay terse.

    """

    location: SourceLocation | None = field(default=None, kw_only=True)


# =============================================================================
# Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Plain text content.

    May still contain HTML entities and backslash escapes; the renderer
    resolves both.

    """

    content: str


@dataclass(frozen=True, slots=True)
class Emphasis(Node):
    """Emphasized (italic) text.

    Markdown: *text* or _text_

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Strong(Node):
    """Strong (bold) text.

    Markdown: **text** or __text__

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Strikethrough(Node):
    """Strikethrough text.

    Markdown: ~~text~~

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Hyperlink.

    Markdown: [text](url "title"), or <https://example.com> for an autolink.
    Autolinks to e-mail addresses keep the bare address as ``url``.

    """

    url: str
    title: str | None
    children: tuple[Inline, ...]
    autolink: bool = False


@dataclass(frozen=True, slots=True)
class Image(Node):
    """Image.

    Markdown: ![alt](url "title")

    """

    url: str
    alt: str
    title: str | None = None


@dataclass(frozen=True, slots=True)
class CodeSpan(Node):
    """Inline code.

    Markdown: `code`

    """

    code: str


@dataclass(frozen=True, slots=True)
class LineBreak(Node):
    """Hard line break.

    Markdown: two trailing spaces or a backslash before the newline.

    """


@dataclass(frozen=True, slots=True)
class SoftBreak(Node):
    """Soft line break (a plain newline inside a paragraph)."""


@dataclass(frozen=True, slots=True)
class HtmlInline(Node):
    """Inline raw HTML, rendered verbatim in the html_span style."""

    html: str


# PEP 695 type alias for inline elements
type Inline = (
    Text
    | Emphasis
    | Strong
    | Strikethrough
    | Link
    | Image
    | CodeSpan
    | LineBreak
    | SoftBreak
    | HtmlInline
)


# =============================================================================
# Block Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Heading(Node):
    """ATX or setext heading, level 1 to 6."""

    level: Literal[1, 2, 3, 4, 5, 6]
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    """Paragraph of inline content."""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class FencedCode(Node):
    """Fenced code block.

    ``info`` is the raw info string; its first word is the language.

    """

    code: str
    info: str | None = None

    @property
    def language(self) -> str:
        """Language identifier from the info string ("" when absent)."""
        if not self.info:
            return ""
        return self.info.split(maxsplit=1)[0] if self.info.strip() else ""


@dataclass(frozen=True, slots=True)
class IndentedCode(Node):
    """Indented code block (4+ spaces)."""

    code: str


@dataclass(frozen=True, slots=True)
class BlockQuote(Node):
    """Block quote.

    Markdown: > quoted text

    """

    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class ListItem(Node):
    """List item.

    ``checked`` is True/False for task-list items and None otherwise.

    """

    children: tuple[Block, ...]
    checked: bool | None = None


@dataclass(frozen=True, slots=True)
class List(Node):
    """Ordered or unordered list."""

    items: tuple[ListItem, ...]
    ordered: bool = False
    start: int = 1
    tight: bool = True


@dataclass(frozen=True, slots=True)
class ThematicBreak(Node):
    """Thematic break (horizontal rule).

    Markdown: --- or *** or ___

    """


@dataclass(frozen=True, slots=True)
class HtmlBlock(Node):
    """Raw HTML block, rendered verbatim in the html_block style."""

    html: str


@dataclass(frozen=True, slots=True)
class TableCell(Node):
    """Table cell (header or body)."""

    children: tuple[Inline, ...]
    is_header: bool = False
    align: Alignment = None


@dataclass(frozen=True, slots=True)
class TableRow(Node):
    """Table row."""

    cells: tuple[TableCell, ...]
    is_header: bool = False


@dataclass(frozen=True, slots=True)
class Table(Node):
    """Table (GFM-style).

    Markdown:
        | A | B |
        |---|---|
        | 1 | 2 |

    ``alignments`` holds one entry per column; None means unaligned.

    """

    head: tuple[TableRow, ...]
    body: tuple[TableRow, ...]
    alignments: tuple[Alignment, ...] = ()


@dataclass(frozen=True, slots=True)
class DefinitionTerm(Node):
    """Term of a definition list."""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class DefinitionDescription(Node):
    """Description of a definition list term."""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class DefinitionList(Node):
    """Definition list: alternating terms and descriptions."""

    children: tuple[DefinitionTerm | DefinitionDescription, ...]


@dataclass(frozen=True, slots=True)
class FrontMatter(Node):
    """Front matter metadata block (already parsed into a mapping)."""

    data: dict[str, Any]


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root document node.

    Contains all top-level blocks in the document.

    """

    children: tuple[Block, ...]


# PEP 695 type alias for block elements
type Block = (
    Heading
    | Paragraph
    | FencedCode
    | IndentedCode
    | BlockQuote
    | List
    | ListItem
    | ThematicBreak
    | HtmlBlock
    | Table
    | DefinitionList
    | FrontMatter
)
