"""Markdown front end: mistune token stream to tinta document tree.

mistune is an optional dependency (``pip install 'tinta[markdown]'``). The
parser runs in AST mode (``renderer=None``) with the ``table``,
``strikethrough``, ``task_lists``, ``def_list`` and ``url`` plugins, and the
resulting token dicts are converted into frozen tinta nodes:

    >>> from tinta.markdown import parse_markdown
    >>> doc = parse_markdown("# Hello *world*")  # doctest: +SKIP
    >>> doc.children[0].level  # doctest: +SKIP
    1

A leading ``---`` block is read as YAML front matter with PyYAML (also part
of the extra) and becomes a FrontMatter node; a mapping passed as
``metadata`` is merged over it.

Thread Safety:
    Each parse_markdown() call creates its own mistune parser; converting
    functions are pure.

"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from tinta.nodes import (
    Alignment,
    Block,
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
from tinta.utils.logger import get_logger

logger = get_logger(__name__)

type Token = Mapping[str, Any]

PLUGINS = ("table", "strikethrough", "task_lists", "def_list", "url")

INSTALL_HINT = (
    "Markdown parsing requires 'mistune' and 'PyYAML'. "
    "Install with: pip install 'tinta[markdown]'"
)

_ALIGNMENTS: frozenset[str] = frozenset({"left", "center", "right"})

_FENCE = re.compile(r"-{3,}[ \t]*")


def parse_markdown(source: str, *, metadata: Mapping[str, Any] | None = None) -> Document:
    """Parse Markdown source into a Document.

    Args:
        source: Markdown text, optionally starting with a ``---`` YAML block
        metadata: Already-parsed front matter, merged over the YAML block

    Raises:
        ImportError: If mistune or PyYAML is not installed
    """
    try:
        import mistune
        import yaml
    except ImportError as err:
        raise ImportError(INSTALL_HINT) from err

    front, body = split_front_matter(source)
    data: dict[str, Any] | None = None
    if front is not None:
        try:
            loaded = yaml.safe_load(front)
        except yaml.YAMLError as err:
            logger.warning("front matter is not valid YAML: %s", err)
            loaded = None
        data = {}
        if isinstance(loaded, dict):
            data = {str(key): value for key, value in loaded.items()}
    if metadata:
        data = {**(data or {}), **metadata}

    markdown = mistune.create_markdown(renderer=None, plugins=list(PLUGINS))
    tokens, _state = markdown.parse(body)
    children = convert_blocks(tokens if isinstance(tokens, list) else [])
    if data is not None:
        children = (FrontMatter(data), *children)
    logger.debug("parsed %d top-level blocks", len(children))
    return Document(children)


def split_front_matter(source: str) -> tuple[str | None, str]:
    """Split a leading front matter block off the source.

    The block opens on the first line and closes at the next line of three
    or more dashes. Without a closing line the source is returned whole.

    Returns:
        (block text or None, remaining source)
    """
    lines = source.splitlines(keepends=True)
    if not lines or not _FENCE.fullmatch(lines[0].rstrip("\r\n")):
        return None, source
    for end in range(1, len(lines)):
        if _FENCE.fullmatch(lines[end].rstrip("\r\n")):
            return "".join(lines[1:end]), "".join(lines[end + 1 :])
    return None, source


# =============================================================================
# Blocks
# =============================================================================


def convert_blocks(tokens: Iterable[Token]) -> tuple[Block, ...]:
    """Convert a sequence of block tokens, dropping blank lines."""
    blocks: list[Block] = []
    for token in tokens:
        block = convert_block(token)
        if block is not None:
            blocks.append(block)
    return tuple(blocks)


def convert_block(token: Token) -> Block | None:
    """Convert one block token; None for tokens without a node."""
    attrs = _attrs(token)
    match token.get("type", ""):
        case "heading":
            level = attrs.get("level", 1)
            if not isinstance(level, int) or not 1 <= level <= 6:
                level = 1
            return Heading(level, convert_inlines(_children(token)))
        case "paragraph" | "block_text":
            return Paragraph(convert_inlines(_children(token)))
        case "block_code":
            code = token.get("raw", "")
            if token.get("style") == "indent":
                return IndentedCode(code)
            info = (attrs.get("info") or "").strip()
            return FencedCode(code, info or None)
        case "block_quote":
            return BlockQuote(convert_blocks(_children(token)))
        case "list":
            return _list(token, attrs)
        case "thematic_break":
            return ThematicBreak()
        case "block_html":
            return HtmlBlock(token.get("raw", ""))
        case "table":
            return _table(token)
        case "def_list":
            return _definition_list(token)
        case "blank_line":
            return None
        case other:
            logger.debug("skipping unsupported block token %r", other)
            return None


def _list(token: Token, attrs: Mapping[str, Any]) -> List:
    ordered = bool(attrs.get("ordered", False))
    start = attrs.get("start", 1)
    tight = token.get("tight", attrs.get("tight", True))
    items = tuple(
        _list_item(child)
        for child in _children(token)
        if child.get("type") in ("list_item", "task_list_item")
    )
    return List(items, ordered=ordered, start=start if isinstance(start, int) else 1, tight=tight)


def _list_item(token: Token) -> ListItem:
    checked: bool | None = None
    if token.get("type") == "task_list_item":
        checked = bool(_attrs(token).get("checked", False))
    return ListItem(convert_blocks(_children(token)), checked=checked)


def _alignment(value: Any) -> Alignment:
    if isinstance(value, str) and value in _ALIGNMENTS:
        return value  # type: ignore[return-value]
    return None


def _cell(token: Token, header: bool) -> TableCell:
    return TableCell(
        convert_inlines(_children(token)),
        is_header=header,
        align=_alignment(_attrs(token).get("align")),
    )


def _table(token: Token) -> Table:
    head: list[TableRow] = []
    body: list[TableRow] = []
    alignments: tuple[Alignment, ...] = ()
    for part in _children(token):
        match part.get("type"):
            case "table_head":
                # header cells sit directly under table_head
                cells = tuple(_cell(cell, True) for cell in _children(part))
                head.append(TableRow(cells, is_header=True))
                alignments = tuple(cell.align for cell in cells)
            case "table_body":
                for row in _children(part):
                    body.append(TableRow(tuple(_cell(cell, False) for cell in _children(row))))
    return Table(tuple(head), tuple(body), alignments)


def _flatten_inlines(tokens: Iterable[Token]) -> tuple[Inline, ...]:
    """Inline content of paragraph tokens, paragraphs separated by soft breaks."""
    inlines: list[Inline] = []
    for token in tokens:
        if token.get("type") in ("paragraph", "block_text"):
            if inlines:
                inlines.append(SoftBreak())
            inlines.extend(convert_inlines(_children(token)))
        elif token.get("type") != "blank_line":
            inlines.extend(convert_inlines([token]))
    return tuple(inlines)


def _definition_list(token: Token) -> DefinitionList:
    children: list[DefinitionTerm | DefinitionDescription] = []
    for child in _children(token):
        match child.get("type"):
            case "def_list_head":
                children.append(DefinitionTerm(convert_inlines(_children(child))))
            case "def_list_item":
                children.append(DefinitionDescription(_flatten_inlines(_children(child))))
    return DefinitionList(tuple(children))


# =============================================================================
# Inlines
# =============================================================================


def convert_inlines(tokens: Iterable[Token]) -> tuple[Inline, ...]:
    """Convert a sequence of inline tokens."""
    inlines: list[Inline] = []
    for token in tokens:
        inline = convert_inline(token)
        if inline is not None:
            inlines.append(inline)
    return tuple(inlines)


def convert_inline(token: Token) -> Inline | None:
    """Convert one inline token; None for unsupported tokens."""
    attrs = _attrs(token)
    match token.get("type", ""):
        case "text":
            return Text(token.get("raw", ""))
        case "emphasis":
            return Emphasis(convert_inlines(_children(token)))
        case "strong":
            return Strong(convert_inlines(_children(token)))
        case "strikethrough":
            return Strikethrough(convert_inlines(_children(token)))
        case "codespan":
            return CodeSpan(token.get("raw", ""))
        case "linebreak":
            return LineBreak()
        case "softbreak":
            return SoftBreak()
        case "link":
            url = attrs.get("url", "")
            children = _children(token)
            return Link(
                url,
                attrs.get("title"),
                convert_inlines(children),
                autolink=_is_autolink(url, children),
            )
        case "image":
            return Image(attrs.get("url", ""), plain_text(_children(token)), attrs.get("title"))
        case "inline_html":
            return HtmlInline(token.get("raw", ""))
        case other:
            logger.debug("skipping unsupported inline token %r", other)
            return None


def _is_autolink(url: str, children: list[Token]) -> bool:
    """A link whose only child is its own destination (``<url>`` or a bare URL)."""
    if len(children) != 1 or children[0].get("type") != "text":
        return False
    text = children[0].get("raw", "")
    return text == url or f"mailto:{text}" == url


def plain_text(tokens: Iterable[Token]) -> str:
    """Concatenated text of inline tokens (image alt text)."""
    parts: list[str] = []
    for token in tokens:
        if "raw" in token and token.get("type") in ("text", "codespan"):
            parts.append(token["raw"])
        elif token.get("type") in ("softbreak", "linebreak"):
            parts.append(" ")
        else:
            parts.append(plain_text(_children(token)))
    return "".join(parts)


def _attrs(token: Token) -> Mapping[str, Any]:
    attrs = token.get("attrs")
    return attrs if isinstance(attrs, Mapping) else {}


def _children(token: Token) -> list[Token]:
    children = token.get("children")
    return children if isinstance(children, list) else []
