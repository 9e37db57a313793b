"""Document-tree visitor with match-based dispatch.

Example — collect all link destinations:

    class LinkCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.urls: list[str] = []

        def visit_link(self, node: Link) -> None:
            self.urls.append(node.url)

    collector = LinkCollector()
    collector.visit(doc)

Thread Safety:
    Visitors are NOT shared across threads by default (they may accumulate
    mutable state). Create a new visitor per thread. iter_children is pure.

"""

from __future__ import annotations

from collections.abc import Iterator

from tinta.nodes import (
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
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
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


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct children of a node in document order."""
    match node:
        case (
            Document(children=children)
            | Heading(children=children)
            | Paragraph(children=children)
            | BlockQuote(children=children)
            | ListItem(children=children)
            | Emphasis(children=children)
            | Strong(children=children)
            | Strikethrough(children=children)
            | Link(children=children)
            | TableCell(children=children)
            | DefinitionList(children=children)
            | DefinitionTerm(children=children)
            | DefinitionDescription(children=children)
        ):
            yield from children
        case List(items=items):
            yield from items
        case Table(head=head, body=body):
            yield from head
            yield from body
        case TableRow(cells=cells):
            yield from cells
        case _:
            pass  # Leaf nodes: no children


class BaseVisitor[T]:
    """Base tree visitor with match-based dispatch.

    Subclass and override ``visit_*`` methods for node types you care about.
    Unhandled node types fall through to ``visit_default``. Children are
    walked automatically after the ``visit_*`` call.

    Type parameter ``T`` is the return type of visit methods (use ``None``
    for side-effect-only visitors).

    """

    def visit(self, node: Node) -> T:
        """Dispatch to the appropriate ``visit_*`` method.

        Walks children automatically after the visit method returns.

        """
        result = self._dispatch(node)
        for child in iter_children(node):
            self.visit(child)
        return result

    def visit_default(self, node: Node) -> T:
        """Called for node types without a specific ``visit_*`` method.

        Override this for catch-all behavior. Default returns None
        (suitable for ``BaseVisitor[None]``).

        """
        return None  # type: ignore[return-value]

    # -- Block visitors --------------------------------------------------------

    def visit_document(self, node: Document) -> T:
        return self.visit_default(node)

    def visit_heading(self, node: Heading) -> T:
        return self.visit_default(node)

    def visit_paragraph(self, node: Paragraph) -> T:
        return self.visit_default(node)

    def visit_fenced_code(self, node: FencedCode) -> T:
        return self.visit_default(node)

    def visit_indented_code(self, node: IndentedCode) -> T:
        return self.visit_default(node)

    def visit_block_quote(self, node: BlockQuote) -> T:
        return self.visit_default(node)

    def visit_list(self, node: List) -> T:
        return self.visit_default(node)

    def visit_list_item(self, node: ListItem) -> T:
        return self.visit_default(node)

    def visit_thematic_break(self, node: ThematicBreak) -> T:
        return self.visit_default(node)

    def visit_html_block(self, node: HtmlBlock) -> T:
        return self.visit_default(node)

    def visit_table(self, node: Table) -> T:
        return self.visit_default(node)

    def visit_table_row(self, node: TableRow) -> T:
        return self.visit_default(node)

    def visit_table_cell(self, node: TableCell) -> T:
        return self.visit_default(node)

    def visit_definition_list(self, node: DefinitionList) -> T:
        return self.visit_default(node)

    def visit_definition_term(self, node: DefinitionTerm) -> T:
        return self.visit_default(node)

    def visit_definition_description(self, node: DefinitionDescription) -> T:
        return self.visit_default(node)

    def visit_front_matter(self, node: FrontMatter) -> T:
        return self.visit_default(node)

    # -- Inline visitors -------------------------------------------------------

    def visit_text(self, node: Text) -> T:
        return self.visit_default(node)

    def visit_emphasis(self, node: Emphasis) -> T:
        return self.visit_default(node)

    def visit_strong(self, node: Strong) -> T:
        return self.visit_default(node)

    def visit_strikethrough(self, node: Strikethrough) -> T:
        return self.visit_default(node)

    def visit_link(self, node: Link) -> T:
        return self.visit_default(node)

    def visit_image(self, node: Image) -> T:
        return self.visit_default(node)

    def visit_code_span(self, node: CodeSpan) -> T:
        return self.visit_default(node)

    def visit_line_break(self, node: LineBreak) -> T:
        return self.visit_default(node)

    def visit_soft_break(self, node: SoftBreak) -> T:
        return self.visit_default(node)

    def visit_html_inline(self, node: HtmlInline) -> T:
        return self.visit_default(node)

    # -- Internal dispatch -----------------------------------------------------

    def _dispatch(self, node: Node) -> T:
        """Match-based dispatch to visit_* methods."""
        match node:
            case Document():
                return self.visit_document(node)
            case Heading():
                return self.visit_heading(node)
            case Paragraph():
                return self.visit_paragraph(node)
            case FencedCode():
                return self.visit_fenced_code(node)
            case IndentedCode():
                return self.visit_indented_code(node)
            case BlockQuote():
                return self.visit_block_quote(node)
            case List():
                return self.visit_list(node)
            case ListItem():
                return self.visit_list_item(node)
            case ThematicBreak():
                return self.visit_thematic_break(node)
            case HtmlBlock():
                return self.visit_html_block(node)
            case Table():
                return self.visit_table(node)
            case TableRow():
                return self.visit_table_row(node)
            case TableCell():
                return self.visit_table_cell(node)
            case DefinitionList():
                return self.visit_definition_list(node)
            case DefinitionTerm():
                return self.visit_definition_term(node)
            case DefinitionDescription():
                return self.visit_definition_description(node)
            case FrontMatter():
                return self.visit_front_matter(node)
            case Text():
                return self.visit_text(node)
            case Emphasis():
                return self.visit_emphasis(node)
            case Strong():
                return self.visit_strong(node)
            case Strikethrough():
                return self.visit_strikethrough(node)
            case Link():
                return self.visit_link(node)
            case Image():
                return self.visit_image(node)
            case CodeSpan():
                return self.visit_code_span(node)
            case LineBreak():
                return self.visit_line_break(node)
            case SoftBreak():
                return self.visit_soft_break(node)
            case HtmlInline():
                return self.visit_html_inline(node)
            case _:
                return self.visit_default(node)
