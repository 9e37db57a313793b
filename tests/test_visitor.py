"""Tests for the tree visitor and plain-text helpers."""

from tinta.location import SourceLocation
from tinta.nodes import (
    BlockQuote,
    CodeSpan,
    Document,
    Emphasis,
    FrontMatter,
    Heading,
    HtmlInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Paragraph,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from tinta.stringbuilder import StringBuilder
from tinta.utils.text import extract_text, unescape_html
from tinta.visitor import BaseVisitor, iter_children

LOC = SourceLocation(lineno=1)


def _doc(*blocks) -> Document:  # type: ignore[no-untyped-def]
    return Document(location=LOC, children=tuple(blocks))


def _para(*inlines) -> Paragraph:  # type: ignore[no-untyped-def]
    return Paragraph(location=LOC, children=tuple(inlines))


def _text(content: str) -> Text:
    return Text(location=LOC, content=content)


# =============================================================================
# Child iteration
# =============================================================================


class TestIterChildren:
    """Direct children in document order."""

    def test_leaf_has_no_children(self) -> None:
        assert list(iter_children(_text("x"))) == []
        assert list(iter_children(ThematicBreak())) == []

    def test_list_items(self) -> None:
        item = ListItem((_para(_text("a")),))
        assert list(iter_children(List((item,)))) == [item]

    def test_table_head_before_body(self) -> None:
        head = TableRow((TableCell((_text("h"),)),), is_header=True)
        body = TableRow((TableCell((_text("b"),)),))
        assert list(iter_children(Table((head,), (body,)))) == [head, body]

    def test_link_children(self) -> None:
        label = _text("go")
        assert list(iter_children(Link("https://go.dev", None, (label,)))) == [label]


# =============================================================================
# Visitor dispatch
# =============================================================================


class TextCollector(BaseVisitor[None]):
    def __init__(self) -> None:
        self.texts: list[str] = []

    def visit_text(self, node: Text) -> None:
        self.texts.append(node.content)


class KindCounter(BaseVisitor[None]):
    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    def visit_default(self, node) -> None:  # type: ignore[no-untyped-def]
        name = type(node).__name__
        self.counts[name] = self.counts.get(name, 0) + 1


class TestBaseVisitor:
    """Dispatch and automatic descent."""

    def test_collects_nested_text(self) -> None:
        doc = _doc(
            Heading(1, (_text("Title"),)),
            BlockQuote((_para(_text("a "), Emphasis((_text("b"),))),)),
        )
        collector = TextCollector()
        collector.visit(doc)
        assert collector.texts == ["Title", "a ", "b"]

    def test_default_catches_unhandled(self) -> None:
        counter = KindCounter()
        counter.visit(_doc(_para(_text("a"), Strong((_text("b"),))), ThematicBreak()))
        assert counter.counts == {
            "Document": 1,
            "Paragraph": 1,
            "Text": 2,
            "Strong": 1,
            "ThematicBreak": 1,
        }

    def test_front_matter_dispatch(self) -> None:
        seen: list[dict[str, object]] = []

        class FrontMatterVisitor(BaseVisitor[None]):
            def visit_front_matter(self, node: FrontMatter) -> None:
                seen.append(node.data)

        FrontMatterVisitor().visit(_doc(FrontMatter({"title": "x"})))
        assert seen == [{"title": "x"}]

    def test_return_value(self) -> None:
        class Level(BaseVisitor[int]):
            def visit_heading(self, node: Heading) -> int:
                return node.level

            def visit_default(self, node) -> int:  # type: ignore[no-untyped-def]
                return 0

        assert Level().visit(Heading(3, (_text("h"),))) == 3


# =============================================================================
# Text helpers
# =============================================================================


class TestExtractText:
    """Plain text of inline nodes."""

    def test_nested_styles(self) -> None:
        inlines = (_text("a "), Strong((Emphasis((_text("b"),)),)), CodeSpan(" c"))
        assert extract_text(inlines) == "a b c"

    def test_image_alt_and_breaks(self) -> None:
        inlines = (Image("x.png", "logo"), LineBreak(), _text("end"))
        assert extract_text(inlines) == "logo end"

    def test_html_dropped(self) -> None:
        assert extract_text((HtmlInline("<b>"), _text("x"))) == "x"


class TestUnescapeHtml:
    """Entity decoding."""

    def test_entities(self) -> None:
        assert unescape_html("a &amp; b &lt;c&gt;") == "a & b <c>"

    def test_plain_text_unchanged(self) -> None:
        text = "no entities"
        assert unescape_html(text) is text


class TestStringBuilder:
    """Frame buffers."""

    def test_write_and_build(self) -> None:
        sb = StringBuilder()
        assert not sb
        assert sb.write("ab") == 2
        sb.append("c").append("d")
        assert sb
        assert sb.build() == "abcd"
        assert str(sb) == "abcd"

    def test_empty_writes_ignored(self) -> None:
        sb = StringBuilder()
        sb.write("")
        assert not sb

    def test_clear(self) -> None:
        sb = StringBuilder("x")
        assert sb.clear().build() == ""
