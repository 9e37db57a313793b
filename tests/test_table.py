"""Tests for the table grid builder and the table footer link list."""

from tinta.ansi.table import TableBorders, TableBuilder, align_cell, is_header_row
from tinta.ansi.table_links import TableLink, collect_table_links, link_domain, table_link
from tinta.nodes import Image, Link, Table, TableCell, TableRow, Text
from tinta.styles.types import StyleTable

ASCII_BORDERS = TableBorders(column="|", row="-", center="+")


def cell(text: str) -> TableCell:
    return TableCell((Text(text),))


def link_cell(text: str, url: str, title: str | None = None) -> TableCell:
    return TableCell((Link(url, title, (Text(text),)),))


def table_of(*rows: tuple[TableCell, ...]) -> Table:
    head, *body = rows
    return Table(
        (TableRow(head, is_header=True),),
        tuple(TableRow(row) for row in body),
    )


class TestTableBorders:
    """Border characters from a table style."""

    def test_defaults(self) -> None:
        assert TableBorders.from_style(StyleTable()) == TableBorders()

    def test_from_style(self) -> None:
        rules = StyleTable(center_separator="+", column_separator="|", row_separator="-")
        assert TableBorders.from_style(rules) == ASCII_BORDERS


class TestTableBuilder:
    """Grid layout."""

    def test_ascii_grid(self) -> None:
        builder = TableBuilder(80, alignments=("left", None), borders=ASCII_BORDERS)
        builder.headers(["Name", "Value"])
        builder.row(["a", "1"])
        builder.row(["b", "2"])
        assert builder.build().split("\n") == [
            " Name | Value ",
            "------+-------",
            " a    | 1     ",
            " b    | 2     ",
        ]

    def test_right_and_center_alignment(self) -> None:
        builder = TableBuilder(80, alignments=("right", "center"), borders=ASCII_BORDERS)
        builder.headers(["Count", "Mid"])
        builder.row(["7", "x"])
        lines = builder.build().split("\n")
        assert lines[2] == "     7 |  x  "

    def test_columns_sized_to_widest_cell(self) -> None:
        builder = TableBuilder(80)
        builder.headers(["a", "b"])
        builder.row(["long cell", "x"])
        assert builder.column_widths() == [9, 1]

    def test_shrinks_widest_column_to_fit(self) -> None:
        builder = TableBuilder(20, borders=ASCII_BORDERS)
        builder.headers(["h", "k"])
        builder.row(["a" * 30, "b"])
        widths = builder.column_widths()
        # 2 columns: 4 cells of padding and one separator
        assert sum(widths) + 4 + 1 <= 20
        assert widths[1] == 1

    def test_wraps_over_wide_cells(self) -> None:
        builder = TableBuilder(16, borders=ASCII_BORDERS)
        builder.headers(["text", "n"])
        builder.row(["alpha beta gamma", "1"])
        lines = builder.build().split("\n")
        assert len(lines) > 3
        assert all(len(line) <= 16 for line in lines)

    def test_truncates_without_wrap(self) -> None:
        builder = TableBuilder(16, borders=ASCII_BORDERS, wrap=False)
        builder.headers(["text", "n"])
        builder.row(["alpha beta gamma", "1"])
        lines = builder.build().split("\n")
        assert len(lines) == 3
        assert "…" in lines[2]

    def test_ragged_rows_padded(self) -> None:
        builder = TableBuilder(80, borders=ASCII_BORDERS)
        builder.headers(["a", "b", "c"])
        builder.row(["1"])
        assert builder.column_count == 3
        assert builder.build().split("\n")[2] == " 1 |   |   "

    def test_empty_builder(self) -> None:
        assert TableBuilder(80).build() == ""

    def test_border_style_applied(self) -> None:
        builder = TableBuilder(80, borders=ASCII_BORDERS, border_style=lambda s: f"<{s}>")
        builder.headers(["a", "b"])
        assert builder.build().split("\n") == [" a <|> b ", "<---+--->"]


class TestAlignCell:
    """Cell padding."""

    def test_left_default(self) -> None:
        assert align_cell("ab", 4, None) == "ab  "

    def test_wide_glyphs(self) -> None:
        assert align_cell("日本", 6, "right") == "  日本"


class TestHeaderRows:
    """Header detection."""

    def test_flagged_row(self) -> None:
        row = TableRow((cell("a"),), is_header=True)
        assert is_header_row(Table((), (row,)), row)

    def test_row_in_head(self) -> None:
        row = TableRow((cell("a"),))
        assert is_header_row(Table((row,), ()), row)

    def test_body_row(self) -> None:
        head = TableRow((cell("a"),))
        row = TableRow((cell("b"),))
        assert not is_header_row(Table((head,), (row,)), row)


class TestTableLinks:
    """Link collection, deduplication and labels."""

    def test_identical_links_collected_once(self) -> None:
        table = table_of(
            (cell("Name"), cell("Docs")),
            (cell("a"), link_cell("Guide", "https://example.com/guide")),
            (cell("b"), link_cell("Guide", "https://example.com/guide")),
        )
        links = collect_table_links(table)
        assert len(links.links) == 1
        assert links.label(links.links[0]) == "Guide"

    def test_same_text_different_href_disambiguated(self) -> None:
        table = table_of(
            (cell("Name"), cell("Docs")),
            (cell("a"), link_cell("Docs", "https://a.example")),
            (cell("b"), link_cell("Docs", "https://b.example")),
        )
        links = collect_table_links(table)
        assert [links.label(link) for link in links.links] == ["Docs[1]", "Docs[2]"]

    def test_title_distinguishes_links(self) -> None:
        table = table_of(
            (cell("x"),),
            (link_cell("Go", "https://go.dev", "one"),),
            (link_cell("Go", "https://go.dev", "two"),),
        )
        assert len(collect_table_links(table).links) == 2

    def test_images_collected_separately(self) -> None:
        image = Image("https://example.com/logo.png", "logo")
        table = table_of((cell("x"),), (TableCell((image,)),))
        links = collect_table_links(table)
        assert links.links == ()
        assert links.images == (TableLink("https://example.com/logo.png", "", "logo", "image"),)

    def test_no_links_is_falsy(self) -> None:
        assert not collect_table_links(table_of((cell("a"),), (cell("b"),)))

    def test_autolink_uses_shorthand(self) -> None:
        link = Link("https://github.com/o/r/pull/7", None, (), autolink=True)
        assert table_link(link).content == "o/r#7"

    def test_autolink_falls_back_to_domain(self) -> None:
        link = Link("https://docs.example.com/page", None, (), autolink=True)
        assert table_link(link).content == "docs.example.com"

    def test_unknown_link_position(self) -> None:
        links = collect_table_links(table_of((cell("a"),)))
        assert links.position(TableLink("https://x", "", "x", "regular")) is None

    def test_link_domain_fallback(self) -> None:
        assert link_domain("not a url") == "link"
