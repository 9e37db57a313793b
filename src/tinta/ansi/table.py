"""Table rendering: a grid builder and the table, row and cell elements.

Cells render into the table accumulator on the render context while the
walk is inside the table; each finished row is committed to a TableBuilder
and the table finisher lays out the whole grid at once:

     Name  │ Status
    ───────┼────────
     tinta │ ok

There is no outer border. Columns are sized to their widest cell; when the
grid does not fit the available width the widest columns shrink one cell at
a time and cell text is wrapped (or truncated with ``…``).

Thread Safety:
    Builders and elements are created per table during one render() call.

"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tinta.ansi.base import ElementRenderer
from tinta.ansi.sequences import truncate, visible_width
from tinta.ansi.table_links import collect_table_links, render_table_links
from tinta.ansi.text import style_text
from tinta.ansi.wordwrap import word_wrap
from tinta.ansi.writers import TextSink
from tinta.nodes import Alignment, Table, TableRow
from tinta.stringbuilder import StringBuilder
from tinta.styles.types import StylePrimitive, StyleTable
from tinta.utils.logger import get_logger

if TYPE_CHECKING:
    from tinta.ansi.context import RenderContext

logger = get_logger(__name__)

DEFAULT_CELL_PADDING = 1


@dataclass(frozen=True, slots=True)
class TableBorders:
    """Border characters of a grid without outer border."""

    column: str = "│"
    row: str = "─"
    center: str = "┼"

    @classmethod
    def from_style(cls, rules: StyleTable) -> TableBorders:
        defaults = cls()
        return cls(
            column=defaults.column if rules.column_separator is None else rules.column_separator,
            row=defaults.row if rules.row_separator is None else rules.row_separator,
            center=defaults.center if rules.center_separator is None else rules.center_separator,
        )


def _identity(text: str) -> str:
    return text


def align_cell(text: str, width: int, align: Alignment) -> str:
    """Pad one cell line to ``width`` cells.

    Example:
        >>> align_cell("ab", 5, "right")
        '   ab'
        >>> align_cell("ab", 5, "center")
        ' ab  '
    """
    missing = max(width - visible_width(text), 0)
    match align:
        case "right":
            return " " * missing + text
        case "center":
            left = missing // 2
            return " " * left + text + " " * (missing - left)
        case _:
            return text + " " * missing


class TableBuilder:
    """Collects rendered cells and lays them out as a grid.

    Args:
        width: Available width for the whole grid
        alignments: Alignment per column index (missing entries are left)
        borders: Separator characters
        padding: Spaces on each side of every cell
        wrap: Wrap over-wide cells; truncate them with ``…`` otherwise
        border_style: Styles a separator string

    """

    __slots__ = (
        "_border_style",
        "_header",
        "_rows",
        "alignments",
        "borders",
        "padding",
        "width",
        "wrap",
    )

    def __init__(
        self,
        width: int,
        *,
        alignments: Sequence[Alignment] = (),
        borders: TableBorders | None = None,
        padding: int = DEFAULT_CELL_PADDING,
        wrap: bool = True,
        border_style: Callable[[str], str] = _identity,
    ) -> None:
        self.width = width
        self.alignments = tuple(alignments)
        self.borders = borders or TableBorders()
        self.padding = padding
        self.wrap = wrap
        self._border_style = border_style
        self._header: list[str] = []
        self._rows: list[list[str]] = []

    def headers(self, cells: Sequence[str]) -> None:
        self._header = list(cells)

    def row(self, cells: Sequence[str]) -> None:
        self._rows.append(list(cells))

    @property
    def column_count(self) -> int:
        return max((len(row) for row in (self._header, *self._rows)), default=0)

    def _align(self, column: int) -> Alignment:
        if column < len(self.alignments):
            return self.alignments[column]
        return None

    def column_widths(self) -> list[int]:
        """Width of every column after shrinking the grid to fit."""
        count = self.column_count
        widths = [1] * count
        for row in (self._header, *self._rows):
            for i, cell in enumerate(row):
                for line in cell.split("\n"):
                    widths[i] = max(widths[i], visible_width(line))
        overhead = count * 2 * self.padding + (count - 1) * visible_width(self.borders.column)
        while count and sum(widths) + overhead > self.width:
            widest = max(range(count), key=widths.__getitem__)
            if widths[widest] <= 1:
                break
            widths[widest] -= 1
        return widths

    def _fit(self, cell: str, width: int) -> list[str]:
        lines: list[str] = []
        for line in cell.split("\n"):
            if visible_width(line) <= width:
                lines.append(line)
            elif self.wrap:
                # words longer than the column are still cut
                lines.extend(truncate(part, width) for part in word_wrap(line, width).split("\n"))
            else:
                lines.append(truncate(line, width))
        return lines

    def _render_row(self, row: Sequence[str], widths: Sequence[int]) -> list[str]:
        cells = [
            self._fit(row[i] if i < len(row) else "", width) for i, width in enumerate(widths)
        ]
        height = max((len(lines) for lines in cells), default=0)
        pad = " " * self.padding
        separator = self._border_style(self.borders.column)
        out: list[str] = []
        for n in range(height):
            parts = [
                pad + align_cell(lines[n] if n < len(lines) else "", width, self._align(i)) + pad
                for i, (lines, width) in enumerate(zip(cells, widths, strict=True))
            ]
            out.append(separator.join(parts))
        return out

    def build(self) -> str:
        """The laid-out grid, without a trailing newline."""
        widths = self.column_widths()
        if not widths:
            return ""
        lines: list[str] = []
        if self._header:
            lines.extend(self._render_row(self._header, widths))
            rule = self.borders.center.join(
                self.borders.row * (width + 2 * self.padding) for width in widths
            )
            lines.append(self._border_style(rule))
        for row in self._rows:
            lines.extend(self._render_row(row, widths))
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class TableElement:
    """Opens the table accumulator; lays out the grid on finish."""

    table: Table

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        rules = ctx.styles.table
        profile = ctx.profile
        block = ctx.stack.current().style.primitive
        style = ctx.stack.with_style(rules)
        out.write(style_text(block, rules.block_prefix, profile))
        out.write(style_text(style, rules.prefix, profile))

        state = ctx.table
        state.reset()
        state.builder = TableBuilder(
            ctx.width,
            alignments=self.table.alignments,
            borders=TableBorders.from_style(rules),
            padding=DEFAULT_CELL_PADDING if rules.margin is None else rules.margin,
            wrap=ctx.options.table_wrap,
            border_style=lambda text: style_text(style, text, profile),
        )
        if not ctx.options.inline_table_links:
            state.links = collect_table_links(self.table)
            logger.debug(
                "table links: %d links, %d images",
                len(state.links.links),
                len(state.links.images),
            )

    def finish(self, out: TextSink, ctx: RenderContext) -> None:
        state = ctx.table
        try:
            if state.builder is None:
                return
            rules = ctx.styles.table
            out.write(state.builder.build())
            out.write(style_text(ctx.stack.with_style(rules), rules.suffix, ctx.profile))
            out.write(
                style_text(ctx.stack.current().style.primitive, rules.block_suffix, ctx.profile)
            )
            if state.links:
                render_table_links(out, ctx, state.links)
        finally:
            state.reset()


@dataclass(frozen=True, slots=True)
class TableRowElement:
    """Commits the pending cells of a row to the builder."""

    header: bool = False

    def finish(self, out: TextSink, ctx: RenderContext) -> None:
        state = ctx.table
        if state.builder is None:
            return
        if self.header:
            state.builder.headers(state.header)
            state.header = []
        else:
            state.builder.row(state.row)
            state.row = []


@dataclass(frozen=True, slots=True)
class TableCellElement:
    """Renders a cell's inlines in the table style into the pending row."""

    children: tuple[ElementRenderer, ...]
    header: bool = False

    def render(
        self, out: TextSink, ctx: RenderContext, override: StylePrimitive | None = None
    ) -> None:
        cell = StringBuilder()
        style = ctx.styles.table.primitive
        for child in self.children:
            child.render(cell, ctx, style)
        if self.header:
            ctx.table.header.append(cell.build())
        else:
            ctx.table.row.append(cell.build())


def is_header_row(table: Table, row: TableRow) -> bool:
    """Rows of the table head, or rows flagged as header rows."""
    return row.is_header or any(row is head for head in table.head)
