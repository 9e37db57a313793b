"""Per-render mutable state.

A RenderContext is created fresh for every render() call and threaded
through every element. It owns the block stack and the table accumulator
and caches the answers to environment questions (color profile,
hyperlink support, highlighter) for the duration of the render.

Thread Safety:
    Each render() call creates its own RenderContext instance.
    No shared mutable state between concurrent renders.

"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tinta.ansi.blockstack import BlockStack
from tinta.ansi.hyperlink import supports_hyperlinks
from tinta.ansi.links import LinkFormatter, resolve_link_formatter
from tinta.ansi.writers import MarginWriter, TextSink
from tinta.highlighting import Highlighter, PygmentsHighlighter
from tinta.styles.types import StyleBlock, StyleConfig
from tinta.utils.logger import get_logger

if TYPE_CHECKING:
    from tinta.ansi.table import TableBuilder
    from tinta.ansi.table_links import TableLinks
    from tinta.config import RenderOptions

logger = get_logger(__name__)


@dataclass(slots=True)
class TableState:
    """Accumulator for the table being rendered.

    Attributes:
        builder: Grid builder (None outside a table)
        header: Rendered header cells of the pending header row
        row: Rendered cells of the pending body row
        links: Links and images collected from the table before any cell
            renders (None outside a table)

    """

    builder: TableBuilder | None = None
    header: list[str] = field(default_factory=list)
    row: list[str] = field(default_factory=list)
    links: TableLinks | None = None

    @property
    def active(self) -> bool:
        return self.builder is not None

    def reset(self) -> None:
        self.builder = None
        self.header = []
        self.row = []
        self.links = None


@dataclass(slots=True)
class RenderContext:
    """State of one render() call.

    Attributes:
        options: The renderer's options
        stack: Open block frames
        table: Table accumulator
        profile: Resolved color profile
        environ: Environment mapping used for terminal detection
        link_formatter: Resolved link formatter

    """

    options: RenderOptions
    stack: BlockStack = field(default_factory=BlockStack)
    table: TableState = field(default_factory=TableState)
    profile: str = field(init=False)
    environ: Mapping[str, str] = field(init=False)
    link_formatter: LinkFormatter = field(init=False)
    _hyperlinks: bool | None = field(default=None, init=False)
    _highlighter: Highlighter | None = field(default=None, init=False)
    _highlighter_resolved: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.profile = self.options.resolved_profile
        self.environ = os.environ if self.options.environ is None else self.options.environ
        self.link_formatter = resolve_link_formatter(self.options.link_formatter)

    @property
    def styles(self) -> StyleConfig:
        return self.options.styles

    @property
    def width(self) -> int:
        """Width left for content inside the open frames."""
        return self.stack.width(self.options.word_wrap)

    def supports_hyperlinks(self) -> bool:
        """OSC-8 support of the terminal, detected once per render."""
        if self._hyperlinks is None:
            self._hyperlinks = supports_hyperlinks(self.environ)
        return self._hyperlinks

    def highlighter(self) -> Highlighter | None:
        """Code block highlighter, or None when highlighting is off.

        Highlighting is off for the ascii profile and for code block styles
        without a theme or token color table.
        """
        if not self._highlighter_resolved:
            self._highlighter_resolved = True
            if self.profile != "ascii":
                self._highlighter = PygmentsHighlighter.for_code_block(
                    self.styles.code_block, self.options.code_formatter
                )
            if self._highlighter is None:
                logger.debug("code highlighting disabled (profile %s)", self.profile)
        return self._highlighter

    def margin_writer(self, out: TextSink, rules: StyleBlock, padding: bool = True) -> MarginWriter:
        """Margin writer for the current frame, indenting in the parent's style."""
        return MarginWriter(
            out,
            rules,
            parent=self.stack.parent().style.primitive,
            width=self.width,
            profile=self.profile,
            padding=padding,
        )
