"""High-level renderer facade.

TermRenderer bundles RenderOptions with an AnsiRenderer. Every ``with_*``
method returns a new renderer, so one configured instance can be shared
freely and specialized per call site:

    >>> from tinta import TermRenderer
    >>> renderer = TermRenderer(style="ascii").with_word_wrap(60).with_url_only_links()
    >>> renderer.options.word_wrap
    60

Thread Safety:
    TermRenderer is immutable. render() creates fresh per-render state, so
    a single instance can render from many threads concurrently.

"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from tinta.ansi.links import (
    HYPERLINK_FORMATTER,
    SMART_HYPERLINK_FORMATTER,
    TEXT_ONLY_FORMATTER,
    URL_ONLY_FORMATTER,
    resolve_link_formatter,
)
from tinta.ansi.renderer import AnsiRenderer
from tinta.ansi.writers import TextSink
from tinta.config import RenderOptions
from tinta.nodes import Document
from tinta.styles.presets import AUTO_STYLE, get_style
from tinta.styles.types import Align, StyleConfig
from tinta.utils.logger import get_logger

if TYPE_CHECKING:
    from tinta.ansi.context import RenderContext
    from tinta.ansi.links import LinkData, LinkFormatter

logger = get_logger(__name__)

STYLE_ENV_VAR = "TINTA_STYLE"


def style_from_environment(environ: Mapping[str, str] | None = None) -> str:
    """Style name or path from ``TINTA_STYLE`` ("auto" when unset or empty).

    Example:
        >>> style_from_environment({"TINTA_STYLE": "dracula"})
        'dracula'
        >>> style_from_environment({})
        'auto'
    """
    env = os.environ if environ is None else environ
    return env.get(STYLE_ENV_VAR) or AUTO_STYLE


def _resolve_styles(style: str | StyleConfig) -> StyleConfig:
    if isinstance(style, StyleConfig):
        return style
    return get_style(style)


class TermRenderer:
    """Render document trees (or Markdown source) for a terminal.

    Args:
        style: Style name, style file path, or a StyleConfig
        options: Base options; ``style`` and keyword overrides apply on top
        **overrides: Any RenderOptions field

    Usage:
        >>> from tinta.nodes import Document, Heading, Text
        >>> renderer = TermRenderer(style="ascii", word_wrap=40)
        >>> "# Title" in renderer.render(Document((Heading(1, (Text("Title"),)),)))
        True

    """

    __slots__ = ("_options", "_renderer")

    def __init__(
        self,
        style: str | StyleConfig | None = None,
        *,
        options: RenderOptions | None = None,
        **overrides: Any,
    ) -> None:
        base = options or RenderOptions()
        if style is not None:
            overrides["styles"] = _resolve_styles(style)
        if "link_formatter" in overrides:
            # fail at configuration time, not on the first link
            resolve_link_formatter(overrides["link_formatter"])
        self._options = replace(base, **overrides) if overrides else base
        self._renderer = AnsiRenderer(self._options)

    @property
    def options(self) -> RenderOptions:
        return self._options

    def _with(self, **changes: Any) -> TermRenderer:
        return TermRenderer(options=self._options, **changes)

    def _with_styles(self, styles: StyleConfig) -> TermRenderer:
        return self._with(styles=styles)

    # -- Options ---------------------------------------------------------------

    def with_style(self, style: str | StyleConfig) -> TermRenderer:
        """Use a style preset name, a style file path or a StyleConfig."""
        return self._with(styles=_resolve_styles(style))

    def with_environment_style(self, environ: Mapping[str, str] | None = None) -> TermRenderer:
        """Use the style named by ``TINTA_STYLE``."""
        return self.with_style(style_from_environment(environ))

    def with_word_wrap(self, width: int) -> TermRenderer:
        return self._with(word_wrap=width)

    def with_color_profile(self, profile: str) -> TermRenderer:
        return self._with(color_profile=profile)

    def with_base_url(self, base_url: str) -> TermRenderer:
        return self._with(base_url=base_url)

    def with_table_wrap(self, wrap: bool) -> TermRenderer:
        return self._with(table_wrap=wrap)

    def with_inline_table_links(self, inline: bool = True) -> TermRenderer:
        return self._with(inline_table_links=inline)

    def with_preserved_newlines(self) -> TermRenderer:
        return self._with(preserve_newlines=True)

    def with_code_formatter(self, formatter: str) -> TermRenderer:
        """Pygments terminal formatter: terminal256, terminal16m or terminal."""
        return self._with(code_formatter=formatter)

    def with_front_matter(self, show: bool = True) -> TermRenderer:
        return self._with(show_front_matter=show)

    # -- Layout ----------------------------------------------------------------

    def with_margins(self, left: int, right: int) -> TermRenderer:
        """Extra left and right margins around the whole document."""
        styles = self._options.styles
        document = replace(styles.document, margin_left=left, margin_right=right)
        return self._with_styles(replace(styles, document=document))

    def _with_alignment(self, align: Align, left: int, right: int) -> TermRenderer:
        renderer = self.with_margins(left, right) if left or right else self
        styles = renderer.options.styles
        aligned = replace(
            styles,
            paragraph=replace(styles.paragraph, align=align),
            heading=replace(styles.heading, align=align),
        )
        return renderer._with_styles(aligned)

    def with_center_alignment(self, left: int = 0, right: int = 0) -> TermRenderer:
        """Center paragraphs and headings (wrapped at 70% of the width)."""
        return self._with_alignment("center", left, right)

    def with_justified_alignment(self, left: int = 0, right: int = 0) -> TermRenderer:
        """Justify paragraphs and headings, with optional margins."""
        return self._with_alignment("justify", left, right)

    # -- Links -----------------------------------------------------------------

    def with_link_formatter(
        self, formatter: LinkFormatter | Callable[[LinkData, RenderContext], str]
    ) -> TermRenderer:
        """Use a LinkFormatter object or a ``(LinkData, RenderContext) -> str`` callable."""
        return self._with(link_formatter=formatter)

    def with_text_only_links(self) -> TermRenderer:
        return self.with_link_formatter(TEXT_ONLY_FORMATTER)

    def with_url_only_links(self) -> TermRenderer:
        return self.with_link_formatter(URL_ONLY_FORMATTER)

    def with_hyperlinks(self) -> TermRenderer:
        return self.with_link_formatter(HYPERLINK_FORMATTER)

    def with_smart_hyperlinks(self) -> TermRenderer:
        return self.with_link_formatter(SMART_HYPERLINK_FORMATTER)

    # -- Rendering -------------------------------------------------------------

    def render(self, document: Document) -> str:
        """Render a document tree to an ANSI string."""
        return self._renderer.render(document)

    def render_to(self, document: Document, stream: TextSink) -> None:
        """Render into any object with ``write(str)``; write errors propagate."""
        self._renderer.render_to(document, stream)

    def render_markdown(self, source: str) -> str:
        """Parse Markdown with mistune and render it.

        Raises:
            ImportError: If the ``markdown`` extra (mistune) is not installed
        """
        from tinta.markdown import parse_markdown

        return self.render(parse_markdown(source))

    def __call__(self, source: str) -> str:
        return self.render_markdown(source)

    def __repr__(self) -> str:
        options = self._options
        return (
            f"TermRenderer(word_wrap={options.word_wrap}, "
            f"color_profile={options.color_profile!r})"
        )
