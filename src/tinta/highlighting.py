"""Syntax highlighting for code blocks, via Pygments terminal formatters.

A style sheet selects highlighting through ``code_block.theme`` (a Pygments
style name such as "dracula", or the name under which a token color table
is registered) and/or ``code_block.chroma`` (a token color table). Token
color tables are turned into Pygments Style classes once and kept in the
process-wide ThemeRegistry.

Usage:
    from tinta.highlighting import PygmentsHighlighter

    highlighter = PygmentsHighlighter.for_code_block(styles.code_block)
    ansi = highlighter.highlight("print('hi')\\n", "python")

Thread Safety:
    PygmentsHighlighter instances are immutable. The ThemeRegistry
    serializes "check if registered, then build and register" behind a
    lock, so concurrent renders build each theme exactly once.

"""

from __future__ import annotations

import threading
import types
from collections.abc import Callable, Hashable
from typing import Protocol

from pygments import highlight as pygments_highlight
from pygments.formatter import Formatter
from pygments.formatters import (
    Terminal256Formatter,
    TerminalFormatter,
    TerminalTrueColorFormatter,
)
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.style import Style as PygmentsStyle
from pygments.styles import get_style_by_name
from pygments.token import (
    Comment,
    Error,
    Generic,
    Keyword,
    Literal,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
    Token,
    _TokenType,
)
from pygments.util import ClassNotFound
from rich.color import Color, ColorParseError

from tinta.errors import StyleError
from tinta.styles.types import Chroma, StyleCodeBlock, StylePrimitive
from tinta.utils.logger import get_logger

logger = get_logger(__name__)

type ThemeBuilder = Callable[[], type[PygmentsStyle]]

# Token color table field -> Pygments token type
CHROMA_TOKENS: dict[str, _TokenType] = {
    "text": Text,
    "error": Error,
    "comment": Comment,
    "comment_preproc": Comment.Preproc,
    "keyword": Keyword,
    "keyword_reserved": Keyword.Reserved,
    "keyword_namespace": Keyword.Namespace,
    "keyword_type": Keyword.Type,
    "operator": Operator,
    "punctuation": Punctuation,
    "name": Name,
    "name_builtin": Name.Builtin,
    "name_tag": Name.Tag,
    "name_attribute": Name.Attribute,
    "name_class": Name.Class,
    "name_constant": Name.Constant,
    "name_decorator": Name.Decorator,
    "name_exception": Name.Exception,
    "name_function": Name.Function,
    "name_other": Name.Other,
    "literal": Literal,
    "literal_number": Number,
    "literal_date": Literal.Date,
    "literal_string": String,
    "literal_string_escape": String.Escape,
    "generic_deleted": Generic.Deleted,
    "generic_emph": Generic.Emph,
    "generic_inserted": Generic.Inserted,
    "generic_strong": Generic.Strong,
    "generic_subheading": Generic.Subheading,
    "background": Token,
}

FORMATTERS: dict[str, type[Formatter]] = {
    "terminal256": Terminal256Formatter,
    "terminal16m": TerminalTrueColorFormatter,
    "terminal": TerminalFormatter,
}


class ThemeRegistry:
    """Process-wide registry of Pygments styles built from token color tables.

    The only mutating operation is register_if_absent(); the check and the
    registration happen under one lock.

    Thread Safety:
        All access is serialized by a threading.Lock.

    """

    __slots__ = ("_lock", "_themes")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._themes: dict[Hashable, type[PygmentsStyle]] = {}

    def register_if_absent(self, key: Hashable, builder: ThemeBuilder) -> type[PygmentsStyle]:
        """Return the theme registered under ``key``, building it on first use.

        Args:
            key: Theme name, or any hashable value identifying the theme
            builder: Called at most once per key, under the lock

        Returns:
            The registered Pygments style class
        """
        with self._lock:
            theme = self._themes.get(key)
            if theme is None:
                theme = builder()
                self._themes[key] = theme
                logger.debug("registered highlighting theme %s", theme.name)
            return theme


THEME_REGISTRY = ThemeRegistry()


def pygments_color(value: str) -> str:
    """Convert a style-file color to the ``#rrggbb`` form Pygments expects.

    Example:
        >>> pygments_color("#FF79C6")
        '#ff79c6'
        >>> pygments_color("196")
        '#ff0000'
    """
    spec = f"color({value})" if value.isdigit() else value
    try:
        return Color.parse(spec).get_truecolor().hex
    except ColorParseError as err:
        raise StyleError(f"invalid color {value!r}: {err}") from err


def pygments_rule(style: StylePrimitive) -> str:
    """Pygments style rule (``"bold #ff0000 bg:#000000"``) for a primitive."""
    parts: list[str] = []
    if style.color:
        parts.append(pygments_color(style.color))
    if style.background_color:
        parts.append("bg:" + pygments_color(style.background_color))
    if style.italic:
        parts.append("italic")
    if style.bold:
        parts.append("bold")
    if style.underline:
        parts.append("underline")
    return " ".join(parts)


def build_theme(name: str, chroma: Chroma) -> type[PygmentsStyle]:
    """Build a Pygments style class from a token color table."""
    rules: dict[_TokenType, str] = {}
    for field_name, token in CHROMA_TOKENS.items():
        rule = pygments_rule(getattr(chroma, field_name))
        if rule:
            rules[token] = rule
    background = chroma.background.background_color
    attrs = {
        "name": name,
        "styles": rules,
        "background_color": pygments_color(background) if background else "#000000",
    }
    class_name = "TintaStyle_" + "".join(c if c.isalnum() else "_" for c in name)
    return types.new_class(class_name, (PygmentsStyle,), exec_body=lambda ns: ns.update(attrs))


def resolve_theme(code_block: StyleCodeBlock) -> type[PygmentsStyle] | None:
    """Pygments style for a code block style, or None if highlighting is off.

    A token color table wins over the theme name; a theme name alone must
    name a Pygments style.

    Raises:
        StyleError: If the theme name is not a known Pygments style
    """
    chroma = code_block.chroma
    if chroma is not None:
        name = code_block.theme or "chroma"
        return THEME_REGISTRY.register_if_absent(
            (name, chroma), lambda: build_theme(name, chroma)
        )
    if not code_block.theme:
        return None
    try:
        return get_style_by_name(code_block.theme)
    except ClassNotFound as err:
        raise StyleError(f"unknown highlighting theme {code_block.theme!r}") from err


class Highlighter(Protocol):
    """Protocol for terminal syntax highlighters.

    Thread Safety:
        Implementations must be thread-safe. highlight() may be called
        concurrently from multiple render threads.
    """

    def highlight(self, code: str, language: str) -> str:
        """Highlight code, returning text with ANSI escapes.

        Contract:
            - MUST NOT raise for unknown languages (fall back to plain text)
            - MUST preserve the code's line structure
        """
        ...

    def supports_language(self, language: str) -> bool:
        """True if a lexer for the language is available."""
        ...


def _lexer(language: str) -> Lexer:
    if not language:
        return TextLexer()
    try:
        return get_lexer_by_name(language)
    except ClassNotFound:
        logger.warning("no lexer for language %r, rendering as plain text", language)
        return TextLexer()


class PygmentsHighlighter:
    """Highlighter backed by a Pygments terminal formatter.

    Args:
        style: Pygments style class
        formatter: "terminal256", "terminal16m" or "terminal"

    """

    __slots__ = ("_formatter",)

    def __init__(self, style: type[PygmentsStyle], formatter: str = "terminal256") -> None:
        try:
            formatter_cls = FORMATTERS[formatter]
        except KeyError:
            raise StyleError(f"unknown code formatter {formatter!r}") from None
        if formatter_cls is TerminalFormatter:
            # the 16-color formatter has a fixed palette, not a style
            self._formatter: Formatter = TerminalFormatter()
        else:
            self._formatter = formatter_cls(style=style)

    @classmethod
    def for_code_block(
        cls, code_block: StyleCodeBlock, formatter: str = "terminal256"
    ) -> PygmentsHighlighter | None:
        """Highlighter for a code block style (None when highlighting is off)."""
        style = resolve_theme(code_block)
        if style is None:
            return None
        return cls(style, formatter)

    def highlight(self, code: str, language: str) -> str:
        return pygments_highlight(code, _lexer(language), self._formatter)

    def supports_language(self, language: str) -> bool:
        try:
            get_lexer_by_name(language)
        except ClassNotFound:
            return False
        return True


__all__ = [
    "CHROMA_TOKENS",
    "FORMATTERS",
    "THEME_REGISTRY",
    "Highlighter",
    "PygmentsHighlighter",
    "ThemeRegistry",
    "build_theme",
    "pygments_color",
    "resolve_theme",
]
