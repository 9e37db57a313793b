"""Primitive text rendering: format template, escapes, case and color.

render_text() is the single place where a StylePrimitive turns into escape
codes. The steps always run in this order:

1. ``format`` template (jinja2), with the token bound to ``text``
2. Markdown backslash escapes resolved (``\\*`` -> ``*``)
3. case transform (upper, lower, title)
4. colors and attributes for the color profile, via rich's Style

Color values follow the style-file convention: a bare number is an 8-bit
palette index ("212"), anything else is handed to rich's color parser
("#ff79c6", "red", "rgb(10,20,30)").

Thread Safety:
    All functions are pure. The template and style caches are
    functools.lru_cache instances, which are safe to share across threads.

"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Literal

from jinja2 import Environment, StrictUndefined, Template, TemplateError
from rich.color import ColorParseError, ColorSystem
from rich.errors import StyleSyntaxError
from rich.style import Style

from tinta.errors import FormatTemplateError, StyleError
from tinta.styles.types import StylePrimitive

type ColorProfile = Literal["truecolor", "256", "16", "ascii"]

COLOR_PROFILES: dict[str, ColorSystem | None] = {
    "truecolor": ColorSystem.TRUECOLOR,
    "256": ColorSystem.EIGHT_BIT,
    "16": ColorSystem.STANDARD,
    "ascii": None,
}

_MARKDOWN_ESCAPE_RE = re.compile(r"\\([\\`*_{}\[\]<>()#+\-.!|])")
_LEGACY_FIELD_RE = re.compile(r"\{\{\s*\.(\w+)")

_environment = Environment(
    undefined=StrictUndefined,
    autoescape=False,  # nosec B701 - terminal output, not HTML
    keep_trailing_newline=True,
)


def color_system(profile: str) -> ColorSystem | None:
    """Map a profile name to rich's ColorSystem (None for ascii)."""
    try:
        return COLOR_PROFILES[profile]
    except KeyError:
        raise StyleError(
            f"unknown color profile {profile!r}, expected one of {sorted(COLOR_PROFILES)}"
        ) from None


@lru_cache(maxsize=256)
def _compile(template: str) -> Template:
    source = _LEGACY_FIELD_RE.sub(r"{{ \1", template)
    return _environment.from_string(source)


def apply_format(template: str, text: str) -> str:
    """Evaluate a format template with the token bound to ``text``.

    Args:
        template: Template source, e.g. ``"Image: {{ text }} →"``
        text: The token

    Returns:
        Rendered template

    Raises:
        FormatTemplateError: If the template fails to parse or evaluate
    """
    try:
        return _compile(template).render(text=text)
    except TemplateError as err:
        raise FormatTemplateError(template, str(err)) from err


def unescape_markdown(text: str) -> str:
    """Resolve backslash escapes of Markdown punctuation."""
    if "\\" not in text:
        return text
    return _MARKDOWN_ESCAPE_RE.sub(r"\1", text)


def _color(value: str | None) -> str | None:
    if not value:
        return None
    return f"color({value})" if value.isdigit() else value


@lru_cache(maxsize=1024)
def _rich_style(
    color: str | None,
    background: str | None,
    flags: tuple[bool | None, ...],
    system: ColorSystem,
) -> Style:
    # rich memoizes the SGR string per Style, so one Style per color system.
    bold, italic, underline, strike, reverse, blink, dim = flags
    try:
        return Style(
            color=_color(color),
            bgcolor=_color(background),
            bold=bold,
            italic=italic,
            underline=underline,
            strike=strike,
            reverse=reverse,
            blink=blink,
            dim=dim,
        )
    except (ColorParseError, StyleSyntaxError) as err:
        raise StyleError(f"invalid color: {err}") from err


def apply_style(rules: StylePrimitive, text: str, profile: str) -> str:
    """Wrap text in the SGR sequences for rules' colors and attributes.

    Only ``True`` flags and set colors emit codes; an unset style returns
    the text untouched.
    """
    system = color_system(profile)
    if not text or system is None or rules.is_plain():
        return text
    flags = (
        rules.bold or None,
        rules.italic or None,
        rules.underline or None,
        rules.crossed_out or None,
        rules.inverse or None,
        rules.blink or None,
        rules.faint or None,
    )
    style = _rich_style(rules.color, rules.background_color, flags, system)
    return style.render(text, color_system=system)


def style_text(rules: StylePrimitive, text: str, profile: str = "truecolor") -> str:
    """Apply case transform and colors to a literal (prefix, suffix, marker).

    Literals skip the format template and escape handling.
    """
    if not text:
        return ""
    if rules.upper:
        text = text.upper()
    if rules.lower:
        text = text.lower()
    if rules.title:
        text = text.title()
    return apply_style(rules, text, profile)


def render_text(rules: StylePrimitive, text: str, profile: str = "truecolor") -> str:
    """Render one token with a primitive style.

    Args:
        rules: Effective (already cascaded) style
        text: The token; an empty token renders to nothing unless a
            format template produces output for it
        profile: Color profile ("truecolor", "256", "16", "ascii")

    Returns:
        Styled token

    Raises:
        FormatTemplateError: If rules.format is broken
        StyleError: If a color cannot be parsed
    """
    if rules.format:
        text = apply_format(rules.format, text)
    if not text:
        return ""
    return style_text(rules, unescape_markdown(text), profile)
