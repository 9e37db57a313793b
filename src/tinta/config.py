"""Render options for tinta.

RenderOptions is an immutable record created once per renderer and read by
every element during a render. Per-render mutable state (block stack,
table accumulators) lives on the RenderContext instead, see
tinta.ansi.context.

Color profile detection (``color_profile="auto"``) looks at the
environment mapping, never at a global:

- ``NO_COLOR`` set: ascii
- ``COLORTERM`` is ``truecolor`` or ``24bit``: truecolor
- ``TERM`` ends in ``256color``: 256
- ``TERM`` is ``dumb`` or missing: ascii
- otherwise: 16

Thread Safety:
    RenderOptions is frozen; share one instance across any number of renders.

"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tinta.errors import StyleError
from tinta.styles.presets import NOTTY_STYLE_CONFIG, get_style
from tinta.styles.types import StyleConfig

if TYPE_CHECKING:
    from tinta.ansi.context import RenderContext
    from tinta.ansi.links import LinkData, LinkFormatter

COLOR_PROFILE_NAMES = ("truecolor", "256", "16", "ascii")
CODE_FORMATTERS = ("terminal256", "terminal16m", "terminal")

DEFAULT_WORD_WRAP = 80


def detect_color_profile(environ: Mapping[str, str] | None = None) -> str:
    """Guess the terminal's color profile from environment signals.

    Args:
        environ: Environment mapping (default: os.environ)

    Returns:
        One of "truecolor", "256", "16", "ascii"

    Example:
        >>> detect_color_profile({"COLORTERM": "truecolor"})
        'truecolor'
        >>> detect_color_profile({"NO_COLOR": "1", "COLORTERM": "truecolor"})
        'ascii'
    """
    env = os.environ if environ is None else environ
    if "NO_COLOR" in env:
        return "ascii"
    if env.get("COLORTERM", "").lower() in ("truecolor", "24bit"):
        return "truecolor"
    term = env.get("TERM", "")
    if term.endswith("256color"):
        return "256"
    if not term or term == "dumb":
        return "ascii"
    return "16"


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Immutable render configuration.

    Attributes:
        word_wrap: Target line width in cells
        color_profile: "truecolor", "256", "16", "ascii" or "auto"
        styles: Style sheet
        base_url: Base for resolving relative link and image URLs
        table_wrap: Wrap over-wide table cells (truncate with … otherwise)
        inline_table_links: Render links inside table cells instead of a
            footer link list
        preserve_newlines: Keep source line breaks inside paragraphs
        code_formatter: Pygments terminal formatter for code blocks
        link_formatter: LinkFormatter object or callable
            ``(LinkData, RenderContext) -> str``; None selects the default
        show_front_matter: Render front matter as a key/value block
        environ: Mapping consulted for terminal detection (None: os.environ)

    """

    word_wrap: int = DEFAULT_WORD_WRAP
    color_profile: str = "truecolor"
    styles: StyleConfig = field(default_factory=lambda: NOTTY_STYLE_CONFIG)
    base_url: str = ""
    table_wrap: bool = True
    inline_table_links: bool = False
    preserve_newlines: bool = False
    code_formatter: str = "terminal256"
    link_formatter: LinkFormatter | Callable[[LinkData, RenderContext], str] | None = None
    show_front_matter: bool = False
    environ: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        if self.word_wrap < 0:
            raise StyleError(f"word_wrap must be non-negative, got {self.word_wrap}")
        if self.color_profile != "auto" and self.color_profile not in COLOR_PROFILE_NAMES:
            raise StyleError(
                f"unknown color profile {self.color_profile!r}, "
                f"expected one of {', '.join(COLOR_PROFILE_NAMES)} or 'auto'"
            )
        if self.code_formatter not in CODE_FORMATTERS:
            raise StyleError(
                f"unknown code formatter {self.code_formatter!r}, "
                f"expected one of {', '.join(CODE_FORMATTERS)}"
            )

    @property
    def resolved_profile(self) -> str:
        """The concrete color profile ("auto" resolved against environ)."""
        if self.color_profile == "auto":
            return detect_color_profile(self.environ)
        return self.color_profile

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> RenderOptions:
        """Create RenderOptions from dictionary.

        Only includes keys that are valid RenderOptions fields; unknown keys
        are silently ignored. ``styles`` may be a StyleConfig, a style name
        or path, or a nested style mapping.

        Args:
            config_dict: Dictionary with option values

        Returns:
            New RenderOptions instance

        Example:
            >>> options = RenderOptions.from_dict({"word_wrap": 60, "colour": "x"})
            >>> options.word_wrap
            60

        """
        valid_fields = set(cls.__dataclass_fields__)
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        styles = filtered.get("styles")
        if isinstance(styles, str):
            filtered["styles"] = get_style(styles)
        elif isinstance(styles, dict):
            filtered["styles"] = StyleConfig.from_dict(styles)
        return cls(**filtered)


DEFAULT_OPTIONS = RenderOptions()

__all__ = [
    "CODE_FORMATTERS",
    "COLOR_PROFILE_NAMES",
    "DEFAULT_OPTIONS",
    "RenderOptions",
    "detect_color_profile",
]
