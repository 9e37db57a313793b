"""OSC-8 hyperlinks and terminal hyperlink detection.

An OSC-8 hyperlink wraps visible text in two escape sequences:

    ESC ] 8 ; ; URL ESC \\   TEXT   ESC ] 8 ; ; ESC \\

Terminals that understand it show TEXT as a clickable link; others are
expected to ignore the sequences, but some print them, which is why the
link formatters only emit them when supports_hyperlinks() says so.

Detection is a heuristic over environment variables, not a terminal
query: false positives and false negatives are possible.

Thread Safety:
    Pure functions; Hyperlink is immutable.

"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from tinta.ansi.sequences import HYPERLINK_END, HYPERLINK_MID, HYPERLINK_START, strip_ansi
from tinta.errors import HyperlinkError

HYPERLINK_PROGRAMS = frozenset({"iTerm.app", "vscode", "Windows Terminal", "WezTerm", "Hyper"})
HYPERLINK_TERMS = ("xterm-256color", "screen-256color", "tmux-256color", "alacritty", "xterm-kitty")
HYPERLINK_MARKER_VARS = ("KITTY_WINDOW_ID", "ALACRITTY_LOG", "ALACRITTY_SOCKET")


def format_hyperlink(text: str, url: str) -> str:
    """Wrap text in an OSC-8 hyperlink; an empty URL returns text unchanged.

    Example:
        >>> format_hyperlink("docs", "https://example.com")
        '\\x1b]8;;https://example.com\\x1b\\\\docs\\x1b]8;;\\x1b\\\\'
        >>> format_hyperlink("docs", "")
        'docs'
    """
    if not url:
        return text
    return f"{HYPERLINK_START}{url}{HYPERLINK_MID}{text}{HYPERLINK_END}"


def supports_hyperlinks(environ: Mapping[str, str] | None = None) -> bool:
    """Guess whether the terminal renders OSC-8 hyperlinks.

    Signals, in order:
        - ``TERM_PROGRAM`` exactly one of HYPERLINK_PROGRAMS
        - ``TERM`` containing one of HYPERLINK_TERMS
        - any of HYPERLINK_MARKER_VARS set (non-empty)

    Args:
        environ: Environment mapping (default: os.environ)

    Returns:
        True if any signal matches
    """
    env = os.environ if environ is None else environ
    if env.get("TERM_PROGRAM", "") in HYPERLINK_PROGRAMS:
        return True
    term = env.get("TERM", "")
    if term and any(known in term for known in HYPERLINK_TERMS):
        return True
    return any(env.get(name) for name in HYPERLINK_MARKER_VARS)


@dataclass(frozen=True, slots=True)
class Hyperlink:
    """A link ready for terminal output.

    Fields are trimmed and the text is stripped of escape sequences on
    construction.

    Example:
        >>> Hyperlink(" https://go.dev ", "\\x1b[1mGo\\x1b[0m").render_plain()
        'Go (https://go.dev)'
    """

    url: str
    text: str = ""
    title: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", self.url.strip())
        object.__setattr__(self, "text", strip_ansi(self.text.strip()))
        object.__setattr__(self, "title", self.title.strip())

    def render_osc8(self) -> str:
        return format_hyperlink(self.text, self.url)

    def render_plain(self) -> str:
        """``"text (url)"``, or whichever of the two is set."""
        if not self.text or self.text == self.url:
            return self.url
        if not self.url:
            return self.text
        return f"{self.text} ({self.url})"

    def render_smart(self, environ: Mapping[str, str] | None = None) -> str:
        """OSC-8 when the terminal supports it, plain text otherwise."""
        if supports_hyperlinks(environ):
            return self.render_osc8()
        return self.render_plain()

    def validate(self) -> None:
        """Raise HyperlinkError when there is neither a URL nor text."""
        if not self.url and not self.text:
            raise HyperlinkError("hyperlink must have either URL or text")
