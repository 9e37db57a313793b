"""Exception classes for tinta.

Provides standardized exceptions for error handling throughout tinta.
"""

from __future__ import annotations

from tinta.location import SourceLocation


class TintaError(Exception):
    """Base exception for all tinta errors.

    Subclass this for specific error categories.
    """

    pass


class RenderError(TintaError):
    """Error while rendering a document tree to terminal output.

    Carries the source location of the offending node when known.
    """

    def __init__(self, message: str, location: SourceLocation | None = None) -> None:
        """Initialize render error with optional location.

        Args:
            message: Error description
            location: Source location of the node being rendered (optional)
        """
        self.message = message
        self.location = location
        prefix = f"{location} " if location is not None else ""
        super().__init__(f"{prefix}{message}")


class FormatTemplateError(RenderError):
    """A style's ``format`` template failed to parse or evaluate.

    Formatting is never silently skipped: a broken template aborts the render.
    """

    def __init__(self, template: str, reason: str) -> None:
        """Initialize template error.

        Args:
            template: The offending format string
            reason: Parser or evaluation error message
        """
        self.template = template
        self.reason = reason
        super().__init__(f"error parsing template {template!r}: {reason}")


class LinkFormatterError(RenderError):
    """A link formatter raised while formatting a link.

    The original exception is available as ``__cause__``.
    """

    def __init__(
        self,
        url: str,
        reason: str,
        location: SourceLocation | None = None,
    ) -> None:
        """Initialize link formatter error.

        Args:
            url: Destination of the link that failed
            reason: Message of the underlying exception
            location: Source location of the link node (optional)
        """
        self.url = url
        self.reason = reason
        super().__init__(f"link formatter error for {url!r}: {reason}", location)


class StyleError(TintaError):
    """Invalid style configuration.

    Raised for unknown style presets, unreadable style files, negative
    indents or margins, and colors that cannot be parsed.
    """

    pass


class HyperlinkError(TintaError):
    """Invalid hyperlink token (neither URL nor text)."""

    pass
