"""Source location tracking for error messages.

Nodes built by a parser front end may carry a SourceLocation so that
render-time failures (a broken link formatter, a bad template) can point
back at the Markdown that produced them. Hand-built trees can omit it.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Position of a node in its source document.

    All positions are 1-indexed (lineno and col_offset start at 1).

    Attributes:
        lineno: Starting line number (1-indexed)
        col_offset: Starting column offset (1-indexed)
        end_lineno: Ending line number (optional)
        source_file: Source file path (optional)

    Examples:
            >>> loc = SourceLocation(3, 1, source_file="README.md")
            >>> str(loc)
            'README.md:3:1'

    """

    lineno: int
    col_offset: int = 1
    end_lineno: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "file.md:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"
