"""StringBuilder: the accumulation buffer behind every block frame.

Appends to a list, joins on demand: O(n) total vs O(n²) for repeated
string concatenation. It also quacks like a text stream (``write``), so
element renderers and writer decorators can target a frame buffer or the
caller's output stream interchangeably.

Thread Safety:
StringBuilder instances are owned by a single block frame of a single
render() call. No shared mutable state.

"""

from __future__ import annotations


class StringBuilder:
    """Efficient string accumulator.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.write("Hello")
            5
            >>> sb.append(", ").append("world")
            StringBuilder('Hello, world')
            >>> sb.build()
            'Hello, world'

    Thread Safety:
        Instance is local to one block frame.
        No shared mutable state.

    """

    __slots__ = ("_parts",)

    def __init__(self, initial: str = "") -> None:
        """Initialize the builder, optionally with initial content."""
        self._parts: list[str] = [initial] if initial else []

    def append(self, s: str) -> StringBuilder:
        """Append a string to the builder.

        Args:
            s: String to append (empty strings are skipped)

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
        return self

    def write(self, s: str) -> int:
        """Stream-style append; returns the number of characters written."""
        if s:
            self._parts.append(s)
        return len(s)

    def build(self) -> str:
        """Join all parts into final string.

        The joined string replaces the parts, so repeated calls stay cheap.
        """
        if len(self._parts) > 1:
            self._parts[:] = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""

    def clear(self) -> StringBuilder:
        """Clear all accumulated parts.

        Returns:
            self for method chaining
        """
        self._parts.clear()
        return self

    def __str__(self) -> str:
        return self.build()

    def __repr__(self) -> str:
        return f"StringBuilder({self.build()!r})"

    def __bool__(self) -> bool:
        """Return True if any content has been appended."""
        return bool(self._parts)
