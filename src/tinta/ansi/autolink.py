"""Readable shorthand for GitHub URLs.

Example:
    >>> detect_autolink("https://github.com/owner/repo/pull/123#discussion_r456")
    'owner/repo#123 (comment)'
    >>> detect_autolink("https://example.com") is None
    True
"""

from __future__ import annotations

import re
from collections.abc import Callable

_REPO = r"^https?://github\.com/([A-Za-z0-9_-]+)/([A-Za-z0-9_-]+)"
_THREAD = r"/(?:issues?|pulls?|discussions?)/([0-9]+)"

_PATTERNS: tuple[tuple[re.Pattern[str], Callable[[re.Match[str]], str]], ...] = (
    (
        re.compile(_REPO + _THREAD + r"$"),
        lambda m: f"{m[1]}/{m[2]}#{m[3]}",
    ),
    (
        re.compile(_REPO + _THREAD + r"#issuecomment-[0-9]+$"),
        lambda m: f"{m[1]}/{m[2]}#{m[3]} (comment)",
    ),
    (
        re.compile(_REPO + r"/pulls?/([0-9]+)#discussion_r[0-9]+$"),
        lambda m: f"{m[1]}/{m[2]}#{m[3]} (comment)",
    ),
    (
        re.compile(_REPO + r"/pulls?/([0-9]+)#pullrequestreview-[0-9]+$"),
        lambda m: f"{m[1]}/{m[2]}#{m[3]} (review)",
    ),
    (
        re.compile(_REPO + r"/discussions/([0-9]+)#discussioncomment-[0-9]+$"),
        lambda m: f"{m[1]}/{m[2]}#{m[3]} (comment)",
    ),
    (
        re.compile(_REPO + r"/commit/([A-Za-z0-9]{7,})(?:#.*)?$"),
        lambda m: f"{m[1]}/{m[2]}@{m[3][:7]}",
    ),
    (
        re.compile(_REPO + r"/pulls?/[0-9]+/commits/([A-Za-z0-9]{7,})(?:#.*)?$"),
        lambda m: f"{m[1]}/{m[2]}@{m[3][:7]}",
    ),
)


def detect_autolink(url: str) -> str | None:
    """Shorten a GitHub issue, pull request, discussion or commit URL.

    Args:
        url: Any URL

    Returns:
        ``owner/repo#n``, ``owner/repo#n (comment)``, ``owner/repo#n (review)``
        or ``owner/repo@sha7``; None for other URLs
    """
    for pattern, shorten in _PATTERNS:
        match = pattern.match(url)
        if match:
            return shorten(match)
    return None
