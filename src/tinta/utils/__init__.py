"""Utility modules for tinta.

Provides:
- logger: get_logger for logging
- text: plain-text extraction and HTML unescaping for inline nodes
"""

from tinta.utils.logger import get_logger
from tinta.utils.text import extract_text, unescape_html

__all__ = [
    "extract_text",
    "get_logger",
    "unescape_html",
]
