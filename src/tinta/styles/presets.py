"""Standard style presets.

Presets are written as the same nested mappings a JSON style file uses and
loaded through StyleConfig.from_dict, so every preset doubles as an
example of the style file format.

Names: ascii, dark, dracula, light, notty, pink. "auto" picks notty when
stdout is not a terminal and dark otherwise.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tinta.errors import StyleError
from tinta.styles.types import StyleConfig
from tinta.utils.logger import get_logger

logger = get_logger(__name__)

ASCII_STYLE = "ascii"
AUTO_STYLE = "auto"
DARK_STYLE = "dark"
DRACULA_STYLE = "dracula"
LIGHT_STYLE = "light"
NOTTY_STYLE = "notty"
PINK_STYLE = "pink"

DEFAULT_LIST_INDENT = 2
DEFAULT_MARGIN = 2

_HEADINGS = {f"h{n}": {"prefix": "#" * n + " "} for n in range(1, 7)}

_ASCII: dict[str, Any] = {
    "document": {"block_prefix": "\n", "block_suffix": "\n", "margin": DEFAULT_MARGIN},
    "block_quote": {"indent": 1, "indent_token": "| "},
    "list": {"level_indent": 4},
    "heading": {"block_suffix": "\n"},
    **_HEADINGS,
    "strikethrough": {"block_prefix": "~~", "block_suffix": "~~"},
    "emph": {"block_prefix": "*", "block_suffix": "*"},
    "strong": {"block_prefix": "**", "block_suffix": "**"},
    "hr": {"format": "\n--------\n"},
    "item": {"block_prefix": "• "},
    "enumeration": {"block_prefix": ". "},
    "task": {"ticked": "[x] ", "unticked": "[ ] "},
    "image_text": {"format": "Image: {{ text }} →"},
    "code": {"block_prefix": "`", "block_suffix": "`"},
    "code_block": {"margin": DEFAULT_MARGIN},
    "table": {"center_separator": "+", "column_separator": "|", "row_separator": "-"},
    "definition_description": {"block_prefix": "\n* "},
}

_DARK_CHROMA: dict[str, Any] = {
    "text": {"color": "#C4C4C4"},
    "error": {"color": "#F1F1F1", "background_color": "#F05B5B"},
    "comment": {"color": "#676767"},
    "comment_preproc": {"color": "#FF875F"},
    "keyword": {"color": "#00AAFF"},
    "keyword_reserved": {"color": "#FF5FD2"},
    "keyword_namespace": {"color": "#FF5F87"},
    "keyword_type": {"color": "#6E6ED8"},
    "operator": {"color": "#EF8080"},
    "punctuation": {"color": "#E8E8A8"},
    "name": {"color": "#C4C4C4"},
    "name_builtin": {"color": "#FF8EC7"},
    "name_tag": {"color": "#B083EA"},
    "name_attribute": {"color": "#7A7AE6"},
    "name_class": {"color": "#F1F1F1", "underline": True, "bold": True},
    "name_decorator": {"color": "#FFFF87"},
    "name_function": {"color": "#00D787"},
    "literal_number": {"color": "#6EEFC0"},
    "literal_string": {"color": "#C69669"},
    "literal_string_escape": {"color": "#AFFFD7"},
    "generic_deleted": {"color": "#FD5B5B"},
    "generic_emph": {"italic": True},
    "generic_inserted": {"color": "#00D787"},
    "generic_strong": {"bold": True},
    "generic_subheading": {"color": "#777777"},
    "background": {"background_color": "#373737"},
}

_LIGHT_CHROMA: dict[str, Any] = {
    **_DARK_CHROMA,
    "text": {"color": "#2A2A2A"},
    "error": {"color": "#F1F1F1", "background_color": "#FF5555"},
    "comment": {"color": "#8D8D8D"},
    "keyword": {"color": "#279EFC"},
    "keyword_namespace": {"color": "#FB406F"},
    "keyword_type": {"color": "#7049C2"},
    "operator": {"color": "#FF2626"},
    "punctuation": {"color": "#FA7878"},
    "name": {},
    "name_builtin": {"color": "#0A1BB1"},
    "name_tag": {"color": "#581290"},
    "name_attribute": {"color": "#8362CB"},
    "name_class": {"color": "#212121", "underline": True, "bold": True},
    "name_constant": {"color": "#581290"},
    "name_decorator": {"color": "#A3A322"},
    "name_function": {"color": "#019F57"},
    "literal_number": {"color": "#22CCAE"},
    "literal_string": {"color": "#7E5B38"},
    "literal_string_escape": {"color": "#00AEAE"},
}


def _dark_like(*, document_color: str, heading_color: str, light: bool) -> dict[str, Any]:
    return {
        "document": {
            "block_prefix": "\n",
            "block_suffix": "\n",
            "color": document_color,
            "margin": DEFAULT_MARGIN,
        },
        "block_quote": {"indent": 1, "indent_token": "│ "},
        "list": {"level_indent": DEFAULT_LIST_INDENT},
        "heading": {"block_suffix": "\n", "color": heading_color, "bold": True},
        **_HEADINGS,
        "h1": {
            "prefix": " ",
            "suffix": " ",
            "color": "228",
            "background_color": "63",
            "bold": True,
        },
        "h6": {"prefix": "###### ", "color": None if light else "35", "bold": False},
        "strikethrough": {"crossed_out": True},
        "emph": {"italic": True},
        "strong": {"bold": True},
        "hr": {"color": "249" if light else "240", "format": "\n--------\n"},
        "item": {"block_prefix": "• "},
        "enumeration": {"block_prefix": ". "},
        "task": {"ticked": "[✓] ", "unticked": "[ ] "},
        "link": {"color": "36" if light else "30", "underline": True},
        "link_text": {"color": "29" if light else "35", "bold": True},
        "image": {"color": "205" if light else "212", "underline": True},
        "image_text": {"color": "243", "format": "Image: {{ text }} →"},
        "code": {
            "prefix": " ",
            "suffix": " ",
            "color": "203",
            "background_color": "254" if light else "236",
        },
        "code_block": {
            "color": "242" if light else "244",
            "margin": DEFAULT_MARGIN,
            "theme": "tinta-light" if light else "tinta-dark",
            "chroma": _LIGHT_CHROMA if light else _DARK_CHROMA,
        },
        "table": {"center_separator": "┼", "column_separator": "│", "row_separator": "─"},
        "definition_description": {"block_prefix": "\n🠶 "},
    }


_DARK = _dark_like(document_color="252", heading_color="39", light=False)
_LIGHT = _dark_like(document_color="234", heading_color="27", light=True)

_PINK: dict[str, Any] = {
    "document": {"margin": DEFAULT_MARGIN},
    "block_quote": {"indent": 1, "indent_token": "│ "},
    "list": {"level_indent": DEFAULT_LIST_INDENT},
    "heading": {"block_suffix": "\n", "color": "212", "bold": True},
    "h1": {"block_prefix": "\n", "block_suffix": "\n"},
    "h2": {"prefix": "▌ "},
    "h3": {"prefix": "┃ "},
    "h4": {"prefix": "│ "},
    "h5": {"prefix": "┆ "},
    "h6": {"prefix": "┊ ", "bold": False},
    "strikethrough": {"crossed_out": True},
    "emph": {"italic": True},
    "strong": {"bold": True},
    "hr": {"color": "212", "format": "\n──────\n"},
    "item": {"block_prefix": "• "},
    "enumeration": {"block_prefix": ". "},
    "task": {"ticked": "[✓] ", "unticked": "[ ] "},
    "link": {"color": "99", "underline": True},
    "link_text": {"bold": True},
    "image": {"underline": True},
    "image_text": {"format": "Image: {{ text }}"},
    "code": {"prefix": " ", "suffix": " ", "color": "212", "background_color": "236"},
    "table": {"center_separator": "┼", "column_separator": "│", "row_separator": "─"},
    "definition_description": {"block_prefix": "\n🠶 "},
}

_DRACULA: dict[str, Any] = {
    "document": {
        "block_prefix": "\n",
        "block_suffix": "\n",
        "color": "#f8f8f2",
        "margin": DEFAULT_MARGIN,
    },
    "block_quote": {"color": "#f1fa8c", "italic": True, "indent": 2},
    "list": {"color": "#f8f8f2", "level_indent": DEFAULT_LIST_INDENT},
    "heading": {"block_suffix": "\n", "color": "#bd93f9", "bold": True},
    **_HEADINGS,
    "strikethrough": {"crossed_out": True},
    "emph": {"color": "#f1fa8c", "italic": True},
    "strong": {"color": "#ffb86c", "bold": True},
    "hr": {"color": "#6272A4", "format": "\n--------\n"},
    "item": {"block_prefix": "• "},
    "enumeration": {"block_prefix": ". ", "color": "#8be9fd"},
    "task": {"ticked": "[✓] ", "unticked": "[ ] "},
    "link": {"color": "#8be9fd", "underline": True},
    "link_text": {"color": "#ff79c6"},
    "image": {"color": "#8be9fd", "underline": True},
    "image_text": {"color": "#ff79c6", "format": "Image: {{ text }} →"},
    "code": {"color": "#50fa7b"},
    "code_block": {"color": "#ffb86c", "margin": DEFAULT_MARGIN, "theme": "dracula"},
    "table": {"center_separator": "┼", "column_separator": "│", "row_separator": "─"},
    "definition_description": {"block_prefix": "\n🠶 "},
}

ASCII_STYLE_CONFIG = StyleConfig.from_dict(_ASCII)
NOTTY_STYLE_CONFIG = ASCII_STYLE_CONFIG
DARK_STYLE_CONFIG = StyleConfig.from_dict(_DARK)
LIGHT_STYLE_CONFIG = StyleConfig.from_dict(_LIGHT)
PINK_STYLE_CONFIG = StyleConfig.from_dict(_PINK)
DRACULA_STYLE_CONFIG = StyleConfig.from_dict(_DRACULA)

DEFAULT_STYLES: dict[str, StyleConfig] = {
    ASCII_STYLE: ASCII_STYLE_CONFIG,
    DARK_STYLE: DARK_STYLE_CONFIG,
    DRACULA_STYLE: DRACULA_STYLE_CONFIG,
    LIGHT_STYLE: LIGHT_STYLE_CONFIG,
    NOTTY_STYLE: NOTTY_STYLE_CONFIG,
    PINK_STYLE: PINK_STYLE_CONFIG,
}


def get_style(name: str) -> StyleConfig:
    """Resolve a standard style name, or read a JSON style file.

    Args:
        name: A preset name ("dark", "ascii", ...), "auto", or a path

    Returns:
        The resolved StyleConfig

    Raises:
        StyleError: If the name is neither a preset nor a readable style file
    """
    if name == AUTO_STYLE:
        tty = sys.stdout is not None and sys.stdout.isatty()
        name = DARK_STYLE if tty else NOTTY_STYLE
        logger.debug("auto style resolved to %s", name)
    preset = DEFAULT_STYLES.get(name)
    if preset is not None:
        return preset
    path = Path(name).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as err:
        raise StyleError(f"{name}: style not found") from err
    logger.debug("loaded style file %s", path)
    return StyleConfig.from_json(text)
