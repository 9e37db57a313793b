"""Style sheets for the ANSI renderer.

Provides:
- types: StylePrimitive, StyleBlock and the role-specific style records
- cascade: field-wise merging of inherited and element styles
- presets: the standard style sheets and style-file loading
"""

from tinta.styles.cascade import (
    apply_override,
    cascade_block,
    cascade_primitive,
    cascade_styles,
)
from tinta.styles.presets import DEFAULT_STYLES, get_style
from tinta.styles.types import (
    Chroma,
    StyleBlock,
    StyleCodeBlock,
    StyleConfig,
    StyleList,
    StylePrimitive,
    StyleTable,
    StyleTask,
)

__all__ = [
    "DEFAULT_STYLES",
    "Chroma",
    "StyleBlock",
    "StyleCodeBlock",
    "StyleConfig",
    "StyleList",
    "StylePrimitive",
    "StyleTable",
    "StyleTask",
    "apply_override",
    "cascade_block",
    "cascade_primitive",
    "cascade_styles",
    "get_style",
]
