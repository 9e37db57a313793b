"""Style cascade: field-wise merging of inherited and element styles.

Two cascades exist:

- ``cascade_primitive`` for leaf text: colors and attribute flags fall back
  to the enclosing style, literals (prefixes, suffixes, format) belong to the
  element being rendered.
- ``cascade_block`` for block frames: the primitive cascade plus block
  geometry (indent, margins, indent token, alignment).

The ``to_block`` flag distinguishes folding style *layers* of one element
(``heading`` + ``h2``: everything unset inherits, literals included) from
deriving the style of a *new frame* (literals and geometry come from the
frame's own style only, because the block stack already sums every frame's
indent and margin).

All functions are pure.
"""

from __future__ import annotations

from dataclasses import replace

from tinta.styles.types import StyleBlock, StylePrimitive

_INHERITED = (
    "color",
    "background_color",
    "underline",
    "bold",
    "upper",
    "lower",
    "title",
    "italic",
    "crossed_out",
    "faint",
    "inverse",
    "blink",
)
_LITERALS = ("block_prefix", "block_suffix", "prefix", "suffix", "format")
_GEOMETRY = ("indent", "indent_token", "margin", "margin_left", "margin_right", "align")

EMPTY_PRIMITIVE = StylePrimitive()
EMPTY_BLOCK = StyleBlock()


def cascade_primitive(
    base: StylePrimitive,
    override: StylePrimitive,
    to_block: bool = False,
) -> StylePrimitive:
    """Merge ``override`` onto ``base``; the override's set fields win.

    Args:
        base: Inherited style
        override: Element style
        to_block: Also inherit literals (prefixes, suffixes, format)

    Returns:
        A plain StylePrimitive
    """
    values: dict[str, object] = {}
    for name in _INHERITED:
        value = getattr(override, name)
        values[name] = getattr(base, name) if value is None else value
    for name in _LITERALS:
        value = getattr(override, name)
        values[name] = getattr(base, name) if to_block and not value else value
    return StylePrimitive(**values)  # type: ignore[arg-type]


def apply_override(style: StylePrimitive, override: StylePrimitive) -> StylePrimitive:
    """Lay an override's colors and attributes over ``style``.

    Used when a container (emphasis, link text, table cell) restyles its
    children: the children keep their own literals.

    Example:
        >>> from tinta.styles.types import StylePrimitive
        >>> merged = apply_override(StylePrimitive(prefix="> "), StylePrimitive(bold=True))
        >>> merged.bold, merged.prefix
        (True, '> ')
    """
    merged = cascade_primitive(style, override)
    return replace(merged, **{name: getattr(style, name) for name in _LITERALS})


def cascade_block[B: StyleBlock](base: StyleBlock, override: B, to_block: bool = False) -> B:
    """Merge a block style onto its enclosing block.

    The result keeps the override's concrete type (a StyleList stays a
    StyleList) so role-specific fields survive.

    Args:
        base: Enclosing (inherited) block style
        override: Element block style
        to_block: Fold style layers: unset geometry and literals inherit

    Returns:
        Merged block style of the same type as ``override``
    """
    primitive = cascade_primitive(base, override, to_block)
    values = {name: getattr(primitive, name) for name in _INHERITED + _LITERALS}
    if to_block:
        for name in _GEOMETRY:
            if getattr(override, name) is None:
                values[name] = getattr(base, name)
    return replace(override, **values)


def cascade_styles(*blocks: StyleBlock) -> StyleBlock:
    """Fold style layers left to right, starting from an empty block.

    Example:
        >>> from tinta.styles.types import StyleBlock
        >>> merged = cascade_styles(StyleBlock(bold=True), StyleBlock(prefix="## "))
        >>> merged.bold, merged.prefix
        (True, '## ')
    """
    result: StyleBlock = EMPTY_BLOCK
    for block in blocks:
        result = cascade_block(result, block, to_block=True)
    return result
