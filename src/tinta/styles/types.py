"""Style data model: one immutable record per semantic role.

Every field is optional. ``None`` (or ``""`` for literal strings) means
"unset, inherit from the enclosing block"; see tinta.styles.cascade for the
merge rules.

Styles are plain frozen dataclasses so a StyleConfig can be shared by any
number of concurrent renders. They load from nested dicts (JSON style
files) with ``from_dict``, which ignores unknown keys so style files written
for newer versions keep loading.

Example:
    >>> cfg = StyleConfig.from_dict({"h1": {"prefix": "# ", "bold": True}})
    >>> cfg.h1.prefix
    '# '
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Literal, Self

from tinta.errors import StyleError

type Align = Literal["left", "center", "justify"]


def _load[T](cls: type[T], data: dict[str, Any] | None, nested: dict[str, type]) -> T:
    """Build a style dataclass from a dict, recursing into nested styles."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise StyleError(f"{cls.__name__} expects a mapping, got {type(data).__name__}")
    known = cls.__dataclass_fields__  # type: ignore[attr-defined]
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            continue
        sub = nested.get(key)
        if sub is not None and value is not None:
            value = sub.from_dict(value)  # type: ignore[attr-defined]
        kwargs[key] = value
    return cls(**kwargs)


@dataclass(frozen=True, slots=True)
class StylePrimitive:
    """Text-level style: colors, attributes, case, literals and format.

    Attributes:
        block_prefix: Literal written before the element in the block's style
        block_suffix: Literal written after the element in the block's style
        prefix: Literal written before the token in the element's style
        suffix: Literal written after the token in the element's style
        color: Foreground ("252", "#ff79c6", "red")
        background_color: Background, same syntax as color
        format: Template applied to the token, e.g. ``"Image: {{ text }}"``

    """

    block_prefix: str = ""
    block_suffix: str = ""
    prefix: str = ""
    suffix: str = ""
    color: str | None = None
    background_color: str | None = None
    underline: bool | None = None
    bold: bool | None = None
    upper: bool | None = None
    lower: bool | None = None
    title: bool | None = None
    italic: bool | None = None
    crossed_out: bool | None = None
    faint: bool | None = None
    inverse: bool | None = None
    blink: bool | None = None
    format: str = ""

    _nested: ClassVar[dict[str, type]] = {}

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any] | None) -> Self:
        """Create a style from a dictionary, ignoring unknown keys."""
        return _load(cls, config_dict, cls._nested)

    @property
    def primitive(self) -> StylePrimitive:
        """The text-level part of this style (self for plain primitives)."""
        if type(self) is StylePrimitive:
            return self
        return StylePrimitive(**{f.name: getattr(self, f.name) for f in fields(StylePrimitive)})

    def is_plain(self) -> bool:
        """True when rendering with this style emits no escape codes."""
        return not (
            self.color
            or self.background_color
            or self.underline
            or self.bold
            or self.italic
            or self.crossed_out
            or self.faint
            or self.inverse
            or self.blink
        )


@dataclass(frozen=True, slots=True)
class StyleBlock(StylePrimitive):
    """Block-level style: a primitive plus indentation and margins.

    Attributes:
        indent: Indent tokens written at the start of every line
        indent_token: The indent token (default a single space)
        margin: Left margin in cells; also drives wrapping of the block
        margin_left: Extra left margin
        margin_right: Right margin (reserved width, never written)
        align: Line alignment inside the block

    """

    indent: int | None = None
    indent_token: str | None = None
    margin: int | None = None
    margin_left: int | None = None
    margin_right: int | None = None
    align: Align | None = None

    def __post_init__(self) -> None:
        for name in ("indent", "margin", "margin_left", "margin_right"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise StyleError(f"{name} must be non-negative, got {value}")

    @property
    def consumed_width(self) -> int:
        """Cells this block takes away from its children."""
        return (
            (self.indent or 0)
            + (self.margin or 0)
            + (self.margin_left or 0)
            + (self.margin_right or 0)
        )


@dataclass(frozen=True, slots=True)
class StyleList(StyleBlock):
    """List style; nested lists indent by ``level_indent``."""

    level_indent: int = 2


@dataclass(frozen=True, slots=True)
class StyleTask(StylePrimitive):
    """Task-list checkbox markers."""

    ticked: str = ""
    unticked: str = ""


@dataclass(frozen=True, slots=True)
class Chroma:
    """Token colors for syntax-highlighted code blocks."""

    text: StylePrimitive = field(default_factory=StylePrimitive)
    error: StylePrimitive = field(default_factory=StylePrimitive)
    comment: StylePrimitive = field(default_factory=StylePrimitive)
    comment_preproc: StylePrimitive = field(default_factory=StylePrimitive)
    keyword: StylePrimitive = field(default_factory=StylePrimitive)
    keyword_reserved: StylePrimitive = field(default_factory=StylePrimitive)
    keyword_namespace: StylePrimitive = field(default_factory=StylePrimitive)
    keyword_type: StylePrimitive = field(default_factory=StylePrimitive)
    operator: StylePrimitive = field(default_factory=StylePrimitive)
    punctuation: StylePrimitive = field(default_factory=StylePrimitive)
    name: StylePrimitive = field(default_factory=StylePrimitive)
    name_builtin: StylePrimitive = field(default_factory=StylePrimitive)
    name_tag: StylePrimitive = field(default_factory=StylePrimitive)
    name_attribute: StylePrimitive = field(default_factory=StylePrimitive)
    name_class: StylePrimitive = field(default_factory=StylePrimitive)
    name_constant: StylePrimitive = field(default_factory=StylePrimitive)
    name_decorator: StylePrimitive = field(default_factory=StylePrimitive)
    name_exception: StylePrimitive = field(default_factory=StylePrimitive)
    name_function: StylePrimitive = field(default_factory=StylePrimitive)
    name_other: StylePrimitive = field(default_factory=StylePrimitive)
    literal: StylePrimitive = field(default_factory=StylePrimitive)
    literal_number: StylePrimitive = field(default_factory=StylePrimitive)
    literal_date: StylePrimitive = field(default_factory=StylePrimitive)
    literal_string: StylePrimitive = field(default_factory=StylePrimitive)
    literal_string_escape: StylePrimitive = field(default_factory=StylePrimitive)
    generic_deleted: StylePrimitive = field(default_factory=StylePrimitive)
    generic_emph: StylePrimitive = field(default_factory=StylePrimitive)
    generic_inserted: StylePrimitive = field(default_factory=StylePrimitive)
    generic_strong: StylePrimitive = field(default_factory=StylePrimitive)
    generic_subheading: StylePrimitive = field(default_factory=StylePrimitive)
    background: StylePrimitive = field(default_factory=StylePrimitive)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any] | None) -> Self:
        """Create a token color table, ignoring unknown token names."""
        nested = {name: StylePrimitive for name in cls.__dataclass_fields__}
        return _load(cls, config_dict, nested)


@dataclass(frozen=True, slots=True)
class StyleCodeBlock(StyleBlock):
    """Code block style with an optional highlighting theme."""

    theme: str = ""
    chroma: Chroma | None = None

    _nested: ClassVar[dict[str, type]] = {"chroma": Chroma}


@dataclass(frozen=True, slots=True)
class StyleTable(StyleBlock):
    """Table style with border characters."""

    center_separator: str | None = None
    column_separator: str | None = None
    row_separator: str | None = None


_CONFIG_FIELDS: dict[str, type] = {
    "document": StyleBlock,
    "block_quote": StyleBlock,
    "paragraph": StyleBlock,
    "list": StyleList,
    "heading": StyleBlock,
    "h1": StyleBlock,
    "h2": StyleBlock,
    "h3": StyleBlock,
    "h4": StyleBlock,
    "h5": StyleBlock,
    "h6": StyleBlock,
    "text": StylePrimitive,
    "strikethrough": StylePrimitive,
    "emph": StylePrimitive,
    "strong": StylePrimitive,
    "hr": StylePrimitive,
    "item": StylePrimitive,
    "enumeration": StylePrimitive,
    "task": StyleTask,
    "link": StylePrimitive,
    "link_text": StylePrimitive,
    "image": StylePrimitive,
    "image_text": StylePrimitive,
    "code": StyleBlock,
    "code_block": StyleCodeBlock,
    "table": StyleTable,
    "definition_list": StyleBlock,
    "definition_term": StylePrimitive,
    "definition_description": StylePrimitive,
    "html_block": StyleBlock,
    "html_span": StyleBlock,
}


@dataclass(frozen=True, slots=True)
class StyleConfig:
    """Complete style sheet: one style per semantic role.

    Thread Safety:
        Immutable; share one instance across any number of renders.

    """

    document: StyleBlock = field(default_factory=StyleBlock)
    block_quote: StyleBlock = field(default_factory=StyleBlock)
    paragraph: StyleBlock = field(default_factory=StyleBlock)
    list: StyleList = field(default_factory=StyleList)
    heading: StyleBlock = field(default_factory=StyleBlock)
    h1: StyleBlock = field(default_factory=StyleBlock)
    h2: StyleBlock = field(default_factory=StyleBlock)
    h3: StyleBlock = field(default_factory=StyleBlock)
    h4: StyleBlock = field(default_factory=StyleBlock)
    h5: StyleBlock = field(default_factory=StyleBlock)
    h6: StyleBlock = field(default_factory=StyleBlock)
    text: StylePrimitive = field(default_factory=StylePrimitive)
    strikethrough: StylePrimitive = field(default_factory=StylePrimitive)
    emph: StylePrimitive = field(default_factory=StylePrimitive)
    strong: StylePrimitive = field(default_factory=StylePrimitive)
    hr: StylePrimitive = field(default_factory=StylePrimitive)
    item: StylePrimitive = field(default_factory=StylePrimitive)
    enumeration: StylePrimitive = field(default_factory=StylePrimitive)
    task: StyleTask = field(default_factory=StyleTask)
    link: StylePrimitive = field(default_factory=StylePrimitive)
    link_text: StylePrimitive = field(default_factory=StylePrimitive)
    image: StylePrimitive = field(default_factory=StylePrimitive)
    image_text: StylePrimitive = field(default_factory=StylePrimitive)
    code: StyleBlock = field(default_factory=StyleBlock)
    code_block: StyleCodeBlock = field(default_factory=StyleCodeBlock)
    table: StyleTable = field(default_factory=StyleTable)
    definition_list: StyleBlock = field(default_factory=StyleBlock)
    definition_term: StylePrimitive = field(default_factory=StylePrimitive)
    definition_description: StylePrimitive = field(default_factory=StylePrimitive)
    html_block: StyleBlock = field(default_factory=StyleBlock)
    html_span: StyleBlock = field(default_factory=StyleBlock)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> StyleConfig:
        """Create a StyleConfig from a nested dictionary.

        Unknown roles and unknown style keys are ignored.

        Args:
            config_dict: Mapping of role name to style mapping

        Returns:
            New StyleConfig
        """
        return _load(cls, config_dict, _CONFIG_FIELDS)

    @classmethod
    def from_json(cls, text: str) -> StyleConfig:
        """Create a StyleConfig from a JSON document."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as err:
            raise StyleError(f"invalid style JSON: {err}") from err
        return cls.from_dict(data)

    def heading_level(self, level: int) -> StyleBlock:
        """Style for heading level 1-6 (clamped)."""
        level = min(max(level, 1), 6)
        return getattr(self, f"h{level}")
