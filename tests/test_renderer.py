"""End-to-end rendering through TermRenderer and the module-level API."""

import io
from concurrent.futures import ThreadPoolExecutor

import pytest

import tinta
from tinta import (
    BlockQuote,
    CodeSpan,
    DefinitionDescription,
    DefinitionList,
    DefinitionTerm,
    Document,
    Emphasis,
    FencedCode,
    FrontMatter,
    Heading,
    Image,
    Link,
    List,
    ListItem,
    Paragraph,
    SoftBreak,
    Table,
    TableCell,
    TableRow,
    TermRenderer,
    Text,
    ThematicBreak,
    style_from_environment,
)
from tinta.ansi.links import SMART_HYPERLINK_FORMATTER, TEXT_ONLY_FORMATTER
from tinta.ansi.renderer import AnsiRenderer
from tinta.ansi.sequences import strip_ansi, visible_width
from tinta.config import RenderOptions
from tinta.styles import DEFAULT_STYLES, get_style

LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua."
)


def lines(text: str) -> list[str]:
    return [line.rstrip() for line in text.split("\n")]


def stripped(text: str) -> list[str]:
    return [line.strip() for line in strip_ansi(text).split("\n")]


def leading(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def para(*children) -> Paragraph:
    return Paragraph(tuple(children))


def doc(*blocks) -> Document:
    return Document(tuple(blocks))


def cell(text: str) -> TableCell:
    return TableCell((Text(text),))


def items(*texts: str, checked: tuple[bool | None, ...] = ()) -> tuple[ListItem, ...]:
    marks = checked or (None,) * len(texts)
    return tuple(
        ListItem((para(Text(text)),), checked=mark)
        for text, mark in zip(texts, marks, strict=True)
    )


@pytest.fixture
def ascii_renderer() -> TermRenderer:
    return TermRenderer(style="ascii", color_profile="ascii")


class TestBlocks:
    """Block layout with the ascii style."""

    def test_paragraph(self, ascii_renderer: TermRenderer) -> None:
        out = lines(ascii_renderer.render(doc(para(Text("Hello")))))
        assert out[0] == ""
        assert "  Hello" in out

    def test_heading(self, ascii_renderer: TermRenderer) -> None:
        out = lines(ascii_renderer.render(doc(Heading(1, (Text("Title"),)))))
        assert "  # Title" in out

    def test_heading_levels(self, ascii_renderer: TermRenderer) -> None:
        out = stripped(ascii_renderer.render(doc(Heading(3, (Text("Third"),)))))
        assert "### Third" in out

    def test_emphasis_literals(self, ascii_renderer: TermRenderer) -> None:
        document = doc(para(Text("a "), Emphasis((Text("b"),)), Text(" "), CodeSpan("c")))
        assert "a *b* `c`" in stripped(ascii_renderer.render(document))

    def test_wraps_to_width(self) -> None:
        renderer = TermRenderer(style="ascii", color_profile="ascii", word_wrap=30)
        out = lines(renderer.render(doc(para(Text(LOREM)))))
        body = [line for line in out if line]
        assert len(body) > 3
        assert all(visible_width(line) <= 30 for line in body)
        assert " ".join(line.strip() for line in body) == LOREM

    @pytest.mark.parametrize("width", [13, 16, 22])
    def test_punctuation_stays_within_width(self, width: int) -> None:
        renderer = TermRenderer(style="ascii", color_profile="ascii", word_wrap=width)
        text = "hello world, foo bar, baz qux. quux corge; grault garply."
        out = lines(renderer.render(doc(para(Text(text)))))
        body = [line for line in out if line]
        assert all(visible_width(line) <= width for line in body)
        assert " ".join(line.strip() for line in body) == text

    def test_block_quote(self, ascii_renderer: TermRenderer) -> None:
        out = stripped(ascii_renderer.render(doc(BlockQuote((para(Text("quoted")),)))))
        assert "| quoted" in out

    def test_thematic_break(self, ascii_renderer: TermRenderer) -> None:
        out = stripped(ascii_renderer.render(doc(para(Text("a")), ThematicBreak())))
        assert "--------" in out

    def test_code_block_verbatim(self, ascii_renderer: TermRenderer) -> None:
        code = FencedCode("def f():\n    return 1\n", "python")
        out = lines(ascii_renderer.render(doc(code)))
        body = [line for line in out if line.strip()]
        assert body[0].strip() == "def f():"
        assert leading(body[1]) == leading(body[0]) + 4

    def test_code_block_highlighted(self) -> None:
        renderer = TermRenderer(style="dark", color_profile="256")
        out = renderer.render(doc(FencedCode("x = 1\n", "python")))
        assert "\x1b[" in out
        assert "x = 1" in strip_ansi(out)

    def test_definition_list(self, ascii_renderer: TermRenderer) -> None:
        dl = DefinitionList(
            (DefinitionTerm((Text("Term"),)), DefinitionDescription((Text("Meaning"),)))
        )
        out = stripped(ascii_renderer.render(doc(dl)))
        assert "Term" in out
        assert "* Meaning" in out

    def test_image(self, ascii_renderer: TermRenderer) -> None:
        out = strip_ansi(ascii_renderer.render(doc(para(Image("logo.png", "Logo")))))
        assert "Image: Logo → logo.png" in out

    def test_ascii_profile_emits_no_escapes(self, ascii_renderer: TermRenderer) -> None:
        out = ascii_renderer.render(doc(Heading(1, (Text("T"),)), para(Text(LOREM))))
        assert strip_ansi(out) == out

    def test_color_profile_emits_escapes(self) -> None:
        renderer = TermRenderer(style="dark", color_profile="truecolor")
        assert "\x1b[" in renderer.render(doc(Heading(2, (Text("T"),))))


class TestLists:
    """Bullets, enumerations and tasks."""

    def test_bullets(self, ascii_renderer: TermRenderer) -> None:
        out = stripped(ascii_renderer.render(doc(List(items("a", "b")))))
        assert "• a" in out
        assert "• b" in out

    def test_enumeration_start(self, ascii_renderer: TermRenderer) -> None:
        out = stripped(ascii_renderer.render(doc(List(items("x", "y"), ordered=True, start=3))))
        assert "3. x" in out
        assert "4. y" in out

    def test_tasks(self, ascii_renderer: TermRenderer) -> None:
        lst = List(items("done", "todo", checked=(True, False)))
        out = stripped(ascii_renderer.render(doc(lst)))
        assert "[x] done" in out
        assert "[ ] todo" in out

    def test_long_item_hangs_under_marker(self) -> None:
        renderer = TermRenderer(style="ascii", color_profile="ascii", word_wrap=30)
        out = [line for line in lines(renderer.render(doc(List(items(LOREM))))) if line]
        assert out[0].lstrip().startswith("• Lorem")
        for line in out[1:]:
            assert leading(line) == leading(out[0]) + 2


class TestTables:
    """Tables and the footer link list."""

    def test_ascii_grid(self, ascii_renderer: TermRenderer) -> None:
        table = Table(
            (TableRow((cell("Name"), cell("Value")), is_header=True),),
            (TableRow((cell("a"), cell("1"))),),
        )
        out = lines(ascii_renderer.render(doc(table)))
        assert "   Name | Value" in out
        assert "  ------+-------" in out
        assert "   a    | 1" in out

    def test_footer_links(self, ascii_renderer: TermRenderer) -> None:
        link = Link("https://x.dev", None, (Text("Docs"),))
        table = Table(
            (TableRow((cell("Name"), cell("Link")), is_header=True),),
            (TableRow((cell("a"), TableCell((link,)))),),
        )
        out = stripped(ascii_renderer.render(doc(table)))
        assert "a    | Docs" in out
        assert "[1]: Docs https://x.dev" in out

    def test_inline_table_links(self, ascii_renderer: TermRenderer) -> None:
        link = Link("https://x.dev", None, (Text("Docs"),))
        table = Table(
            (TableRow((cell("Link"),), is_header=True),),
            (TableRow((TableCell((link,)),)),),
        )
        out = strip_ansi(ascii_renderer.with_inline_table_links().render(doc(table)))
        assert "Docs https://x.dev" in out
        assert "[1]:" not in out


class TestLinks:
    """Link formatter selection."""

    DOC = doc(para(Link("https://x.dev", None, (Text("Docs"),))))

    def test_default(self, ascii_renderer: TermRenderer) -> None:
        assert "Docs https://x.dev" in strip_ansi(ascii_renderer.render(self.DOC))

    def test_url_only(self, ascii_renderer: TermRenderer) -> None:
        out = strip_ansi(ascii_renderer.with_url_only_links().render(self.DOC))
        assert "https://x.dev" in out
        assert "Docs" not in out

    def test_hyperlinks(self, ascii_renderer: TermRenderer) -> None:
        out = ascii_renderer.with_hyperlinks().render(self.DOC)
        assert "\x1b]8;;https://x.dev\x1b\\" in out

    def test_base_url(self, ascii_renderer: TermRenderer) -> None:
        document = doc(para(Link("/guide", None, (Text("Guide"),))))
        out = strip_ansi(ascii_renderer.with_base_url("https://x.dev").render(document))
        assert "Guide https://x.dev/guide" in out

    def test_bad_formatter_rejected_at_construction(self) -> None:
        with pytest.raises(TypeError):
            TermRenderer(style="ascii", link_formatter=42)


class TestFrontMatter:
    """Front matter is hidden unless enabled."""

    DOC = doc(FrontMatter({"title": "Doc", "tags": ["a", "b"]}), para(Text("body")))

    def test_hidden_by_default(self, ascii_renderer: TermRenderer) -> None:
        out = strip_ansi(ascii_renderer.render(self.DOC))
        assert "title" not in out
        assert "body" in out

    def test_shown(self, ascii_renderer: TermRenderer) -> None:
        out = stripped(ascii_renderer.with_front_matter().render(self.DOC))
        assert "title: Doc" in out
        assert "tags: a, b" in out

    def test_markdown_front_matter(self, ascii_renderer: TermRenderer) -> None:
        pytest.importorskip("mistune")
        pytest.importorskip("yaml")
        source = "---\ntitle: Hello\n---\n\nbody\n"
        hidden = stripped(ascii_renderer.render_markdown(source))
        assert "body" in hidden
        assert not any("title" in line or "---" in line for line in hidden)
        shown = stripped(ascii_renderer.with_front_matter().render_markdown(source))
        assert "title: Hello" in shown


class TestTermRenderer:
    """Configuration methods and output targets."""

    def test_with_methods_return_new_renderers(self, ascii_renderer: TermRenderer) -> None:
        narrow = ascii_renderer.with_word_wrap(40)
        assert narrow is not ascii_renderer
        assert narrow.options.word_wrap == 40
        assert ascii_renderer.options.word_wrap == 80

    def test_options_carry_over(self) -> None:
        renderer = TermRenderer(style="ascii").with_word_wrap(50).with_table_wrap(False)
        assert renderer.options.word_wrap == 50
        assert renderer.options.table_wrap is False
        assert renderer.options.styles is DEFAULT_STYLES["ascii"]

    def test_option_helpers(self, ascii_renderer: TermRenderer) -> None:
        options = (
            ascii_renderer.with_color_profile("256")
            .with_code_formatter("terminal16m")
            .with_preserved_newlines()
            .options
        )
        assert options.color_profile == "256"
        assert options.code_formatter == "terminal16m"
        assert options.preserve_newlines is True

    def test_link_helpers(self, ascii_renderer: TermRenderer) -> None:
        assert ascii_renderer.with_text_only_links().options.link_formatter is TEXT_ONLY_FORMATTER
        smart = ascii_renderer.with_smart_hyperlinks().options.link_formatter
        assert smart is SMART_HYPERLINK_FORMATTER

    def test_preserved_newlines(self, ascii_renderer: TermRenderer) -> None:
        document = doc(para(Text("one"), SoftBreak(), Text("two")))
        assert "one two" in stripped(ascii_renderer.render(document))
        kept = stripped(ascii_renderer.with_preserved_newlines().render(document))
        assert "one" in kept
        assert "one two" not in kept

    def test_justified_alignment(self) -> None:
        renderer = TermRenderer(style="ascii", color_profile="ascii", word_wrap=40)
        justified = renderer.with_justified_alignment().render(doc(para(Text(LOREM))))
        body = [line for line in lines(justified) if line]
        # every line but the last is stretched to the full content width
        assert len({len(line) for line in body[:-1]}) == 1
        assert "  " in body[0].strip()

    def test_render_to_stream(self, ascii_renderer: TermRenderer) -> None:
        document = doc(para(Text("Hello")))
        stream = io.StringIO()
        ascii_renderer.render_to(document, stream)
        assert stream.getvalue() == ascii_renderer.render(document)

    def test_margins(self, ascii_renderer: TermRenderer) -> None:
        document = doc(para(Text("Hello")))
        plain = [line for line in lines(ascii_renderer.render(document)) if line]
        wide = [line for line in lines(ascii_renderer.with_margins(4, 4).render(document)) if line]
        assert leading(wide[0]) > leading(plain[0])

    def test_center_alignment(self) -> None:
        renderer = TermRenderer(style="ascii", color_profile="ascii", word_wrap=40)
        centered = renderer.with_center_alignment().render(doc(para(Text("Hi"))))
        out = [line for line in lines(centered) if line]
        assert leading(out[0]) > 10

    def test_environment_style(self) -> None:
        renderer = TermRenderer().with_environment_style({"TINTA_STYLE": "dracula"})
        assert renderer.options.styles is DEFAULT_STYLES["dracula"]

    def test_style_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TINTA_STYLE", "pink")
        assert style_from_environment() == "pink"
        monkeypatch.setenv("TINTA_STYLE", "")
        assert style_from_environment() == "auto"

    def test_repr(self, ascii_renderer: TermRenderer) -> None:
        assert repr(ascii_renderer) == "TermRenderer(word_wrap=80, color_profile='ascii')"

    def test_concurrent_renders(self) -> None:
        """One renderer shared across threads gives identical output."""
        renderer = TermRenderer(style="dark", color_profile="256", word_wrap=40)
        document = doc(
            Heading(1, (Text("Title"),)),
            para(Text(LOREM)),
            List(items("a", "b")),
            FencedCode("print(1)\n", "python"),
        )
        expected = renderer.render(document)
        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: renderer.render(document), range(32)))
        assert all(result == expected for result in results)


class TestNodeRoots:
    """AnsiRenderer renders block nodes that are not wrapped in a Document."""

    @pytest.fixture
    def renderer(self) -> AnsiRenderer:
        return AnsiRenderer(RenderOptions(color_profile="ascii", styles=get_style("ascii")))

    def test_paragraph_root(self, renderer: AnsiRenderer) -> None:
        assert "hello" in stripped(renderer.render(para(Text("hello"))))

    def test_heading_root(self, renderer: AnsiRenderer) -> None:
        assert "## Section" in stripped(renderer.render(Heading(2, (Text("Section"),))))

    def test_block_quote_root(self, renderer: AnsiRenderer) -> None:
        out = stripped(renderer.render(BlockQuote((para(Text("quoted")),))))
        assert "| quoted" in out

    def test_list_root(self, renderer: AnsiRenderer) -> None:
        out = stripped(renderer.render(List(items("a", "b"))))
        assert "• a" in out
        assert "• b" in out

    def test_table_root(self, renderer: AnsiRenderer) -> None:
        table = Table(
            (TableRow((cell("Name"), cell("Value")), is_header=True),),
            (TableRow((cell("a"), cell("1"))),),
        )
        assert "Name | Value" in stripped(renderer.render(table))

    def test_render_to_stream(self, renderer: AnsiRenderer) -> None:
        stream = io.StringIO()
        renderer.render_to(para(Text("streamed")), stream)
        assert "streamed" in stream.getvalue()


class TestModuleApi:
    """tinta.render and tinta.render_markdown."""

    def test_render(self) -> None:
        out = tinta.render(doc(para(Text("Hello"))), style="ascii", color_profile="ascii")
        assert "  Hello" in lines(out)

    def test_render_markdown(self) -> None:
        pytest.importorskip("mistune")
        out = tinta.render_markdown("# Title\n\nSome *text*.", style="ascii")
        assert "# Title" in stripped(out)
        assert "Some *text*." in stripped(out)

    def test_renderer_is_callable(self) -> None:
        pytest.importorskip("mistune")
        renderer = TermRenderer(style="ascii", color_profile="ascii")
        assert "- a" not in renderer("- a\n- b\n")
        assert "• a" in stripped(renderer("- a\n- b\n"))
