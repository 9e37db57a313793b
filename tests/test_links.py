"""Tests for hyperlinks, link formatters and GitHub autolink shorthand."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tinta.ansi.autolink import detect_autolink
from tinta.ansi.context import RenderContext
from tinta.ansi.hyperlink import Hyperlink, format_hyperlink, supports_hyperlinks
from tinta.ansi.links import (
    DEFAULT_FORMATTER,
    HYPERLINK_FORMATTER,
    SMART_HYPERLINK_FORMATTER,
    TEXT_ONLY_FORMATTER,
    URL_ONLY_FORMATTER,
    FunctionFormatter,
    LinkData,
    LinkFormatter,
    is_fragment_only_url,
    resolve_link_formatter,
    resolve_relative_url,
)
from tinta.ansi.sequences import strip_ansi
from tinta.config import RenderOptions
from tinta.errors import HyperlinkError, LinkFormatterError
from tinta.location import SourceLocation
from tinta.nodes import Document, Link, Paragraph, Text
from tinta.renderer import TermRenderer
from tinta.styles import get_style

TERMINAL_VARS = (
    "TERM_PROGRAM",
    "TERM",
    "KITTY_WINDOW_ID",
    "ALACRITTY_LOG",
    "ALACRITTY_SOCKET",
)

link_text = st.text(
    alphabet=st.characters(blacklist_categories=("Cc", "Cs")),
    min_size=1,
    max_size=40,
)
urls = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789:/.#?=&-_", min_size=1)


def make_ctx(environ: dict[str, str] | None = None, **options: object) -> RenderContext:
    options.setdefault("styles", get_style("ascii"))
    return RenderContext(RenderOptions(environ=environ or {}, **options))  # type: ignore[arg-type]


class TestFormatHyperlink:
    """OSC-8 wrapping."""

    def test_sequence_layout(self) -> None:
        expected = "\x1b]8;;https://x.dev\x1b\\a\x1b]8;;\x1b\\"
        assert format_hyperlink("a", "https://x.dev") == expected

    def test_empty_url_returns_text(self) -> None:
        assert format_hyperlink("plain", "") == "plain"

    @given(text=link_text, url=urls)
    @settings(max_examples=200)
    def test_round_trip(self, text: str, url: str) -> None:
        assert strip_ansi(format_hyperlink(text, url)) == text


class TestHyperlink:
    """The Hyperlink value type."""

    def test_fields_trimmed_and_stripped(self) -> None:
        link = Hyperlink("  https://go.dev ", " \x1b[1mGo\x1b[0m ", " t ")
        assert (link.url, link.text, link.title) == ("https://go.dev", "Go", "t")

    def test_render_plain(self) -> None:
        assert Hyperlink("https://go.dev", "Go").render_plain() == "Go (https://go.dev)"
        assert Hyperlink("https://go.dev").render_plain() == "https://go.dev"
        assert Hyperlink("", "Go").render_plain() == "Go"

    def test_render_smart(self) -> None:
        link = Hyperlink("https://go.dev", "Go")
        assert link.render_smart({"TERM_PROGRAM": "WezTerm"}) == link.render_osc8()
        assert link.render_smart({}) == "Go (https://go.dev)"

    def test_validate(self) -> None:
        Hyperlink("https://go.dev").validate()
        with pytest.raises(HyperlinkError):
            Hyperlink("", "").validate()


class TestSupportsHyperlinks:
    """Environment heuristics."""

    @pytest.fixture(autouse=True)
    def clean_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in TERMINAL_VARS:
            monkeypatch.delenv(name, raising=False)

    def test_nothing_set(self) -> None:
        assert supports_hyperlinks() is False

    def test_term_program(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERM_PROGRAM", "iTerm.app")
        assert supports_hyperlinks() is True

    def test_term_program_must_match_exactly(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERM_PROGRAM", "Apple_Terminal")
        assert supports_hyperlinks() is False

    def test_term_substring(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERM", "xterm-kitty")
        assert supports_hyperlinks() is True

    def test_marker_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KITTY_WINDOW_ID", "1")
        assert supports_hyperlinks() is True

    def test_explicit_mapping_ignores_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERM_PROGRAM", "vscode")
        assert supports_hyperlinks({}) is False


class TestUrls:
    """Fragment detection and base URL resolution."""

    def test_fragment_only(self) -> None:
        assert is_fragment_only_url("#usage")
        assert not is_fragment_only_url("https://x.dev/#usage")
        assert not is_fragment_only_url("")

    def test_malformed_url_is_not_fragment(self) -> None:
        assert not is_fragment_only_url("http://[::1")

    def test_resolve_root_relative(self) -> None:
        assert resolve_relative_url("https://x.dev/docs", "/a.png") == "https://x.dev/docs/a.png"

    def test_absolute_unchanged(self) -> None:
        assert resolve_relative_url("https://x.dev/", "https://y.dev/a") == "https://y.dev/a"

    def test_no_base(self) -> None:
        assert resolve_relative_url("", "a.png") == "a.png"


class TestFormatters:
    """Built-in link formatters with the ascii style."""

    def test_default_text_and_url(self) -> None:
        data = LinkData(url="https://x.dev", text="Docs")
        assert DEFAULT_FORMATTER.format_link(data, make_ctx()) == "Docs https://x.dev"

    def test_default_hides_fragment_url(self) -> None:
        data = LinkData(url="#usage", text="Usage")
        assert DEFAULT_FORMATTER.format_link(data, make_ctx()) == "Usage"

    def test_default_resolves_base_url(self) -> None:
        data = LinkData(url="/guide", text="Guide", base_url="https://x.dev")
        assert DEFAULT_FORMATTER.format_link(data, make_ctx()) == "Guide https://x.dev/guide"

    def test_url_only(self) -> None:
        data = LinkData(url="https://x.dev", text="Docs")
        assert URL_ONLY_FORMATTER.format_link(data, make_ctx()) == "https://x.dev"

    def test_url_only_fragment_renders_nothing(self) -> None:
        data = LinkData(url="#usage", text="Usage")
        assert URL_ONLY_FORMATTER.format_link(data, make_ctx()) == ""

    def test_text_only_plain_terminal(self) -> None:
        data = LinkData(url="https://x.dev", text="Docs")
        assert TEXT_ONLY_FORMATTER.format_link(data, make_ctx()) == "Docs"

    def test_text_only_hyperlink_terminal(self) -> None:
        data = LinkData(url="https://x.dev", text="Docs")
        ctx = make_ctx({"TERM_PROGRAM": "vscode"})
        assert TEXT_ONLY_FORMATTER.format_link(data, ctx) == format_hyperlink(
            "Docs", "https://x.dev"
        )

    def test_hyperlink_unconditional(self) -> None:
        data = LinkData(url="https://x.dev", text="Docs")
        out = HYPERLINK_FORMATTER.format_link(data, make_ctx())
        assert out == format_hyperlink("Docs", "https://x.dev")

    def test_smart_falls_back_to_default(self) -> None:
        data = LinkData(url="https://x.dev", text="Docs")
        assert SMART_HYPERLINK_FORMATTER.format_link(data, make_ctx()) == "Docs https://x.dev"

    def test_smart_uses_hyperlink_when_supported(self) -> None:
        data = LinkData(url="https://x.dev", text="Docs")
        ctx = make_ctx({"TERM": "xterm-256color"})
        assert SMART_HYPERLINK_FORMATTER.format_link(data, ctx).startswith("\x1b]8;;")

    def test_table_links_hide_url(self) -> None:
        data = LinkData(url="https://x.dev", text="Docs", is_in_table=True)
        assert DEFAULT_FORMATTER.format_link(data, make_ctx()) == "Docs"
        inline = make_ctx(inline_table_links=True)
        assert DEFAULT_FORMATTER.format_link(data, inline) == "Docs https://x.dev"


class TestResolveLinkFormatter:
    """Normalizing the link_formatter option."""

    def test_none_is_default(self) -> None:
        assert resolve_link_formatter(None) is DEFAULT_FORMATTER

    def test_protocol_object_kept(self) -> None:
        assert resolve_link_formatter(URL_ONLY_FORMATTER) is URL_ONLY_FORMATTER
        assert isinstance(URL_ONLY_FORMATTER, LinkFormatter)

    def test_callable_adapted(self) -> None:
        formatter = resolve_link_formatter(lambda data, ctx: f"<{data.url}>")
        assert isinstance(formatter, FunctionFormatter)
        assert formatter.format_link(LinkData(url="u"), make_ctx()) == "<u>"

    def test_rejects_other_values(self) -> None:
        with pytest.raises(TypeError):
            resolve_link_formatter(42)  # type: ignore[arg-type]


class TestLinkFormatterErrors:
    """Formatter failures surface as LinkFormatterError."""

    def test_error_wrapped_with_cause(self) -> None:
        def broken(data: LinkData, ctx: RenderContext) -> str:
            raise ValueError("boom")

        location = SourceLocation(3, 5, source_file="README.md")
        link = Link("https://x.dev", None, (Text("x"),), location=location)
        doc = Document((Paragraph((link,)),))
        renderer = TermRenderer(style="ascii", link_formatter=broken)
        with pytest.raises(LinkFormatterError) as exc_info:
            renderer.render(doc)
        err = exc_info.value
        assert err.url == "https://x.dev"
        assert err.location == location
        assert isinstance(err.__cause__, ValueError)
        assert "boom" in str(err)

    def test_custom_formatter_output_used(self) -> None:
        doc = Document((Paragraph((Link("https://x.dev", None, (Text("x"),)),)),))
        renderer = TermRenderer(style="ascii", link_formatter=lambda d, c: f"[{d.text}]")
        assert "[x]" in renderer.render(doc)


class TestAutolinkShorthand:
    """GitHub URL shortening."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://github.com/o/r/issues/1", "o/r#1"),
            ("https://github.com/o/r/pull/2#issuecomment-9", "o/r#2 (comment)"),
            ("https://github.com/o/r/pull/3#discussion_r5", "o/r#3 (comment)"),
            ("https://github.com/o/r/pull/4#pullrequestreview-6", "o/r#4 (review)"),
            ("https://github.com/o/r/discussions/5#discussioncomment-7", "o/r#5 (comment)"),
            ("https://github.com/o/r/commit/abcdef1234567", "o/r@abcdef1"),
            ("https://github.com/o/r/pull/6/commits/1234567890", "o/r@1234567"),
        ],
    )
    def test_shortened(self, url: str, expected: str) -> None:
        assert detect_autolink(url) == expected

    def test_other_urls(self) -> None:
        assert detect_autolink("https://github.com/o/r") is None
        assert detect_autolink("https://example.com/o/r/issues/1") is None
