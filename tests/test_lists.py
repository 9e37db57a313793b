"""Tests for hanging-indent list wrapping."""

from hypothesis import given, settings
from hypothesis import strategies as st

from tinta.ansi.lists import (
    ListMarker,
    detect_list_marker,
    split_at_plain_offset,
    wrap_list_content,
)
from tinta.ansi.sequences import strip_ansi, visible_width

words = st.text(alphabet="abcdefghij", min_size=1, max_size=12)
sentences = st.lists(words, min_size=1, max_size=40).map(" ".join)


def leading_spaces(line: str) -> int:
    plain = strip_ansi(line)
    return len(plain) - len(plain.lstrip(" "))


class TestDetectListMarker:
    """Marker detection on escape-free lines."""

    def test_bullet(self) -> None:
        assert detect_list_marker("• item") == ListMarker(width=2, length=2)

    def test_task_checkbox(self) -> None:
        assert detect_list_marker("[x] done") == ListMarker(width=4, length=4)

    def test_enumeration(self) -> None:
        assert detect_list_marker("  3. third") == ListMarker(width=3, length=3)

    def test_plain_line(self) -> None:
        assert detect_list_marker("just text") is None

    def test_blank_line(self) -> None:
        assert detect_list_marker("   ") is None


class TestSplitAtPlainOffset:
    """Splitting styled text by visible characters."""

    def test_plain(self) -> None:
        assert split_at_plain_offset("• item", 2) == ("• ", "item")

    def test_reset_after_marker_stays_in_head(self) -> None:
        head, tail = split_at_plain_offset("\x1b[1m• \x1b[0mitem", 2)
        assert head == "\x1b[1m• \x1b[0m"
        assert tail == "item"

    def test_offset_past_end(self) -> None:
        assert split_at_plain_offset("ab", 5) == ("ab", "")

    def test_zero_offset(self) -> None:
        assert split_at_plain_offset("ab", 0) == ("", "ab")

    def test_hyperlink_never_cut(self) -> None:
        text = "\x1b]8;;https://x.dev\x1b\\link\x1b]8;;\x1b\\ rest"
        head, tail = split_at_plain_offset(text, 4)
        assert head + tail == text
        assert strip_ansi(head) == "link"
        assert strip_ansi(tail) == " rest"


class TestWrapListContent:
    """Continuation lines line up after the marker."""

    def test_bullet_hanging_indent(self) -> None:
        text = "• Lorem ipsum dolor sit amet, consectetur adipiscing elit"
        lines = wrap_list_content(text, 24).split("\n")
        assert lines[0].startswith("• Lorem")
        assert len(lines) > 1
        for line in lines[1:]:
            assert leading_spaces(line) == 2

    def test_nested_enumeration(self) -> None:
        text = "  10. alpha beta gamma delta epsilon zeta eta theta"
        lines = wrap_list_content(text, 20).split("\n")
        assert len(lines) > 1
        for line in lines[1:]:
            assert leading_spaces(line) == 2 + 4

    def test_styled_marker(self) -> None:
        text = "\x1b[1m• \x1b[0m" + "word " * 12
        lines = wrap_list_content(text.rstrip(), 20).split("\n")
        assert lines[0].startswith("\x1b[1m• \x1b[0m")
        for line in lines[1:]:
            assert line.startswith("  word")

    def test_lines_without_marker_wrap_plainly(self) -> None:
        assert wrap_list_content("aaa bbb ccc", 7) == "aaa bbb\nccc"

    def test_blank_lines_pass_through(self) -> None:
        assert wrap_list_content("• a\n\n• b", 20) == "• a\n\n• b"

    @given(
        text=sentences,
        leading=st.integers(min_value=0, max_value=6),
        width=st.integers(min_value=24, max_value=60),
    )
    @settings(max_examples=150)
    def test_continuation_indent_property(self, text: str, leading: int, width: int) -> None:
        line = " " * leading + "• " + text
        lines = wrap_list_content(line, width).split("\n")
        assert leading_spaces(lines[0]) == leading
        for continuation in lines[1:]:
            assert leading_spaces(continuation) == leading + 2
        for wrapped in lines:
            assert visible_width(wrapped) <= width
