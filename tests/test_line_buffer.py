"""Tests for the LineBuffer edit buffer."""

from __future__ import annotations

from rimtag.line_buffer import LineBuffer


def _typed(text: str) -> LineBuffer:
    buf = LineBuffer()
    for ch in text:
        buf.handle_key("space" if ch == " " else ch)
    return buf


class TestLineBufferInitialState:
    """LineBuffer starts empty with the cursor at 0."""

    def test_initial_value_is_empty(self) -> None:
        buf = LineBuffer()
        assert buf.value == ""
        assert buf.cursor == 0


class TestLineBufferCharacterInsertion:
    """Printable keys insert text at the cursor."""

    def test_typing(self) -> None:
        assert _typed("hi there").value == "hi there"

    def test_insertion_at_cursor_position(self) -> None:
        buf = _typed("ac")
        buf.handle_key("left")
        buf.handle_key("b")
        assert buf.value == "abc"

    def test_named_keys_are_not_inserted(self) -> None:
        buf = _typed("ab")
        assert buf.handle_key("enter") is False
        assert buf.handle_key("f5") is False
        assert buf.value == "ab"


class TestLineBufferDeletion:
    """Backspace/delete remove whole graphemes."""

    def test_backspace(self) -> None:
        buf = _typed("abc")
        buf.handle_key("backspace")
        assert buf.value == "ab"
        assert buf.cursor == 2

    def test_backspace_at_start_is_noop(self) -> None:
        buf = LineBuffer()
        buf.handle_key("backspace")
        assert buf.value == ""

    def test_backspace_removes_full_grapheme(self) -> None:
        buf = LineBuffer()
        buf.insert("ae\u0301")  # e + combining acute
        buf.handle_key("backspace")
        assert buf.value == "a"

    def test_forward_delete(self) -> None:
        buf = _typed("abc")
        buf.handle_key("home")
        buf.handle_key("delete")
        assert buf.value == "bc"
        assert buf.cursor == 0

    def test_delete_word_backward(self) -> None:
        buf = _typed("Red Alert")
        buf.handle_key("ctrl+w")
        assert buf.value == "Red "

    def test_delete_word_backward_skips_trailing_spaces(self) -> None:
        buf = _typed("Red Alert  ")
        buf.handle_key("ctrl+w")
        assert buf.value == "Red "

    def test_delete_to_line_start_and_end(self) -> None:
        buf = _typed("abcdef")
        for _ in range(3):
            buf.handle_key("left")
        buf.handle_key("ctrl+k")
        assert buf.value == "abc"
        buf.handle_key("left")
        buf.handle_key("ctrl+u")
        assert buf.value == "c"
        assert buf.cursor == 0


class TestLineBufferCursor:
    """Cursor movement stays inside the text."""

    def test_left_right_clamp(self) -> None:
        buf = _typed("ab")
        buf.handle_key("right")
        assert buf.cursor == 2
        for _ in range(5):
            buf.handle_key("left")
        assert buf.cursor == 0

    def test_home_end(self) -> None:
        buf = _typed("abc")
        buf.handle_key("home")
        assert buf.cursor == 0
        buf.handle_key("end")
        assert buf.cursor == 3

    def test_set_value_moves_cursor_to_end(self) -> None:
        buf = LineBuffer()
        buf.set_value("#ff0000")
        assert buf.cursor == 7

    def test_clear(self) -> None:
        buf = _typed("abc")
        buf.clear()
        assert buf.value == ""
        assert buf.cursor == 0
