"""Tests for prompter.input_buffer.InputBuffer."""

from __future__ import annotations

from prompter.input_buffer import InputBuffer


class TestConstruction:
    def test_cursor_defaults_to_end(self) -> None:
        assert InputBuffer("abc").cursor == 3

    def test_cursor_is_clamped(self) -> None:
        assert InputBuffer("abc", cursor=10).cursor == 3
        assert InputBuffer("abc", cursor=-2).cursor == 0

    def test_set_text_moves_cursor_to_end(self) -> None:
        buf = InputBuffer("abc", cursor=0)
        buf.set_text("hello")
        assert (buf.text, buf.cursor) == ("hello", 5)


class TestEditingScenario:
    def test_backspace_home_and_kill(self) -> None:
        buf = InputBuffer("abcdef")
        buf.delete_backward()
        buf.delete_backward()
        assert (buf.text, buf.cursor) == ("abcd", 4)
        buf.move_home()
        assert buf.cursor == 0
        buf.kill_to_end()
        assert (buf.text, buf.cursor) == ("", 0)


class TestCursorMovement:
    def test_left_and_right_are_clamped(self) -> None:
        buf = InputBuffer("ab", cursor=0)
        buf.move_left()
        assert buf.cursor == 0
        buf.move_end()
        buf.move_right()
        assert buf.cursor == 2

    def test_moves_over_whole_graphemes(self) -> None:
        buf = InputBuffer("ae\u0301")
        buf.move_left()
        assert buf.cursor == 1
        buf.move_right()
        assert buf.cursor == 3

    def test_word_right_stops_after_next_space(self) -> None:
        buf = InputBuffer("foo bar baz", cursor=0)
        buf.move_word_right()
        assert buf.cursor == 4
        buf.move_word_right()
        assert buf.cursor == 8

    def test_word_right_without_space_goes_to_end(self) -> None:
        buf = InputBuffer("foo bar", cursor=5)
        buf.move_word_right()
        assert buf.cursor == 7

    def test_word_left_goes_to_word_start(self) -> None:
        buf = InputBuffer("foo bar  ")
        buf.move_word_left()
        assert buf.cursor == 4
        buf.move_word_left()
        assert buf.cursor == 0

    def test_word_left_from_middle_of_word(self) -> None:
        buf = InputBuffer("foo barbaz", cursor=7)
        buf.move_word_left()
        assert buf.cursor == 4

    def test_word_left_over_leading_spaces(self) -> None:
        buf = InputBuffer("   ")
        buf.move_word_left()
        assert buf.cursor == 0


class TestDeletion:
    def test_backspace_at_start_is_noop(self) -> None:
        buf = InputBuffer("ab", cursor=0)
        buf.delete_backward()
        assert (buf.text, buf.cursor) == ("ab", 0)

    def test_delete_forward(self) -> None:
        buf = InputBuffer("abc", cursor=1)
        buf.delete_forward()
        assert (buf.text, buf.cursor) == ("ac", 1)

    def test_delete_forward_at_end_is_noop(self) -> None:
        buf = InputBuffer("abc")
        buf.delete_forward()
        assert buf.text == "abc"

    def test_backspace_removes_whole_grapheme(self) -> None:
        buf = InputBuffer("xe\u0301")
        buf.delete_backward()
        assert (buf.text, buf.cursor) == ("x", 1)

    def test_delete_word_backward(self) -> None:
        buf = InputBuffer("foo bar baz", cursor=8)
        buf.delete_word_backward()
        assert (buf.text, buf.cursor) == ("foo baz", 4)

    def test_clear(self) -> None:
        buf = InputBuffer("abc", cursor=1)
        buf.clear()
        assert (buf.text, buf.cursor) == ("", 0)

    def test_kill_to_end_keeps_prefix(self) -> None:
        buf = InputBuffer("abcdef", cursor=2)
        buf.kill_to_end()
        assert (buf.text, buf.cursor) == ("ab", 2)


class TestInsert:
    def test_insert_at_cursor(self) -> None:
        buf = InputBuffer("ac", cursor=1)
        buf.insert("b")
        assert (buf.text, buf.cursor) == ("abc", 2)
