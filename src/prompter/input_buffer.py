"""Single-line editable text with a cursor."""

from __future__ import annotations

import re

from prompter.utils import graphemes

_WHITESPACE_RE = re.compile(r"\s")
_TRAILING_WORD_RE = re.compile(r"\S+\s*$")


class InputBuffer:
    """Text plus a cursor index, kept within ``0 <= cursor <= len(text)``.

    Character moves and deletes step over whole grapheme clusters so a
    combining mark or an emoji sequence is never split.
    """

    def __init__(self, text: str = "", cursor: int | None = None) -> None:
        self.text = text
        self.cursor = len(text) if cursor is None else max(0, min(cursor, len(text)))

    def __repr__(self) -> str:
        return f"InputBuffer(text={self.text!r}, cursor={self.cursor})"

    def set_text(self, text: str) -> None:
        """Replace the whole buffer and move the cursor to the end."""
        self.text = text
        self.cursor = len(text)

    # -- cursor movement ----------------------------------------------------

    def move_left(self) -> None:
        if self.cursor > 0:
            self.cursor -= len(graphemes(self.text[: self.cursor])[-1])

    def move_right(self) -> None:
        if self.cursor < len(self.text):
            self.cursor += len(graphemes(self.text[self.cursor :])[0])

    def move_home(self) -> None:
        self.cursor = 0

    def move_end(self) -> None:
        self.cursor = len(self.text)

    def move_word_left(self) -> None:
        """Jump to the start of the word before the cursor (or to 0)."""
        self.cursor = self._word_left_position()

    def move_word_right(self) -> None:
        """Jump just past the next whitespace after the cursor (or to the end)."""
        match = _WHITESPACE_RE.search(self.text, self.cursor)
        self.cursor = match.end() if match else len(self.text)

    # -- editing ------------------------------------------------------------

    def insert(self, chars: str) -> None:
        self.text = self.text[: self.cursor] + chars + self.text[self.cursor :]
        self.cursor += len(chars)

    def delete_backward(self) -> None:
        if self.cursor == 0:
            return
        start = self.cursor - len(graphemes(self.text[: self.cursor])[-1])
        self.text = self.text[:start] + self.text[self.cursor :]
        self.cursor = start

    def delete_forward(self) -> None:
        if self.cursor >= len(self.text):
            return
        end = self.cursor + len(graphemes(self.text[self.cursor :])[0])
        self.text = self.text[: self.cursor] + self.text[end:]

    def delete_word_backward(self) -> None:
        start = self._word_left_position()
        self.text = self.text[:start] + self.text[self.cursor :]
        self.cursor = start

    def clear(self) -> None:
        self.text = ""
        self.cursor = 0

    def kill_to_end(self) -> None:
        self.text = self.text[: self.cursor]

    def _word_left_position(self) -> int:
        match = _TRAILING_WORD_RE.search(self.text[: self.cursor])
        return match.start() if match else 0
