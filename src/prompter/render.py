"""Repaint the prompt region in place.

The terminal offers no portable way to ask where the cursor is, so the
``Renderer`` remembers how many rows below the prompt's first row it left
the cursor (``lines_down``) and moves back up before every repaint.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prompter.utils import slice_by_column

if TYPE_CHECKING:
    from prompter.terminal import Terminal

_CURSOR_TO_COLUMN_0 = "\x1b[0G"
_CLEAR_TO_END = "\x1b[J"
# Far right of the current row, clear below, then a fresh line
_FINISH = "\x1b[1000C\x1b[J\n"


def _terminal_width(terminal: Terminal) -> int:
    width = terminal.columns
    return width if width > 0 else 80


class Renderer:
    """Owns the cursor bookkeeping for one session."""

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal
        self.lines_down: int = 0

    def render(self, lines: list[str], cursor_column: int) -> None:
        """Repaint *lines* and park the cursor at *cursor_column* on the first row.

        Emits exactly one terminal write.  Calling it twice with the same
        arguments leaves the screen unchanged.
        """
        width = _terminal_width(self.terminal)

        out = [self._move_home(), _CURSOR_TO_COLUMN_0, _CLEAR_TO_END]
        out.append("\n".join(slice_by_column(line, 0, width) for line in lines))

        if len(lines) > 1:
            out.append(f"\x1b[{len(lines) - 1}F")
        else:
            out.append(_CURSOR_TO_COLUMN_0)

        # A full row leaves the cursor on its last column; only spilling past it moves down.
        if cursor_column > width:
            self.lines_down = cursor_column // width
            out.append(f"\x1b[{cursor_column % width}C")
            out.append(f"\x1b[{self.lines_down}B")
        else:
            self.lines_down = 0
            out.append(f"\x1b[{cursor_column}C")

        self.terminal.write("".join(out))

    def write_above(self, text: str) -> None:
        """Replace the prompt region with *text* plus a newline.

        The caller repaints the prompt afterwards, one row lower.
        """
        self.terminal.write(f"{self._move_home()}\x1b[1G{_CLEAR_TO_END}{text}\n")
        self.lines_down = 0

    def clear(self) -> None:
        """Leave the prompt region: clear what is below and start a new line."""
        self.terminal.write(self._move_home() + _FINISH)
        self.lines_down = 0

    def _move_home(self) -> str:
        return f"\x1b[{self.lines_down}A" if self.lines_down > 0 else ""
