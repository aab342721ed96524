"""In-memory stand-in for ``prompter.terminal.ProcessTerminal``.

Sessions and prompt verbs run against ``VirtualTerminal`` in tests: writes
are recorded instead of printed and raw input is fed in by hand.
"""

from __future__ import annotations

from typing import Callable

from prompter.keys import BRACKETED_PASTE_END, BRACKETED_PASTE_START
from prompter.stdin_buffer import StdinBuffer


class VirtualTerminal:
    """Records every write and lets tests type and resize.

    Raw input goes through a ``StdinBuffer`` the same way it does for the
    real terminal, so ``simulate_input("ab\\r")`` arrives as three keys.
    """

    def __init__(self, columns: int = 80) -> None:
        self._columns = columns
        self._writes: list[str] = []
        self._running = False
        self._on_key: Callable[[str], None] | None = None
        self._on_resize: Callable[[], None] | None = None
        self._cursor_shown = True
        self._keys = StdinBuffer()
        self._keys.on_data(self._emit_key)
        self._keys.on_paste(self._emit_paste)
        self.start_count = 0
        self.stop_count = 0

    @property
    def columns(self) -> int:
        return self._columns

    # -- lifecycle ----------------------------------------------------------

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        self._on_key = on_input
        self._on_resize = on_resize
        self._running = True
        self.start_count += 1

    def stop(self) -> None:
        self._running = False
        self._on_key = None
        self._on_resize = None
        self._keys.clear()
        self.stop_count += 1

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        self._writes.append(data)

    def hide_cursor(self) -> None:
        self._cursor_shown = False
        self.write("\x1b[?25l")

    def show_cursor(self) -> None:
        self._cursor_shown = True
        self.write("\x1b[?25h")

    # -- inspection ---------------------------------------------------------

    @property
    def started(self) -> bool:
        return self._running

    @property
    def cursor_visible(self) -> bool:
        return self._cursor_shown

    @property
    def output(self) -> str:
        """Everything written so far, concatenated."""
        return "".join(self._writes)

    @property
    def writes(self) -> list[str]:
        return list(self._writes)

    @property
    def write_count(self) -> int:
        return len(self._writes)

    def clear_buffer(self) -> None:
        self._writes.clear()

    # -- driving ------------------------------------------------------------

    def simulate_input(self, data: str) -> None:
        """Feed *data* as if it had just been read from stdin."""
        if self._on_key is None:
            raise RuntimeError("Terminal is not started")
        self._keys.process(data)

    def simulate_resize(self, columns: int) -> None:
        self._columns = columns
        if self._on_resize is not None:
            self._on_resize()

    def _emit_key(self, data: str) -> None:
        if self._on_key is not None:
            self._on_key(data)

    def _emit_paste(self, data: str) -> None:
        if self._on_key is not None:
            self._on_key(BRACKETED_PASTE_START + data + BRACKETED_PASTE_END)


class FailingTerminal(VirtualTerminal):
    """A terminal whose ``stop`` fails after releasing its handlers."""

    def stop(self) -> None:
        super().stop()
        raise OSError("terminal went away")
