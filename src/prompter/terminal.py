"""The terminal a prompt draws on.

``Terminal`` is the small surface sessions use; ``ProcessTerminal`` backs it
with the real stdin/stdout: raw key input read on the event loop, bracketed
paste, SIGWINCH resize notifications and restoring the tty afterwards.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
import termios
import tty
from typing import Callable, Protocol

from prompter.keys import BRACKETED_PASTE_END, BRACKETED_PASTE_START
from prompter.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_BRACKETED_PASTE_ENABLE = "\x1b[?2004h"
_BRACKETED_PASTE_DISABLE = "\x1b[?2004l"

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"

_READ_SIZE = 1024


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """What a prompt session needs from the terminal it draws on."""

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None: ...

    def stop(self) -> None: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...


# ---------------------------------------------------------------------------
# The real terminal
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Terminal backed by ``sys.stdin``/``sys.stdout``.

    ``start`` must be called from a running asyncio event loop: input is
    read through ``loop.add_reader`` and resize signals are handed to the
    loop, so every input, resize and timer event runs to completion before
    the next one is processed.
    """

    def __init__(self, *, write_log_path: str = "", stdin_timeout: float = 0.01) -> None:
        self._on_key: Callable[[str], None] | None = None
        self._on_resize: Callable[[], None] | None = None
        self._keys: StdinBuffer | None = None
        self._stdin_timeout = stdin_timeout
        self._loop: asyncio.AbstractEventLoop | None = None
        self._saved_termios: list | None = None
        self._saved_sigwinch: signal.Handlers | Callable | int | None = None
        self._log_path = write_log_path

    @property
    def columns(self) -> int:
        try:
            size = os.get_terminal_size(sys.stdout.fileno())
        except (OSError, ValueError):
            return 80
        return size.columns

    # -- lifecycle -----------------------------------------------------------

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        """Enable raw mode and bracketed paste, and begin reading stdin."""
        self._on_key = on_input
        self._on_resize = on_resize
        self._loop = asyncio.get_running_loop()

        fd = sys.stdin.fileno()
        self._saved_termios = termios.tcgetattr(fd)
        _set_raw_mode(fd)

        self._put(_BRACKETED_PASTE_ENABLE)

        self._saved_sigwinch = signal.getsignal(signal.SIGWINCH)
        signal.signal(signal.SIGWINCH, self._on_sigwinch)

        self._keys = StdinBuffer(timeout=self._stdin_timeout)
        self._keys.on_data(self._emit_key)
        self._keys.on_paste(self._emit_paste)
        self._loop.add_reader(fd, self._read_stdin)

    def stop(self) -> None:
        """Restore terminal state and remove all handlers.

        Every step runs even if an earlier one fails; the first failure is
        re-raised at the end.
        """
        errors: list[BaseException] = []
        fd = sys.stdin.fileno()

        if self._loop is not None:
            try:
                self._loop.remove_reader(fd)
            except (RuntimeError, ValueError, OSError) as exc:
                errors.append(exc)
            self._loop = None

        if self._keys is not None:
            self._keys.clear()
            self._keys = None

        if self._saved_sigwinch is not None:
            try:
                signal.signal(signal.SIGWINCH, self._saved_sigwinch)
            except (ValueError, OSError) as exc:
                errors.append(exc)
            self._saved_sigwinch = None

        self._put(_BRACKETED_PASTE_DISABLE)

        if self._saved_termios is not None:
            try:
                termios.tcsetattr(fd, termios.TCSADRAIN, self._saved_termios)
            except termios.error as exc:
                errors.append(exc)
            self._saved_termios = None

        self._on_key = None
        self._on_resize = None

        if errors:
            raise errors[0]

    # -- output --------------------------------------------------------------

    def write(self, data: str) -> None:
        """Send *data* to stdout, mirroring it into the write log if one is set."""
        self._put(data)

        if self._log_path:
            try:
                with open(self._log_path, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError:
                logger.debug("Could not append to write log %s", self._log_path)

    def hide_cursor(self) -> None:
        self._put(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._put(_SHOW_CURSOR)

    # -- private: input ------------------------------------------------------

    def _read_stdin(self) -> None:
        try:
            raw = os.read(sys.stdin.fileno(), _READ_SIZE)
        except OSError:
            return
        if not raw or self._keys is None:
            return
        self._keys.process(raw.decode("utf-8", errors="replace"))

    def _emit_key(self, data: str) -> None:
        if self._on_key is not None:
            self._on_key(data)

    def _emit_paste(self, data: str) -> None:
        if self._on_key is not None:
            self._on_key(BRACKETED_PASTE_START + data + BRACKETED_PASTE_END)

    # -- private: resize -----------------------------------------------------

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        # Signal handlers must not touch the screen; defer to the loop.
        if self._loop is not None and self._on_resize is not None:
            self._loop.call_soon_threadsafe(self._on_resize)

    # -- private: stdout -----------------------------------------------------

    def _put(self, data: str) -> None:
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError:
            pass


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _set_raw_mode(fd: int) -> None:
    """Put *fd* in raw mode but keep output post-processing.

    Keys arrive unprocessed (no echo, no line buffering, ctrl+c as a byte)
    while ``\\n`` written to stdout still returns the carriage.
    """
    tty.setraw(fd)
    attrs = termios.tcgetattr(fd)
    attrs[1] |= termios.OPOST | termios.ONLCR  # c_oflag
    termios.tcsetattr(fd, termios.TCSADRAIN, attrs)
