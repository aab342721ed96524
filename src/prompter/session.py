"""Live prompt sessions.

A ``Session`` owns the editable input line of one prompt: it receives key
events from the terminal, applies them to an ``InputBuffer`` (or lets the
host's ``KeyHandler`` take them first), repaints through a ``Renderer`` and
finally tears the terminal state down exactly once and resolves its
``result`` future.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from dataclasses import dataclass, field
from typing import Callable, Protocol

from prompter.config import PromptSettings
from prompter.debounce import Debouncer
from prompter.errors import PromptAborted
from prompter.input_buffer import InputBuffer
from prompter.keybindings import get_keybindings
from prompter.keys import BRACKETED_PASTE_END, BRACKETED_PASTE_START, is_printable
from prompter.render import Renderer
from prompter.terminal import ProcessTerminal, Terminal
from prompter.utils import display_lines, slice_by_column, visible_width

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Host-facing types
# ---------------------------------------------------------------------------


@dataclass
class PrintRequest:
    """Snapshot of what to show, produced by the host on every redraw.

    The editable input is drawn between ``prefix`` and ``suffix`` on the
    first row; ``lines`` follow below it.
    """

    prefix: str
    suffix: str = ""
    lines: list[str] = field(default_factory=list)


class KeyHandler(Protocol):
    """Lets a prompt take keys before the built-in line editing sees them."""

    def try_handle(self, key: str, session: Session) -> bool:
        """Return ``True`` if *key* was consumed."""
        ...


class DisplayHost(Protocol):
    """What a session needs from the prompt that drives it.

    ``input_changed(text)`` and ``key_handler`` are optional -- checked at
    call-sites via ``getattr``.
    """

    def print(self) -> PrintRequest: ...


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class Session:
    """One prompt's lifetime, from raw mode on to teardown."""

    def __init__(
        self,
        host: DisplayHost,
        terminal: Terminal,
        settings: PromptSettings | None = None,
    ) -> None:
        self.settings = settings or PromptSettings()
        self.terminal = terminal
        self._host = host
        self._buffer = InputBuffer()
        self._renderer = Renderer(terminal)
        self._debouncer = Debouncer(self.update, self.settings.debounce_ms / 1000)
        self._stopped = False

        self.result: asyncio.Future[str] = asyncio.get_running_loop().create_future()

    # -- accessors ----------------------------------------------------------

    @property
    def input(self) -> str:
        return self._buffer.text

    @property
    def cursor(self) -> int:
        return self._buffer.cursor

    @property
    def lines_down(self) -> int:
        return self._renderer.lines_down

    def is_stopped(self) -> bool:
        return self._stopped

    # -- lifecycle ----------------------------------------------------------

    def start(self) -> None:
        """Paint the prompt, then take over the terminal."""
        self.update()
        self.terminal.start(self.handle_key, self._on_resize)
        logger.debug("Prompt session started")

    def stop(self) -> None:
        """End the session without an answer; ``result`` resolves to ``""``."""
        self._finish("")

    def update(self) -> None:
        """Redraw right away, dropping any pending debounced redraw."""
        if self._stopped:
            return
        self._debouncer.cancel()
        width = self.terminal.columns
        if width <= 0:
            width = 80
        lines, cursor_column = self._layout(self._host.print(), width)
        self._renderer.render(lines, cursor_column)

    def set_input(self, text: str) -> None:
        """Replace the input, move the cursor to its end and redraw."""
        if self._stopped:
            return
        self._buffer.set_text(text)
        self._notify_input_changed()
        self.update()

    def write_above(self, text: str) -> None:
        """Print *text* on the prompt's row and repaint the prompt below it."""
        if self._stopped:
            self.terminal.write(text + "\n")
            return
        self._renderer.write_above(text)
        self.update()

    # -- input --------------------------------------------------------------

    def handle_key(self, key: str) -> None:
        """Apply one key event."""
        if self._stopped:
            return

        kb = get_keybindings()

        # Always honoured so a broken prompt can still be left.
        if kb.matches(key, "interrupt"):
            self._interrupt()
            return

        # The host sees every key first, pastes included.
        handler = getattr(self._host, "key_handler", None)
        if handler is not None and handler.try_handle(key, self):
            self._schedule_redraw()
            return

        old_text = self._buffer.text
        if key.startswith(BRACKETED_PASTE_START) and key.endswith(BRACKETED_PASTE_END):
            pasted = key[len(BRACKETED_PASTE_START) : -len(BRACKETED_PASTE_END)]
            self._buffer.insert(pasted.replace("\r", "").replace("\n", ""))
        elif self._edit(key):
            return
        if self._buffer.text != old_text:
            self._notify_input_changed()
        self._schedule_redraw()

    def _edit(self, key: str) -> bool:
        """Apply the built-in line editing.  Returns ``True`` if the session ended."""
        kb = get_keybindings()
        buffer = self._buffer

        if kb.matches(key, "eof") and not buffer.text:
            self._abort()
            return True
        if kb.matches(key, "submit"):
            self._finish(buffer.text)
            return True

        actions: list[tuple[str, Callable[[], None]]] = [
            ("cursorLeft", buffer.move_left),
            ("cursorRight", buffer.move_right),
            ("cursorWordLeft", buffer.move_word_left),
            ("cursorWordRight", buffer.move_word_right),
            ("cursorLineStart", buffer.move_home),
            ("cursorLineEnd", buffer.move_end),
            ("deleteCharBackward", buffer.delete_backward),
            ("deleteCharForward", buffer.delete_forward),
            ("deleteWordBackward", buffer.delete_word_backward),
            ("deleteToLineStart", buffer.clear),
            ("deleteToLineEnd", buffer.kill_to_end),
        ]
        for action, apply in actions:
            if kb.matches(key, action):  # type: ignore[arg-type]
                apply()
                return False

        if is_printable(key):
            buffer.insert(key)
        else:
            logger.debug("Ignoring key %r", key)
        return False

    def _notify_input_changed(self) -> None:
        callback = getattr(self._host, "input_changed", None)
        if callback is not None:
            callback(self._buffer.text)

    # -- rendering ----------------------------------------------------------

    def _schedule_redraw(self) -> None:
        if not self._stopped:
            self._debouncer.trigger()

    def _on_resize(self) -> None:
        logger.debug("Terminal resized to %d columns", self.terminal.columns)
        self.update()

    def _layout(self, request: PrintRequest, width: int) -> tuple[list[str], int]:
        head = request.prefix + self._buffer.text
        if visible_width(head) > width:
            first = head
        else:
            first = slice_by_column(head + request.suffix, 0, width)

        cursor_column = visible_width(request.prefix) + visible_width(
            self._buffer.text[: self._buffer.cursor]
        )
        return display_lines(first, width) + list(request.lines), cursor_column

    # -- teardown -----------------------------------------------------------

    def _finish(self, answer: str) -> None:
        if self._teardown() and not self.result.done():
            self.result.set_result(answer)

    def _abort(self) -> None:
        if self._teardown() and not self.result.done():
            self.result.set_exception(PromptAborted("Input ended with ctrl+d"))

    def _interrupt(self) -> None:
        if self._teardown() and not self.result.done():
            self.result.cancel()
        _raise_interrupt()

    def _teardown(self) -> bool:
        """Restore the terminal.  Returns ``False`` if already stopped."""
        if self._stopped:
            return False
        self._stopped = True

        steps: list[tuple[str, Callable[[], None]]] = [
            ("cancel redraw", self._debouncer.cancel),
            ("clear prompt", self._renderer.clear),
            ("stop terminal", self.terminal.stop),
            ("show cursor", self.terminal.show_cursor),
        ]
        for name, step in steps:
            try:
                step()
            except Exception:
                logger.exception("Prompt teardown step %r failed", name)

        logger.debug("Prompt session stopped")
        return True


def _raise_interrupt() -> None:
    """Deliver SIGINT to this process so the installed handler decides what happens."""
    if signal.getsignal(signal.SIGINT) == signal.SIG_IGN:
        raise SystemExit(130)
    signal.raise_signal(signal.SIGINT)


def start_display(
    host: DisplayHost,
    *,
    terminal: Terminal | None = None,
    settings: PromptSettings | None = None,
) -> Session:
    """Start a prompt session for *host*.

    Must be called from a running event loop.  The first paint happens
    before this returns.
    """
    settings = settings or PromptSettings.from_env()
    if terminal is None:
        terminal = ProcessTerminal(
            write_log_path=settings.write_log_path,
            stdin_timeout=settings.stdin_timeout,
        )
    session = Session(host, terminal, settings)
    session.start()
    return session
