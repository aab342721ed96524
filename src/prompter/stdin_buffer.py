"""Reassemble raw stdin chunks into complete key events.

Terminal reads can end in the middle of an escape sequence (``ESC`` in one
chunk, ``[A`` in the next).  ``StdinBuffer`` holds such partial sequences
back until they complete, or until a short timeout proves that a lone
``ESC`` really was the escape key.  Printable runs are split one character
at a time, so every emitted event is a single key.
"""

from __future__ import annotations

import asyncio
import re
from typing import Callable, Literal

from prompter.keys import BRACKETED_PASTE_END, BRACKETED_PASTE_START, ESC

SequenceStatus = Literal["complete", "incomplete", "not-escape"]

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def sequence_status(data: str) -> SequenceStatus:
    """Classify *data* as a complete escape sequence, a prefix of one, or neither."""
    if not data.startswith(ESC):
        return "not-escape"
    if len(data) == 1:
        return "incomplete"

    introducer = data[1]

    # ESC-prefixed sequence (option+arrow on macOS): ESC ESC [ C
    if introducer == ESC:
        if len(data) == 2:
            return "incomplete"
        return sequence_status(data[1:])

    if introducer == "[":
        if data.startswith(f"{ESC}[M"):
            # X10 mouse report: three payload bytes follow
            return "complete" if len(data) >= 6 else "incomplete"
        return _csi_status(data)

    if introducer in "]P_":
        # OSC / DCS / APC are terminated by ST, OSC also by BEL
        if data.endswith(f"{ESC}\\"):
            return "complete"
        if introducer == "]" and data.endswith("\x07"):
            return "complete"
        return "incomplete"

    if introducer == "O":
        # SS3: ESC O <letter>
        return "complete" if len(data) >= 3 else "incomplete"

    # Meta key: ESC followed by a single character
    return "complete"


def _csi_status(data: str) -> SequenceStatus:
    if len(data) < 3:
        return "incomplete"
    payload = data[2:]
    if not 0x40 <= ord(payload[-1]) <= 0x7E:
        return "incomplete"
    if payload.startswith("<"):
        return "complete" if _SGR_MOUSE_RE.match(payload) else "incomplete"
    return "complete"


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete key events.

    Returns ``(events, remainder)`` where *remainder* is an unfinished
    escape sequence to keep for the next chunk.
    """
    events: list[str] = []
    pos = 0

    while pos < len(buffer):
        if buffer[pos] != ESC:
            events.append(buffer[pos])
            pos += 1
            continue

        end = pos + 1
        while True:
            status = sequence_status(buffer[pos:end])
            if status != "incomplete":
                break
            if end >= len(buffer):
                return events, buffer[pos:]
            end += 1
        events.append(buffer[pos:end])
        pos = end

    return events, ""


class StdinBuffer:
    """Buffers stdin input and emits complete key events.

    Bracketed-paste content is collected separately and delivered through
    the paste callback as one string.
    """

    def __init__(self, *, timeout: float = 0.01) -> None:
        self._buffer: str = ""
        self._timeout: float = timeout
        self._timeout_handle: asyncio.TimerHandle | None = None
        self._paste_buffer: str | None = None

        self._on_data: Callable[[str], None] | None = None
        self._on_paste: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        """Set callback for complete key events."""
        self._on_data = callback

    def on_paste(self, callback: Callable[[str], None]) -> None:
        """Set callback for pasted text."""
        self._on_paste = callback

    @property
    def pending(self) -> str:
        """Unfinished escape sequence held back for the next chunk."""
        return self._buffer

    def process(self, data: str) -> None:
        """Feed a chunk read from stdin."""
        self._cancel_timeout()

        if self._paste_buffer is not None:
            self._collect_paste(data)
            return

        self._buffer += data
        start = self._buffer.find(BRACKETED_PASTE_START)
        if start != -1:
            before = self._buffer[:start]
            after = self._buffer[start + len(BRACKETED_PASTE_START) :]
            self._buffer = ""
            events, _ = split_sequences(before)
            self._emit_all(events)
            self._paste_buffer = ""
            self._collect_paste(after)
            return

        events, self._buffer = split_sequences(self._buffer)
        self._emit_all(events)

        if self._buffer:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                # No event loop: nothing more can arrive in time
                self._emit_all(self.flush())
                return
            self._timeout_handle = loop.call_later(self._timeout, self._on_timeout)

    def flush(self) -> list[str]:
        """Give up waiting and return the held-back remainder as one event."""
        self._cancel_timeout()
        if not self._buffer:
            return []
        events = [self._buffer]
        self._buffer = ""
        return events

    def clear(self) -> None:
        """Drop all buffered input and any pending timeout."""
        self._cancel_timeout()
        self._buffer = ""
        self._paste_buffer = None

    # -- internals ----------------------------------------------------------

    def _collect_paste(self, data: str) -> None:
        assert self._paste_buffer is not None
        self._paste_buffer += data
        end = self._paste_buffer.find(BRACKETED_PASTE_END)
        if end == -1:
            return
        content = self._paste_buffer[:end]
        remaining = self._paste_buffer[end + len(BRACKETED_PASTE_END) :]
        self._paste_buffer = None
        if self._on_paste is not None:
            self._on_paste(content)
        if remaining:
            self.process(remaining)

    def _emit_all(self, events: list[str]) -> None:
        if self._on_data is None:
            return
        for event in events:
            self._on_data(event)

    def _on_timeout(self) -> None:
        self._timeout_handle = None
        self._emit_all(self.flush())

    def _cancel_timeout(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None
