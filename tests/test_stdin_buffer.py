"""Tests for prompter.stdin_buffer.StdinBuffer."""

from __future__ import annotations

import asyncio

import pytest

from prompter.keys import BRACKETED_PASTE_END, BRACKETED_PASTE_START, ESC
from prompter.stdin_buffer import StdinBuffer, sequence_status, split_sequences


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class Collector:
    """Collects emitted data/paste events for assertions."""

    def __init__(self) -> None:
        self.data: list[str] = []
        self.pastes: list[str] = []

    def on_data(self, d: str) -> None:
        self.data.append(d)

    def on_paste(self, d: str) -> None:
        self.pastes.append(d)


def make_buffer(timeout: float = 0.01) -> tuple[StdinBuffer, Collector]:
    buf = StdinBuffer(timeout=timeout)
    col = Collector()
    buf.on_data(col.on_data)
    buf.on_paste(col.on_paste)
    return buf, col


# ---------------------------------------------------------------------------
# sequence_status / split_sequences
# ---------------------------------------------------------------------------


class TestSequenceStatus:
    @pytest.mark.parametrize(
        ("data", "status"),
        [
            ("a", "not-escape"),
            (ESC, "incomplete"),
            (f"{ESC}[", "incomplete"),
            (f"{ESC}[1;5", "incomplete"),
            (f"{ESC}[A", "complete"),
            (f"{ESC}[3~", "complete"),
            (f"{ESC}O", "incomplete"),
            (f"{ESC}OA", "complete"),
            (f"{ESC}b", "complete"),
            (f"{ESC}{ESC}", "incomplete"),
            (f"{ESC}{ESC}[C", "complete"),
            (f"{ESC}]0;title", "incomplete"),
            (f"{ESC}]0;title\x07", "complete"),
            (f"{ESC}[<0;5", "incomplete"),
            (f"{ESC}[<0;50;25M", "complete"),
        ],
    )
    def test_status(self, data: str, status: str) -> None:
        assert sequence_status(data) == status


class TestSplitSequences:
    def test_printable_run_is_split_per_character(self) -> None:
        assert split_sequences("abc") == (["a", "b", "c"], "")

    def test_mixed_input(self) -> None:
        assert split_sequences(f"a{ESC}[Db\r") == (["a", f"{ESC}[D", "b", "\r"], "")

    def test_trailing_partial_sequence_is_kept(self) -> None:
        assert split_sequences(f"x{ESC}[1;") == (["x"], f"{ESC}[1;")

    def test_alt_arrow_is_one_event(self) -> None:
        assert split_sequences(f"{ESC}{ESC}[C") == ([f"{ESC}{ESC}[C"], "")


# ---------------------------------------------------------------------------
# StdinBuffer.process
# ---------------------------------------------------------------------------


class TestProcess:
    def test_chars_before_escape_emitted_first(self) -> None:
        buf, col = make_buffer()
        buf.process(f"ab{ESC}[A")
        assert col.data == ["a", "b", f"{ESC}[A"]

    def test_lone_escape_without_loop_is_flushed(self) -> None:
        buf, col = make_buffer()
        buf.process(ESC)
        assert col.data == [ESC]
        assert buf.pending == ""

    @pytest.mark.asyncio
    async def test_split_csi_across_chunks(self) -> None:
        """ESC arrives in one chunk and [A in the next."""
        buf, col = make_buffer()
        buf.process(ESC)
        assert col.data == []
        assert buf.pending == ESC
        buf.process("[A")
        assert col.data == [f"{ESC}[A"]

    @pytest.mark.asyncio
    async def test_incomplete_sequence_flushed_on_timeout(self) -> None:
        buf, col = make_buffer(timeout=0.02)
        buf.process(ESC)
        await asyncio.sleep(0.05)
        assert col.data == [ESC]

    @pytest.mark.asyncio
    async def test_timeout_cancelled_on_new_data(self) -> None:
        buf, col = make_buffer(timeout=0.05)
        buf.process(ESC)
        buf.process("[A")
        await asyncio.sleep(0.08)
        assert col.data == [f"{ESC}[A"]

    @pytest.mark.asyncio
    async def test_clear_drops_pending(self) -> None:
        buf, col = make_buffer(timeout=0.02)
        buf.process(ESC)
        buf.clear()
        await asyncio.sleep(0.05)
        assert col.data == []
        assert buf.pending == ""


# ---------------------------------------------------------------------------
# Bracketed paste
# ---------------------------------------------------------------------------


class TestBracketedPaste:
    def test_paste_in_one_chunk(self) -> None:
        buf, col = make_buffer()
        buf.process(f"{BRACKETED_PASTE_START}hello world{BRACKETED_PASTE_END}")
        assert col.pastes == ["hello world"]
        assert col.data == []

    def test_paste_across_chunks(self) -> None:
        buf, col = make_buffer()
        buf.process(f"{BRACKETED_PASTE_START}hel")
        buf.process(f"lo{BRACKETED_PASTE_END}")
        assert col.pastes == ["hello"]

    def test_keys_around_paste(self) -> None:
        buf, col = make_buffer()
        buf.process(f"a{BRACKETED_PASTE_START}pasted{BRACKETED_PASTE_END}b")
        assert col.data == ["a", "b"]
        assert col.pastes == ["pasted"]

    def test_escape_sequences_inside_paste_are_not_keys(self) -> None:
        buf, col = make_buffer()
        buf.process(f"{BRACKETED_PASTE_START}x{ESC}[Ay{BRACKETED_PASTE_END}")
        assert col.pastes == [f"x{ESC}[Ay"]
        assert col.data == []
