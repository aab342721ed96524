"""Wait for child processes and collect their output."""

from __future__ import annotations

import asyncio
import subprocess

from prompter.errors import ProcessError


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def wait_for_process(message: str, process: subprocess.Popen) -> str:
    """Block until *process* exits and return its stdout.

    Raises ``ProcessError`` with the captured stderr on a non-zero exit
    code.  Pipe stdout/stderr when creating the process to capture them.
    """
    stdout, stderr = process.communicate()
    if process.returncode != 0:
        raise ProcessError(message, process.returncode, _decode(stderr))
    return _decode(stdout)


async def wait_for_process_async(message: str, process: asyncio.subprocess.Process) -> str:
    """Async variant of ``wait_for_process`` for ``asyncio`` subprocesses."""
    stdout, stderr = await process.communicate()
    returncode = process.returncode if process.returncode is not None else 0
    if returncode != 0:
        raise ProcessError(message, returncode, _decode(stderr))
    return _decode(stdout)
