"""Exception types raised by prompter."""

from __future__ import annotations


class PrompterError(Exception):
    """Base class for all prompter errors."""


class NoChoicesError(PrompterError, ValueError):
    """A selection prompt was given an empty list of choices."""

    def __init__(self) -> None:
        super().__init__("No choices provided")


class PromptActiveError(PrompterError, RuntimeError):
    """A prompt was started while another one still owns the terminal."""


class PromptAborted(PrompterError):
    """The user ended input with ctrl+d on an empty line."""


class ProcessError(PrompterError):
    """A child process exited with a non-zero status."""

    def __init__(self, message: str, returncode: int, stderr: str) -> None:
        super().__init__(f"{message} failed with code {returncode}\n{stderr}")
        self.returncode = returncode
        self.stderr = stderr
