"""File-path completion for the ``file`` prompt.

Completions are *suffixes*: strings to append to what the user typed.
Directories end with ``/``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


def expand_home_dir(path: str) -> str:
    """Expand a leading ``~`` to the user's home directory."""
    if not path.startswith("~"):
        return path
    rest = path[1:].lstrip("/")
    home = str(Path.home())
    expanded = os.path.join(home, rest) if rest else home
    # "~/" still names the directory itself.
    if path.endswith("/") and not expanded.endswith("/"):
        expanded += "/"
    return expanded


def common_prefix(strings: Iterable[str]) -> str:
    """Longest string every item starts with (``""`` for no items)."""
    return os.path.commonprefix(list(strings))


def _is_directory(entry: os.DirEntry) -> bool:
    # Follow symlinks, but treat broken links and permission errors as files.
    try:
        return entry.is_dir()
    except OSError:
        return False


def _keeps_extension(name: str, ext: str | None) -> bool:
    return ext is None or name.endswith(ext) or "." not in name


def _list_dir(path: str) -> list[os.DirEntry]:
    with os.scandir(path) as it:
        return sorted(it, key=lambda entry: entry.name)


def make_file_completions(
    text: str,
    ext: str | None = None,
    cwd: str | None = None,
) -> list[str]:
    """Return the suffixes that extend *text* to existing paths.

    Relative input is resolved against *cwd* (default: the working
    directory).  When *text* names a directory its visible children are
    offered too, prefixed with ``/`` unless *text* already ends with one.
    With *ext*, only files ending in it (and names without any dot) are
    offered.  Filesystem errors give no completions.
    """
    base = cwd or os.getcwd()
    try:
        if not text:
            return [
                entry.name + ("/" if _is_directory(entry) else "")
                for entry in _list_dir(base)
                if not entry.name.startswith(".") and _keeps_extension(entry.name, ext)
            ]

        expanded = expand_home_dir(text)
        path = os.path.abspath(os.path.join(base, expanded))
        parent = os.path.dirname(path)
        if not os.path.isdir(parent):
            return []

        completions: list[str] = []
        if os.path.isdir(path):
            separator = "" if expanded.endswith("/") else "/"
            for entry in _list_dir(path):
                if entry.name.startswith(".") or not _keeps_extension(entry.name, ext):
                    continue
                completions.append(
                    separator + entry.name + ("/" if _is_directory(entry) else "")
                )

        if not expanded.endswith("/"):
            stem = os.path.basename(path)
            for entry in _list_dir(parent):
                if not entry.name.startswith(stem) or not _keeps_extension(entry.name, ext):
                    continue
                completions.append(
                    entry.name[len(stem) :] + ("/" if _is_directory(entry) else "")
                )

        return completions
    except OSError as exc:
        logger.debug("No completions for %r: %s", text, exc)
        return []


def completion_hint(text: str, suffix: str) -> str:
    """Short label for one completion: the name of the path it leads to."""
    completed = text + suffix
    hint = os.path.basename(completed.rstrip("/"))
    if completed.endswith("/"):
        hint += "/"
    if suffix.startswith("/") and text and not text.endswith("/"):
        hint = "/" + hint
    return hint
