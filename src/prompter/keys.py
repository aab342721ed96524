"""Keyboard input identification for raw terminal input.

Maps raw key events (one printable character or one complete escape /
control sequence) to key identifiers such as ``"ctrl+a"``, ``"left"`` or
``"alt+right"``, and provides ``matches_key`` for checking a raw event
against an identifier.
"""

from __future__ import annotations

KeyId = str

ESC = "\x1b"


# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    home = "home"
    end = "end"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


# ---------------------------------------------------------------------------
# Raw sequences -> key identifiers
# ---------------------------------------------------------------------------

SPECIAL_KEYS: dict[str, KeyId] = {
    "\r": "enter",
    "\x1bOM": "enter",
    "\t": "tab",
    "\x1b[Z": "shift+tab",
    " ": "space",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x1b": "escape",
}

LEGACY_KEY_SEQUENCES: dict[str, KeyId] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1b[3~": "delete",
}

MODIFIED_KEY_SEQUENCES: dict[str, KeyId] = {
    # xterm style: CSI 1 ; <modifier> <letter>
    "\x1b[1;3C": "alt+right",
    "\x1b[1;3D": "alt+left",
    "\x1b[1;5C": "ctrl+right",
    "\x1b[1;5D": "ctrl+left",
    "\x1b[1;2C": "shift+right",
    "\x1b[1;2D": "shift+left",
    # rxvt style
    "\x1bOc": "ctrl+right",
    "\x1bOd": "ctrl+left",
    # macOS terminals send ESC-prefixed arrows for option+arrow
    "\x1b\x1b[C": "alt+right",
    "\x1b\x1b[D": "alt+left",
    # readline meta bindings
    "\x1bf": "alt+f",
    "\x1bb": "alt+b",
    "\x1bd": "alt+d",
    "\x1b\x7f": "alt+backspace",
}

BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"


def parse_key(data: str) -> KeyId | None:
    """Return the key identifier for a raw key event, or ``None``.

    Printable characters are identified as themselves; unknown escape
    sequences and unassigned control characters yield ``None``.
    """
    if not data:
        return None

    for table in (SPECIAL_KEYS, LEGACY_KEY_SEQUENCES, MODIFIED_KEY_SEQUENCES):
        key_id = table.get(data)
        if key_id is not None:
            return key_id

    if len(data) == 1:
        code = ord(data)
        if 1 <= code <= 26:
            return f"ctrl+{chr(code - 1 + ord('a'))}"
        if is_printable(data):
            return data
        return None

    return None


def matches_key(data: str, key_id: KeyId) -> bool:
    """Check whether raw input *data* corresponds to *key_id*."""
    return parse_key(data) == key_id


def is_printable(data: str) -> bool:
    """Return ``True`` if *data* contains no control characters at all."""
    return bool(data) and not any(
        ord(ch) < 32 or ord(ch) == 0x7F or (0x80 <= ord(ch) <= 0x9F)
        for ch in data
    )


def is_escape_sequence(data: str) -> bool:
    return data.startswith(ESC)
