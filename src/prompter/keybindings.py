"""Prompt keybindings manager."""

from __future__ import annotations

from typing import Literal

from prompter.keys import KeyId, matches_key

PromptAction = Literal[
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorWordLeft",
    "cursorWordRight",
    "cursorLineStart",
    "cursorLineEnd",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
    "deleteToLineStart",
    "deleteToLineEnd",
    # Session
    "submit",
    "interrupt",
    "eof",
    # Selection/completion
    "selectUp",
    "selectDown",
    "toggleSelect",
    "complete",
]

PromptKeybindingsConfig = dict[PromptAction, KeyId | list[KeyId]]

DEFAULT_PROMPT_KEYBINDINGS: dict[PromptAction, KeyId | list[KeyId]] = {
    # Cursor movement
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorWordLeft": ["alt+left", "ctrl+left", "alt+b"],
    "cursorWordRight": ["alt+right", "ctrl+right", "alt+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    # Deletion
    "deleteCharBackward": "backspace",
    "deleteCharForward": ["delete", "ctrl+d"],
    "deleteWordBackward": ["ctrl+w", "alt+backspace"],
    "deleteToLineStart": "ctrl+u",
    "deleteToLineEnd": "ctrl+k",
    # Session
    "submit": "enter",
    "interrupt": "ctrl+c",
    "eof": "ctrl+d",
    # Selection/completion
    "selectUp": "up",
    "selectDown": "down",
    "toggleSelect": "space",
    "complete": "tab",
}


class KeybindingsManager:
    """Maps prompt actions to the keys that trigger them."""

    def __init__(self, config: PromptKeybindingsConfig | None = None) -> None:
        self._keys_by_action: dict[PromptAction, list[KeyId]] = {}
        self._load(config or {})

    def _load(self, config: PromptKeybindingsConfig) -> None:
        self._keys_by_action.clear()

        for source in (DEFAULT_PROMPT_KEYBINDINGS, config):
            for action, keys in source.items():
                bound = [keys] if isinstance(keys, str) else keys
                self._keys_by_action[action] = list(bound)

    def matches(self, data: str, action: PromptAction) -> bool:
        """Check if raw input *data* triggers *action*."""
        return any(matches_key(data, key) for key in self._keys_by_action.get(action, []))

    def get_keys(self, action: PromptAction) -> list[KeyId]:
        return self._keys_by_action.get(action, [])

    def set_config(self, config: PromptKeybindingsConfig) -> None:
        """Replace overrides; unspecified actions fall back to the defaults."""
        self._load(config)


_global_keybindings: KeybindingsManager | None = None


def get_keybindings() -> KeybindingsManager:
    global _global_keybindings
    if _global_keybindings is None:
        _global_keybindings = KeybindingsManager()
    return _global_keybindings


def set_keybindings(manager: KeybindingsManager) -> None:
    global _global_keybindings
    _global_keybindings = manager
