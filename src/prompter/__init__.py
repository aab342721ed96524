"""prompter: interactive terminal prompts with fuzzy choice filtering."""

# Configuration
from prompter.config import PromptSettings

# Errors
from prompter.errors import (
    NoChoicesError,
    ProcessError,
    PromptAborted,
    PromptActiveError,
    PrompterError,
)

# Fuzzy ranking
from prompter.fuzzy import (
    Choice,
    StringOrChoice,
    contiguous_spans,
    filter_and_rank,
    highlight,
    is_subsequence,
    score,
)

# Keybindings
from prompter.keybindings import (
    DEFAULT_PROMPT_KEYBINDINGS,
    KeybindingsManager,
    PromptAction,
    get_keybindings,
    set_keybindings,
)

# Keyboard input handling
from prompter.keys import Key, KeyId, matches_key, parse_key

# Child processes
from prompter.process import wait_for_process, wait_for_process_async

# Prompt verbs
from prompter.prompts import (
    Prompter,
    ask,
    confirm,
    file,
    get_default_prompter,
    log_above,
    multiple,
    render_choice,
    set_default_prompter,
)

# Sessions
from prompter.session import DisplayHost, KeyHandler, PrintRequest, Session, start_display

# Terminal
from prompter.terminal import ProcessTerminal, Terminal

# Utilities
from prompter.utils import slice_by_column, strip_ansi, visible_width

__all__ = [
    # Configuration
    "PromptSettings",
    # Errors
    "NoChoicesError",
    "ProcessError",
    "PromptAborted",
    "PromptActiveError",
    "PrompterError",
    # Fuzzy ranking
    "Choice",
    "StringOrChoice",
    "contiguous_spans",
    "filter_and_rank",
    "highlight",
    "is_subsequence",
    "score",
    # Keybindings
    "DEFAULT_PROMPT_KEYBINDINGS",
    "KeybindingsManager",
    "PromptAction",
    "get_keybindings",
    "set_keybindings",
    # Keys
    "Key",
    "KeyId",
    "matches_key",
    "parse_key",
    # Child processes
    "wait_for_process",
    "wait_for_process_async",
    # Prompt verbs
    "Prompter",
    "ask",
    "confirm",
    "file",
    "get_default_prompter",
    "log_above",
    "multiple",
    "render_choice",
    "set_default_prompter",
    # Sessions
    "DisplayHost",
    "KeyHandler",
    "PrintRequest",
    "Session",
    "start_display",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Utilities
    "slice_by_column",
    "strip_ansi",
    "visible_width",
]
