"""Prompt verbs: ``ask``, ``confirm``, ``file`` and ``multiple``.

Each verb builds a small display host (what to print, which keys it takes
over) and runs it in a ``Session``.  A ``Prompter`` owns the session that
is currently live so ``log_above`` can print around it; the module-level
functions use a shared default ``Prompter``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Sequence

from prompter import style
from prompter.completion import (
    common_prefix,
    completion_hint,
    expand_home_dir,
    make_file_completions,
)
from prompter.config import PromptSettings
from prompter.errors import NoChoicesError, PromptActiveError
from prompter.fuzzy import (
    StringOrChoice,
    choice_label,
    choice_name,
    choice_text,
    filter_and_rank,
    highlight,
)
from prompter.keybindings import get_keybindings
from prompter.session import PrintRequest, Session, start_display
from prompter.utils import slice_by_column, visible_width

if TYPE_CHECKING:
    from prompter.terminal import Terminal

logger = logging.getLogger(__name__)

_QUESTION_MARK = style.cyan("? ")
_CHECK_MARK = style.green("✔ ")


def _question(text: str, hint: str = " … ") -> str:
    return _QUESTION_MARK + style.bold(style.white(text.strip())) + style.dim(hint)


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


# ---------------------------------------------------------------------------
# Choice rendering
# ---------------------------------------------------------------------------


def render_choice(
    choice: StringOrChoice,
    selected: bool = False,
    query: str = "",
    arrow: bool = True,
) -> str:
    """Render one choice line.

    Characters matching *query* are highlighted, the hint is dimmed and the
    selected line gets an arrow plus an underline.
    """
    text = choice_label(choice)
    hint_start = -1
    if not isinstance(choice, str) and choice.hint:
        hint_start = visible_width(text)
        text += " " + choice.hint

    if query:
        text = highlight(text, query)

    # Dim after highlighting so the hint's highlight codes stay balanced.
    if hint_start != -1:
        text = slice_by_column(text, 0, hint_start + 1) + style.dim(
            slice_by_column(text, hint_start + 1, visible_width(text))
        )

    prefix = ""
    if arrow:
        prefix = style.green_bright("❯ ") if selected else "  "
    if not selected:
        return prefix + text
    return prefix + style.cyan(style.underline(text))


class _ChoiceList:
    """Filtered, scrollable view over a choice list.

    Tracks indices into the original list so that equal choices stay
    distinguishable.
    """

    def __init__(self, choices: Sequence[StringOrChoice], max_visible: int) -> None:
        self.choices = choices
        self.max_visible = max(1, max_visible)
        self.query = ""
        self.matches: list[int] = list(range(len(choices)))
        self.selected = 0
        self.offset = 0

    def set_query(self, query: str) -> None:
        self.query = query
        self.matches = filter_and_rank(
            range(len(self.choices)),
            query,
            get_text=lambda i: choice_text(self.choices[i]),
        )
        if not self.matches:
            self.selected = 0
            self.offset = 0
            return
        self.selected = min(self.selected, len(self.matches) - 1)
        self.offset = max(0, min(self.offset, len(self.matches) - self.max_visible))
        self._scroll_to_selected()

    def move(self, delta: int) -> None:
        if not self.matches:
            return
        self.selected = max(0, min(self.selected + delta, len(self.matches) - 1))
        self._scroll_to_selected()

    def current(self) -> int | None:
        return self.matches[self.selected] if self.matches else None

    def lines(self, render: Callable[[int, bool], str]) -> list[str]:
        visible = self.matches[self.offset : self.offset + self.max_visible]
        lines = [
            render(index, self.offset + row == self.selected)
            for row, index in enumerate(visible)
        ]
        return lines or [style.magenta("No matching choices")]

    def _scroll_to_selected(self) -> None:
        if self.selected < self.offset:
            self.offset = self.selected
        elif self.selected >= self.offset + self.max_visible:
            self.offset = self.selected - self.max_visible + 1


# ---------------------------------------------------------------------------
# Display hosts
# ---------------------------------------------------------------------------


class _TextHost:
    """Free text with up/down through earlier answers."""

    def __init__(self, prefix: str, history: list[str]) -> None:
        self.prefix = prefix
        self.history = history
        self.history_index = len(history)
        self.key_handler = self

    def print(self) -> PrintRequest:
        return PrintRequest(prefix=self.prefix)

    def try_handle(self, key: str, session: Session) -> bool:
        kb = get_keybindings()
        if kb.matches(key, "selectUp"):
            if self.history_index > 0:
                self.history_index -= 1
                session.set_input(self.history[self.history_index])
            return True
        if kb.matches(key, "selectDown"):
            if self.history_index < len(self.history):
                self.history_index += 1
                if self.history_index == len(self.history):
                    session.set_input("")
                else:
                    session.set_input(self.history[self.history_index])
            return True
        return False


class _ChoiceHost:
    """Fuzzy single choice."""

    def __init__(self, prefix: str, choices: _ChoiceList) -> None:
        self.prefix = prefix
        self.choices = choices
        self.key_handler = self

    def print(self) -> PrintRequest:
        choices = self.choices

        def render(index: int, selected: bool) -> str:
            return render_choice(choices.choices[index], selected, choices.query)

        return PrintRequest(prefix=self.prefix, lines=choices.lines(render))

    def input_changed(self, text: str) -> None:
        self.choices.set_query(text)

    def try_handle(self, key: str, session: Session) -> bool:
        kb = get_keybindings()
        if kb.matches(key, "submit"):
            if not self.choices.matches:
                session.terminal.write(style.BELL)
                return True
            return False
        if kb.matches(key, "selectUp"):
            self.choices.move(-1)
            return True
        if kb.matches(key, "selectDown"):
            self.choices.move(1)
            return True
        return False


class _MultipleHost:
    """Fuzzy multi choice; space toggles the highlighted line."""

    def __init__(self, prefix: str, choices: _ChoiceList, required: bool) -> None:
        self.prefix = prefix
        self.choices = choices
        self.required = required
        self.picked: set[int] = set()
        self.key_handler = self

    def print(self) -> PrintRequest:
        choices = self.choices

        def render(index: int, selected: bool) -> str:
            line = render_choice(choices.choices[index], selected, choices.query, arrow=False)
            if index in self.picked:
                return style.green(style.bold("☑ ")) + style.bold(line)
            return style.dim("☐ ") + line

        return PrintRequest(
            prefix=self.prefix,
            suffix=style.dim("  (Use <space> to select, <return> to submit)"),
            lines=choices.lines(render),
        )

    def input_changed(self, text: str) -> None:
        self.choices.set_query(text)

    def try_handle(self, key: str, session: Session) -> bool:
        kb = get_keybindings()
        if kb.matches(key, "submit"):
            if self.required and not self.picked:
                session.terminal.write(style.BELL)
                return True
            return False
        if kb.matches(key, "selectUp"):
            self.choices.move(-1)
            return True
        if kb.matches(key, "selectDown"):
            self.choices.move(1)
            return True
        if kb.matches(key, "toggleSelect"):
            index = self.choices.current()
            if index is not None:
                self.picked ^= {index}
            return True
        return False


class _FileHost:
    """Free text with tab completion of file paths."""

    def __init__(
        self, prefix: str, ext: str | None, cwd: str | None, max_hints: int
    ) -> None:
        self.prefix = prefix
        self.ext = ext
        self.cwd = cwd
        self.max_hints = max_hints
        self.text = ""
        self.key_handler = self

    def print(self) -> PrintRequest:
        completions = make_file_completions(self.text, self.ext, self.cwd)
        hints = [completion_hint(self.text, c) for c in completions]
        return PrintRequest(
            prefix=self.prefix,
            suffix=style.dim(" You can use tab completion"),
            lines=[hint for hint in hints if hint][: self.max_hints],
        )

    def input_changed(self, text: str) -> None:
        self.text = text

    def try_handle(self, key: str, session: Session) -> bool:
        if not get_keybindings().matches(key, "complete"):
            return False
        if not self.text:
            return True
        completions = make_file_completions(self.text, self.ext, self.cwd)
        if len(completions) == 1:
            session.set_input(self.text + completions[0])
        elif completions:
            shared = common_prefix(completions)
            if shared:
                session.set_input(self.text + shared)
        return True


class _ConfirmHost:
    """Yes/no; every key is consumed."""

    def __init__(self, prefix: str, default: bool, timeout: int) -> None:
        self.prefix = prefix
        self.default = default
        self.remaining = timeout
        self.answer: bool | None = None
        self.key_handler = self

    def print(self) -> PrintRequest:
        suffix = ""
        if self.remaining > 0:
            suffix = style.dim(
                f" defaulting to {_format_bool(self.default)} in {self.remaining} seconds"
            )
        return PrintRequest(
            prefix=self.prefix + style.green(_format_bool(self.default)) + " " + style.HIDE_CURSOR,
            suffix=suffix,
        )

    def try_handle(self, key: str, session: Session) -> bool:
        if key in ("y", "Y"):
            self.answer = True
        elif key in ("n", "N"):
            self.answer = False
        elif get_keybindings().matches(key, "submit"):
            self.answer = self.default
        else:
            return True
        session.stop()
        return True

    async def count_down(self, session: Session) -> None:
        """Tick once a second; at zero answer with the default."""
        while self.remaining > 0 and not session.is_stopped():
            await asyncio.sleep(1)
            if session.is_stopped():
                return
            self.remaining -= 1
            session.update()
        if self.answer is None and not session.is_stopped():
            self.answer = self.default
            session.stop()


# ---------------------------------------------------------------------------
# Prompter
# ---------------------------------------------------------------------------


class Prompter:
    """Runs prompts one at a time and tracks the live one.

    *terminal* defaults to a fresh ``ProcessTerminal`` per prompt.
    """

    def __init__(
        self,
        *,
        terminal: Terminal | None = None,
        settings: PromptSettings | None = None,
    ) -> None:
        self.settings = settings or PromptSettings.from_env()
        self.terminal = terminal
        self.history: list[str] = []
        self._session: Session | None = None

    @property
    def active_session(self) -> Session | None:
        session = self._session
        if session is None or session.is_stopped():
            return None
        return session

    # -- verbs --------------------------------------------------------------

    async def ask(self, text: str, choices: Sequence[StringOrChoice] | None = None) -> str:
        """Ask for free text, or for one of *choices* (returns its name)."""
        prefix = _question(text)

        if choices is None:
            session = self._start(_TextHost(prefix, self.history))
            answer = await self._wait(session)
            self._print_end_text(session, prefix, answer)
            self.history.append(answer)
            return answer

        if not choices:
            raise NoChoicesError()

        choice_list = _ChoiceList(choices, self.settings.max_visible_choices)
        session = self._start(_ChoiceHost(prefix, choice_list))
        await self._wait(session)

        index = choice_list.current()
        if index is None:
            self._print_end_text(session, prefix, "")
            return ""
        picked = choices[index]
        self._print_end_text(session, prefix, choice_label(picked))
        return choice_name(picked)

    async def confirm(self, message: str, default: bool = True, timeout: int = 0) -> bool:
        """Ask yes/no.  With *timeout* seconds, answer *default* when it runs out."""
        options = " (Y/n) · " if default else " (y/N) · "
        prefix = _question(message, options)
        host = _ConfirmHost(prefix, default, timeout)
        session = self._start(host)

        countdown: asyncio.Task[None] | None = None
        if timeout > 0:
            countdown = asyncio.ensure_future(host.count_down(session))
        try:
            await self._wait(session)
        finally:
            if countdown is not None:
                countdown.cancel()

        answer = host.default if host.answer is None else host.answer
        self._print_end_text(session, prefix, _format_bool(answer))
        return answer

    async def file(self, text: str, ext: str | None = None, cwd: str | None = None) -> str:
        """Ask for a path, with tab completion.  ``~`` is expanded in the result."""
        prefix = _question(text)
        host = _FileHost(prefix, ext, cwd, self.settings.max_visible_choices)
        session = self._start(host)
        answer = await self._wait(session)
        self._print_end_text(session, prefix, answer)
        return expand_home_dir(answer)

    async def multiple(
        self,
        text: str,
        choices: Sequence[StringOrChoice],
        required_at_least_one: bool = True,
    ) -> list[str]:
        """Pick any number of *choices*; names come back in their original order."""
        prefix = _question(text)
        if not choices:
            raise NoChoicesError()

        choice_list = _ChoiceList(choices, self.settings.max_visible_choices)
        host = _MultipleHost(prefix, choice_list, required_at_least_one)
        session = self._start(host)
        await self._wait(session)

        picked = [choice for i, choice in enumerate(choices) if i in host.picked]
        shown = ", ".join(choice_label(c) for c in picked) if picked else style.italic("(none)")
        self._print_end_text(session, prefix, shown)
        return [choice_name(c) for c in picked]

    def log_above(self, text: str) -> None:
        """Print *text* without disturbing the live prompt."""
        session = self.active_session
        if session is not None:
            session.write_above(text)
        elif self.terminal is not None:
            self.terminal.write(text + "\n")
        else:
            print(text)

    # -- internals ----------------------------------------------------------

    def _start(self, host: object) -> Session:
        if self.active_session is not None:
            raise PromptActiveError("Another prompt is still active")
        session = start_display(host, terminal=self.terminal, settings=self.settings)  # type: ignore[arg-type]
        self._session = session
        return session

    async def _wait(self, session: Session) -> str:
        try:
            return await session.result
        finally:
            if self._session is session:
                self._session = None

    @staticmethod
    def _print_end_text(session: Session, prefix: str, answer: str) -> None:
        # Rewrite the question row with a check mark and the answer.
        text = prefix.replace(_QUESTION_MARK, _CHECK_MARK, 1)
        session.terminal.write(
            f"\x1b[1A\x1b[J{text} {style.cyan(answer)}\n{style.SHOW_CURSOR}"
        )


# ---------------------------------------------------------------------------
# Module-level convenience API
# ---------------------------------------------------------------------------

_default_prompter: Prompter | None = None


def get_default_prompter() -> Prompter:
    global _default_prompter
    if _default_prompter is None:
        _default_prompter = Prompter()
    return _default_prompter


def set_default_prompter(prompter: Prompter) -> None:
    global _default_prompter
    _default_prompter = prompter


async def ask(text: str, choices: Sequence[StringOrChoice] | None = None) -> str:
    return await get_default_prompter().ask(text, choices)


async def confirm(message: str, default: bool = True, timeout: int = 0) -> bool:
    return await get_default_prompter().confirm(message, default, timeout)


async def file(text: str, ext: str | None = None, cwd: str | None = None) -> str:
    return await get_default_prompter().file(text, ext, cwd)


async def multiple(
    text: str,
    choices: Sequence[StringOrChoice],
    required_at_least_one: bool = True,
) -> list[str]:
    return await get_default_prompter().multiple(text, choices, required_at_least_one)


def log_above(text: str) -> None:
    get_default_prompter().log_above(text)
