"""SGR styling helpers.

Each helper wraps text in an opening code and the matching close code, so
nested styles end cleanly without a full ``ESC[0m`` reset.  An inner span
that closes with the same code as its wrapper reopens the wrapper right
after, so the outer style carries on past it.
"""

from __future__ import annotations

from typing import Callable

StyleFn = Callable[[str], str]


def _style(open_code: int, close_code: int) -> StyleFn:
    opening = f"\x1b[{open_code}m"
    closing = f"\x1b[{close_code}m"

    def apply(text: str) -> str:
        # Inner spans that share our close code would end us early; reopen after them.
        if closing in text:
            text = text.replace(closing, closing + opening)
        return f"{opening}{text}{closing}"

    return apply


bold = _style(1, 22)
dim = _style(2, 22)
italic = _style(3, 23)
underline = _style(4, 24)

green = _style(32, 39)
magenta = _style(35, 39)
cyan = _style(36, 39)
white = _style(37, 39)
green_bright = _style(92, 39)

BELL = "\x07"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


def highlight(text: str) -> str:
    """Style used for the characters of a choice that match the query."""
    return cyan(bold(underline(text)))
