"""Fuzzy choice ranking and match highlighting.

A choice matches a query if all query characters appear in its text in
order (not necessarily consecutive).  Lower score = better match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar, Union

from prompter import style
from prompter.utils import slice_by_column, strip_ansi, visible_width

T = TypeVar("T")

MatchSpan = tuple[int, int]


@dataclass(frozen=True)
class Choice:
    """A selectable option.

    ``name`` is what a selection returns; ``message`` (the label, defaulting
    to ``name``) and ``hint`` only affect display and matching.
    """

    name: str
    message: str | None = None
    hint: str | None = None

    @property
    def label(self) -> str:
        return self.message or self.name


StringOrChoice = Union[str, Choice]


def choice_label(choice: StringOrChoice) -> str:
    return choice if isinstance(choice, str) else choice.label


def choice_name(choice: StringOrChoice) -> str:
    return choice if isinstance(choice, str) else choice.name


def choice_text(choice: StringOrChoice) -> str:
    """Flattened, unstyled text of a choice: label plus hint."""
    if isinstance(choice, str):
        return strip_ansi(choice)
    text = choice.label
    if choice.hint:
        text += " " + choice.hint
    return strip_ansi(text)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def is_subsequence(haystack: str, needle: str, case_insensitive: bool = True) -> bool:
    """Return ``True`` if every character of *needle* occurs in *haystack* in order."""
    if case_insensitive:
        haystack = haystack.lower()
        needle = needle.lower()

    j = 0
    for ch in haystack:
        if j == len(needle):
            break
        if ch == needle[j]:
            j += 1
    return j == len(needle)


def contiguous_spans(haystack: str, needle: str) -> list[MatchSpan]:
    """Decompose *needle* into the fewest, longest runs found in *haystack*.

    Greedy: at each step the longest prefix of the remaining needle is
    taken whose first occurrence after the previous run still leaves the
    rest of the needle a subsequence of the rest of the haystack.  Case is
    only folded when no exact-case decomposition exists.

    Returns inclusive ``(start, end)`` index pairs, left to right.
    """
    if not is_subsequence(haystack, needle, case_insensitive=False):
        if not is_subsequence(haystack, needle):
            raise ValueError(f"{needle!r} is not a subsequence of {haystack!r}")
        haystack = haystack.lower()
        needle = needle.lower()

    spans: list[MatchSpan] = []
    offset = 0
    while needle:
        for length in range(len(needle), 0, -1):
            index = haystack.find(needle[:length], offset)
            if index == -1:
                continue
            rest = needle[length:]
            if is_subsequence(haystack[index + length :], rest, case_insensitive=False):
                spans.append((index, index + length - 1))
                offset = index + length
                needle = rest
                break
    return spans


def score(text: str, query: str) -> float:
    """Priority of *text* for *query*; lower is better.

    Literal substring matches come first, ordered by position.  Other
    subsequence matches follow, preferring fewer runs, then longer runs,
    then an earlier first run, then shorter text.
    """
    position = text.find(query)
    if position != -1:
        return 1 + position / 1000

    spans = contiguous_spans(text, query)
    weight = sum((end - start + 1) ** 2 for start, end in spans)
    first_start = spans[0][0]
    return (
        2
        + len(spans) / 1000
        - weight / 1_000_000
        + first_start / 10_000_000
        + len(text) / 1_000_000_000
    )


def filter_and_rank(
    items: Iterable[T],
    query: str,
    get_text: Callable[[T], str] = choice_text,  # type: ignore[assignment]
) -> list[T]:
    """Keep the items whose text fuzzily matches *query*, best first.

    The sort is stable, so an empty query keeps the input order.
    """
    matching = [item for item in items if is_subsequence(get_text(item), query)]
    if not query:
        return matching
    return sorted(matching, key=lambda item: score(get_text(item), query))


# ---------------------------------------------------------------------------
# Highlighting
# ---------------------------------------------------------------------------


def highlight(
    text: str,
    query: str,
    highlight_style: Callable[[str], str] = style.highlight,
) -> str:
    """Wrap the characters of *text* that match *query* in *highlight_style*.

    *text* may already be styled; unmatched regions are copied through
    untouched.
    """
    plain = strip_ansi(text)
    if not query or not is_subsequence(plain, query):
        return text

    out: list[str] = []
    last_col = 0
    for start, end in contiguous_spans(plain, query):
        start_col = visible_width(plain[:start])
        end_col = visible_width(plain[: end + 1])
        out.append(slice_by_column(text, last_col, start_col))
        out.append(highlight_style(slice_by_column(text, start_col, end_col)))
        last_col = end_col
    out.append(slice_by_column(text, last_col, visible_width(text)))
    return "".join(out)
