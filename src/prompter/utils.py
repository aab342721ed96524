"""Line metrics: ANSI handling, display width, and column-based slicing.

Everything here is pure.  Widths are measured per grapheme cluster so that
combining marks cost nothing and wide East-Asian characters and emoji cost
two columns.  Escape sequences never consume columns.
"""

from __future__ import annotations

import math
import re
import unicodedata

import grapheme
import wcwidth as _wcwidth


# ---------------------------------------------------------------------------
# Regex patterns for ANSI / OSC / APC sequences
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"                # CSI (SGR, cursor movement, ...)
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"     # OSC
    r"|\x1b[_P][^\x07\x1b]*(?:\x07|\x1b\\)"   # APC / DCS
)

_TAB_WIDTH = 3


def strip_ansi(text: str) -> str:
    """Remove every escape sequence from *text*."""
    return _STRIP_RE.sub("", text)


def graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters."""
    return list(grapheme.graphemes(text))


# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Zero-width characters (controls, combining marks) measure 0, emoji
    sequences measure 2, everything else is delegated to wcwidth.
    """
    if not g:
        return 0

    if g == "\t":
        return _TAB_WIDTH

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # regional indicators
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


def visible_width(text: str) -> int:
    """Calculate the number of terminal columns *text* occupies.

    * Strips escape sequences.
    * Treats tabs as 3 columns.
    * Uses a fast path for printable ASCII and caches everything else.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E or ch == "\t" for ch in stripped):
        return len(stripped) + stripped.count("\t") * (_TAB_WIDTH - 1)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


# ---------------------------------------------------------------------------
# extract_ansi_code
# ---------------------------------------------------------------------------


def extract_ansi_code(text: str, pos: int) -> tuple[str, int] | None:
    """Extract an escape sequence starting at *pos* in *text*.

    Returns ``(code, length)`` or ``None`` if *pos* does not start a
    complete CSI, OSC, APC or DCS sequence.
    """
    if pos + 1 >= len(text) or text[pos] != "\x1b":
        return None

    next_ch = text[pos + 1]

    # CSI: ESC[ <parameter bytes> <intermediate bytes> <final byte>
    if next_ch == "[":
        i = pos + 2
        while i < len(text) and "\x30" <= text[i] <= "\x3f":
            i += 1
        while i < len(text) and "\x20" <= text[i] <= "\x2f":
            i += 1
        if i < len(text) and "\x40" <= text[i] <= "\x7e":
            code = text[pos : i + 1]
            return (code, len(code))
        return None

    # OSC / APC / DCS: terminated by BEL or ST (ESC\)
    if next_ch in "]_P":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch == "\x07":
                code = text[pos : i + 1]
                return (code, len(code))
            if ch == "\x1b" and i + 1 < len(text) and text[i + 1] == "\\":
                code = text[pos : i + 2]
                return (code, len(code))
            i += 1
        return None

    return None


# ---------------------------------------------------------------------------
# slice_by_column
# ---------------------------------------------------------------------------


def _in_columns(col: int, width: int, start_col: int, end_col: int) -> bool:
    # Zero-width clusters stick to whatever precedes them, so adjacent
    # slices never both claim (or both drop) one.
    if width == 0:
        return start_col < col <= end_col or (col == start_col == 0 < end_col)
    return col >= start_col and col + width <= end_col


def slice_by_column(line: str, start_col: int, end_col: int) -> str:
    """Return the part of *line* whose visible columns lie in ``[start_col, end_col)``.

    A wide character straddling either boundary is dropped.  Escape
    sequences are never split: each one is kept where it occurs, and all of
    them (including those from the dropped regions) are appended again at
    the end so that closing codes are never lost.
    """
    result: list[str] = []
    codes: list[str] = []
    col = 0
    i = 0

    while i < len(line):
        extracted = extract_ansi_code(line, i)
        if extracted is not None:
            code, length = extracted
            result.append(code)
            codes.append(code)
            i += length
            continue

        # Measure the plain run up to the next escape sequence.
        j = line.find("\x1b", i + 1)
        if j == -1:
            j = len(line)
        for g in grapheme.graphemes(line[i:j]):
            w = _grapheme_width(g)
            if _in_columns(col, w, start_col, end_col):
                result.append(g)
            col += w
        i = j

    result.extend(codes)
    return "".join(result)


def display_lines(line: str, width: int) -> list[str]:
    """Split a styled line into rows of at most *width* columns."""
    total = visible_width(line)
    if width <= 0 or total < width:
        return [line]
    count = math.ceil(total / width)
    return [
        slice_by_column(line, i * width, (i + 1) * width) for i in range(count)
    ]
