"""Terminal text utilities: width measurement, truncation, grapheme handling.

Token chips and option rows are measured and clipped in terminal columns,
not code points, so wide and combining characters line up correctly.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth


# ---------------------------------------------------------------------------
# Grapheme segmentation
# ---------------------------------------------------------------------------


def split_graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters."""
    return list(grapheme.graphemes(text))


def drop_last_grapheme(text: str) -> str:
    """Return *text* without its final grapheme cluster."""
    if not text:
        return text
    clusters = split_graphemes(text)
    return "".join(clusters[:-1])


# ---------------------------------------------------------------------------
# ANSI / APC stripping
# ---------------------------------------------------------------------------

_ESCAPE_RE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"        # CSI
    r"|\x1b\]8;;[^\x07]*\x07"       # OSC 8
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"  # APC (cursor marker)
)

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        # VS16, ZWJ, skin tones, regional indicators
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def strip_ansi(text: str) -> str:
    return _ESCAPE_RE.sub("", text)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    ANSI sequences are ignored and tabs count as three columns. Results for
    non-ASCII strings are cached.
    """
    if not text:
        return 0

    stripped = strip_ansi(text).replace("\t", "   ")
    if not stripped:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


# ---------------------------------------------------------------------------
# Truncation
# ---------------------------------------------------------------------------


def _take_columns(text: str, max_cols: int) -> str:
    """Return a prefix of *text* that fits in *max_cols* columns.

    Escape sequences are kept; the cut happens on a grapheme boundary.
    """
    result: list[str] = []
    cols = 0
    pos = 0

    while pos < len(text):
        escape = _ESCAPE_RE.match(text, pos)
        if escape is not None:
            result.append(escape.group(0))
            pos = escape.end()
            continue

        next_escape = _ESCAPE_RE.search(text, pos)
        end = next_escape.start() if next_escape else len(text)
        for g in grapheme.graphemes(text[pos:end]):
            w = _grapheme_width(g)
            if cols + w > max_cols:
                return "".join(result)
            result.append(g)
            cols += w
        pos = end

    return "".join(result)


def truncate_to_width(
    text: str,
    max_width: int,
    ellipsis: str = "...",
    pad: bool = False,
) -> str:
    """Truncate *text* to fit within *max_width* visible columns.

    When the text is too wide it is cut and *ellipsis* appended (the ellipsis
    counts towards the width). With *pad* the result is right-padded to
    exactly *max_width*.
    """
    if max_width <= 0:
        return ""

    text_width = visible_width(text)
    if text_width <= max_width:
        if pad:
            return text + " " * (max_width - text_width)
        return text

    target_width = max_width - visible_width(ellipsis)
    if target_width <= 0:
        return _take_columns(ellipsis, max_width)

    result = _take_columns(text, target_width) + ellipsis
    if pad:
        result += " " * max(0, max_width - visible_width(result))
    return result

