"""ANSI-aware width measurement for styled result rows.

Escape sequences never count toward the width, wide characters count as two
columns, and combining marks count as none.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
RESET = "\033[0m"


def char_display_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return the number of terminal columns ``text`` occupies once drawn."""
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are copied through unchanged, so the caller only has to
    append a reset when the clipped text contains any.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    while i < len(text) and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        width = char_display_width(text[i])
        if col + width > max_cols:
            break
        out.append(text[i])
        col += width
        i += 1
    return "".join(out)


def reverse_video(text: str) -> str:
    """Highlight ``text`` in reverse video while keeping its colors."""
    if not text:
        return text
    # internal resets would otherwise cancel the reverse attribute
    return "\033[7m" + text.replace(RESET, "\033[0;7m") + RESET


def pad_to_width(text: str, width: int) -> str:
    gap = width - display_width(text)
    if gap <= 0:
        return text
    return text + " " * gap


__all__ = [
    "ANSI_ESCAPE_RE",
    "RESET",
    "char_display_width",
    "clip_ansi_line",
    "display_width",
    "pad_to_width",
    "reverse_video",
    "strip_ansi",
]
