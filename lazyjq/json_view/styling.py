"""Turn formatted JSON rows into ANSI text using Pygments styles.

Each row is expressed as a short Pygments token stream (indent, key,
punctuation, value) and run through a cached ``Terminal256Formatter``, so the
``--style`` option accepts any installed Pygments style name.
"""

from __future__ import annotations

from typing import Any

from pygments import format as pygments_format
from pygments.formatters import Terminal256Formatter
from pygments.styles import get_style_by_name
from pygments.token import Keyword, Name, Number, Punctuation, String, Text
from pygments.util import ClassNotFound

from .formatter import (
    STYLE_BOOLEAN,
    STYLE_BRACE,
    STYLE_BRACKET,
    STYLE_NULL,
    STYLE_NUMBER,
    STYLE_STRING,
    JsonRow,
)

DEFAULT_STYLE = "monokai"

_STYLE_TOKENS: dict[str, Any] = {
    STYLE_BRACE: Punctuation,
    STYLE_BRACKET: Punctuation,
    STYLE_STRING: String.Double,
    STYLE_NUMBER: Number,
    STYLE_BOOLEAN: Keyword.Constant,
    STYLE_NULL: Keyword.Constant,
}

_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()
_FORMATTERS: dict[str, Terminal256Formatter] = {}


def normalize_style(style: str) -> str:
    """Return ``style`` when Pygments knows it, otherwise the default style."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def row_tokens(row: JsonRow) -> list[tuple[Any, str]]:
    """Return the Pygments token stream for one row."""
    tokens: list[tuple[Any, str]] = []
    if row.depth and row.indent:
        tokens.append((Text.Whitespace, " " * (row.depth * row.indent)))
    if row.key is not None:
        tokens.append((Name.Tag, row.key_label()[:-2]))
        tokens.append((Punctuation, ": "))
    tokens.append((_STYLE_TOKENS.get(row.style, Text), row.text))
    if row.comma:
        tokens.append((Punctuation, ","))
    return tokens


def style_row(row: JsonRow, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Render one row as a single ANSI-styled line (no trailing newline)."""
    if no_color:
        return row.plain()
    formatter = _formatter_for_style(normalize_style(style))
    return pygments_format(row_tokens(row), formatter).rstrip("\n")


def style_rows(rows: list[JsonRow], style: str = DEFAULT_STYLE, no_color: bool = False) -> list[str]:
    return [style_row(row, style, no_color) for row in rows]


__all__ = ["DEFAULT_STYLE", "normalize_style", "row_tokens", "style_row", "style_rows"]
