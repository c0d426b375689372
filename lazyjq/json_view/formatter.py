"""Foldable, line-oriented rendering of JSON values.

Rows are derived from the structured value plus a :class:`FoldState` on every
call; nothing is cached between calls and no serialized copy of the document
is kept. A container renders as one placeholder row when collapsed, otherwise
as an open row, one row span per child, and a close row.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Union

JsonPath = tuple[Union[str, int], ...]

STYLE_BRACE = "brace"
STYLE_BRACKET = "bracket"
STYLE_STRING = "string"
STYLE_NUMBER = "number"
STYLE_BOOLEAN = "boolean"
STYLE_NULL = "null"

ROW_OPEN = "open"
ROW_CLOSE = "close"
ROW_VALUE = "value"
ROW_COLLAPSED = "collapsed"

COLLAPSED_MARK = "…"


@dataclass(frozen=True)
class JsonRow:
    """One display row of a formatted JSON value."""

    path: JsonPath
    depth: int
    indent: int
    kind: str
    style: str
    text: str
    key: str | None = None
    comma: bool = False

    @property
    def collapsed(self) -> bool:
        return self.kind == ROW_COLLAPSED

    @property
    def foldable(self) -> bool:
        return self.kind in (ROW_OPEN, ROW_CLOSE, ROW_COLLAPSED)

    def key_label(self) -> str:
        if self.key is None:
            return ""
        return json.dumps(self.key, ensure_ascii=False) + ": "

    def plain(self) -> str:
        """Return the unstyled text of this row including indentation."""
        comma = "," if self.comma else ""
        return f"{' ' * (self.depth * self.indent)}{self.key_label()}{self.text}{comma}"


class FoldState:
    """Expanded/collapsed flags per node path.

    Paths without an explicit flag follow ``fold_depth``: ``None`` keeps every
    container expanded, an integer ``N`` collapses containers at depth ``N``
    and deeper (depth 0 is a top-level value).
    """

    def __init__(self, fold_depth: int | None = None) -> None:
        self.fold_depth = fold_depth
        self._overrides: dict[JsonPath, bool] = {}

    def is_collapsed(self, path: JsonPath, depth: int) -> bool:
        override = self._overrides.get(path)
        if override is not None:
            return override
        return self.fold_depth is not None and depth >= self.fold_depth

    def set_collapsed(self, path: JsonPath, collapsed: bool) -> None:
        self._overrides[path] = bool(collapsed)

    def toggle(self, path: JsonPath, depth: int) -> bool:
        """Flip the flag for ``path`` and return whether it is now collapsed."""
        collapsed = not self.is_collapsed(path, depth)
        self._overrides[path] = collapsed
        return collapsed

    def expand_all(self) -> None:
        self.fold_depth = None
        self._overrides.clear()

    def collapse_all(self) -> None:
        self.fold_depth = 0
        self._overrides.clear()


def _scalar_style(value: Any) -> str:
    if value is None:
        return STYLE_NULL
    if isinstance(value, bool):
        return STYLE_BOOLEAN
    if isinstance(value, (int, float)):
        return STYLE_NUMBER
    return STYLE_STRING


def _append_rows(
    rows: list[JsonRow],
    value: Any,
    path: JsonPath,
    depth: int,
    key: str | None,
    comma: bool,
    fold_state: FoldState,
    indent: int,
) -> None:
    if isinstance(value, dict):
        open_text, close_text, style = "{", "}", STYLE_BRACE
        children: Iterable[tuple[Any, Any]] = value.items()
    elif isinstance(value, list):
        open_text, close_text, style = "[", "]", STYLE_BRACKET
        children = enumerate(value)
    else:
        rows.append(
            JsonRow(
                path=path,
                depth=depth,
                indent=indent,
                kind=ROW_VALUE,
                style=_scalar_style(value),
                text=json.dumps(value, ensure_ascii=False),
                key=key,
                comma=comma,
            )
        )
        return

    if not value:
        rows.append(JsonRow(path, depth, indent, ROW_VALUE, style, open_text + close_text, key, comma))
        return
    if fold_state.is_collapsed(path, depth):
        text = f"{open_text}{COLLAPSED_MARK}{close_text}"
        rows.append(JsonRow(path, depth, indent, ROW_COLLAPSED, style, text, key, comma))
        return

    rows.append(JsonRow(path, depth, indent, ROW_OPEN, style, open_text, key))
    is_object = isinstance(value, dict)
    last = len(value) - 1
    for position, (child_key, child) in enumerate(children):
        _append_rows(
            rows,
            child,
            path + (child_key,),
            depth + 1,
            child_key if is_object else None,
            position < last,
            fold_state,
            indent,
        )
    rows.append(JsonRow(path, depth, indent, ROW_CLOSE, style, close_text, None, comma))


def format_rows(
    value: Any,
    fold_state: FoldState,
    indent: int = 2,
    *,
    root: JsonPath = (),
) -> list[JsonRow]:
    """Format one JSON value into display rows rooted at ``root``."""
    rows: list[JsonRow] = []
    _append_rows(rows, value, root, 0, None, False, fold_state, max(0, indent))
    return rows


def format_stream(values: Iterable[Any], fold_state: FoldState, indent: int = 2) -> list[JsonRow]:
    """Format consecutive top-level values; value ``i`` is rooted at path ``(i,)``."""
    rows: list[JsonRow] = []
    for index, value in enumerate(values):
        rows.extend(format_rows(value, fold_state, indent, root=(index,)))
    return rows


__all__ = [
    "COLLAPSED_MARK",
    "FoldState",
    "JsonPath",
    "JsonRow",
    "ROW_CLOSE",
    "ROW_COLLAPSED",
    "ROW_OPEN",
    "ROW_VALUE",
    "STYLE_BOOLEAN",
    "STYLE_BRACE",
    "STYLE_BRACKET",
    "STYLE_NULL",
    "STYLE_NUMBER",
    "STYLE_STRING",
    "format_rows",
    "format_stream",
]
