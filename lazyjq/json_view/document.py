"""Input document parsing.

Input may hold one JSON value or a stream of concatenated values (NDJSON and
friends). Values are decoded one after another with ``raw_decode``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

_WHITESPACE_RE = re.compile(r"\s*")


class DocumentError(ValueError):
    """Raised when input text is not a readable JSON value stream."""


@dataclass(frozen=True)
class JsonDocument:
    """Parsed input values plus the compact text handed to the filter engine."""

    values: tuple[Any, ...]
    engine_input: str

    @classmethod
    def from_values(cls, values: list[Any] | tuple[Any, ...]) -> JsonDocument:
        engine_input = "\n".join(json.dumps(value, ensure_ascii=False) for value in values)
        return cls(values=tuple(values), engine_input=engine_input)


def parse_json_stream(text: str, max_streams: int | None = None) -> JsonDocument:
    """Decode ``text`` into a :class:`JsonDocument`.

    ``max_streams`` keeps only the first N values; the rest of the input is
    not decoded at all.
    """
    decoder = json.JSONDecoder()
    source = text.lstrip("\ufeff")
    values: list[Any] = []
    pos = 0
    end = len(source)
    while True:
        pos = _WHITESPACE_RE.match(source, pos).end()
        if pos >= end:
            break
        if max_streams is not None and len(values) >= max_streams:
            break
        try:
            value, pos = decoder.raw_decode(source, pos)
        except json.JSONDecodeError as exc:
            raise DocumentError(f"invalid JSON input: {exc}") from exc
        values.append(value)

    if not values:
        raise DocumentError("input contains no JSON values")
    return JsonDocument.from_values(values)


__all__ = ["DocumentError", "JsonDocument", "parse_json_stream"]
