"""jq path candidates for autocomplete.

Paths are produced depth-first in document order (``.``, ``.a``, ``.a[0]``,
``."odd key"``) and cached as they are walked, so repeated reads from any
offset never re-walk the document.
"""

from __future__ import annotations

import json
import re
import threading
from collections.abc import Iterable, Iterator
from itertools import islice
from typing import Any

from ..pipeline.suggestions import CandidateSourceError

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _member_path(base: str, key: str) -> str:
    segment = key if _IDENTIFIER_RE.fullmatch(key) else json.dumps(key, ensure_ascii=False)
    if base == ".":
        return f".{segment}"
    return f"{base}.{segment}"


def _index_path(base: str, index: int) -> str:
    if base == ".":
        return f".[{index}]"
    return f"{base}[{index}]"


def iter_json_paths(values: Iterable[Any]) -> Iterator[str]:
    """Yield every distinct jq path reachable in ``values``, parents first."""
    seen: set[str] = set()
    for value in values:
        stack: list[tuple[Any, str]] = [(value, ".")]
        while stack:
            node, path = stack.pop()
            if path not in seen:
                seen.add(path)
                yield path
            if isinstance(node, dict):
                stack.extend(
                    (child, _member_path(path, str(key)))
                    for key, child in reversed(list(node.items()))
                )
            elif isinstance(node, list):
                stack.extend(
                    (child, _index_path(path, idx))
                    for idx, child in reversed(list(enumerate(node)))
                )


class JsonPathIndex:
    """Restartable, thread-safe cursor over the jq paths of a document."""

    def __init__(self, values: Iterable[Any]) -> None:
        self._paths = iter_json_paths(values)
        self._cache: list[str] = []
        self._exhausted = False
        self._lock = threading.Lock()

    @property
    def loaded_count(self) -> int:
        return len(self._cache)

    def read(self, offset: int, limit: int) -> list[str]:
        """Return up to ``limit`` paths starting at ``offset``."""
        offset = max(0, offset)
        limit = max(0, limit)
        with self._lock:
            wanted = offset + limit
            missing = wanted - len(self._cache)
            if missing > 0 and not self._exhausted:
                try:
                    batch = list(islice(self._paths, missing))
                except Exception as exc:
                    self._exhausted = True
                    raise CandidateSourceError(f"failed to index JSON paths: {exc}") from exc
                self._cache.extend(batch)
                if len(batch) < missing:
                    self._exhausted = True
            return self._cache[offset:wanted]


__all__ = ["JsonPathIndex", "iter_json_paths"]
