"""Value types shared by the query/search pipeline.

Every type here is immutable. The aggregator replaces values instead of
mutating them, so a snapshot handed to the renderer never changes underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ..json_view.formatter import JsonRow

EDITOR_FOCUS = "editor"
VIEWER_FOCUS = "viewer"


@dataclass(frozen=True)
class Pending:
    """Evaluation requested but not yet answered for the current generation."""


@dataclass(frozen=True)
class EvalOk:
    """Engine produced one or more JSON values."""

    values: tuple[Any, ...]


@dataclass(frozen=True)
class EvalEmpty:
    """Engine ran successfully but produced no output."""


@dataclass(frozen=True)
class EvalError:
    """Engine rejected the expression or could not be invoked.

    ``kind`` is ``"eval"`` for syntax/runtime errors and ``"unavailable"``
    when the engine binary is missing or failed to launch.
    """

    message: str
    kind: str = "eval"

    @property
    def unavailable(self) -> bool:
        return self.kind == "unavailable"


Outcome = Union[Pending, EvalOk, EvalEmpty, EvalError]

PENDING = Pending()
EMPTY = EvalEmpty()


@dataclass(frozen=True)
class QueryState:
    text: str
    generation: int
    outcome: Outcome = PENDING


@dataclass(frozen=True)
class SuggestionChunk:
    """One window's worth of matches produced by the suggestion loader."""

    generation: int
    window_index: int
    items: tuple[str, ...]
    truncated: bool = False


@dataclass(frozen=True)
class SuggestionPage:
    """Accumulated candidates for one generation.

    ``selected`` is ``None`` until the user starts cycling through completions.
    ``more_available`` is true when some window had more matches than one
    chunk could carry; ``loading`` is true while the scan is still running.
    """

    generation: int
    items: tuple[str, ...] = ()
    selected: int | None = None
    more_available: bool = False
    loading: bool = False
    error: str | None = None

    @property
    def selected_item(self) -> str | None:
        if self.selected is None or not (0 <= self.selected < len(self.items)):
            return None
        return self.items[self.selected]


@dataclass(frozen=True)
class SpinnerState:
    active: bool = False
    phase: int = 0


@dataclass(frozen=True)
class RenderSnapshot:
    """Point-in-time composite of everything the renderer needs.

    ``rows`` belong to the last successfully displayed result, which may be
    older than ``query.generation`` while a newer evaluation is pending or
    failed. ``error`` is the indicator drawn above those rows.
    """

    version: int
    query: QueryState
    suggestions: SuggestionPage
    spinner: SpinnerState
    rows: tuple[JsonRow, ...]
    displayed_generation: int | None
    error: EvalError | None = None
    empty_result: bool = False
    focus: str = EDITOR_FOCUS
    viewer_cursor: int = 0
    completion_active: bool = False
    status_message: str = ""


# Events posted by background workers and applied on the main thread.


@dataclass(frozen=True)
class EvalCompleted:
    generation: int
    outcome: Outcome


@dataclass(frozen=True)
class SuggestionChunkLoaded:
    chunk: SuggestionChunk


@dataclass(frozen=True)
class SuggestionLoadFinished:
    generation: int
    windows: int
    error: str | None = None
