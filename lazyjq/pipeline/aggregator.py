"""Single owner of query, suggestion, spinner and fold state.

Every ``on_*`` method runs on the main thread. Worker threads never touch
this object; they post events that the main loop feeds to
:meth:`ViewStateAggregator.apply_event`. Each accepted mutation builds a new
immutable :class:`RenderSnapshot` and hands it to ``on_publish``. Results
tagged with an older generation are dropped without publishing anything.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

from ..json_view.document import JsonDocument
from ..json_view.formatter import FoldState, JsonPath, JsonRow, format_stream
from .cancellation import CancellationToken, GenerationCounter
from .debounce import DebounceScheduler
from .evaluator import QueryEvaluator
from .state import (
    EDITOR_FOCUS,
    PENDING,
    VIEWER_FOCUS,
    EvalCompleted,
    EvalEmpty,
    EvalError,
    EvalOk,
    Outcome,
    QueryState,
    RenderSnapshot,
    SpinnerState,
    SuggestionChunk,
    SuggestionChunkLoaded,
    SuggestionLoadFinished,
    SuggestionPage,
)
from .suggestions import CandidateSource, SuggestionLoader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryRequest:
    """Debounced payload: the work to start once typing pauses."""

    text: str
    prefix: str
    token: CancellationToken


class ViewStateAggregator:
    def __init__(
        self,
        document: JsonDocument,
        *,
        evaluator: QueryEvaluator,
        loader: SuggestionLoader,
        candidates: CandidateSource,
        query_debounce_seconds: float = 0.6,
        fold_depth: int | None = None,
        indent: int = 2,
        clock: Callable[[], float] = time.monotonic,
        on_publish: Callable[[RenderSnapshot], None] | None = None,
        generations: GenerationCounter | None = None,
    ) -> None:
        self.document = document
        self._evaluator = evaluator
        self._loader = loader
        self._candidates = candidates
        self.generations = generations if generations is not None else GenerationCounter()
        self.query_debounce: DebounceScheduler[QueryRequest] = DebounceScheduler(
            query_debounce_seconds,
            self._dispatch_query,
            clock=clock,
            name="query-debounce",
        )
        self._fold_depth = fold_depth
        self._indent = indent
        self._on_publish = on_publish

        generation = self.generations.current
        self._query = QueryState(text="", generation=generation, outcome=PENDING)
        self._page = SuggestionPage(generation=generation)
        self._spinner = SpinnerState()
        self._fold = FoldState(fold_depth)
        self._displayed_values: tuple | None = None
        self._displayed_generation: int | None = None
        self._rows: tuple[JsonRow, ...] = ()
        self._error: EvalError | None = None
        self._empty_result = False
        self._focus = EDITOR_FOCUS
        self._viewer_cursor = 0
        self._completion_active = False
        self._status_message = ""
        self._version = 0
        self._snapshot = self._build_snapshot()

    # snapshots
    def snapshot(self) -> RenderSnapshot:
        """Most recently published snapshot."""
        return self._snapshot

    @property
    def generation(self) -> int:
        return self._query.generation

    def _build_snapshot(self) -> RenderSnapshot:
        return RenderSnapshot(
            version=self._version,
            query=self._query,
            suggestions=self._page,
            spinner=self._spinner,
            rows=self._rows,
            displayed_generation=self._displayed_generation,
            error=self._error,
            empty_result=self._empty_result,
            focus=self._focus,
            viewer_cursor=self._viewer_cursor,
            completion_active=self._completion_active,
            status_message=self._status_message,
        )

    def _publish(self) -> RenderSnapshot:
        self._version += 1
        self._snapshot = self._build_snapshot()
        if self._on_publish is not None:
            self._on_publish(self._snapshot)
        return self._snapshot

    # query lifecycle
    def start(self, text: str = "", prefix: str | None = None) -> int:
        """Begin the first generation and start its work without waiting for the debounce."""
        generation = self.on_query_changed(text, prefix)
        self.query_debounce.flush()
        return generation

    def on_query_changed(self, text: str, prefix: str | None = None) -> int:
        """Start a new generation for ``text`` and arm its work behind the debounce.

        ``prefix`` is the text before the editor cursor; it defaults to ``text``.
        """
        token = self.generations.advance()
        generation = token.generation
        logger.debug("generation %d for query %r", generation, text)
        self._query = QueryState(text=text, generation=generation, outcome=PENDING)
        self._page = SuggestionPage(generation=generation)
        self._completion_active = False
        self.query_debounce.schedule(
            QueryRequest(text=text, prefix=text if prefix is None else prefix, token=token)
        )
        self._publish()
        return generation

    def _dispatch_query(self, request: QueryRequest) -> None:
        """Start evaluation and candidate loading for a debounced request that is still current."""
        if not request.token.is_current():
            return
        self._evaluator.evaluate(request.text, self.document, request.token)
        if request.prefix.strip():
            self._loader.spawn_load(self._candidates, request.prefix, request.token)
            self._page = replace(self._page, loading=True)
            self._publish()

    def on_eval_result(self, outcome: Outcome, generation: int) -> bool:
        """Record an evaluation outcome; results of stale generations are dropped."""
        if generation != self._query.generation:
            logger.debug("discarding evaluation for stale generation %d", generation)
            return False
        self._query = replace(self._query, outcome=outcome)
        if isinstance(outcome, EvalOk):
            self._displayed_values = outcome.values
            self._displayed_generation = generation
            self._fold = FoldState(self._fold_depth)
            self._error = None
            self._empty_result = False
            self._viewer_cursor = 0
            self._recompute_rows()
        elif isinstance(outcome, EvalEmpty):
            self._displayed_values = ()
            self._displayed_generation = generation
            self._error = None
            self._empty_result = True
            self._viewer_cursor = 0
            self._recompute_rows()
        elif isinstance(outcome, EvalError):
            self._error = outcome
        self._publish()
        return True

    def on_suggestion_chunk(self, chunk: SuggestionChunk, generation: int) -> bool:
        """Append a chunk of matching candidates to the current suggestion page."""
        if generation != self._page.generation or chunk.generation != generation:
            logger.debug("discarding suggestion chunk for stale generation %d", generation)
            return False
        self._page = replace(
            self._page,
            items=self._page.items + chunk.items,
            more_available=self._page.more_available or chunk.truncated,
        )
        self._publish()
        return True

    def on_suggestion_finished(self, generation: int, error: str | None = None) -> bool:
        """Mark the current candidate search as done, keeping any failure message."""
        if generation != self._page.generation:
            return False
        self._page = replace(self._page, loading=False, error=error)
        self._publish()
        return True

    def on_spinner_tick(self, state: SpinnerState) -> bool:
        """Publish a new spinner frame."""
        if state == self._spinner:
            return False
        self._spinner = state
        self._publish()
        return True

    def apply_event(self, event: object) -> bool:
        """Apply one worker event; return whether it changed the snapshot."""
        if isinstance(event, EvalCompleted):
            return self.on_eval_result(event.outcome, event.generation)
        if isinstance(event, SuggestionChunkLoaded):
            return self.on_suggestion_chunk(event.chunk, event.chunk.generation)
        if isinstance(event, SuggestionLoadFinished):
            return self.on_suggestion_finished(event.generation, event.error)
        logger.debug("ignoring unknown event %r", event)
        return False

    # folding
    def _recompute_rows(self) -> None:
        """Re-render the displayed values under the current fold state."""
        values = self._displayed_values or ()
        self._rows = tuple(format_stream(values, self._fold, self._indent))
        self._clamp_cursor()

    def _clamp_cursor(self) -> None:
        """Keep the viewer cursor on an existing row."""
        self._viewer_cursor = max(0, min(self._viewer_cursor, len(self._rows) - 1))

    def on_fold_toggle(self, path: JsonPath) -> bool:
        """Toggle the container at ``path`` in the displayed result."""
        target = next((row for row in self._rows if row.path == path and row.foldable), None)
        if target is None:
            return False
        self._fold.toggle(path, target.depth)
        self._recompute_rows()
        for idx, row in enumerate(self._rows):
            if row.path == path:
                self._viewer_cursor = idx
                break
        self._publish()
        return True

    def on_fold_toggle_at_cursor(self) -> bool:
        """Toggle the container under the viewer cursor."""
        if not self._rows:
            return False
        return self.on_fold_toggle(self._rows[self._viewer_cursor].path)

    def on_fold_all(self, collapsed: bool) -> bool:
        """Collapse or expand every container in the displayed result."""
        if self._displayed_values is None:
            return False
        if collapsed:
            self._fold.collapse_all()
        else:
            self._fold.expand_all()
        self._viewer_cursor = 0
        self._recompute_rows()
        self._publish()
        return True

    # viewer / focus
    def on_viewer_move(self, delta: int) -> bool:
        """Move the viewer cursor by ``delta`` rows, clamped to the result."""
        previous = self._viewer_cursor
        self._viewer_cursor += delta
        self._clamp_cursor()
        if self._viewer_cursor == previous:
            return False
        self._publish()
        return True

    def on_viewer_jump(self, to_end: bool) -> bool:
        """Move the viewer cursor to the first or last row."""
        target = max(0, len(self._rows) - 1) if to_end else 0
        return self.on_viewer_move(target - self._viewer_cursor)

    def on_focus(self, focus: str) -> bool:
        """Give focus to the editor or the viewer; closes the completion list."""
        if focus not in (EDITOR_FOCUS, VIEWER_FOCUS) or focus == self._focus:
            return False
        self._focus = focus
        self._completion_active = False
        self._publish()
        return True

    def toggle_focus(self) -> bool:
        """Switch focus between the editor and the viewer."""
        return self.on_focus(VIEWER_FOCUS if self._focus == EDITOR_FOCUS else EDITOR_FOCUS)

    # completion
    def on_suggestion_select(self, delta: int) -> bool:
        """Move the completion selection, opening the completion list if closed."""
        items = self._page.items
        if not items:
            return False
        current = self._page.selected
        if current is None:
            selected = 0 if delta >= 0 else len(items) - 1
        else:
            selected = (current + delta) % len(items)
        self._page = replace(self._page, selected=selected)
        self._completion_active = True
        self._publish()
        return True

    def on_completion_close(self) -> bool:
        """Hide the completion list and clear its selection."""
        if not self._completion_active:
            return False
        self._completion_active = False
        self._page = replace(self._page, selected=None)
        self._publish()
        return True

    def accept_completion(self) -> str | None:
        """Close the completion list and return the selected candidate."""
        if not self._completion_active:
            return None
        selected = self._page.selected_item
        self.on_completion_close()
        return selected

    # status
    def on_status(self, message: str) -> bool:
        """Show ``message`` on the status line; an empty string clears it."""
        if message == self._status_message:
            return False
        self._status_message = message
        self._publish()
        return True

    # accessors for copy actions
    def displayed_values(self) -> tuple:
        """Values of the last successful evaluation."""
        return self._displayed_values or ()

    def result_text(self) -> str:
        """Displayed values as JSON text, one value per stream item."""
        return "\n".join(
            json.dumps(value, indent=self._indent or None, ensure_ascii=False)
            for value in self.displayed_values()
        )

    def close(self) -> None:
        """Stop scheduling work and invalidate every in-flight generation."""
        self.query_debounce.close()
        self.generations.advance()


__all__ = ["QueryRequest", "ViewStateAggregator"]
