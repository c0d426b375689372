"""Background evaluation of the current filter expression."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from ..engine import EngineError, EngineUnavailableError, FilterEngine
from ..json_view.document import JsonDocument
from .cancellation import CancellationToken
from .spinner import SpinnerCoordinator
from .state import EMPTY, EvalCompleted, EvalError, EvalOk, Outcome

logger = logging.getLogger(__name__)


def evaluate_outcome(engine: FilterEngine, expression: str, document: JsonDocument) -> Outcome:
    """Run ``expression`` and fold every result shape into an outcome value.

    A blank expression passes the document through without calling the engine.
    """
    if not expression.strip():
        return EvalOk(document.values) if document.values else EMPTY
    try:
        values = engine.evaluate(expression, document)
    except EngineUnavailableError as exc:
        return EvalError(str(exc), kind="unavailable")
    except EngineError as exc:
        return EvalError(str(exc))
    if not values:
        return EMPTY
    return EvalOk(tuple(values))


class QueryEvaluator:
    """Spawn one engine run per debounced query and post its outcome.

    Results are posted as :class:`EvalCompleted` events only while the run's
    token is still current; the aggregator re-checks on arrival.
    """

    def __init__(
        self,
        engine: FilterEngine,
        post: Callable[[object], None],
        spinner: SpinnerCoordinator,
    ) -> None:
        self.engine = engine
        self._post = post
        self._spinner = spinner

    def evaluate(self, expression: str, document: JsonDocument, token: CancellationToken) -> threading.Thread:
        """Start evaluation on a daemon thread and return it."""
        worker = threading.Thread(
            target=self.run,
            args=(expression, document, token),
            name=f"lazyjq-eval-{token.generation}",
            daemon=True,
        )
        worker.start()
        return worker

    def run(self, expression: str, document: JsonDocument, token: CancellationToken) -> Outcome | None:
        """Evaluate synchronously; return the posted outcome or ``None`` when superseded."""
        unit_id = f"eval-{token.generation}"
        self._spinner.mark_busy(unit_id)
        try:
            if not token.is_current():
                return None
            try:
                outcome = evaluate_outcome(self.engine, expression, document)
            except Exception as exc:
                logger.exception("evaluation of %r crashed", expression)
                outcome = EvalError(f"evaluation failed: {exc}")
            if not token.is_current():
                logger.debug("dropping stale evaluation for generation %d", token.generation)
                return None
            self._post(EvalCompleted(generation=token.generation, outcome=outcome))
            return outcome
        finally:
            self._spinner.mark_idle(unit_id)


__all__ = ["QueryEvaluator", "evaluate_outcome"]
