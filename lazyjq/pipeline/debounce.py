"""Timer-coalescing scheduler driven by the main loop.

A scheduler is either idle or armed with ``(payload, deadline)``. A new event
while armed replaces both; reaching the deadline fires the trigger once with
the latest payload and returns to idle. The loop calls :meth:`poll`; nothing
here owns a thread, so triggers run on the main thread.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class _Armed(Generic[T]):
    payload: T
    deadline: float


class DebounceScheduler(Generic[T]):
    """Fire ``trigger`` at most once per quiet period with the newest payload."""

    def __init__(
        self,
        quiet_seconds: float,
        trigger: Callable[[T], None],
        *,
        clock: Callable[[], float] = time.monotonic,
        name: str = "debounce",
    ) -> None:
        self.quiet_seconds = max(0.0, float(quiet_seconds))
        self._trigger = trigger
        self._clock = clock
        self.name = name
        self._armed: _Armed[T] | None = None
        self._closed = False

    @property
    def armed(self) -> bool:
        return self._armed is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def next_deadline(self) -> float | None:
        """Return the pending fire time, or ``None`` when idle."""
        armed = self._armed
        return armed.deadline if armed is not None else None

    def schedule(self, payload: T) -> None:
        """Record ``payload`` and restart the quiet period.

        Calls after :meth:`close` are ignored.
        """
        if self._closed:
            return
        self._armed = _Armed(payload=payload, deadline=self._clock() + self.quiet_seconds)

    def poll(self, now: float | None = None) -> bool:
        """Fire the trigger when the deadline has passed; return whether it fired."""
        armed = self._armed
        if armed is None or self._closed:
            return False
        if now is None:
            now = self._clock()
        if now < armed.deadline:
            return False
        self._armed = None
        logger.debug("%s fired", self.name)
        self._trigger(armed.payload)
        return True

    def flush(self) -> bool:
        """Fire a pending payload immediately, ignoring the remaining quiet period."""
        armed = self._armed
        if armed is None or self._closed:
            return False
        self._armed = None
        self._trigger(armed.payload)
        return True

    def cancel(self) -> None:
        self._armed = None

    def close(self) -> None:
        """Tear down: drop any pending payload and ignore future schedules."""
        self._armed = None
        self._closed = True


__all__ = ["DebounceScheduler"]
