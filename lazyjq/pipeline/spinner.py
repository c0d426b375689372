"""Busy-unit reference counting and spinner animation timing."""

from __future__ import annotations

import threading
import time
from collections import Counter
from collections.abc import Callable

from .state import SpinnerState

SPINNER_FRAMES: tuple[str, ...] = ("|", "/", "-", "\\")


def spinner_glyph(state: SpinnerState) -> str:
    """Return the frame glyph for ``state``; blank when idle."""
    if not state.active:
        return " "
    return SPINNER_FRAMES[state.phase % len(SPINNER_FRAMES)]


class SpinnerCoordinator:
    """Track in-flight work units and advance a spinner phase while any are busy.

    ``mark_busy``/``mark_idle`` may be called from worker threads. ``tick`` is
    called by the main loop and returns a new :class:`SpinnerState` only when
    something visible changed.
    """

    def __init__(
        self,
        interval_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval_seconds = max(0.01, float(interval_seconds))
        self._clock = clock
        self._lock = threading.Lock()
        self._busy: Counter[str] = Counter()
        self._count = 0
        self._state = SpinnerState()
        self._next_tick_at = 0.0

    def mark_busy(self, unit_id: str) -> None:
        with self._lock:
            self._busy[unit_id] += 1
            self._count += 1

    def mark_idle(self, unit_id: str) -> None:
        """Release one busy mark for ``unit_id``; unmatched releases are ignored."""
        with self._lock:
            if self._busy[unit_id] <= 0:
                return
            self._busy[unit_id] -= 1
            if self._busy[unit_id] == 0:
                del self._busy[unit_id]
            self._count -= 1

    @property
    def busy_count(self) -> int:
        return self._count

    @property
    def active(self) -> bool:
        return self._count > 0

    @property
    def state(self) -> SpinnerState:
        return self._state

    def next_deadline(self) -> float | None:
        """Return when ``tick`` next has work to do, or ``None`` when fully idle."""
        if self.active and self._state.active:
            return self._next_tick_at
        if self.active != self._state.active:
            return self._clock()
        return None

    def tick(self, now: float | None = None) -> SpinnerState | None:
        if now is None:
            now = self._clock()
        previous = self._state
        if self.active:
            if not previous.active:
                state = SpinnerState(active=True, phase=previous.phase)
                self._next_tick_at = now + self.interval_seconds
            elif now >= self._next_tick_at:
                state = SpinnerState(active=True, phase=previous.phase + 1)
                self._next_tick_at = now + self.interval_seconds
            else:
                return None
        elif previous.active:
            state = SpinnerState(active=False, phase=previous.phase)
        else:
            return None
        self._state = state
        return state


__all__ = ["SPINNER_FRAMES", "SpinnerCoordinator", "spinner_glyph"]
