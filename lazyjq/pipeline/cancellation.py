"""Generation counter and per-generation cancellation tokens.

Cancellation is cooperative: a token never interrupts running work, it only
answers whether the work it was issued for is still the newest.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


class GenerationCounter:
    """Thread-safe monotonic source of generations."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def advance(self) -> CancellationToken:
        """Start a new generation, invalidating every previously issued token."""
        with self._lock:
            self._current += 1
            generation = self._current
        return CancellationToken(generation=generation, counter=self)

    def token(self) -> CancellationToken:
        """Return a token for the generation that is current right now."""
        with self._lock:
            generation = self._current
        return CancellationToken(generation=generation, counter=self)

    def is_current(self, generation: int) -> bool:
        return generation == self._current


@dataclass(frozen=True)
class CancellationToken:
    generation: int
    counter: GenerationCounter = field(repr=False, compare=False)

    def is_current(self) -> bool:
        """Return whether no newer generation has started since this token was issued."""
        return self.counter.is_current(self.generation)


__all__ = ["CancellationToken", "GenerationCounter"]
