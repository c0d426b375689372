"""Chunked, cancellable loading of autocomplete candidates.

The candidate source is scanned in fixed windows of ``load_chunk_size`` raw
items. Each window is filtered against the prefix and delivered as one chunk
of at most ``result_chunk_size`` matches. The token is checked before every
window and before every delivery, so a superseded scan stops at the next
window boundary and delivers nothing further.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from typing import Protocol

from .cancellation import CancellationToken
from .spinner import SpinnerCoordinator
from .state import SuggestionChunk, SuggestionChunkLoaded, SuggestionLoadFinished

logger = logging.getLogger(__name__)

RANKING_SCAN = "scan"
RANKING_SHORTEST = "shortest"
RANKING_POLICIES = (RANKING_SCAN, RANKING_SHORTEST)


class CandidateSourceError(Exception):
    """The candidate source failed while being scanned."""


class CandidateSource(Protocol):
    def read(self, offset: int, limit: int) -> Sequence[str]: ...


def rank_matches(matches: list[str], ranking: str) -> list[str]:
    if ranking == RANKING_SHORTEST:
        return sorted(matches, key=len)
    return matches


def scan_candidates(
    source: CandidateSource,
    prefix: str,
    token: CancellationToken,
    emit: Callable[[SuggestionChunk], None],
    *,
    load_chunk_size: int,
    result_chunk_size: int,
    ranking: str = RANKING_SCAN,
) -> int:
    """Scan ``source`` window by window and return how many windows were scanned."""
    load_chunk_size = max(1, load_chunk_size)
    result_chunk_size = max(1, result_chunk_size)
    offset = 0
    windows = 0
    while token.is_current():
        window = source.read(offset, load_chunk_size)
        if not window:
            break
        windows += 1
        offset += len(window)

        matches = rank_matches([item for item in window if item.startswith(prefix)], ranking)
        if not token.is_current():
            break
        if matches:
            emit(
                SuggestionChunk(
                    generation=token.generation,
                    window_index=windows - 1,
                    items=tuple(matches[:result_chunk_size]),
                    truncated=len(matches) > result_chunk_size,
                )
            )
        if len(window) < load_chunk_size:
            break
    return windows


class SuggestionLoader:
    """Run :func:`scan_candidates` on daemon threads, one per generation."""

    def __init__(
        self,
        post: Callable[[object], None],
        spinner: SpinnerCoordinator,
        *,
        load_chunk_size: int,
        result_chunk_size: int,
        ranking: str = RANKING_SCAN,
    ) -> None:
        self._post = post
        self._spinner = spinner
        self.load_chunk_size = load_chunk_size
        self.result_chunk_size = result_chunk_size
        self.ranking = ranking if ranking in RANKING_POLICIES else RANKING_SCAN

    def spawn_load(self, source: CandidateSource, prefix: str, token: CancellationToken) -> threading.Thread:
        worker = threading.Thread(
            target=self.run,
            args=(source, prefix, token),
            name=f"lazyjq-suggest-{token.generation}",
            daemon=True,
        )
        worker.start()
        return worker

    def run(self, source: CandidateSource, prefix: str, token: CancellationToken) -> int:
        """Scan synchronously, posting chunks and a final completion event."""
        unit_id = f"suggest-{token.generation}"
        self._spinner.mark_busy(unit_id)
        windows = 0
        error: str | None = None

        def emit(chunk: SuggestionChunk) -> None:
            nonlocal windows
            windows = chunk.window_index + 1
            self._post(SuggestionChunkLoaded(chunk))

        try:
            try:
                windows = scan_candidates(
                    source,
                    prefix,
                    token,
                    emit,
                    load_chunk_size=self.load_chunk_size,
                    result_chunk_size=self.result_chunk_size,
                    ranking=self.ranking,
                )
            except CandidateSourceError as exc:
                error = str(exc)
            except Exception as exc:
                logger.exception("suggestion scan for %r crashed", prefix)
                error = f"suggestion loading failed: {exc}"
            if error is not None:
                logger.debug("suggestion scan stopped after %d windows: %s", windows, error)
            if token.is_current():
                self._post(SuggestionLoadFinished(generation=token.generation, windows=windows, error=error))
            return windows
        finally:
            self._spinner.mark_idle(unit_id)


__all__ = [
    "CandidateSource",
    "CandidateSourceError",
    "RANKING_POLICIES",
    "RANKING_SCAN",
    "RANKING_SHORTEST",
    "SuggestionLoader",
    "rank_matches",
    "scan_candidates",
]
