"""Tests for the debounce scheduler.

Uses an injected clock so quiet periods are exercised without sleeping.
"""

from __future__ import annotations

import unittest

from lazyjq.pipeline.debounce import DebounceScheduler


class _FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class DebounceSchedulerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = _FakeClock()
        self.fired: list[str] = []
        self.scheduler: DebounceScheduler[str] = DebounceScheduler(0.6, self.fired.append, clock=self.clock)

    def test_burst_of_schedules_fires_once_with_latest_payload(self) -> None:
        for text in (".", ".a", ".ab", ".abc"):
            self.scheduler.schedule(text)
            self.clock.advance(0.1)
            self.assertFalse(self.scheduler.poll())

        self.clock.advance(0.6)
        self.assertTrue(self.scheduler.poll())
        self.assertEqual(self.fired, [".abc"])

    def test_each_schedule_restarts_quiet_period(self) -> None:
        self.scheduler.schedule("first")
        self.clock.advance(0.5)
        self.scheduler.schedule("second")
        self.clock.advance(0.5)

        self.assertFalse(self.scheduler.poll())
        self.assertEqual(self.fired, [])

        self.clock.advance(0.2)
        self.assertTrue(self.scheduler.poll())
        self.assertEqual(self.fired, ["second"])

    def test_poll_after_firing_is_idle(self) -> None:
        self.scheduler.schedule("x")
        self.clock.advance(1.0)
        self.scheduler.poll()

        self.assertFalse(self.scheduler.armed)
        self.assertIsNone(self.scheduler.next_deadline())
        self.assertFalse(self.scheduler.poll())
        self.assertEqual(self.fired, ["x"])

    def test_next_deadline_tracks_latest_schedule(self) -> None:
        self.scheduler.schedule("x")
        self.assertAlmostEqual(self.scheduler.next_deadline(), 100.6)
        self.clock.advance(0.2)
        self.scheduler.schedule("y")
        self.assertAlmostEqual(self.scheduler.next_deadline(), 100.8)

    def test_poll_accepts_explicit_now(self) -> None:
        self.scheduler.schedule("x")
        self.assertFalse(self.scheduler.poll(now=100.5))
        self.assertTrue(self.scheduler.poll(now=100.7))

    def test_flush_fires_without_waiting(self) -> None:
        self.scheduler.schedule("now")
        self.assertTrue(self.scheduler.flush())
        self.assertEqual(self.fired, ["now"])
        self.assertFalse(self.scheduler.flush())

    def test_cancel_drops_pending_payload(self) -> None:
        self.scheduler.schedule("dropped")
        self.scheduler.cancel()
        self.clock.advance(1.0)

        self.assertFalse(self.scheduler.poll())
        self.assertEqual(self.fired, [])

    def test_schedule_after_close_is_ignored(self) -> None:
        self.scheduler.schedule("pending")
        self.scheduler.close()
        self.scheduler.schedule("late")
        self.clock.advance(1.0)

        self.assertTrue(self.scheduler.closed)
        self.assertFalse(self.scheduler.poll())
        self.assertFalse(self.scheduler.flush())
        self.assertEqual(self.fired, [])

    def test_zero_quiet_period_fires_on_next_poll(self) -> None:
        scheduler: DebounceScheduler[int] = DebounceScheduler(0, self.fired.append, clock=self.clock)
        scheduler.schedule(1)
        self.assertTrue(scheduler.poll())


if __name__ == "__main__":
    unittest.main()
