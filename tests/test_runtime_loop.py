from __future__ import annotations

from contextlib import contextmanager
import unittest

from lazyjq.runtime.loop import run_main_loop


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0
        self.exited = 0

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1


class _FakeApp:
    def __init__(self, pump_results: list[bool]) -> None:
        self.pump_results = list(pump_results)
        self.sizes: list[tuple[int, int]] = []
        self.keys: list[str] = []
        self.paints = 0
        self.timeouts_requested = 0

    def observe_size(self, size: tuple[int, int]) -> None:
        self.sizes.append(size)

    def pump(self) -> bool:
        return self.pump_results.pop(0) if self.pump_results else False

    def paint(self) -> None:
        self.paints += 1

    def next_timeout_ms(self) -> int:
        self.timeouts_requested += 1
        return 42

    def handle_key(self, key: str) -> bool:
        self.keys.append(key)
        return key == "CTRL_C"


def _key_sequence(*items):
    pending = list(items)
    seen: list[tuple[int, int | None]] = []

    def reader(fd: int, timeout_ms: int | None) -> str:
        seen.append((fd, timeout_ms))
        item = pending.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    return reader, seen


class RuntimeLoopTests(unittest.TestCase):
    def test_loop_dispatches_keys_until_quit(self) -> None:
        app = _FakeApp([True, False, True])
        terminal = _FakeTerminal()
        reader, seen = _key_sequence("a", "", "UP", "CTRL_C", "never-read")

        run_main_loop(app, terminal, 7, get_size=lambda: (100, 30), key_reader=reader)

        self.assertEqual(app.keys, ["a", "UP", "CTRL_C"])
        self.assertEqual(app.paints, 2)
        self.assertEqual(seen[0], (7, 42))
        self.assertEqual(len(app.sizes), 4)
        self.assertEqual((terminal.entered, terminal.exited), (1, 1))

    def test_keyboard_interrupt_while_waiting_is_ignored(self) -> None:
        app = _FakeApp([])
        terminal = _FakeTerminal()
        reader, _seen = _key_sequence(KeyboardInterrupt(), "CTRL_C")

        run_main_loop(app, terminal, 0, get_size=lambda: (80, 24), key_reader=reader)

        self.assertEqual(app.keys, ["CTRL_C"])

    def test_terminal_restored_when_handler_raises(self) -> None:
        app = _FakeApp([])

        def explode(key: str) -> bool:
            raise RuntimeError("boom")

        app.handle_key = explode
        terminal = _FakeTerminal()
        reader, _seen = _key_sequence("x")

        with self.assertRaises(RuntimeError):
            run_main_loop(app, terminal, 0, get_size=lambda: (80, 24), key_reader=reader)
        self.assertEqual(terminal.exited, 1)


if __name__ == "__main__":
    unittest.main()
