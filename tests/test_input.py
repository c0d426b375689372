"""Regression tests for raw-key decoding.

Covers ESC timing, arrow/modifier/meta sequences, UTF-8 text, and
control-key token mapping.
"""

import os
import time
import unittest

from lazyjq import input as input_mod


class ReadKeyRegressionTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def _read_all(self, data: bytes, count: int) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, data)
            return [input_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        keys = self._read_all(b"\x1b", 1)
        elapsed = time.monotonic() - started

        self.assertEqual(keys, ["ESC"])
        self.assertLess(elapsed, 0.2)

    def test_arrow_sequences(self) -> None:
        self.assertEqual(self._read_all(b"\x1b[A\x1b[B\x1b[C\x1b[D", 4), ["UP", "DOWN", "RIGHT", "LEFT"])

    def test_shift_arrows_switch_mode_tokens(self) -> None:
        self.assertEqual(self._read_all(b"\x1b[1;2A\x1b[1;2B", 2), ["SHIFT_UP", "SHIFT_DOWN"])

    def test_alt_word_motions(self) -> None:
        self.assertEqual(
            self._read_all(b"\x1bb\x1bf\x1bd\x1b[1;3D", 4),
            ["ALT_LEFT", "ALT_RIGHT", "ALT_D", "ALT_LEFT"],
        )

    def test_home_end_delete_and_shift_tab(self) -> None:
        self.assertEqual(
            self._read_all(b"\x1b[H\x1b[F\x1b[3~\x1b[1~\x1b[4~\x1b[Z\x1bOA", 7),
            ["HOME", "END", "DELETE", "HOME", "END", "SHIFT_TAB", "UP"],
        )

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._read_all(b"\x1ba", 2), ["ESC", "a"])

    def test_control_keys(self) -> None:
        keys = self._read_all(b"\x03\x0f\x11\x10\x0e\x17\x15\t\r\x7f", 10)
        self.assertEqual(
            keys,
            ["CTRL_C", "CTRL_O", "CTRL_Q", "CTRL_P", "CTRL_N", "CTRL_W", "CTRL_U", "TAB", "ENTER", "BACKSPACE"],
        )

    def test_multibyte_utf8_character_is_one_key(self) -> None:
        self.assertEqual(self._read_all("é✓".encode("utf-8"), 2), ["é", "✓"])

    def test_timeout_without_input_returns_empty_string(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            self.assertEqual(input_mod.read_key(read_fd, timeout_ms=10), "")
        finally:
            os.close(read_fd)
            os.close(write_fd)


if __name__ == "__main__":
    unittest.main()
