from __future__ import annotations

import unittest

from lazyjq.ansi import clip_ansi_line, display_width, pad_to_width, reverse_video, strip_ansi


class AnsiHelperTests(unittest.TestCase):
    def test_display_width_ignores_escapes_and_counts_wide_chars(self) -> None:
        self.assertEqual(display_width("\033[31mabc\033[0m"), 3)
        self.assertEqual(display_width("日本"), 4)
        self.assertEqual(display_width("é"), 1)

    def test_clip_keeps_escape_sequences(self) -> None:
        clipped = clip_ansi_line("\033[31mabcdef\033[0m", 3)
        self.assertEqual(clipped, "\033[31mabc")
        self.assertEqual(strip_ansi(clipped), "abc")

    def test_clip_never_splits_wide_characters(self) -> None:
        self.assertEqual(clip_ansi_line("a日本", 2), "a")
        self.assertEqual(clip_ansi_line("abc", 0), "")

    def test_reverse_video_survives_internal_resets(self) -> None:
        text = reverse_video("\033[31mx\033[0my")
        self.assertTrue(text.startswith("\033[7m"))
        self.assertIn("\033[0;7my", text)
        self.assertTrue(text.endswith("\033[0m"))
        self.assertEqual(reverse_video(""), "")

    def test_pad_to_width(self) -> None:
        self.assertEqual(pad_to_width("ab", 4), "ab  ")
        self.assertEqual(pad_to_width("abcdef", 4), "abcdef")
        self.assertEqual(pad_to_width("\033[1mab\033[0m", 3), "\033[1mab\033[0m ")


if __name__ == "__main__":
    unittest.main()
