from __future__ import annotations

import subprocess
import unittest
from unittest import mock

from lazyjq.runtime import clipboard

_COMMANDS = [["wl-copy"], ["xclip", "-selection", "clipboard"]]


class ClipboardTests(unittest.TestCase):
    def test_macos_uses_pbcopy(self) -> None:
        with mock.patch.object(clipboard.sys, "platform", "darwin"):
            self.assertEqual(clipboard.clipboard_commands(), [["pbcopy"]])

    def test_empty_text_is_not_copied(self) -> None:
        with mock.patch("lazyjq.runtime.clipboard.subprocess.run") as run_mock:
            self.assertFalse(clipboard.copy_text_to_clipboard(""))
        run_mock.assert_not_called()

    def test_first_installed_command_receives_text(self) -> None:
        with mock.patch("lazyjq.runtime.clipboard.clipboard_commands", return_value=_COMMANDS), mock.patch(
            "lazyjq.runtime.clipboard.shutil.which", side_effect=lambda name: None if name == "wl-copy" else "/usr/bin/" + name
        ), mock.patch(
            "lazyjq.runtime.clipboard.subprocess.run",
            return_value=subprocess.CompletedProcess(args=[], returncode=0),
        ) as run_mock:
            self.assertTrue(clipboard.copy_text_to_clipboard(".a | keys"))

        run_mock.assert_called_once()
        self.assertEqual(run_mock.call_args.args[0], ["xclip", "-selection", "clipboard"])
        self.assertEqual(run_mock.call_args.kwargs["input"], ".a | keys")

    def test_failures_fall_through_to_false(self) -> None:
        results = [OSError("broken pipe"), subprocess.CompletedProcess(args=[], returncode=1)]
        with mock.patch("lazyjq.runtime.clipboard.clipboard_commands", return_value=_COMMANDS), mock.patch(
            "lazyjq.runtime.clipboard.shutil.which", return_value="/usr/bin/tool"
        ), mock.patch("lazyjq.runtime.clipboard.subprocess.run", side_effect=results) as run_mock:
            self.assertFalse(clipboard.copy_text_to_clipboard("{}"))

        self.assertEqual(run_mock.call_count, 2)

    def test_no_installed_command_returns_false(self) -> None:
        with mock.patch("lazyjq.runtime.clipboard.clipboard_commands", return_value=_COMMANDS), mock.patch(
            "lazyjq.runtime.clipboard.shutil.which", return_value=None
        ):
            self.assertFalse(clipboard.copy_text_to_clipboard("{}"))


if __name__ == "__main__":
    unittest.main()
