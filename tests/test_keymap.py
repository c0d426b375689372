from __future__ import annotations

import unittest

from lazyjq.keymap import (
    COMPLETION_BINDINGS,
    DEFAULT_KEYBINDS,
    EDITOR_BINDINGS,
    GLOBAL_BINDINGS,
    VIEWER_BINDINGS,
    KeyComboBinding,
    KeyComboRegistry,
    merge_keybinds,
)


class KeyComboRegistryTests(unittest.TestCase):
    def test_dispatch_invokes_bound_handler(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register_binding(
            KeyComboBinding(("CTRL_P", "UP"), lambda: calls.append("up") or True)
        )

        self.assertTrue(registry.dispatch("UP"))
        self.assertTrue(registry.dispatch("CTRL_P"))
        self.assertEqual(calls, ["up", "up"])

    def test_unbound_key_returns_none(self) -> None:
        registry = KeyComboRegistry()
        self.assertFalse(registry.handles("x"))
        self.assertIsNone(registry.dispatch("x"))

    def test_register_actions_uses_binding_table(self) -> None:
        registry = KeyComboRegistry().register_actions({"go": ("g", "HOME")}, {"go": lambda: "went"})
        self.assertEqual(registry.dispatch("HOME"), "went")
        self.assertTrue(registry.handles("g"))

    def test_default_tables_have_no_internal_conflicts(self) -> None:
        for table in (GLOBAL_BINDINGS, EDITOR_BINDINGS, COMPLETION_BINDINGS, VIEWER_BINDINGS):
            combos = [combo for keys in table.values() for combo in keys]
            self.assertEqual(len(combos), len(set(combos)))

    def test_global_keys_do_not_shadow_mode_keys(self) -> None:
        global_combos = {combo for keys in GLOBAL_BINDINGS.values() for combo in keys}
        for table in (EDITOR_BINDINGS, COMPLETION_BINDINGS, VIEWER_BINDINGS):
            mode_combos = {combo for keys in table.values() for combo in keys}
            self.assertEqual(global_combos & mode_combos, set())

    def test_expected_default_bindings(self) -> None:
        self.assertEqual(GLOBAL_BINDINGS["exit"], ("CTRL_C",))
        self.assertEqual(GLOBAL_BINDINGS["copy_query"], ("CTRL_Q",))
        self.assertEqual(GLOBAL_BINDINGS["copy_result"], ("CTRL_O",))
        self.assertIn("TAB", EDITOR_BINDINGS["completion"])
        self.assertIn("ENTER", VIEWER_BINDINGS["toggle"])
        self.assertEqual(VIEWER_BINDINGS["expand"], ("CTRL_P",))
        self.assertEqual(VIEWER_BINDINGS["collapse"], ("CTRL_N",))

    def test_merge_without_overrides_copies_defaults(self) -> None:
        merged = merge_keybinds({})
        self.assertEqual(merged, DEFAULT_KEYBINDS)
        merged["viewer"]["up"] = ("w",)
        self.assertEqual(VIEWER_BINDINGS["up"], ("UP", "CTRL_K", "k"))


if __name__ == "__main__":
    unittest.main()
