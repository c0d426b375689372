from __future__ import annotations

import unittest

from lazyjq.json_view.formatter import (
    COLLAPSED_MARK,
    ROW_CLOSE,
    ROW_COLLAPSED,
    ROW_OPEN,
    ROW_VALUE,
    STYLE_BOOLEAN,
    STYLE_NULL,
    STYLE_NUMBER,
    STYLE_STRING,
    FoldState,
    format_rows,
    format_stream,
)


class FormatRowsTests(unittest.TestCase):
    def test_expanded_object_matches_pretty_printed_json(self) -> None:
        rows = format_rows({"a": 1, "b": [True, None]}, FoldState())

        self.assertEqual(
            [row.plain() for row in rows],
            ["{", '  "a": 1,', '  "b": [', "    true,", "    null", "  ]", "}"],
        )
        self.assertEqual(
            [row.kind for row in rows],
            [ROW_OPEN, ROW_VALUE, ROW_OPEN, ROW_VALUE, ROW_VALUE, ROW_CLOSE, ROW_CLOSE],
        )
        self.assertEqual(rows[2].path, ("b",))
        self.assertEqual(rows[3].path, ("b", 0))

    def test_scalar_styles(self) -> None:
        rows = format_rows(["s", 1.5, False, None], FoldState())
        self.assertEqual(
            [row.style for row in rows[1:-1]],
            [STYLE_STRING, STYLE_NUMBER, STYLE_BOOLEAN, STYLE_NULL],
        )

    def test_empty_containers_render_inline(self) -> None:
        rows = format_rows({"x": {}, "y": []}, FoldState(fold_depth=0))
        self.assertEqual([row.plain() for row in rows], [f"{{{COLLAPSED_MARK}}}"])

        rows = format_rows({"x": {}, "y": []}, FoldState())
        self.assertEqual([row.plain() for row in rows], ["{", '  "x": {},', '  "y": []', "}"])
        self.assertFalse(rows[1].foldable)

    def test_collapsed_container_keeps_key_and_comma(self) -> None:
        fold = FoldState()
        fold.set_collapsed(("a",), True)

        rows = format_rows({"a": {"deep": [1, 2]}, "b": 2}, fold)

        self.assertEqual([row.plain() for row in rows], ["{", f'  "a": {{{COLLAPSED_MARK}}},', '  "b": 2', "}"])
        self.assertEqual(rows[1].kind, ROW_COLLAPSED)
        self.assertTrue(rows[1].collapsed)

    def test_indent_width_is_configurable(self) -> None:
        rows = format_rows({"a": [1]}, FoldState(), indent=4)
        self.assertEqual([row.plain() for row in rows], ["{", '    "a": [', "        1", "    ]", "}"])

    def test_non_ascii_keys_and_strings_are_kept(self) -> None:
        rows = format_rows({"név": "ü"}, FoldState())
        self.assertEqual(rows[1].plain(), '  "név": "ü"')

    def test_stream_roots_each_value_at_its_index(self) -> None:
        rows = format_stream([{"a": 1}, [2]], FoldState())
        self.assertEqual([row.path for row in rows], [(0,), (0, "a"), (0,), (1,), (1, 0), (1,)])

    def test_collapse_all_is_idempotent(self) -> None:
        value = {"a": [1, {"b": 2}], "c": {"d": []}}
        fold = FoldState()
        fold.collapse_all()
        once = format_rows(value, fold)
        fold.collapse_all()
        self.assertEqual(format_rows(value, fold), once)
        self.assertEqual(len(once), 1)

    def test_collapsing_every_container_path_leaves_one_placeholder_per_value(self) -> None:
        values = [{"a": [1, {"b": 2}]}, [3, [4]], 5]
        fold = FoldState()
        container_paths = [row.path for row in format_stream(values, fold) if row.kind == ROW_OPEN]
        self.assertEqual(container_paths, [(0,), (0, "a"), (0, "a", 1), (1,), (1, 1)])

        for path in container_paths:
            fold.set_collapsed(path, True)
        once = [row.plain() for row in format_stream(values, fold)]
        self.assertEqual(once, ["{…}", "[…]", "5"])

        for path in container_paths:
            fold.set_collapsed(path, True)
        self.assertEqual([row.plain() for row in format_stream(values, fold)], once)

    def test_expand_all_clears_overrides(self) -> None:
        value = {"a": [1, 2]}
        fold = FoldState(fold_depth=1)
        fold.set_collapsed((), True)
        fold.expand_all()
        self.assertEqual(len(format_rows(value, fold)), 6)


class FoldStateTests(unittest.TestCase):
    def test_depth_threshold_and_overrides(self) -> None:
        fold = FoldState(fold_depth=2)
        self.assertFalse(fold.is_collapsed(("a",), 1))
        self.assertTrue(fold.is_collapsed(("a", "b"), 2))

        self.assertFalse(fold.toggle(("a", "b"), 2))
        self.assertFalse(fold.is_collapsed(("a", "b"), 2))
        self.assertTrue(fold.toggle(("a", "b"), 2))


if __name__ == "__main__":
    unittest.main()
