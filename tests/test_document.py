from __future__ import annotations

import unittest

from lazyjq.json_view.document import DocumentError, JsonDocument, parse_json_stream


class ParseJsonStreamTests(unittest.TestCase):
    def test_single_value(self) -> None:
        document = parse_json_stream('{"a": [1, 2]}\n')
        self.assertEqual(document.values, ({"a": [1, 2]},))
        self.assertEqual(document.engine_input, '{"a": [1, 2]}')

    def test_newline_delimited_and_concatenated_values(self) -> None:
        document = parse_json_stream('{"n": 1}\n{"n": 2}{"n": 3} 4 "five"')
        self.assertEqual(document.values, ({"n": 1}, {"n": 2}, {"n": 3}, 4, "five"))
        self.assertEqual(document.engine_input.splitlines()[-1], '"five"')

    def test_max_streams_keeps_first_values_and_ignores_the_rest(self) -> None:
        document = parse_json_stream('1 2 3 {not json', max_streams=2)
        self.assertEqual(document.values, (1, 2))

    def test_byte_order_mark_is_ignored(self) -> None:
        self.assertEqual(parse_json_stream("\ufeff[1]").values, ([1],))

    def test_malformed_input_raises_document_error(self) -> None:
        with self.assertRaises(DocumentError) as ctx:
            parse_json_stream('{"a": 1} {"b": ')
        self.assertIn("invalid JSON input", str(ctx.exception))

    def test_blank_input_raises_document_error(self) -> None:
        with self.assertRaises(DocumentError):
            parse_json_stream("  \n\t")

    def test_from_values_serializes_one_value_per_line(self) -> None:
        document = JsonDocument.from_values([{"k": "ü"}, [1]])
        self.assertEqual(document.engine_input, '{"k": "ü"}\n[1]')


if __name__ == "__main__":
    unittest.main()
