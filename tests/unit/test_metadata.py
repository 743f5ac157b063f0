# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

import unittest

from sealmail.core.errors import MetadataParseError
from sealmail.formats.metadata import (
    METADATA_STRATEGIES,
    decode_metadata,
    encode_metadata,
    line_format_supports,
    parse_json_metadata,
    parse_line_metadata,
)


class TestMetadataStrategies(unittest.TestCase):
    def test_strategy_order(self) -> None:
        self.assertEqual(METADATA_STRATEGIES, (parse_json_metadata, parse_line_metadata))

    def test_json_strategy(self) -> None:
        result = parse_json_metadata('{"a": "b", "n": 1.5, "flag": true}')
        self.assertTrue(result.ok)
        self.assertEqual(result.metadata, {"a": "b", "n": "1.5", "flag": "true"})
        for text in ("[1, 2]", "Key: value", '{"nested": {"x": 1}}'):
            with self.subTest(text=text):
                result = parse_json_metadata(text)
                self.assertFalse(result.ok)
                self.assertTrue(result.error)

    def test_line_strategy(self) -> None:
        result = parse_line_metadata("Encryption: AES-256\n\nTimestamp: 2026-01-01T10:00:00.000Z")
        self.assertEqual(
            result.metadata,
            {"Encryption": "AES-256", "Timestamp": "2026-01-01T10:00:00.000Z"},
        )
        self.assertFalse(parse_line_metadata("no separator").ok)
        self.assertFalse(parse_line_metadata(": missing key").ok)

    def test_decode_uses_first_success(self) -> None:
        self.assertEqual(decode_metadata('{"a": "b"}').format, "json")
        self.assertEqual(decode_metadata("a: b").format, "lines")
        only_lines = decode_metadata('{"a": "b"}', strategies=(parse_line_metadata,))
        self.assertEqual(only_lines.metadata, {'{"a"': '"b"}'})

    def test_deeply_nested_json_is_rejected(self) -> None:
        result = parse_json_metadata("[" * 100_000)
        self.assertFalse(result.ok)
        self.assertEqual(result.format, "json")
        self.assertIn("nested", result.error or "")
        with self.assertRaises(MetadataParseError):
            decode_metadata("[" * 100_000)

    def test_decode_collects_reasons(self) -> None:
        with self.assertRaises(MetadataParseError) as ctx:
            decode_metadata("garbage")
        self.assertTrue(ctx.exception.reasons[0].startswith("json:"))
        self.assertTrue(ctx.exception.reasons[1].startswith("lines:"))

    def test_line_format_support(self) -> None:
        self.assertTrue(line_format_supports({"Encryption": "AES-256", "Empty": ""}))
        for metadata in ({"a:b": "c"}, {"a": " c"}, {"a": "c\nd"}, {"": "x"}):
            with self.subTest(metadata=metadata):
                self.assertFalse(line_format_supports(metadata))

    def test_auto_avoids_lines_that_read_as_json(self) -> None:
        metadata = {'{"a"': '"b"}'}
        text, fmt = encode_metadata(metadata)
        self.assertEqual(fmt, "json")
        self.assertEqual(decode_metadata(text).metadata, metadata)

    def test_encode_rejects_unknown_format(self) -> None:
        with self.assertRaises(ValueError):
            encode_metadata({"a": "b"}, "yaml")  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
