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

from sealmail.core.bounds import MAX_NAME_BYTES
from sealmail.core.validation import (
    normalize_name,
    require_dict,
    require_keys,
    require_size,
    require_str,
    safe_filename,
)


class TestValidation(unittest.TestCase):
    def test_require_helpers(self) -> None:
        self.assertEqual(require_dict({"a": 1}, label="entry"), {"a": 1})
        with self.assertRaises(ValueError):
            require_dict([], label="entry")
        require_keys({"a": 1, "b": 2}, ("a", "b"), label="entry")
        with self.assertRaisesRegex(ValueError, "entry b is required"):
            require_keys({"a": 1}, ("a", "b"), label="entry")
        self.assertEqual(require_str("", label="name"), "")
        with self.assertRaises(ValueError):
            require_str("", label="name", allow_empty=False)
        with self.assertRaises(ValueError):
            require_str(5, label="name")

    def test_require_size(self) -> None:
        self.assertEqual(require_size(0, label="size"), 0)
        for value in (-1, 1.0, "3", True, None):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    require_size(value, label="size")

    def test_normalize_name(self) -> None:
        self.assertEqual(normalize_name("Å"), "Å")
        self.assertEqual(normalize_name("é" * 300), "é" * 300)
        with self.assertRaises(ValueError):
            normalize_name("\ud800")
        with self.assertRaises(ValueError):
            normalize_name(None)

    def test_safe_filename(self) -> None:
        self.assertEqual(safe_filename("dir/sub/file.txt"), "file.txt")
        self.assertEqual(safe_filename("tab\tname.txt"), "tab_name.txt")
        self.assertEqual(safe_filename(" . ", fallback="file"), "file")
        self.assertEqual(safe_filename("bad\ud800.txt"), "bad_.txt")

    def test_safe_filename_truncates_long_names(self) -> None:
        name = safe_filename("a" * 300 + ".pdf")
        self.assertEqual(len(name.encode("utf-8")), MAX_NAME_BYTES)
        self.assertTrue(name.endswith("a.pdf"))

        name = safe_filename("é" * 200 + ".txt")
        self.assertLessEqual(len(name.encode("utf-8")), MAX_NAME_BYTES)
        self.assertEqual(name, "é" * 125 + ".txt")

        name = safe_filename("b" * 300)
        self.assertEqual(name, "b" * MAX_NAME_BYTES)


if __name__ == "__main__":
    unittest.main()
