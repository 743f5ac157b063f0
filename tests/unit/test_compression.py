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

import base64
import os
import unittest
import zlib
from unittest import mock

from sealmail.core.errors import (
    BLOCK_AUDIO,
    BLOCK_FILES,
    CompressionError,
    DecodeError,
    InflateError,
    LengthMismatchError,
)
from sealmail.encoding.compression import (
    CompressedBlob,
    compress,
    compress_blob,
    compress_many,
    compression_ratio,
    decompress,
    decompress_blob,
    resolve_jobs,
)


class TestCompression(unittest.TestCase):
    def test_round_trip(self) -> None:
        cases = (b"", b"x", b"\x00" * 10, bytes(range(256)), b"hello world " * 400)
        for data in cases:
            with self.subTest(size=len(data)):
                self.assertEqual(decompress(compress(data)), data)

    def test_ten_zero_bytes(self) -> None:
        blob = compress_blob(b"\x00" * 10)
        self.assertEqual(blob.original_size, 10)
        self.assertEqual(decompress_blob(blob), b"\x00" * 10)

    def test_emits_gzip_framing(self) -> None:
        packed = base64.b64decode(compress(b"payload"))
        self.assertEqual(packed[:2], b"\x1f\x8b")

    def test_accepts_zlib_framing(self) -> None:
        text = base64.b64encode(zlib.compress(b"older sender")).decode("ascii")
        self.assertEqual(decompress(text), b"older sender")

    def test_ignores_line_breaks_in_text(self) -> None:
        text = compress(b"wrapped " * 100)
        wrapped = "\n".join(text[idx : idx + 20] for idx in range(0, len(text), 20))
        self.assertEqual(decompress(wrapped), b"wrapped " * 100)

    def test_truncation_by_one_character_fails(self) -> None:
        for data in (b"", b"a", b"hello" * 50, bytes(range(256)) * 3):
            with self.subTest(size=len(data)):
                text = compress(data)
                with self.assertRaises(CompressionError):
                    decompress(text[:-1])

    def test_invalid_base64_reports_block(self) -> None:
        with self.assertRaises(DecodeError) as ctx:
            decompress("not*base64!", block=BLOCK_AUDIO)
        self.assertEqual(ctx.exception.block, BLOCK_AUDIO)

    def test_non_deflate_data_is_inflate_error(self) -> None:
        text = base64.b64encode(b"hello world").decode("ascii")
        with self.assertRaises(InflateError):
            decompress(text)

    def test_trailing_data_is_inflate_error(self) -> None:
        packed = base64.b64decode(compress(b"a")) + b"xx"
        with self.assertRaises(InflateError):
            decompress(base64.b64encode(packed).decode("ascii"))

    def test_empty_text_is_inflate_error(self) -> None:
        with self.assertRaises(InflateError):
            decompress("")

    def test_length_mismatch(self) -> None:
        blob = CompressedBlob(compressed_data=compress(b"abc"), original_size=4)
        with self.assertRaises(LengthMismatchError) as ctx:
            decompress_blob(blob, block=BLOCK_FILES)
        self.assertEqual(ctx.exception.expected, 4)
        self.assertEqual(ctx.exception.actual, 3)
        self.assertEqual(ctx.exception.block, BLOCK_FILES)

    def test_rejects_text_input_and_bad_level(self) -> None:
        with self.assertRaises(TypeError):
            compress("text")  # type: ignore[arg-type]
        with self.assertRaises(ValueError):
            compress(b"data", level=10)

    def test_compression_ratio(self) -> None:
        self.assertEqual(compression_ratio(100, 25), 75.0)
        self.assertEqual(compression_ratio(3, 1), 66.67)
        self.assertEqual(compression_ratio(0, 20), 0.0)
        self.assertLess(compression_ratio(1, 21), 0)

    def test_blob_sizes(self) -> None:
        data = b"z" * 4096
        blob = compress_blob(data)
        packed = base64.b64decode(blob.compressed_data)
        self.assertEqual(blob.compressed_size, len(packed))
        self.assertEqual(blob.compression_ratio, compression_ratio(4096, len(packed)))

    def test_compress_many_keeps_order(self) -> None:
        items = [bytes([idx]) * (idx + 1) * 100 for idx in range(6)]
        with mock.patch("sealmail.encoding.compression.os.cpu_count", return_value=4):
            blobs = compress_many(items, jobs=3)
        self.assertEqual([decompress_blob(blob) for blob in blobs], items)
        self.assertEqual(compress_many([]), [])


class TestResolveJobs(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch("sealmail.encoding.compression.os.cpu_count", return_value=8)
        patcher.start()
        self.addCleanup(patcher.stop)
        env = mock.patch.dict(os.environ, {}, clear=False)
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop("SEALMAIL_JOBS", None)

    def test_explicit_jobs_capped_by_tasks(self) -> None:
        self.assertEqual(resolve_jobs(3, task_count=2), 2)
        self.assertEqual(resolve_jobs(3, task_count=10), 3)

    def test_auto_stays_serial_for_small_inputs(self) -> None:
        self.assertEqual(resolve_jobs("auto", task_count=6, total_bytes=1024), 1)
        self.assertEqual(resolve_jobs(None, task_count=6, total_bytes=1024), 1)

    def test_auto_scales_with_input_size(self) -> None:
        self.assertEqual(resolve_jobs("auto", task_count=6, total_bytes=1024 * 1024), 4)

    def test_env_override(self) -> None:
        os.environ["SEALMAIL_JOBS"] = "5"
        self.assertEqual(resolve_jobs(None, task_count=10), 5)
        os.environ["SEALMAIL_JOBS"] = "many"
        with self.assertRaises(ValueError):
            resolve_jobs(None, task_count=10)

    def test_rejects_invalid_jobs(self) -> None:
        for value in (0, -1, True):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    resolve_jobs(value, task_count=2)


if __name__ == "__main__":
    unittest.main()
