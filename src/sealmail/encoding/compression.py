#!/usr/bin/env python3
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

from __future__ import annotations

import base64
import binascii
import concurrent.futures
import functools
import logging
import os
import zlib
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from ..core.errors import DecodeError, InflateError, LengthMismatchError

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = 9
# gzip framing on encode (what deployed senders emit); header auto-detect on decode
_WBITS_GZIP = 16 + zlib.MAX_WBITS
_WBITS_AUTO = 32 + zlib.MAX_WBITS

_JOBS_ENV = "SEALMAIL_JOBS"
_DEFAULT_WORKERS_CAP = 8
_MIN_BYTES_PER_WORKER = 256 * 1024

Jobs = int | Literal["auto"] | None


@dataclass(frozen=True)
class CompressedBlob:
    compressed_data: str
    original_size: int

    @property
    def compressed_size(self) -> int:
        stripped = "".join(self.compressed_data.split())
        padding = len(stripped) - len(stripped.rstrip("="))
        return len(stripped) * 3 // 4 - padding

    @property
    def compression_ratio(self) -> float:
        return compression_ratio(self.original_size, self.compressed_size)


def compression_ratio(original: int, compressed: int) -> float:
    """Return the space saved as a percentage with two-decimal precision."""
    if original <= 0:
        return 0.0
    return round((original - compressed) / original * 100, 2)


def compress(data: bytes, *, level: int = DEFAULT_LEVEL) -> str:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("data must be bytes")
    if not 0 <= level <= 9:
        raise ValueError("compression level must be between 0 and 9")
    raw = bytes(data)
    compressor = zlib.compressobj(level, zlib.DEFLATED, _WBITS_GZIP)
    packed = compressor.compress(raw) + compressor.flush()
    encoded = base64.b64encode(packed).decode("ascii")
    logger.debug(
        "compressed %d -> %d bytes (%d chars, ratio %.2f%%)",
        len(raw),
        len(packed),
        len(encoded),
        compression_ratio(len(raw), len(packed)),
    )
    return encoded


def decompress(text: str, *, block: str | None = None) -> bytes:
    if not isinstance(text, str):
        raise TypeError("compressed text must be a string")
    cleaned = "".join(text.split())
    try:
        packed = base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"compressed data is not valid base64: {exc}", block=block) from exc

    inflater = zlib.decompressobj(_WBITS_AUTO)
    try:
        output = inflater.decompress(packed) + inflater.flush()
    except zlib.error as exc:
        raise InflateError(f"compressed stream is corrupt: {exc}", block=block) from exc
    if not inflater.eof:
        raise InflateError("compressed stream is truncated", block=block)
    if inflater.unused_data:
        raise InflateError("compressed stream has trailing data", block=block)
    logger.debug("decompressed %d -> %d bytes", len(packed), len(output))
    return output


def compress_blob(data: bytes, *, level: int = DEFAULT_LEVEL) -> CompressedBlob:
    return CompressedBlob(compressed_data=compress(data, level=level), original_size=len(data))


def decompress_blob(blob: CompressedBlob, *, block: str | None = None) -> bytes:
    output = decompress(blob.compressed_data, block=block)
    if len(output) != blob.original_size:
        raise LengthMismatchError(
            f"decompressed length mismatch: expected {blob.original_size}, got {len(output)}",
            expected=blob.original_size,
            actual=len(output),
            block=block,
        )
    return output


def compress_many(
    items: Sequence[bytes],
    *,
    level: int = DEFAULT_LEVEL,
    jobs: Jobs = None,
) -> list[CompressedBlob]:
    """Compress several buffers, offloading to a thread pool when it pays off.

    zlib releases the GIL while compressing, so threads give real parallelism
    here. Results are returned in input order.
    """
    if not items:
        return []
    workers = resolve_jobs(jobs, task_count=len(items), total_bytes=sum(map(len, items)))
    if workers <= 1:
        return [compress_blob(item, level=level) for item in items]

    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(functools.partial(compress_blob, level=level), items))


def resolve_jobs(jobs: Jobs, *, task_count: int, total_bytes: int = 0) -> int:
    explicit = False
    requested: int | None = None
    if jobs is None:
        raw = os.environ.get(_JOBS_ENV, "").strip().lower()
        if raw and raw != "auto":
            try:
                parsed = int(raw)
            except ValueError:
                raise ValueError(f"{_JOBS_ENV} must be a positive integer or 'auto'") from None
            if parsed > 0:
                requested = parsed
                explicit = True
    elif jobs != "auto":
        if isinstance(jobs, bool) or not isinstance(jobs, int) or jobs <= 0:
            raise ValueError("jobs must be a positive integer or 'auto'")
        requested = jobs
        explicit = True

    cpu = os.cpu_count() or 1
    if requested is None:
        requested = min(cpu, _DEFAULT_WORKERS_CAP)

    workers = max(1, min(requested, cpu, task_count))
    if not explicit:
        workers = min(workers, max(1, total_bytes // _MIN_BYTES_PER_WORKER))
    return max(1, workers)
