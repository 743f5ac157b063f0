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

import json
import logging
import mimetypes
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..core.bounds import MAX_MANIFEST_FILES
from ..core.errors import (
    BLOCK_FILES,
    AttachmentRestoreError,
    CompressionError,
    ManifestParseError,
)
from ..core.validation import (
    normalize_name,
    require_dict,
    require_keys,
    require_size,
    require_str,
    safe_filename,
)
from ..encoding.compression import (
    DEFAULT_LEVEL,
    CompressedBlob,
    Jobs,
    compress_many,
    decompress_blob,
)

logger = logging.getLogger(__name__)

FILES_MARKER = "FILES_COMPRESSED:"
DEFAULT_MIME_TYPE = "application/octet-stream"
_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


@dataclass(frozen=True)
class AttachmentRecord:
    name: str
    mime_type: str
    size: int
    compressed: CompressedBlob
    compression_ratio: float

    def __post_init__(self) -> None:
        name = normalize_name(self.name, label="attachment name")
        if not name:
            raise ValueError("attachment name must be a non-empty string")
        object.__setattr__(self, "name", name)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "mimeType": self.mime_type,
            "size": self.size,
            "compressed": {
                "compressedData": self.compressed.compressed_data,
                "originalSize": self.compressed.original_size,
            },
            "compressionRatio": self.compression_ratio,
        }


@dataclass(frozen=True)
class AttachmentPart:
    name: str
    data: bytes
    mime_type: str | None = None


@dataclass(frozen=True)
class RestoredAttachment:
    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def safe_filename(self) -> str:
        return safe_filename(self.name)


def guess_mime_type(name: str) -> str:
    mime_type, _encoding = mimetypes.guess_type(name)
    return mime_type or DEFAULT_MIME_TYPE


def read_attachment(path: str | Path, *, mime_type: str | None = None) -> AttachmentPart:
    resolved = Path(path).expanduser()
    return AttachmentPart(name=resolved.name, data=resolved.read_bytes(), mime_type=mime_type)


def build_record(
    name: str,
    mime_type: str | None,
    data: bytes,
    *,
    level: int = DEFAULT_LEVEL,
) -> AttachmentRecord:
    part = AttachmentPart(name=name, data=data, mime_type=mime_type)
    (record,) = build_records([part], level=level)
    return record


def build_records(
    parts: Sequence[AttachmentPart],
    *,
    level: int = DEFAULT_LEVEL,
    jobs: Jobs = None,
) -> list[AttachmentRecord]:
    if len(parts) > MAX_MANIFEST_FILES:
        raise ValueError(
            f"attachments exceed MAX_MANIFEST_FILES ({MAX_MANIFEST_FILES}): {len(parts)} files"
        )
    blobs = compress_many([bytes(part.data) for part in parts], level=level, jobs=jobs)
    records: list[AttachmentRecord] = []
    for part, blob in zip(parts, blobs):
        record = AttachmentRecord(
            name=part.name,
            mime_type=part.mime_type or guess_mime_type(part.name),
            size=len(part.data),
            compressed=blob,
            compression_ratio=blob.compression_ratio,
        )
        logger.debug(
            "attachment %r (%s): %s -> %s, ratio %.2f%%",
            record.name,
            record.mime_type,
            format_file_size(record.size),
            format_file_size(blob.compressed_size),
            record.compression_ratio,
        )
        records.append(record)
    return records


def serialize_manifest(records: Sequence[AttachmentRecord]) -> str:
    entries = [record.to_dict() for record in records]
    return FILES_MARKER + json.dumps(entries, separators=(",", ":"))


def parse_manifest(text: str) -> list[AttachmentRecord]:
    idx = text.find(FILES_MARKER)
    if idx < 0:
        return []
    remainder = text[idx + len(FILES_MARKER) :].lstrip()
    try:
        decoded, _end = json.JSONDecoder().raw_decode(remainder)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(f"files manifest is not valid JSON: {exc.msg}") from exc
    except RecursionError as exc:
        raise ManifestParseError("files manifest is nested too deeply") from exc
    if not isinstance(decoded, list):
        raise ManifestParseError("files manifest must be a JSON array")
    if len(decoded) > MAX_MANIFEST_FILES:
        raise ManifestParseError(
            f"files manifest exceeds MAX_MANIFEST_FILES ({MAX_MANIFEST_FILES}): "
            f"{len(decoded)} entries"
        )
    records: list[AttachmentRecord] = []
    for index, entry in enumerate(decoded):
        try:
            records.append(_decode_entry(entry))
        except ValueError as exc:
            raise ManifestParseError(f"files manifest entry {index}: {exc}", index=index) from exc
    return records


def restore_attachments(records: Sequence[AttachmentRecord]) -> list[RestoredAttachment]:
    """Decompress every record, stopping at the first one that fails."""
    restored: list[RestoredAttachment] = []
    for index, record in enumerate(records):
        try:
            data = decompress_blob(record.compressed, block=BLOCK_FILES)
        except CompressionError as exc:
            raise AttachmentRestoreError(
                f"attachment {index} ({record.name!r}) could not be restored: {exc}",
                index=index,
                name=record.name,
            ) from exc
        restored.append(
            RestoredAttachment(name=record.name, mime_type=record.mime_type, data=data)
        )
    return restored


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    exponent = 0
    scaled = float(size)
    while scaled >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        scaled /= 1024
        exponent += 1
    value = round(scaled, 2)
    return f"{value:g} {_SIZE_UNITS[exponent]}"


def _decode_entry(entry: object) -> AttachmentRecord:
    values = require_dict(entry, label="entry")
    name = require_str(values.get("name"), label="name", allow_empty=False)
    size = require_size(values.get("size"), label="size")
    if "compressed" in values:
        compressed = require_dict(values["compressed"], label="compressed")
        require_keys(compressed, ("compressedData", "originalSize"), label="compressed")
        mime_value = values.get("mimeType")
    else:
        # flat layout written by older clients
        compressed = values
        require_keys(compressed, ("compressedData", "originalSize"), label="entry")
        mime_value = values.get("mimeType", values.get("type"))
    if mime_value is None:
        mime_type = DEFAULT_MIME_TYPE
    else:
        mime_type = require_str(mime_value, label="mimeType")
    blob = CompressedBlob(
        compressed_data=require_str(compressed["compressedData"], label="compressedData"),
        original_size=require_size(compressed["originalSize"], label="originalSize"),
    )
    ratio = values.get("compressionRatio")
    if ratio is None:
        ratio = blob.compression_ratio
    if isinstance(ratio, bool) or not isinstance(ratio, (int, float)):
        raise ValueError("compressionRatio must be a number")
    return AttachmentRecord(
        name=name,
        mime_type=mime_type,
        size=size,
        compressed=blob,
        compression_ratio=float(ratio),
    )
