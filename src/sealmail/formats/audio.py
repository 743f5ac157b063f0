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

from dataclasses import dataclass

from ..capture.playback import AudioClip
from ..core.errors import BLOCK_AUDIO, AudioHeaderError
from ..encoding.compression import (
    DEFAULT_LEVEL,
    CompressedBlob,
    compress_blob,
    decompress,
    decompress_blob,
)

AUDIO_MARKER = "AUDIO_COMPRESSED:"
_MIME_SEPARATOR = ":"


@dataclass(frozen=True)
class AudioBlock:
    mime_type: str
    blob: CompressedBlob


def build_audio_block(mime_type: str, data: bytes, *, level: int = DEFAULT_LEVEL) -> AudioBlock:
    _validate_mime_type(mime_type)
    return AudioBlock(mime_type=mime_type, blob=compress_blob(data, level=level))


def serialize_audio(mime_type: str, blob: CompressedBlob) -> str:
    _validate_mime_type(mime_type)
    data = "".join(blob.compressed_data.split())
    return f"{AUDIO_MARKER}{mime_type}{_MIME_SEPARATOR}{data}"


def serialize_audio_block(block: AudioBlock) -> str:
    return serialize_audio(block.mime_type, block.blob)


def parse_audio(text: str) -> AudioBlock | None:
    segment = find_audio_segment(text)
    if segment is None:
        return None
    # MIME types never contain ':' and base64 never does either, so the first one is the split
    mime_type, sep, data = segment.partition(_MIME_SEPARATOR)
    if not sep:
        raise AudioHeaderError("audio block has no ':' between MIME type and data")
    if not mime_type:
        raise AudioHeaderError("audio block has an empty MIME type")
    compressed_data = data.strip()
    raw = decompress(compressed_data, block=BLOCK_AUDIO)
    return AudioBlock(
        mime_type=mime_type,
        blob=CompressedBlob(compressed_data=compressed_data, original_size=len(raw)),
    )


def restore_audio(block: AudioBlock) -> AudioClip:
    data = decompress_blob(block.blob, block=BLOCK_AUDIO)
    return AudioClip(mime_type=block.mime_type, data=data)


def find_audio_segment(text: str) -> str | None:
    """Return the remainder of the line carrying the audio marker, if any."""
    idx = text.find(AUDIO_MARKER)
    if idx < 0:
        return None
    start = idx + len(AUDIO_MARKER)
    lines = text[start:].splitlines()
    return lines[0] if lines else ""


def _validate_mime_type(mime_type: str) -> None:
    if not isinstance(mime_type, str) or not mime_type:
        raise ValueError("audio MIME type must be a non-empty string")
    if _MIME_SEPARATOR in mime_type:
        raise ValueError("audio MIME type must not contain ':'")
    if len(mime_type.splitlines()) != 1 or mime_type.endswith(("\n", "\r")):
        raise ValueError("audio MIME type must be a single line")
