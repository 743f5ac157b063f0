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

"""Typed failures raised by the body codecs.

Every error is a ``ValueError`` so callers that only care about "bad input"
can keep catching that, and carries the name of the block that failed.
"""

from __future__ import annotations

BLOCK_PAYLOAD = "payload"
BLOCK_METADATA = "metadata"
BLOCK_AUDIO = "audio"
BLOCK_FILES = "files"
BLOCK_DATA = "data"


class CodecError(ValueError):
    block: str = BLOCK_DATA

    def __init__(self, message: str, *, block: str | None = None) -> None:
        super().__init__(message)
        if block is not None:
            self.block = block


class EnvelopeError(CodecError):
    block = BLOCK_PAYLOAD


class NoEnvelopeError(EnvelopeError):
    """The body carries no encrypted envelope; treat it as plain content."""


class TruncatedEnvelopeError(EnvelopeError):
    """An open marker was found without its matching close marker."""


class MetadataParseError(EnvelopeError):
    block = BLOCK_METADATA

    def __init__(self, message: str, *, reasons: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.reasons = reasons


class ManifestParseError(CodecError):
    block = BLOCK_FILES

    def __init__(self, message: str, *, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class AudioHeaderError(CodecError):
    block = BLOCK_AUDIO


class AttachmentRestoreError(CodecError):
    block = BLOCK_FILES

    def __init__(self, message: str, *, index: int, name: str) -> None:
        super().__init__(message)
        self.index = index
        self.name = name


class CompressionError(CodecError):
    pass


class DecodeError(CompressionError):
    """Compressed text is not valid base64."""


class InflateError(CompressionError):
    """Decoded bytes are not a complete deflate stream."""


class LengthMismatchError(CompressionError):
    def __init__(self, message: str, *, expected: int, actual: int, block: str | None = None):
        super().__init__(message, block=block)
        self.expected = expected
        self.actual = actual


__all__ = [
    "AttachmentRestoreError",
    "AudioHeaderError",
    "BLOCK_AUDIO",
    "BLOCK_DATA",
    "BLOCK_FILES",
    "BLOCK_METADATA",
    "BLOCK_PAYLOAD",
    "CodecError",
    "CompressionError",
    "DecodeError",
    "EnvelopeError",
    "InflateError",
    "LengthMismatchError",
    "ManifestParseError",
    "MetadataParseError",
    "NoEnvelopeError",
    "TruncatedEnvelopeError",
]
