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

"""Plaintext message layout: free text followed by optional attachment blocks.

This is the text that gets encrypted on send and that comes back out of the
decryptor on receive::

    <message text>

    AUDIO_COMPRESSED:<mime>:<base64>

    FILES_COMPRESSED:[{...}, ...]
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..capture.playback import AudioClip
from ..core.errors import CodecError
from .attachments import (
    FILES_MARKER,
    AttachmentRecord,
    RestoredAttachment,
    parse_manifest,
    restore_attachments,
    serialize_manifest,
)
from .audio import AUDIO_MARKER, AudioBlock, parse_audio, restore_audio, serialize_audio_block

logger = logging.getLogger(__name__)

_BLOCK_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class BlockFailure:
    block: str
    error: CodecError

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass(frozen=True)
class MessageContent:
    text: str
    audio: AudioClip | None = None
    attachments: tuple[RestoredAttachment, ...] = ()
    failures: tuple[BlockFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures


def compose_message(
    text: str,
    *,
    audio: AudioBlock | None = None,
    files: Sequence[AttachmentRecord] = (),
) -> str:
    for marker in (AUDIO_MARKER, FILES_MARKER):
        if marker in text:
            raise ValueError(f"message text must not contain {marker!r}")
    parts = [text]
    if audio is not None:
        parts.append(serialize_audio_block(audio))
    if files:
        manifest = serialize_manifest(files)
        if AUDIO_MARKER in manifest:
            raise ValueError(f"attachment names must not contain {AUDIO_MARKER!r}")
        parts.append(manifest)
    return _BLOCK_SEPARATOR.join(parts)


def parse_message(text: str) -> MessageContent:
    """Split decrypted text into prose and restored attachments.

    A malformed block is reported in ``failures`` and never hides the text
    or the other block.
    """
    failures: list[BlockFailure] = []

    audio: AudioClip | None = None
    try:
        block = parse_audio(text)
        if block is not None:
            audio = restore_audio(block)
    except CodecError as exc:
        logger.debug("audio block rejected: %s", exc)
        failures.append(BlockFailure(block=exc.block, error=exc))

    attachments: tuple[RestoredAttachment, ...] = ()
    try:
        attachments = tuple(restore_attachments(parse_manifest(text)))
    except CodecError as exc:
        logger.debug("files manifest rejected: %s", exc)
        failures.append(BlockFailure(block=exc.block, error=exc))

    return MessageContent(
        text=strip_blocks(text),
        audio=audio,
        attachments=attachments,
        failures=tuple(failures),
    )


def strip_blocks(text: str) -> str:
    """Remove attachment blocks, leaving only the free text."""
    cleaned = _cut(text, AUDIO_MARKER, _line_end)
    cleaned = _cut(cleaned, FILES_MARKER, _manifest_end)
    return cleaned.rstrip("\r\n")


def _cut(text: str, marker: str, find_end) -> str:
    start = text.find(marker)
    if start < 0:
        return text
    end = find_end(text, start + len(marker))
    return text[:start] + text[end:]


def _line_end(text: str, start: int) -> int:
    newline = text.find("\n", start)
    return len(text) if newline < 0 else newline


def _manifest_end(text: str, start: int) -> int:
    offset = len(text[start:]) - len(text[start:].lstrip())
    try:
        _value, end = json.JSONDecoder().raw_decode(text, start + offset)
    except (json.JSONDecodeError, RecursionError):
        return _line_end(text, start)
    return end
