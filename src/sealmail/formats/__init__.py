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

from .attachments import (
    FILES_MARKER,
    AttachmentPart,
    AttachmentRecord,
    RestoredAttachment,
    build_record,
    build_records,
    format_file_size,
    parse_manifest,
    restore_attachments,
    serialize_manifest,
)
from .audio import (
    AUDIO_MARKER,
    AudioBlock,
    build_audio_block,
    parse_audio,
    restore_audio,
    serialize_audio,
)
from .classifier import ContentKind, classify, display_subject, looks_encrypted
from .envelope_codec import build, extract, find_envelope
from .envelope_types import (
    METADATA_CLOSE,
    METADATA_OPEN,
    PAYLOAD_CLOSE,
    PAYLOAD_CLOSE_LEGACY,
    PAYLOAD_OPEN,
    Envelope,
)
from .message import BlockFailure, MessageContent, compose_message, parse_message
from .schemes import SCHEMES, Scheme, get_scheme, seal_message

__all__ = [
    "AUDIO_MARKER",
    "AttachmentPart",
    "AttachmentRecord",
    "AudioBlock",
    "BlockFailure",
    "ContentKind",
    "Envelope",
    "FILES_MARKER",
    "METADATA_CLOSE",
    "METADATA_OPEN",
    "MessageContent",
    "PAYLOAD_CLOSE",
    "PAYLOAD_CLOSE_LEGACY",
    "PAYLOAD_OPEN",
    "RestoredAttachment",
    "SCHEMES",
    "Scheme",
    "build",
    "build_audio_block",
    "build_record",
    "build_records",
    "classify",
    "compose_message",
    "display_subject",
    "extract",
    "find_envelope",
    "format_file_size",
    "get_scheme",
    "looks_encrypted",
    "parse_audio",
    "parse_manifest",
    "parse_message",
    "restore_attachments",
    "restore_audio",
    "seal_message",
    "serialize_audio",
    "serialize_manifest",
]
