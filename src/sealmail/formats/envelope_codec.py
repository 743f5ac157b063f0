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

import logging
from collections.abc import Mapping

from ..core.bounds import DEFAULT_PAYLOAD_WRAP
from ..core.errors import BLOCK_METADATA, NoEnvelopeError, TruncatedEnvelopeError
from .envelope_types import (
    METADATA_CLOSE,
    METADATA_FORMAT_AUTO,
    METADATA_OPEN,
    PAYLOAD_CLOSE,
    PAYLOAD_CLOSE_MARKERS,
    PAYLOAD_OPEN,
    Envelope,
    MetadataFormatChoice,
    contains_marker,
)
from .metadata import decode_metadata, encode_metadata

logger = logging.getLogger(__name__)


def build(
    metadata: Mapping[str, str],
    payload: str,
    *,
    metadata_format: MetadataFormatChoice = METADATA_FORMAT_AUTO,
    wrap: int = DEFAULT_PAYLOAD_WRAP,
    banner: str | None = None,
) -> str:
    if not isinstance(payload, str):
        raise TypeError("payload must be a string")
    if wrap < 0:
        raise ValueError("wrap must be zero or a positive integer")
    for key, value in metadata.items():
        _reject_marker(f"{key}\n{value}", label="metadata")
    _reject_marker(payload, label="payload")

    metadata_text, _format = encode_metadata(metadata, metadata_format)
    lines: list[str] = []
    if banner:
        if len(banner.splitlines()) != 1:
            raise ValueError("banner must be a single line")
        _reject_marker(banner, label="banner")
        lines.extend([banner, ""])
    lines.append(METADATA_OPEN)
    lines.append(metadata_text)
    lines.append(METADATA_CLOSE)
    lines.append("")
    lines.append(PAYLOAD_OPEN)
    lines.extend(wrap_payload(payload, wrap))
    lines.append(PAYLOAD_CLOSE)
    return "\n".join(lines)


def extract(body: str) -> Envelope:
    if not isinstance(body, str):
        raise TypeError("email body must be a string")

    open_idx = body.find(METADATA_OPEN)
    if open_idx < 0:
        raise NoEnvelopeError("body does not contain an encrypted envelope")
    metadata_start = open_idx + len(METADATA_OPEN)
    metadata_end = body.find(METADATA_CLOSE, metadata_start)
    if metadata_end < 0:
        raise TruncatedEnvelopeError(
            f"metadata block is not terminated by {METADATA_CLOSE!r}",
            block=BLOCK_METADATA,
        )

    payload_open_idx = body.find(PAYLOAD_OPEN, metadata_end + len(METADATA_CLOSE))
    if payload_open_idx < 0:
        raise TruncatedEnvelopeError("envelope has metadata but no payload block")
    payload_start = payload_open_idx + len(PAYLOAD_OPEN)
    payload_end = _find_payload_close(body, payload_start)
    if payload_end < 0:
        raise TruncatedEnvelopeError("payload block is not terminated")

    parsed = decode_metadata(body[metadata_start:metadata_end].strip())
    payload = "".join(body[payload_start:payload_end].split())
    logger.debug(
        "extracted envelope: %d metadata keys (%s), %d payload chars",
        len(parsed.metadata or {}),
        parsed.format,
        len(payload),
    )
    return Envelope(
        metadata=dict(parsed.metadata or {}),
        payload=payload,
        metadata_format=parsed.format,
    )


def find_envelope(body: str) -> Envelope | None:
    try:
        return extract(body)
    except NoEnvelopeError:
        return None


def wrap_payload(payload: str, width: int) -> list[str]:
    compact = "".join(payload.split())
    if not compact:
        return []
    if width <= 0:
        return [compact]
    return [compact[idx : idx + width] for idx in range(0, len(compact), width)]


def _find_payload_close(body: str, start: int) -> int:
    positions = [body.find(marker, start) for marker in PAYLOAD_CLOSE_MARKERS]
    found = [pos for pos in positions if pos >= 0]
    return min(found) if found else -1


def _reject_marker(text: str, *, label: str) -> None:
    marker = contains_marker(text)
    if marker is not None:
        raise ValueError(f"{label} must not contain the envelope marker {marker!r}")
