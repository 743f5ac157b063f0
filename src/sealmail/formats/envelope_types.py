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

from dataclasses import dataclass, field
from typing import Literal

METADATA_OPEN = "--- ENCRYPTED METADATA ---"
METADATA_CLOSE = "--- END METADATA ---"
PAYLOAD_OPEN = "--- ENCRYPTED PAYLOAD ---"
PAYLOAD_CLOSE = "--- END PAYLOAD ---"
PAYLOAD_CLOSE_LEGACY = "--- END ENCRYPTED MESSAGE ---"

# Either terminator is accepted; PAYLOAD_CLOSE is the one written.
PAYLOAD_CLOSE_MARKERS = (PAYLOAD_CLOSE, PAYLOAD_CLOSE_LEGACY)
ENVELOPE_MARKERS = (METADATA_OPEN, METADATA_CLOSE, PAYLOAD_OPEN, *PAYLOAD_CLOSE_MARKERS)

METADATA_FORMAT_LINES = "lines"
METADATA_FORMAT_JSON = "json"
METADATA_FORMAT_AUTO = "auto"

MetadataFormat = Literal["lines", "json"]
MetadataFormatChoice = Literal["auto", "lines", "json"]


@dataclass(frozen=True)
class Envelope:
    metadata: dict[str, str]
    payload: str
    metadata_format: MetadataFormat = field(default=METADATA_FORMAT_LINES, compare=False)

    def to_dict(self) -> dict[str, object]:
        return {
            "metadata": dict(self.metadata),
            "payload": self.payload,
            "metadata_format": self.metadata_format,
        }

    def __iter__(self):
        # allows ``metadata, payload = extract(body)``
        yield self.metadata
        yield self.payload


def contains_marker(text: str) -> str | None:
    for marker in ENVELOPE_MARKERS:
        if marker in text:
            return marker
    return None
