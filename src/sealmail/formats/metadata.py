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

"""Envelope metadata formats.

Senders in the wild wrote metadata either as ``Key: Value`` lines or as a JSON
object, without any version marker. Decoding therefore runs an ordered list of
strategies and keeps the first one that succeeds.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from ..core.errors import MetadataParseError
from .envelope_types import (
    METADATA_FORMAT_AUTO,
    METADATA_FORMAT_JSON,
    METADATA_FORMAT_LINES,
    MetadataFormat,
    MetadataFormatChoice,
)

_LINE_SEPARATOR = ":"


@dataclass(frozen=True)
class MetadataParse:
    format: MetadataFormat
    metadata: dict[str, str] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.metadata is not None


MetadataStrategy = Callable[[str], MetadataParse]


def parse_json_metadata(text: str) -> MetadataParse:
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as exc:
        return MetadataParse(METADATA_FORMAT_JSON, error=f"not JSON: {exc.msg}")
    except RecursionError:
        return MetadataParse(METADATA_FORMAT_JSON, error="JSON metadata is nested too deeply")
    if not isinstance(decoded, dict):
        return MetadataParse(METADATA_FORMAT_JSON, error="JSON metadata must be an object")
    metadata: dict[str, str] = {}
    for key, value in decoded.items():
        if isinstance(value, str):
            metadata[key] = value
        elif value is None or isinstance(value, (bool, int, float)):
            metadata[key] = json.dumps(value)
        else:
            return MetadataParse(
                METADATA_FORMAT_JSON,
                error=f"JSON metadata value for {key!r} must be a scalar",
            )
    return MetadataParse(METADATA_FORMAT_JSON, metadata=metadata)


def parse_line_metadata(text: str) -> MetadataParse:
    metadata: dict[str, str] = {}
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        key, sep, value = line.partition(_LINE_SEPARATOR)
        key = key.strip()
        if not sep or not key:
            return MetadataParse(
                METADATA_FORMAT_LINES,
                error=f"line {lineno} is not a 'key: value' pair",
            )
        metadata[key] = value.strip()
    return MetadataParse(METADATA_FORMAT_LINES, metadata=metadata)


METADATA_STRATEGIES: tuple[MetadataStrategy, ...] = (
    parse_json_metadata,
    parse_line_metadata,
)


def decode_metadata(
    text: str,
    strategies: tuple[MetadataStrategy, ...] = METADATA_STRATEGIES,
) -> MetadataParse:
    reasons: list[str] = []
    for strategy in strategies:
        result = strategy(text)
        if result.ok:
            return result
        reasons.append(f"{result.format}: {result.error}")
    raise MetadataParseError(
        "envelope metadata is neither JSON nor 'key: value' lines",
        reasons=tuple(reasons),
    )


def line_format_supports(metadata: Mapping[str, str]) -> bool:
    """Return True when ``key: value`` lines reproduce metadata exactly."""
    for key, value in metadata.items():
        if not key or key != key.strip() or value != value.strip():
            return False
        if _LINE_SEPARATOR in key or _has_line_break(key) or _has_line_break(value):
            return False
    return True


def encode_metadata(
    metadata: Mapping[str, str],
    metadata_format: MetadataFormatChoice = METADATA_FORMAT_AUTO,
) -> tuple[str, MetadataFormat]:
    for key, value in metadata.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise ValueError("metadata keys and values must be strings")
    if metadata_format not in (METADATA_FORMAT_AUTO, METADATA_FORMAT_JSON, METADATA_FORMAT_LINES):
        raise ValueError(f"unsupported metadata format: {metadata_format}")
    if metadata_format != METADATA_FORMAT_JSON:
        text = "\n".join(f"{key}: {value}" for key, value in metadata.items())
        # the decoder tries JSON first, so lines that happen to form a JSON object are unusable
        usable = line_format_supports(metadata) and not parse_json_metadata(text).ok
        if usable:
            return text, METADATA_FORMAT_LINES
        if metadata_format == METADATA_FORMAT_LINES:
            raise ValueError("metadata cannot be written as 'key: value' lines; use json")
    return json.dumps(dict(metadata), ensure_ascii=False, indent=2), METADATA_FORMAT_JSON


def _has_line_break(text: str) -> bool:
    return len(text.splitlines()) > 1 or text.endswith(("\n", "\r"))
