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

import re
import unicodedata
from collections.abc import Iterable
from typing import Any

from .bounds import MAX_NAME_BYTES

_UNSAFE_FILENAME_CHARS = re.compile(r'[\x00-\x1f\x7f<>:"/\\|?*]')


def require_dict(value: object, *, label: str) -> dict[str, Any]:
    """Validate that value is a dict."""
    if not isinstance(value, dict):
        raise ValueError(f"{label} must be an object")
    return value


def require_keys(mapping: dict[str, Any], keys: Iterable[str], *, label: str) -> None:
    """Validate that all keys are present in mapping."""
    for key in keys:
        if key not in mapping:
            raise ValueError(f"{label} {key} is required")


def require_str(value: object, *, label: str, allow_empty: bool = True) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string")
    if not allow_empty and not value:
        raise ValueError(f"{label} must be a non-empty string")
    return value


def require_size(value: object, *, label: str) -> int:
    # bool is an int subclass; JSON true/false must not pass as a size
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{label} must be a non-negative integer")
    return value


def normalize_name(name: object, *, label: str = "name") -> str:
    """Normalize an attachment name to Unicode NFC."""
    if not isinstance(name, str):
        raise ValueError(f"{label} must be a string")
    try:
        name.encode("utf-8", "strict")
    except UnicodeEncodeError as exc:
        raise ValueError(f"{label} must be valid UTF-8") from exc
    return unicodedata.normalize("NFC", name)


def safe_filename(name: str, *, fallback: str = "attachment") -> str:
    """Reduce a declared attachment name to a single safe path component."""
    leaf = name.replace("\\", "/").rsplit("/", 1)[-1]
    leaf = leaf.encode("utf-8", "replace").decode("utf-8")
    leaf = _UNSAFE_FILENAME_CHARS.sub("_", leaf).strip(" .")
    if not leaf:
        return fallback
    return _truncate_name(leaf, MAX_NAME_BYTES)


def _truncate_name(name: str, limit: int) -> str:
    if len(name.encode("utf-8")) <= limit:
        return name
    stem, dot, extension = name.rpartition(".")
    suffix = dot + extension if stem and len(extension) <= 16 else ""
    base = name[: len(name) - len(suffix)]
    budget = limit - len(suffix.encode("utf-8"))
    # drop a multibyte character cut in half
    kept = base.encode("utf-8")[:budget].decode("utf-8", "ignore")
    return kept.rstrip(" .") + suffix
