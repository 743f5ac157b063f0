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
from enum import Enum

from ..core.errors import EnvelopeError
from .envelope_codec import extract
from .envelope_types import METADATA_OPEN, PAYLOAD_OPEN
from .schemes import KNOWN_BANNERS, LOCK_EMOJI

_MARKUP_RE = re.compile(r"<[a-z][^<>]*>", re.IGNORECASE)
_SUBJECT_TAG_RE = re.compile(r"\s*\[[^\[\]]*Encrypted\]\s*$")
_SUBJECT_LOCKS = (LOCK_EMOJI, "\U0001f512")
_MARKUP_TYPES = {"text/html", "application/xhtml+xml"}


class ContentKind(str, Enum):
    ENCRYPTED = "encrypted"
    MARKUP = "markup"
    PLAIN_TEXT = "plain_text"


def classify(body: str, declared_type: str | None = None) -> ContentKind:
    """Decide how a received body should be decoded.

    An extractable envelope wins over everything else; a body whose envelope
    is damaged falls through to the markup/plain checks so it can still be
    shown raw.
    """
    try:
        extract(body)
    except EnvelopeError:
        pass
    else:
        return ContentKind.ENCRYPTED
    if _declares_markup(declared_type) or _MARKUP_RE.search(body):
        return ContentKind.MARKUP
    return ContentKind.PLAIN_TEXT


def subject_looks_encrypted(subject: str | None) -> bool:
    if not subject:
        return False
    stripped = subject.strip()
    if stripped.startswith(_SUBJECT_LOCKS):
        return True
    return bool(_SUBJECT_TAG_RE.search(stripped))


def looks_encrypted(body: str | None, subject: str | None = None) -> bool:
    """Cheap inbox badge check; never a substitute for :func:`classify`."""
    if subject_looks_encrypted(subject):
        return True
    if not body:
        return False
    if METADATA_OPEN in body or PAYLOAD_OPEN in body:
        return True
    return any(banner in body for banner in KNOWN_BANNERS)


def display_subject(subject: str | None) -> str:
    if not subject:
        return "No Subject"
    cleaned = subject.strip()
    for lock in _SUBJECT_LOCKS:
        if cleaned.startswith(lock):
            cleaned = cleaned[len(lock) :].lstrip()
    cleaned = _SUBJECT_TAG_RE.sub("", cleaned)
    return cleaned or "No Subject"


def _declares_markup(declared_type: str | None) -> bool:
    if not declared_type:
        return False
    base = declared_type.split(";", 1)[0].strip().lower()
    return base in _MARKUP_TYPES
