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

"""Encryption scheme presets used when sealing a message.

The presets only describe how a sealed body is labelled (banner, subject tag,
metadata keys). The ciphertext itself is produced elsewhere.
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from dataclasses import dataclass, field

from ..core.bounds import DEFAULT_PAYLOAD_WRAP
from .envelope_codec import build
from .envelope_types import METADATA_FORMAT_AUTO, MetadataFormatChoice

LOCK_EMOJI = "\U0001f510"
TIMESTAMP_KEY = "Timestamp"
_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


@dataclass(frozen=True)
class Scheme:
    name: str
    banner: str
    subject_tag: str
    metadata: tuple[tuple[str, str], ...] = field(default=())


SCHEMES: dict[str, Scheme] = {
    "aes": Scheme(
        name="aes",
        banner="[AES ENCRYPTED]",
        subject_tag="[Encrypted]",
        metadata=(("Encryption", "AES-256"),),
    ),
    "qkd": Scheme(
        name="qkd",
        banner="[QKD ENCRYPTED]",
        subject_tag="[Quantum Encrypted]",
        metadata=(
            ("Encryption", "Quantum Key Distribution"),
            ("Key Distribution Protocol", "BB84"),
        ),
    ),
    "pqc": Scheme(
        name="pqc",
        banner="[PQC ENCRYPTED]",
        subject_tag="[Post-Quantum Encrypted]",
        metadata=(
            ("Encryption", "AES-GCM 32 Bytes"),
            ("Post-Quantum Algorithm", "Quantum-Resistant"),
        ),
    ),
    "otp": Scheme(
        name="otp",
        banner="[AES STANDARD ENCRYPTED]",
        subject_tag="[AES Standard Encrypted]",
        metadata=(
            ("Encryption", "AES-256 Standard"),
            ("Algorithm", "Advanced Encryption Standard"),
        ),
    ),
}

# Banners seen in bodies from older clients, including ones no preset writes any more.
KNOWN_BANNERS = (*(scheme.banner for scheme in SCHEMES.values()), "[AES-GCM ENCRYPTED]")


@dataclass(frozen=True)
class SealedMessage:
    subject: str | None
    body: str


def get_scheme(name: str) -> Scheme:
    key = name.strip().lower()
    if key not in SCHEMES:
        choices = ", ".join(sorted(SCHEMES))
        raise ValueError(f"unknown encryption scheme: {name} (choose from {choices})")
    return SCHEMES[key]


def scheme_metadata(
    scheme: Scheme,
    *,
    now: datetime.datetime | None = None,
    extra: Mapping[str, str] | None = None,
) -> dict[str, str]:
    moment = _as_utc(now or datetime.datetime.now(datetime.timezone.utc))
    metadata = dict(scheme.metadata)
    if scheme.name == "qkd":
        millis = (moment - _EPOCH) // datetime.timedelta(milliseconds=1)
        metadata = {
            "Encryption": metadata["Encryption"],
            "Quantum Entanglement ID": f"QE-{millis}",
            **{key: value for key, value in metadata.items() if key != "Encryption"},
        }
    metadata[TIMESTAMP_KEY] = _isoformat(moment)
    if extra:
        metadata.update(extra)
    return metadata


def decorate_subject(subject: str, scheme: Scheme) -> str:
    return f"{LOCK_EMOJI} {subject} {scheme.subject_tag}"


def seal_message(
    payload: str,
    scheme: Scheme,
    *,
    subject: str | None = None,
    now: datetime.datetime | None = None,
    extra: Mapping[str, str] | None = None,
    metadata_format: MetadataFormatChoice = METADATA_FORMAT_AUTO,
    wrap: int = DEFAULT_PAYLOAD_WRAP,
) -> SealedMessage:
    body = build(
        scheme_metadata(scheme, now=now, extra=extra),
        payload,
        metadata_format=metadata_format,
        wrap=wrap,
        banner=scheme.banner,
    )
    return SealedMessage(
        subject=decorate_subject(subject, scheme) if subject is not None else None,
        body=body,
    )


def _as_utc(moment: datetime.datetime) -> datetime.datetime:
    # naive datetimes are taken to be UTC
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.timezone.utc)
    return moment.astimezone(datetime.timezone.utc)


def _isoformat(moment: datetime.datetime) -> str:
    utc = _as_utc(moment)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
