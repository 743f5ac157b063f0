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

import json
from typing import cast

import typer

from ...core.errors import EnvelopeError
from ...formats.envelope_codec import build, extract
from ...formats.envelope_types import MetadataFormatChoice
from ...formats.schemes import decorate_subject, get_scheme, scheme_metadata
from ..core.common import (
    _ctx_config,
    _ctx_quiet,
    _ctx_value,
    _read_text,
    _run_cli,
    _write_text,
)
from ..core.log import _warn
from ..ui import build_kv_table, console, console_err, panel

_SEAL_HELP = (
    "Wrap an encrypted payload in the mail envelope.\n\n"
    "Examples:\n"
    "  sealmail seal ciphertext.b64 --scheme qkd --subject 'Lunch'\n"
    "  sealmail seal - --meta Recipient=bob@example.com --format json\n"
)

_OPEN_HELP = (
    "Extract metadata and payload from a received mail body.\n\n"
    "Examples:\n"
    "  sealmail open body.txt\n"
    "  sealmail open body.txt --payload-only | decrypt-tool\n"
    "  sealmail open body.txt --json --fallback-raw\n"
)

_FORMAT_CHOICES = ("auto", "lines", "json")


def register(app: typer.Typer) -> None:
    app.command(help=_SEAL_HELP)(seal)
    app.command("open", help=_OPEN_HELP)(open_envelope)


def seal(
    ctx: typer.Context,
    input_path: str = typer.Argument(
        "-", metavar="INPUT", help="Encrypted payload text (- for stdin)."
    ),
    scheme: str | None = typer.Option(
        None,
        "--scheme",
        "-s",
        help="Encryption preset: aes, qkd, pqc, otp (defaults to [envelope] scheme).",
        rich_help_panel="Envelope",
    ),
    meta: list[str] = typer.Option(
        [],
        "--meta",
        "-m",
        help="Extra metadata entry as KEY=VALUE (repeatable).",
        rich_help_panel="Envelope",
    ),
    metadata_format: str | None = typer.Option(
        None,
        "--format",
        help="Metadata layout: auto, lines or json.",
        rich_help_panel="Envelope",
    ),
    wrap: int | None = typer.Option(
        None,
        "--wrap",
        min=0,
        help="Payload line width (0 keeps a single line).",
        rich_help_panel="Envelope",
    ),
    subject: str | None = typer.Option(
        None,
        "--subject",
        help="Subject to decorate with the preset's lock and tag.",
        rich_help_panel="Envelope",
    ),
    no_banner: bool = typer.Option(
        False,
        "--no-banner",
        help="Omit the preset banner line.",
        rich_help_panel="Envelope",
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the body here instead of stdout.",
        rich_help_panel="Outputs",
    ),
) -> None:
    debug = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        quiet = _ctx_quiet(ctx)
        config = _ctx_config(ctx)
        preset = get_scheme(scheme or config.envelope.scheme)
        fmt = _metadata_format(metadata_format or config.envelope.metadata_format)
        width = config.envelope.wrap if wrap is None else wrap
        payload = _read_text(input_path)
        body = build(
            scheme_metadata(preset, extra=_parse_meta(meta)),
            payload,
            metadata_format=fmt,
            wrap=width,
            banner=None if no_banner else preset.banner,
        )
        _write_text(output, body)
        if subject is not None and not quiet:
            console_err.print(f"Subject: {decorate_subject(subject, preset)}", markup=False)

    _run_cli(_run, debug=debug)


def open_envelope(
    ctx: typer.Context,
    input_path: str = typer.Argument("-", metavar="INPUT", help="Mail body (- for stdin)."),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print metadata and payload as JSON.",
        rich_help_panel="Outputs",
    ),
    payload_only: bool = typer.Option(
        False,
        "--payload-only",
        help="Print only the payload text.",
        rich_help_panel="Outputs",
    ),
    fallback_raw: bool = typer.Option(
        False,
        "--fallback-raw",
        help="Print the body unchanged when no intact envelope is found.",
        rich_help_panel="Behavior",
    ),
) -> None:
    debug = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        quiet = _ctx_quiet(ctx)
        body = _read_text(input_path)
        try:
            envelope = extract(body)
        except EnvelopeError as exc:
            if not fallback_raw:
                raise
            _warn(f"{exc}; showing the raw body", quiet=quiet)
            _write_text(None, body)
            return
        if payload_only:
            _write_text(None, envelope.payload)
            return
        if as_json:
            _write_text(None, json.dumps(envelope.to_dict(), indent=2, ensure_ascii=False))
            return
        console.print(build_kv_table(list(envelope.metadata.items()), title="Metadata"))
        console.print(panel("Payload", envelope.payload, style="encrypted"))

    _run_cli(_run, debug=debug)


def _parse_meta(entries: list[str]) -> dict[str, str]:
    extra: dict[str, str] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"--meta expects KEY=VALUE, got {entry!r}")
        extra[key] = value.strip()
    return extra


def _metadata_format(value: str) -> MetadataFormatChoice:
    normalized = value.strip().lower()
    if normalized not in _FORMAT_CHOICES:
        raise ValueError(f"--format must be one of: {', '.join(_FORMAT_CHOICES)}")
    return cast(MetadataFormatChoice, normalized)
