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

from pathlib import Path

import typer

from ...capture.playback import guess_audio_type
from ...core.bounds import MAX_BODY_BYTES
from ...formats.attachments import build_records, format_file_size, read_attachment
from ...formats.audio import build_audio_block
from ...formats.message import compose_message
from ..core.common import (
    _ctx_config,
    _ctx_quiet,
    _ctx_value,
    _read_bytes,
    _read_text,
    _run_cli,
    _write_text,
)
from ..ui import build_list_table, console_err

_COMPOSE_HELP = (
    "Build the plaintext of a message: text, optional voice note, optional files.\n\n"
    "The result is what gets encrypted and then wrapped with `sealmail seal`.\n\n"
    "Examples:\n"
    "  sealmail compose note.txt --attach a.png --attach b.pdf -o plain.txt\n"
    '  sealmail compose --text "see you" --audio memo.webm --audio-type audio/webm\n'
)


def register(app: typer.Typer) -> None:
    app.command(help=_COMPOSE_HELP)(compose)


def compose(
    ctx: typer.Context,
    input_path: str = typer.Argument(
        "-",
        metavar="INPUT",
        help="Message text file (- for stdin). Ignored with --text.",
    ),
    text: str | None = typer.Option(
        None,
        "--text",
        "-t",
        help="Message text given inline.",
        rich_help_panel="Inputs",
    ),
    audio: Path | None = typer.Option(
        None,
        "--audio",
        help="Voice note recording to embed.",
        rich_help_panel="Inputs",
    ),
    audio_type: str | None = typer.Option(
        None,
        "--audio-type",
        help="MIME type of the recording (guessed from the file name when omitted).",
        rich_help_panel="Inputs",
    ),
    attach: list[Path] = typer.Option(
        [],
        "--attach",
        "-a",
        help="File to attach (repeatable).",
        rich_help_panel="Inputs",
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the message here instead of stdout.",
        rich_help_panel="Outputs",
    ),
) -> None:
    debug = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        quiet = _ctx_quiet(ctx)
        config = _ctx_config(ctx)
        level = config.compression.level
        body = text if text is not None else _read_text(input_path)

        audio_block = None
        if audio is not None:
            mime_type = audio_type or _guess_audio_type(audio)
            audio_block = build_audio_block(mime_type, _read_bytes(audio), level=level)

        parts = [read_attachment(path) for path in attach]
        total = sum(len(part.data) for part in parts)
        if total > MAX_BODY_BYTES:
            raise ValueError(f"attachments exceed MAX_BODY_BYTES ({MAX_BODY_BYTES} bytes)")
        records = build_records(parts, level=level, jobs=config.runtime.jobs)

        message = compose_message(body, audio=audio_block, files=records)
        _write_text(output, message)
        if not quiet and records:
            rows = [
                (
                    record.name,
                    record.mime_type,
                    format_file_size(record.size),
                    f"{record.compression_ratio:.2f}%",
                )
                for record in records
            ]
            console_err.print(
                build_list_table("Attachments", ("Name", "Type", "Size", "Saved"), rows)
            )

    _run_cli(_run, debug=debug)


def _guess_audio_type(path: Path) -> str:
    mime_type = guess_audio_type(path.name)
    if not mime_type:
        raise ValueError(f"cannot guess the MIME type of {path}; pass --audio-type")
    return mime_type
