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

from ...formats.attachments import format_file_size
from ...formats.message import parse_message
from ..core.common import _ctx_quiet, _ctx_value, _read_text, _run_cli, _write_text
from ..core.log import _warn
from ..ui import build_list_table, console_err

_UNPACK_HELP = (
    "Split decrypted message text into prose, voice note and attachments.\n\n"
    "The text goes to stdout; files are written to --out. A damaged block is\n"
    "reported and skipped, and the command exits with 1.\n\n"
    "Examples:\n"
    "  sealmail unpack plain.txt --out ./received\n"
    "  decrypt-tool | sealmail unpack - --text-only\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_UNPACK_HELP)(unpack)


def unpack(
    ctx: typer.Context,
    input_path: str = typer.Argument(
        "-", metavar="INPUT", help="Decrypted message text (- for stdin)."
    ),
    out_dir: Path = typer.Option(
        Path("."),
        "--out",
        "-d",
        help="Directory for restored files.",
        rich_help_panel="Outputs",
    ),
    text_only: bool = typer.Option(
        False,
        "--text-only",
        help="Print the text and write no files.",
        rich_help_panel="Outputs",
    ),
) -> None:
    debug = bool(_ctx_value(ctx, "debug"))

    def _run() -> int:
        quiet = _ctx_quiet(ctx)
        content = parse_message(_read_text(input_path))
        _write_text(None, content.text)
        for failure in content.failures:
            _warn(f"{failure.block} block skipped: {failure.message}", quiet=quiet)
        if text_only:
            return 0 if content.ok else 1

        written: list[tuple[str, str, str]] = []
        clip = content.audio
        if clip is not None:
            path = _write_unique(out_dir, clip.suggested_filename(), clip.data)
            written.append((str(path), clip.mime_type, format_file_size(clip.size)))
        for attachment in content.attachments:
            path = _write_unique(out_dir, attachment.safe_filename(), attachment.data)
            written.append((str(path), attachment.mime_type, format_file_size(attachment.size)))
        if written and not quiet:
            console_err.print(build_list_table("Restored", ("Path", "Type", "Size"), written))
        return 0 if content.ok else 1

    _run_cli(_run, debug=debug)


def _write_unique(directory: Path, filename: str, data: bytes) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    candidate = directory / filename
    stem, suffix = candidate.stem, candidate.suffix
    counter = 1
    while candidate.exists():
        candidate = directory / f"{stem} ({counter}){suffix}"
        counter += 1
    candidate.write_bytes(data)
    return candidate
