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

import typer

from ...core.errors import BLOCK_DATA
from ...encoding.compression import (
    CompressedBlob,
    compress_blob,
    decompress,
    decompress_blob,
)
from ...formats.attachments import format_file_size
from ..core.common import (
    _ctx_config,
    _ctx_quiet,
    _ctx_value,
    _read_bytes,
    _read_text,
    _run_cli,
    _write_bytes,
    _write_text,
)
from ..ui import build_kv_table, console_err

_COMPRESS_HELP = (
    "Compress a file into a base64 gzip blob.\n\n"
    "Examples:\n"
    "  sealmail compress notes.txt\n"
    "  cat photo.png | sealmail compress - -o photo.b64 --stats\n"
)

_DECOMPRESS_HELP = (
    "Restore the bytes behind a base64 gzip blob.\n\n"
    "Examples:\n"
    "  sealmail decompress photo.b64 -o photo.png\n"
    "  sealmail decompress photo.b64 --expect-size 20480 -o photo.png\n"
)


def register(app: typer.Typer) -> None:
    app.command("compress", help=_COMPRESS_HELP)(compress)
    app.command("decompress", help=_DECOMPRESS_HELP)(decompress_command)


def compress(
    ctx: typer.Context,
    input_path: str = typer.Argument("-", metavar="INPUT", help="File to compress (- for stdin)."),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the blob here instead of stdout.",
        rich_help_panel="Outputs",
    ),
    level: int | None = typer.Option(
        None,
        "--level",
        min=0,
        max=9,
        help="Compression level (defaults to [compression] level).",
        rich_help_panel="Behavior",
    ),
    stats: bool = typer.Option(
        False,
        "--stats",
        help="Print sizes and ratio to stderr.",
        rich_help_panel="Outputs",
    ),
) -> None:
    debug = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        quiet = _ctx_quiet(ctx)
        config = _ctx_config(ctx)
        data = _read_bytes(input_path)
        blob = compress_blob(data, level=config.compression.level if level is None else level)
        _write_text(output, blob.compressed_data)
        if stats and not quiet:
            console_err.print(_stats_table(blob))

    _run_cli(_run, debug=debug)


def decompress_command(
    ctx: typer.Context,
    input_path: str = typer.Argument("-", metavar="INPUT", help="Blob to restore (- for stdin)."),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the restored bytes here instead of stdout.",
        rich_help_panel="Outputs",
    ),
    expect_size: int | None = typer.Option(
        None,
        "--expect-size",
        min=0,
        help="Fail unless the restored data has exactly this many bytes.",
        rich_help_panel="Behavior",
    ),
) -> None:
    debug = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        text = _read_text(input_path)
        if expect_size is None:
            data = decompress(text, block=BLOCK_DATA)
        else:
            blob = CompressedBlob(compressed_data=text, original_size=expect_size)
            data = decompress_blob(blob, block=BLOCK_DATA)
        _write_bytes(output, data)

    _run_cli(_run, debug=debug)


def _stats_table(blob: CompressedBlob):
    return build_kv_table(
        [
            ("Original", format_file_size(blob.original_size)),
            ("Compressed", format_file_size(blob.compressed_size)),
            ("Ratio", f"{blob.compression_ratio:.2f}%"),
        ],
        title="Compression",
    )
