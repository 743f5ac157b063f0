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

import typer

from ...formats.classifier import classify, display_subject, looks_encrypted
from ..core.common import _ctx_value, _read_text, _run_cli, _write_text
from ..ui import build_kv_table, console

_CLASSIFY_HELP = (
    "Report whether a received body is an envelope, markup or plain text.\n\n"
    "Examples:\n"
    "  sealmail classify body.txt\n"
    "  sealmail classify body.html --content-type text/html --subject 'Re: hi'\n"
)


def register(app: typer.Typer) -> None:
    app.command("classify", help=_CLASSIFY_HELP)(classify_command)


def classify_command(
    ctx: typer.Context,
    input_path: str = typer.Argument("-", metavar="INPUT", help="Mail body (- for stdin)."),
    content_type: str | None = typer.Option(
        None,
        "--content-type",
        help="Declared MIME type of the body.",
        rich_help_panel="Inputs",
    ),
    subject: str | None = typer.Option(
        None,
        "--subject",
        help="Subject line, used for the inbox badge and display subject.",
        rich_help_panel="Inputs",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON.",
        rich_help_panel="Outputs",
    ),
) -> None:
    debug = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        body = _read_text(input_path)
        result = {
            "kind": classify(body, content_type).value,
            "badge": looks_encrypted(body, subject),
            "subject": display_subject(subject),
        }
        if as_json:
            _write_text(None, json.dumps(result, ensure_ascii=False))
            return
        console.print(
            build_kv_table(
                [
                    ("Kind", result["kind"]),
                    ("Encrypted badge", "yes" if result["badge"] else "no"),
                    ("Subject", result["subject"]),
                ]
            )
        )

    _run_cli(_run, debug=debug)
