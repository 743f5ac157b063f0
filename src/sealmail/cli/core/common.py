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

import importlib.metadata
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import typer
from rich.markup import escape
from rich.traceback import install as install_rich_traceback

from ...config import AppConfig, load_app_config
from ...core.bounds import MAX_BODY_BYTES
from ..ui import configure_ui, console_err

STDIO = "-"


def _run_cli(func: Callable[[], Any], *, debug: bool) -> None:
    if debug:
        install_rich_traceback(show_locals=True)
    try:
        result = func()
    except (OSError, RuntimeError, ValueError, TypeError, LookupError) as exc:
        if debug:
            raise
        console_err.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2)
    if isinstance(result, int) and result != 0:
        raise typer.Exit(code=result)


def _ctx_value(ctx: typer.Context, key: str) -> Any:
    if ctx.obj is None:
        return None
    return ctx.obj.get(key)


def _ctx_config(ctx: typer.Context) -> AppConfig:
    cached = _ctx_value(ctx, "app_config")
    if isinstance(cached, AppConfig):
        return cached
    config = load_app_config(_ctx_value(ctx, "config"))
    if config.ui.no_color:
        configure_ui(no_color=True)
    if ctx.obj is not None:
        ctx.obj["app_config"] = config
    return config


def _ctx_quiet(ctx: typer.Context) -> bool:
    return bool(_ctx_value(ctx, "quiet")) or _ctx_config(ctx).ui.quiet


def _read_bytes(path: str | Path) -> bytes:
    if str(path) == STDIO:
        data = sys.stdin.buffer.read(MAX_BODY_BYTES + 1)
        label = "stdin"
    else:
        resolved = Path(path).expanduser()
        if not resolved.is_file():
            raise FileNotFoundError(f"input file not found: {resolved}")
        if resolved.stat().st_size > MAX_BODY_BYTES:
            raise ValueError(f"{resolved} exceeds MAX_BODY_BYTES ({MAX_BODY_BYTES} bytes)")
        data = resolved.read_bytes()
        label = str(resolved)
    if len(data) > MAX_BODY_BYTES:
        raise ValueError(f"{label} exceeds MAX_BODY_BYTES ({MAX_BODY_BYTES} bytes)")
    return data


def _read_text(path: str | Path) -> str:
    data = _read_bytes(path)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"{path} is not valid UTF-8 text") from exc


def _write_text(path: str | Path | None, text: str) -> None:
    if path is None or str(path) == STDIO:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.flush()
        return
    resolved = Path(path).expanduser()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    resolved.write_text(text, encoding="utf-8")


def _write_bytes(path: str | Path | None, data: bytes) -> None:
    if path is None or str(path) == STDIO:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()
        return
    resolved = Path(path).expanduser()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    resolved.write_bytes(data)


def _get_version() -> str:
    try:
        return importlib.metadata.version("sealmail")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"
