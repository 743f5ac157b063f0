#!/usr/bin/env python3
from __future__ import annotations

import typer

from .commands import (
    classify as classify_command,
    codec as codec_command,
    compose as compose_command,
    config as config_command,
    envelope as envelope_command,
    unpack as unpack_command,
)


def register(app: typer.Typer) -> None:
    codec_command.register(app)
    compose_command.register(app)
    envelope_command.register(app)
    unpack_command.register(app)
    classify_command.register(app)
    config_command.register(app)
