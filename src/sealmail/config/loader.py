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

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, cast

from ..core.bounds import DEFAULT_PAYLOAD_WRAP
from ..encoding.compression import DEFAULT_LEVEL
from ..formats.envelope_types import MetadataFormatChoice
from ..formats.schemes import SCHEMES
from .installer import resolve_config_path

_METADATA_FORMATS = ("auto", "lines", "json")


@dataclass(frozen=True)
class CompressionDefaults:
    level: int = DEFAULT_LEVEL


@dataclass(frozen=True)
class EnvelopeDefaults:
    scheme: str = "aes"
    metadata_format: MetadataFormatChoice = "auto"
    wrap: int = DEFAULT_PAYLOAD_WRAP


@dataclass(frozen=True)
class RuntimeDefaults:
    jobs: int | Literal["auto"] = "auto"


@dataclass(frozen=True)
class UiDefaults:
    quiet: bool = False
    no_color: bool = False


@dataclass(frozen=True)
class AppConfig:
    path: Path | None = None
    compression: CompressionDefaults = field(default_factory=CompressionDefaults)
    envelope: EnvelopeDefaults = field(default_factory=EnvelopeDefaults)
    runtime: RuntimeDefaults = field(default_factory=RuntimeDefaults)
    ui: UiDefaults = field(default_factory=UiDefaults)


def load_app_config(path: str | Path | None = None) -> AppConfig:
    config_path = resolve_config_path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")
    data = _load_toml(config_path)
    return parse_app_config(data, path=config_path)


def parse_app_config(data: dict[str, object], *, path: Path | None = None) -> AppConfig:
    return AppConfig(
        path=path,
        compression=_parse_compression(_get_dict(data, "compression")),
        envelope=_parse_envelope(_get_dict(data, "envelope")),
        runtime=_parse_runtime(_get_dict(data, "runtime")),
        ui=_parse_ui(_get_dict(data, "ui")),
    )


def _parse_compression(cfg: dict[str, object]) -> CompressionDefaults:
    level = cfg.get("level")
    if level is None:
        return CompressionDefaults()
    parsed = _parse_int_strict(level, field="compression.level")
    if not 0 <= parsed <= 9:
        raise ValueError("compression.level must be between 0 and 9")
    return CompressionDefaults(level=parsed)


def _parse_envelope(cfg: dict[str, object]) -> EnvelopeDefaults:
    defaults = EnvelopeDefaults()
    scheme = _parse_optional_choice(
        cfg.get("scheme"),
        field="envelope.scheme",
        choices=tuple(sorted(SCHEMES)),
    )
    metadata_format = _parse_optional_choice(
        cfg.get("metadata_format"),
        field="envelope.metadata_format",
        choices=_METADATA_FORMATS,
    )
    wrap_value = cfg.get("wrap")
    wrap = defaults.wrap
    if wrap_value is not None:
        wrap = _parse_int_strict(wrap_value, field="envelope.wrap")
        if wrap < 0:
            raise ValueError("envelope.wrap must be 0 or a positive integer")
    return EnvelopeDefaults(
        scheme=scheme or defaults.scheme,
        metadata_format=cast(MetadataFormatChoice, metadata_format or defaults.metadata_format),
        wrap=wrap,
    )


def _parse_runtime(cfg: dict[str, object]) -> RuntimeDefaults:
    value = cfg.get("jobs")
    if value is None:
        return RuntimeDefaults()
    if isinstance(value, str):
        normalized = value.strip().lower()
        if not normalized or normalized == "auto":
            return RuntimeDefaults()
        value = normalized
    parsed = _parse_int_strict(value, field="runtime.jobs")
    if parsed <= 0:
        raise ValueError("runtime.jobs must be 'auto' or a positive integer")
    return RuntimeDefaults(jobs=parsed)


def _parse_ui(cfg: dict[str, object]) -> UiDefaults:
    return UiDefaults(
        quiet=_parse_bool(cfg.get("quiet"), field="ui.quiet", default=False),
        no_color=_parse_bool(cfg.get("no_color"), field="ui.no_color", default=False),
    )


def _load_toml(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _get_dict(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    if isinstance(value, dict):
        return value
    return {}


def _parse_optional_choice(
    value: object,
    *,
    field: str,
    choices: tuple[str, ...],
) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{field} must be one of: {', '.join(choices)}")
    normalized = value.strip().lower()
    if not normalized:
        return None
    if normalized not in choices:
        raise ValueError(f"{field} must be one of: {', '.join(choices)}")
    return normalized


def _parse_bool(value: object, *, field: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"{field} must be a boolean")
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
        raise ValueError(f"{field} must be a boolean")
    raise ValueError(f"{field} must be a boolean")


def _parse_int_strict(value: object, *, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{field} must be an integer")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError(f"{field} must be an integer")
        try:
            return int(text)
        except ValueError as exc:
            raise ValueError(f"{field} must be an integer") from exc
    raise ValueError(f"{field} must be an integer")
