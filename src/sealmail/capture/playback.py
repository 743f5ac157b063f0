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

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import PurePath

_EXTRA_EXTENSIONS = {
    "audio/webm": ".webm",
    "audio/ogg": ".ogg",
    "audio/mp4": ".m4a",
    "audio/mpeg": ".mp3",
    "audio/wav": ".wav",
}


@dataclass(frozen=True)
class AudioClip:
    """Reconstructed recording, typed exactly as it was transmitted."""

    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    def suggested_filename(self, stem: str = "voice-message") -> str:
        return f"{stem}{extension_for(self.mime_type)}"


def extension_for(mime_type: str) -> str:
    base = mime_type.split(";", 1)[0].strip().lower()
    if base in _EXTRA_EXTENSIONS:
        return _EXTRA_EXTENSIONS[base]
    return mimetypes.guess_extension(base) or ".bin"


def guess_audio_type(filename: str) -> str | None:
    suffix = PurePath(filename).suffix.lower()
    for mime_type, extension in _EXTRA_EXTENSIONS.items():
        if extension == suffix:
            return mime_type
    mime_type, _encoding = mimetypes.guess_type(filename)
    return mime_type
