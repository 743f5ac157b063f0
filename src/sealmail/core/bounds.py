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

# Maximum number of entries accepted in a files manifest.
MAX_MANIFEST_FILES = 256

# Maximum UTF-8 byte length of a file name written to disk.
MAX_NAME_BYTES = 255

# Maximum email body read by the CLI (UTF-8 bytes); most providers cap near 25 MB.
MAX_BODY_BYTES = 26_214_400

# Hard ceiling for a voice recording, in seconds.
MAX_RECORDING_SECONDS = 10.0

# Default column width used when wrapping the encrypted payload.
DEFAULT_PAYLOAD_WRAP = 76


__all__ = [
    "DEFAULT_PAYLOAD_WRAP",
    "MAX_BODY_BYTES",
    "MAX_MANIFEST_FILES",
    "MAX_NAME_BYTES",
    "MAX_RECORDING_SECONDS",
]
