#!/usr/bin/env python3
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

"""Bounded voice capture.

A :class:`RecordingSession` owns one :class:`AudioSource` for its lifetime.
Manual :meth:`RecordingSession.stop` races a hard-ceiling timer; whichever
fires first stops the source and resolves the session's future, the other is
a no-op. The source is closed on every exit path.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Literal, Protocol

from ..core.bounds import MAX_RECORDING_SECONDS

logger = logging.getLogger(__name__)

StopReason = Literal["manual", "timeout", "closed"]


class AudioSource(Protocol):
    mime_type: str

    def start(self) -> None: ...

    def stop(self) -> bytes: ...

    def close(self) -> None: ...


class _Timer(Protocol):
    daemon: bool

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], _Timer]


@dataclass(frozen=True)
class Recording:
    mime_type: str
    data: bytes
    stopped_by: StopReason
    elapsed: float


class RecordingSession:
    def __init__(
        self,
        source: AudioSource,
        *,
        max_seconds: float = MAX_RECORDING_SECONDS,
        timer_factory: TimerFactory = threading.Timer,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_seconds <= 0:
            raise ValueError("max_seconds must be positive")
        self._source = source
        self._max_seconds = max_seconds
        self._timer_factory = timer_factory
        self._clock = clock
        self._lock = threading.Lock()
        self._future: Future[Recording] = Future()
        self._timer: _Timer | None = None
        self._started_at: float | None = None
        self._closed = False

    @property
    def running(self) -> bool:
        return self._started_at is not None and not self._future.done()

    @property
    def future(self) -> Future[Recording]:
        return self._future

    def start(self) -> RecordingSession:
        with self._lock:
            if self._closed:
                raise RuntimeError("recording session is closed")
            if self._started_at is not None:
                raise RuntimeError("recording already started")
            self._source.start()
            self._started_at = self._clock()
            timer = self._timer_factory(self._max_seconds, self._on_timeout)
            timer.daemon = True
            timer.start()
            self._timer = timer
        logger.debug("recording started (ceiling %.1fs)", self._max_seconds)
        return self

    def stop(self) -> bool:
        """Stop manually. Returns False when the timer already won the race."""
        return self._finish("manual")

    def result(self, timeout: float | None = None) -> Recording:
        return self._future.result(timeout)

    def close(self) -> None:
        if self._closed:
            return
        try:
            if self.running:
                self._finish("closed")
        finally:
            self._closed = True
            if self._timer is not None:
                self._timer.cancel()
            self._source.close()

    def __enter__(self) -> RecordingSession:
        try:
            return self.start()
        except BaseException:
            self.close()
            raise

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _on_timeout(self) -> None:
        self._finish("timeout")

    def _finish(self, reason: StopReason) -> bool:
        with self._lock:
            if self._started_at is None:
                raise RuntimeError("recording not started")
            if self._future.done():
                return False
            if self._timer is not None:
                self._timer.cancel()
            elapsed = self._clock() - self._started_at
            try:
                data = self._source.stop()
            except Exception as exc:
                self._future.set_exception(exc)
                if reason == "timeout":
                    return True
                raise
            recording = Recording(
                mime_type=self._source.mime_type,
                data=bytes(data),
                stopped_by=reason,
                elapsed=elapsed,
            )
            self._future.set_result(recording)
        logger.debug("recording stopped by %s after %.2fs (%d bytes)", reason, elapsed, len(data))
        return True


def record(
    source: AudioSource,
    *,
    max_seconds: float = MAX_RECORDING_SECONDS,
    stop_event: threading.Event | None = None,
) -> Recording:
    """Record for up to ``max_seconds`` and return the accumulated bytes.

    Setting ``stop_event`` ends the recording early.
    """
    with RecordingSession(source, max_seconds=max_seconds) as session:
        if stop_event is not None and stop_event.wait(max_seconds):
            session.stop()
        return session.result()
