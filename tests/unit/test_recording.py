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

import threading
import unittest
from collections.abc import Callable

from sealmail.capture.recording import RecordingSession, record


class _FakeSource:
    def __init__(self, data: bytes = b"opus-frames", *, fail_start=None, fail_stop=None):
        self.mime_type = "audio/webm;codecs=opus"
        self.data = data
        self.fail_start = fail_start
        self.fail_stop = fail_stop
        self.started = 0
        self.stopped = 0
        self.closed = 0

    def start(self) -> None:
        self.started += 1
        if self.fail_start is not None:
            raise self.fail_start

    def stop(self) -> bytes:
        self.stopped += 1
        if self.fail_stop is not None:
            raise self.fail_stop
        return self.data

    def close(self) -> None:
        self.closed += 1


class _FakeTimer:
    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.function()


class TestRecordingSession(unittest.TestCase):
    def setUp(self) -> None:
        self.timers: list[_FakeTimer] = []
        self.ticks = iter([100.0, 102.5, 200.0])

    def _session(self, source: _FakeSource, **kwargs) -> RecordingSession:
        def factory(interval: float, function: Callable[[], None]) -> _FakeTimer:
            timer = _FakeTimer(interval, function)
            self.timers.append(timer)
            return timer

        return RecordingSession(
            source,
            timer_factory=factory,
            clock=lambda: next(self.ticks),
            **kwargs,
        )

    def test_manual_stop(self) -> None:
        source = _FakeSource()
        session = self._session(source).start()
        (timer,) = self.timers
        self.assertEqual(timer.interval, 10.0)
        self.assertTrue(timer.daemon)
        self.assertTrue(timer.started)
        self.assertTrue(session.running)

        self.assertTrue(session.stop())
        recording = session.result(timeout=0)
        self.assertEqual(recording.stopped_by, "manual")
        self.assertEqual(recording.data, b"opus-frames")
        self.assertEqual(recording.mime_type, "audio/webm;codecs=opus")
        self.assertEqual(recording.elapsed, 2.5)
        self.assertTrue(timer.cancelled)
        self.assertFalse(session.running)

    def test_timeout_wins_race(self) -> None:
        source = _FakeSource()
        session = self._session(source, max_seconds=3).start()
        self.timers[0].fire()
        self.assertFalse(session.stop())
        self.assertEqual(session.result(timeout=0).stopped_by, "timeout")
        self.assertEqual(source.stopped, 1)

    def test_late_timer_is_ignored(self) -> None:
        source = _FakeSource()
        session = self._session(source).start()
        session.stop()
        self.timers[0].fire()
        self.assertEqual(session.result(timeout=0).stopped_by, "manual")
        self.assertEqual(source.stopped, 1)

    def test_context_manager_closes_running_session(self) -> None:
        source = _FakeSource()
        with self._session(source) as session:
            self.assertTrue(session.running)
        self.assertEqual(session.result(timeout=0).stopped_by, "closed")
        self.assertEqual(source.closed, 1)
        self.assertTrue(self.timers[0].cancelled)
        session.close()
        self.assertEqual(source.closed, 1)

    def test_failed_start_still_closes_source(self) -> None:
        source = _FakeSource(fail_start=OSError("no microphone"))
        with self.assertRaises(OSError):
            with self._session(source):
                pass
        self.assertEqual(source.closed, 1)
        self.assertEqual(self.timers, [])

    def test_source_failure_on_timeout_lands_in_future(self) -> None:
        source = _FakeSource(fail_stop=OSError("device lost"))
        session = self._session(source).start()
        self.timers[0].fire()
        with self.assertRaises(OSError):
            session.result(timeout=0)
        self.assertFalse(session.stop())

    def test_source_failure_on_manual_stop_raises(self) -> None:
        source = _FakeSource(fail_stop=OSError("device lost"))
        session = self._session(source).start()
        with self.assertRaises(OSError):
            session.stop()
        with self.assertRaises(OSError):
            session.result(timeout=0)

    def test_lifecycle_errors(self) -> None:
        with self.assertRaises(ValueError):
            RecordingSession(_FakeSource(), max_seconds=0)
        session = self._session(_FakeSource())
        with self.assertRaises(RuntimeError):
            session.stop()
        session.start()
        with self.assertRaises(RuntimeError):
            session.start()
        session.close()
        closed = self._session(_FakeSource())
        closed.close()
        with self.assertRaises(RuntimeError):
            closed.start()


class TestRecord(unittest.TestCase):
    def test_stop_event_ends_early(self) -> None:
        source = _FakeSource()
        stop_event = threading.Event()
        stop_event.set()
        recording = record(source, max_seconds=5, stop_event=stop_event)
        self.assertEqual(recording.stopped_by, "manual")
        self.assertEqual(recording.data, b"opus-frames")
        self.assertEqual(source.closed, 1)

    def test_ceiling_ends_recording(self) -> None:
        source = _FakeSource()
        recording = record(source, max_seconds=0.05)
        self.assertEqual(recording.stopped_by, "timeout")
        self.assertEqual(source.stopped, 1)
        self.assertEqual(source.closed, 1)


if __name__ == "__main__":
    unittest.main()
