"""In-memory statistics over admitted commands."""

import threading
from typing import NamedTuple


class StatsSnapshot(NamedTuple):
    """Consistent view of the command statistics."""

    total_commands: int
    active_commands: int
    average_duration: float


class CommandStats:
    """Counters and smoothed duration of admitted commands.

    The average is an exponential smoothing, each completion moves it halfway
    toward the latest duration: ``average = (average + duration) / 2``.
    Completions with a non-positive duration leave it untouched.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._total_commands = 0
        self._active_commands = 0
        self._average_duration = 0.0

    def record_start(self) -> None:
        with self._lock:
            self._total_commands += 1
            self._active_commands += 1

    def record_end(self, duration: float) -> None:
        """Mark one command as finished after ``duration`` seconds."""
        with self._lock:
            self._active_commands -= 1
            if duration > 0:
                self._average_duration = (self._average_duration + duration) / 2

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            return StatsSnapshot(
                total_commands=self._total_commands,
                active_commands=self._active_commands,
                average_duration=self._average_duration,
            )
