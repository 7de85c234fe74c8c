"""Tests for the command statistics tracker."""

import threading

from lp_tracker.application.command_stats import CommandStats, StatsSnapshot


class TestCommandStats:
    """Test cases for CommandStats."""

    def test_initial_snapshot(self):
        """Test that a fresh tracker reports nothing."""
        assert CommandStats().snapshot() == StatsSnapshot(0, 0, 0.0)

    def test_record_start_and_end(self):
        """Test counters across a start/end pair."""
        stats = CommandStats()

        stats.record_start()
        assert stats.snapshot().total_commands == 1
        assert stats.snapshot().active_commands == 1

        stats.record_end(1.0)
        snapshot = stats.snapshot()
        assert snapshot.total_commands == 1
        assert snapshot.active_commands == 0

    def test_average_is_halfway_smoothing(self):
        """Test durations of 4s then 6s give averages of 2s then 4s."""
        stats = CommandStats()

        stats.record_start()
        stats.record_end(4.0)
        assert stats.snapshot().average_duration == 2.0

        stats.record_start()
        stats.record_end(6.0)
        assert stats.snapshot().average_duration == 4.0

    def test_zero_duration_leaves_average_untouched(self):
        """Test that non-positive durations only decrement the active count."""
        stats = CommandStats()
        stats.record_start()
        stats.record_end(4.0)

        stats.record_start()
        stats.record_end(0)

        snapshot = stats.snapshot()
        assert snapshot.average_duration == 2.0
        assert snapshot.active_commands == 0
        assert snapshot.total_commands == 2

    def test_total_is_monotonic(self):
        """Test that the total never decreases."""
        stats = CommandStats()
        totals = []
        for _ in range(5):
            stats.record_start()
            totals.append(stats.snapshot().total_commands)
            stats.record_end(0.5)
            totals.append(stats.snapshot().total_commands)

        assert totals == sorted(totals)
        assert totals[-1] == 5

    def test_concurrent_updates_are_consistent(self):
        """Test that updates from many threads are not lost."""
        stats = CommandStats()

        def worker():
            for _ in range(1000):
                stats.record_start()
                stats.record_end(0.01)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        snapshot = stats.snapshot()
        assert snapshot.total_commands == 8000
        assert snapshot.active_commands == 0
