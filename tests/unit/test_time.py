"""
Unit tests for the clock helpers.
"""

import time

from orderflow.utils.time import LatencyTimer, format_elapsed, get_timestamp_ms


class TestClock:
    """Tests for timestamps and latency measurement."""

    def test_timestamp_ms(self) -> None:
        """Test the timestamp is wall-clock milliseconds."""
        before = int(time.time() * 1000)
        stamp = get_timestamp_ms()
        after = int(time.time() * 1000)

        assert before - 1 <= stamp <= after + 1

    def test_timer_measures_block(self) -> None:
        """Test elapsed is zero before the block and positive after."""
        timer = LatencyTimer()
        assert timer.elapsed == 0.0

        with timer:
            time.sleep(0.01)

        assert timer.elapsed >= 0.01
        assert str(timer) == format_elapsed(timer.elapsed)

    def test_format_elapsed(self) -> None:
        """Test sub-second durations render in ms and longer ones in s."""
        assert format_elapsed(0.0042) == "4.2ms"
        assert format_elapsed(0.0) == "0.0ms"
        assert format_elapsed(1.0) == "1.00s"
        assert format_elapsed(12.345) == "12.35s"
