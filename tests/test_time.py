"""Tests for duration formatting and runtime helpers."""

import pytest

from hallowmoon.runtime import Runtime, fraction_to_base36, to_base36
from hallowmoon.utils.time import format_duration, round_half_up


class TestFormatDuration:
    """Test the compact duration strings used in log lines."""

    @pytest.mark.parametrize("ms,expected", [
        (0, "0ms"),
        (500, "500ms"),
        (1500, "1.5s"),
        (12500, "13s"),
        (60000, "1m"),
        (90500, "1m 31s"),
    ])
    def test_documented_examples(self, ms, expected):
        """Each documented example renders exactly."""
        assert format_duration(ms) == expected

    def test_negative_clamps_to_zero(self):
        """Negative durations render as zero."""
        assert format_duration(-400) == "0ms"

    def test_one_decimal_rounds_half_up(self):
        """1.25s rounds up to 1.3s rather than to even."""
        assert format_duration(1250) == "1.3s"

    def test_whole_minutes_drop_seconds(self):
        """Exact minutes omit the seconds part."""
        assert format_duration(180000) == "3m"


class TestRoundHalfUp:
    """Test half-up rounding."""

    def test_halves_round_up(self):
        """Halves go up, never to even."""
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3

    def test_below_half_rounds_down(self):
        """Values under .5 round down."""
        assert round_half_up(2.49) == 2


class TestRuntime:
    """Test the injectable runtime."""

    def test_seeded_runtime_is_reproducible(self):
        """Two runtimes with the same seed roll the same numbers."""
        a = Runtime(seed=42, clock=lambda: 0)
        b = Runtime(seed=42, clock=lambda: 0)
        assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]

    def test_clock_is_integer_ms(self):
        """now() returns integer milliseconds from the clock."""
        runtime = Runtime(random=lambda: 0.1, clock=lambda: 1234.9)
        assert runtime.now() == 1234

    def test_choice_uses_random(self):
        """choice() maps [0, 1) onto the options."""
        assert Runtime(random=lambda: 0.0).choice("abc") == "a"
        assert Runtime(random=lambda: 0.99).choice("abc") == "c"

    def test_to_base36(self):
        """Integers encode in lowercase base 36."""
        assert to_base36(0) == "0"
        assert to_base36(35) == "z"
        assert to_base36(36) == "10"

    def test_fraction_to_base36(self):
        """Fractions emit digits after the point and stop early at zero."""
        assert fraction_to_base36(0.5) == "i"
        assert fraction_to_base36(0.0) == ""
        assert len(fraction_to_base36(0.123456)) == 6
