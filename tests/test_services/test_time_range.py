from __future__ import annotations

import pytest

from metrik.models.enums import SamplingInterval
from metrik.services.time_range import split_time_range, window_days
from tests.helpers import MILLIS_PER_DAY, _ms


class TestWindowDays:
    """Unit tests for :func:`window_days`."""

    @pytest.mark.parametrize(
        ("start", "end", "expected"),
        [
            (0, MILLIS_PER_DAY - 1, 1),
            (0, 30 * MILLIS_PER_DAY - 1, 30),
            (0, 30 * MILLIS_PER_DAY, 31),
            (100, 200, 1),
            (500, 500, 1),
        ],
    )
    def test_days_round_up(self, start: int, end: int, expected: int) -> None:
        """Partial days count as whole days and a window is never shorter than one day."""
        assert window_days(start, end) == expected


class TestSplitTimeRange:
    """Unit tests for :func:`split_time_range`."""

    def test_fortnightly_periods(self) -> None:
        """A 30-day window splits into two full fortnights and a 2-day remainder."""
        periods = split_time_range(0, 30 * MILLIS_PER_DAY - 1, SamplingInterval.fortnightly)
        assert [window_days(s, e) for s, e in periods] == [14, 14, 2]

    def test_monthly_periods_follow_calendar(self) -> None:
        """Monthly periods end on UTC month boundaries."""
        start = _ms(2024, 1, 15)
        end = _ms(2024, 3, 10) - 1
        assert split_time_range(start, end, SamplingInterval.monthly) == [
            (start, _ms(2024, 2, 1) - 1),
            (_ms(2024, 2, 1), _ms(2024, 3, 1) - 1),
            (_ms(2024, 3, 1), end),
        ]

    def test_monthly_crosses_year_end(self) -> None:
        """December rolls over into January of the next year."""
        start = _ms(2023, 12, 20)
        end = _ms(2024, 1, 5)
        periods = split_time_range(start, end, SamplingInterval.monthly)
        assert periods == [(start, _ms(2024, 1, 1) - 1), (_ms(2024, 1, 1), end)]

    @pytest.mark.parametrize("interval", list(SamplingInterval))
    def test_periods_cover_window_without_gaps(self, interval: SamplingInterval) -> None:
        """Periods are contiguous, non-overlapping, and exactly cover the window."""
        start = _ms(2024, 1, 3)
        end = _ms(2024, 7, 19) + 12345
        periods = split_time_range(start, end, interval)
        assert periods[0][0] == start
        assert periods[-1][1] == end
        for (_, prev_end), (next_start, _) in zip(periods, periods[1:]):
            assert next_start == prev_end + 1

    def test_single_instant_window(self) -> None:
        """A window of one millisecond yields one period."""
        assert split_time_range(42, 42, SamplingInterval.fortnightly) == [(42, 42)]
