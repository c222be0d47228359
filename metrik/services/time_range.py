from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

from metrik.models.enums import SamplingInterval

MILLIS_PER_DAY: int = 24 * 60 * 60 * 1000
FORTNIGHT_DAYS: int = 14


def window_days(start_timestamp: int, end_timestamp: int) -> int:
    """Number of days spanned by the inclusive window, rounded up, at least 1.

    A window from the first millisecond of one day to the last millisecond of
    another is exactly the number of calendar days it covers::

        >>> window_days(0, 30 * MILLIS_PER_DAY - 1)
        30
    """
    span = end_timestamp - start_timestamp + 1
    return max(1, math.ceil(span / MILLIS_PER_DAY))


def split_time_range(
    start_timestamp: int,
    end_timestamp: int,
    interval: SamplingInterval,
) -> list[tuple[int, int]]:
    """Cut the inclusive window into consecutive inclusive periods.

    Periods are produced from *start_timestamp* forwards with no gaps or
    overlaps; the final period is truncated at *end_timestamp*.

    * ``fortnightly`` periods are 14 days long.
    * ``monthly`` periods end at the last millisecond of each UTC calendar
      month, so the first period may be shorter than a full month.
    """
    periods: list[tuple[int, int]] = []
    cursor = start_timestamp
    while cursor <= end_timestamp:
        period_end = min(_next_boundary(cursor, interval) - 1, end_timestamp)
        periods.append((cursor, period_end))
        cursor = period_end + 1
    return periods


def _next_boundary(timestamp: int, interval: SamplingInterval) -> int:
    if interval is SamplingInterval.fortnightly:
        return timestamp + FORTNIGHT_DAYS * MILLIS_PER_DAY

    moment = datetime.fromtimestamp(timestamp // 1000, tz=UTC)
    if moment.month == 12:
        boundary = datetime(moment.year + 1, 1, 1, tzinfo=UTC)
    else:
        boundary = datetime(moment.year, moment.month + 1, 1, tzinfo=UTC)
    return _to_millis(boundary)


def _to_millis(moment: datetime) -> int:
    return (moment - datetime(1970, 1, 1, tzinfo=UTC)) // timedelta(milliseconds=1)
