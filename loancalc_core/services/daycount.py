from __future__ import annotations

import datetime as dt
from typing import Union

DateLike = Union[dt.date, dt.datetime]


def _calendar_day(value: DateLike) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def days_between(start: DateLike, end: DateLike) -> int:
    """
    Whole days from the midnight starting `start` to the midnight ending `end`.

    Time of day and time zone are ignored, so the same calendar day counts as 1
    and an `end` before `start` gives a negative count.
    """
    start_midnight = _calendar_day(start)
    end_next_midnight = _calendar_day(end) + dt.timedelta(days=1)
    return (end_next_midnight - start_midnight).days
