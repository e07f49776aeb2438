# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Date-only calendar arithmetic shared by every cycle and proration routine.

Every value is normalized to a ``datetime.date`` before any arithmetic so a
time-of-day or a local timezone offset can never shift a boundary by one day.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Union

import pandas as pd
from dateutil.relativedelta import relativedelta

DateLike = Union[date, datetime, pd.Timestamp, str]

ONE_DAY = timedelta(days=1)


def to_date_only(value: DateLike) -> date:
    """
    Normalize a date-like value to a UTC calendar date.

    Timezone-aware datetimes are converted to UTC first; naive datetimes are
    taken as already being in UTC.

    Raises:
        ValueError: If the value cannot be read as a date (including NaT)
    """
    if isinstance(value, str):
        parsed = pd.to_datetime(value, errors="coerce", utc=True)
        if pd.isna(parsed):
            raise ValueError(f"Invalid date: {value!r}")
        return parsed.date()
    if isinstance(value, datetime):
        if pd.isna(value):
            raise ValueError(f"Invalid date: {value!r}")
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return date(value.year, value.month, value.day)
    if isinstance(value, date):
        return value
    raise ValueError(f"Invalid date: {value!r}")


def today() -> date:
    """Current UTC date. Only the outermost entry points call this."""
    return datetime.now(timezone.utc).date()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> int:
    """Clamp ``day`` into ``[1, days_in_month(year, month)]``."""
    return min(max(day, 1), days_in_month(year, month))


def clamped_date(year: int, month: int, day: int) -> date:
    """
    Build a date for ``day`` in the given month, clamping to the month length.

    ``month`` may fall outside 1..12 (e.g. 0 or 13); it is rolled into the
    neighbouring year first, so callers can step months with plain integers.
    """
    first = date(year, 1, 1) + relativedelta(months=month - 1)
    return first.replace(day=clamp_day(first.year, first.month, day))


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return day.replace(day=days_in_month(day.year, day.month))


def inclusive_days(start: date, end: date) -> int:
    """Number of days in ``[start, end]``; zero when ``end`` precedes ``start``."""
    return max(0, (end - start).days + 1)


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month
