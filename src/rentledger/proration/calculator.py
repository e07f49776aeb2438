# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Allocation-aware proration of monthly bed prices.

The daily rate of a monthly price depends on the calendar month a day falls
in (price / days in that month), so every overlap between an allocation
interval and the billed period is split at month boundaries before it is
priced. Sums stay exact ``Decimal``; only the final figure is rounded.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterator, Optional, Tuple

from ..core.primitives import (
    ONE_DAY,
    ZERO,
    DateLike,
    MoneyLike,
    days_in_month,
    inclusive_days,
    month_end,
    round_money,
    to_date_only,
    to_money,
)
from ..tenancy.allocation import AllocationsLike, as_intervals


def month_segments(start: date, end: date) -> Iterator[Tuple[date, date]]:
    """
    Split ``[start, end]`` at calendar month boundaries.

    Examples:
        >>> list(month_segments(date(2025, 1, 20), date(2025, 2, 5)))
        [(datetime.date(2025, 1, 20), datetime.date(2025, 1, 31)), (datetime.date(2025, 2, 1), datetime.date(2025, 2, 5))]
    """
    cursor = start
    while cursor <= end:
        part_end = min(end, month_end(cursor))
        yield cursor, part_end
        cursor = part_end + ONE_DAY


def prorate_segment(price: MoneyLike, start: date, end: date) -> Decimal:
    """
    Unrounded charge for ``[start, end]`` at a monthly ``price``.

    The segment must lie within one calendar month; the daily rate is the
    price divided by that month's length.
    """
    monthly = to_money(price)
    if monthly <= 0:
        return ZERO
    return monthly / days_in_month(start.year, start.month) * inclusive_days(start, end)


def prorate_period(price: MoneyLike, start: date, end: date) -> Decimal:
    """Unrounded charge for any period at one flat monthly price."""
    return sum((prorate_segment(price, s, e) for s, e in month_segments(start, end)), ZERO)


def expected_due_exact(
    intervals: AllocationsLike, period_start: DateLike, period_end: DateLike
) -> Decimal:
    """Unrounded ``expected_due``, for callers composing further sums."""
    start = to_date_only(period_start)
    end = to_date_only(period_end)
    if start > end:
        return ZERO

    total = ZERO
    ordered = sorted(as_intervals(intervals), key=lambda i: i.effective_from)
    for interval in ordered:
        if not interval.overlaps(start, end):
            continue
        seg_start = max(interval.effective_from, start)
        seg_end = interval.end_within(end)
        total += prorate_period(interval.price, seg_start, seg_end)
    return total


def expected_due(
    intervals: AllocationsLike,
    period_start: DateLike,
    period_end: DateLike,
    places: int = 2,
) -> Decimal:
    """
    Rent a tenant owes for ``[period_start, period_end]`` from their allocations.

    Every interval overlapping the period is intersected with it, split at
    month boundaries and priced at ``price / days_in_month`` per day.

    Args:
        intervals: AllocationHistory or iterable of AllocationInterval
        period_start: First day of the billed period
        period_end: Last day of the billed period (inclusive)
        places: Decimal places of the returned amount

    Returns:
        Amount rounded half away from zero; ``0.00`` when no interval
        overlaps the period (the caller must then fall back)

    Examples:
        >>> history = AllocationHistory.start(date(2025, 3, 15), 9000)
        >>> expected_due(history, date(2025, 3, 15), date(2025, 3, 31))
        Decimal('4935.48')
    """
    return round_money(expected_due_exact(intervals, period_start, period_end), places)


def flat_price_due(
    price: Optional[MoneyLike], period_start: DateLike, period_end: DateLike, places: int = 2
) -> Decimal:
    """Legacy due: one flat monthly price prorated over the period (0 without a price)."""
    if price is None:
        return round_money(ZERO, places)
    start = to_date_only(period_start)
    end = to_date_only(period_end)
    return round_money(prorate_period(price, start, end), places)
