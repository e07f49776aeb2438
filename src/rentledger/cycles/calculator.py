# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Billing cycle boundaries for the two supported conventions.

``compute_window`` is the single place where a cycle's start and end are
derived. It is pure: the same convention, anchor and reference date always
produce the same window.
"""

from __future__ import annotations

from datetime import date

from ..core.primitives import (
    ONE_DAY,
    BillingConvention,
    CycleWindow,
    DateLike,
    clamp_day,
    clamped_date,
    month_end,
    same_month,
    to_date_only,
)


def calendar_window(anchor_date: date, reference_date: date) -> CycleWindow:
    """
    CALENDAR cycle containing ``reference_date``.

    The join month starts on the check-in day; every other month runs from
    the 1st to its last day.
    """
    if same_month(reference_date, anchor_date):
        start = anchor_date
    else:
        start = reference_date.replace(day=1)
    return CycleWindow(start=start, end=month_end(reference_date))


def midmonth_window(anchor_date: date, reference_date: date) -> CycleWindow:
    """
    MIDMONTH cycle containing ``reference_date``.

    The cycle starts on the anchor day (clamped to the month length) of the
    reference month when the reference day has reached the anchor day, and
    of the previous month otherwise. It ends the day before the next clamped
    anchor day. Clamping is re-evaluated at each boundary, so an anchor of
    31 yields Jan 31, Feb 28, Mar 31 rather than drifting to the 28th.
    """
    anchor_day = anchor_date.day
    # Compare against this month's clamped anchor: with anchor 31, Feb 28 starts a cycle
    if reference_date.day >= clamp_day(reference_date.year, reference_date.month, anchor_day):
        start_month = reference_date.month
    else:
        start_month = reference_date.month - 1

    start = clamped_date(reference_date.year, start_month, anchor_day)
    next_start = clamped_date(start.year, start.month + 1, anchor_day)
    return CycleWindow(start=start, end=next_start - ONE_DAY)


def compute_window(
    convention: BillingConvention,
    anchor_date: DateLike,
    reference_date: DateLike,
) -> CycleWindow:
    """
    Compute the billing cycle that contains ``reference_date``.

    Args:
        convention: CALENDAR or MIDMONTH
        anchor_date: The tenant's check-in date (the MIDMONTH anchor day and
            the CALENDAR join month both derive from it)
        reference_date: Any day inside the wanted cycle

    Returns:
        The inclusive CycleWindow containing ``reference_date``

    Examples:
        >>> compute_window(BillingConvention.MIDMONTH, date(2025, 12, 10), date(2025, 12, 10))
        CycleWindow(start=datetime.date(2025, 12, 10), end=datetime.date(2026, 1, 9))
    """
    anchor = to_date_only(anchor_date)
    reference = to_date_only(reference_date)
    convention = BillingConvention(convention)

    if convention == BillingConvention.CALENDAR:
        return calendar_window(anchor, reference)
    return midmonth_window(anchor, reference)


def next_window(
    convention: BillingConvention, anchor_date: DateLike, window: CycleWindow
) -> CycleWindow:
    """The cycle immediately following ``window``."""
    return compute_window(convention, anchor_date, window.next_start)
