# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for cycle window boundaries."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from rentledger.core.primitives import BillingConvention, CycleWindow
from rentledger.cycles import compute_window, next_window

CALENDAR = BillingConvention.CALENDAR
MIDMONTH = BillingConvention.MIDMONTH


class TestCalendarWindow:
    """CALENDAR: 1st to month end, join month from check-in."""

    def test_join_month_starts_on_check_in(self):
        window = compute_window(CALENDAR, date(2025, 3, 15), date(2025, 3, 20))
        assert window == CycleWindow(start=date(2025, 3, 15), end=date(2025, 3, 31))

    def test_later_month_is_full(self):
        window = compute_window(CALENDAR, date(2025, 3, 15), date(2025, 4, 1))
        assert window == CycleWindow(start=date(2025, 4, 1), end=date(2025, 4, 30))

    def test_leap_february(self):
        window = compute_window(CALENDAR, date(2023, 11, 5), date(2024, 2, 14))
        assert window == CycleWindow(start=date(2024, 2, 1), end=date(2024, 2, 29))

    def test_same_month_of_later_year_is_not_join_month(self):
        window = compute_window(CALENDAR, date(2024, 3, 15), date(2025, 3, 20))
        assert window.start == date(2025, 3, 1)

    def test_accepts_strings(self):
        window = compute_window("CALENDAR", "2025-03-15", "2025-03-15")
        assert window.start == date(2025, 3, 15)


class TestMidmonthWindow:
    """MIDMONTH: anchored to the check-in day, clamped per boundary."""

    def test_first_two_cycles(self):
        anchor = date(2025, 12, 10)
        first = compute_window(MIDMONTH, anchor, anchor)
        assert first == CycleWindow(start=date(2025, 12, 10), end=date(2026, 1, 9))
        second = next_window(MIDMONTH, anchor, first)
        assert second == CycleWindow(start=date(2026, 1, 10), end=date(2026, 2, 9))

    def test_reference_before_anchor_day_uses_previous_month(self):
        window = compute_window(MIDMONTH, date(2025, 12, 10), date(2026, 1, 9))
        assert window == CycleWindow(start=date(2025, 12, 10), end=date(2026, 1, 9))

    def test_anchor_31_in_february(self):
        anchor = date(2025, 1, 31)
        window = compute_window(MIDMONTH, anchor, date(2025, 2, 28))
        assert window.start == date(2025, 2, 28)
        assert window.end == date(2025, 3, 30)

    def test_anchor_31_in_leap_february(self):
        window = compute_window(MIDMONTH, date(2024, 1, 31), date(2024, 2, 29))
        assert window.start == date(2024, 2, 29)

    def test_anchor_31_does_not_drift(self):
        """Jan 31, Feb 28, Mar 31: clamping never carries forward."""
        anchor = date(2025, 1, 31)
        window = compute_window(MIDMONTH, anchor, anchor)
        starts = []
        for _ in range(4):
            starts.append(window.start)
            window = next_window(MIDMONTH, anchor, window)
        assert starts == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31), date(2025, 4, 30)]

    def test_anchor_30_in_30_day_month(self):
        window = compute_window(MIDMONTH, date(2025, 1, 30), date(2025, 4, 30))
        assert window == CycleWindow(start=date(2025, 4, 30), end=date(2025, 5, 29))

    def test_year_boundary(self):
        window = compute_window(MIDMONTH, date(2025, 6, 20), date(2026, 1, 5))
        assert window == CycleWindow(start=date(2025, 12, 20), end=date(2026, 1, 19))


@pytest.mark.parametrize("convention", [CALENDAR, MIDMONTH])
@pytest.mark.parametrize("anchor_day", range(1, 32))
def test_windows_tile_two_years_without_gaps(convention, anchor_day):
    """For every anchor day: start <= end, reference inside, consecutive windows touch."""
    anchor = date(2024, 1, anchor_day)
    window = compute_window(convention, anchor, anchor)
    assert window.start == anchor
    day = anchor
    while day < date(2026, 1, 31):
        current = compute_window(convention, anchor, day)
        assert current.start <= current.end
        assert current.contains(day)
        if day == current.end:
            following = compute_window(convention, anchor, day + timedelta(days=1))
            assert following.start == current.next_start
        day += timedelta(days=1)


@pytest.mark.parametrize("convention", [CALENDAR, MIDMONTH])
def test_compute_window_is_pure(convention):
    anchor = date(2025, 1, 31)
    reference = date(2025, 2, 28)
    assert compute_window(convention, anchor, reference) == compute_window(
        convention, anchor, reference
    )
