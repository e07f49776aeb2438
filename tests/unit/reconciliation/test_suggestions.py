# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for next-payment suggestions."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from rentledger.reconciliation import suggest_next_payment
from rentledger.tenancy import check_out_tenant

from tests.conftest import payment, window

REFERENCE = date(2025, 5, 10)
MARCH = ("2025-03-15", "2025-03-31")
APRIL = ("2025-04-01", "2025-04-30")
MAY = ("2025-05-01", "2025-05-31")


def test_earliest_gap_suggested_first(calendar_tenant, calendar_history):
    rows = [payment(*APRIL, 9000)]
    suggestion = suggest_next_payment(calendar_tenant, calendar_history, rows, REFERENCE)
    assert suggestion.is_gap_fill
    assert suggestion.window == window(*MARCH)
    assert suggestion.amount_due == Decimal("4935.48")
    assert suggestion.gap.priority == -1
    assert "Please fill this gap first" in suggestion.message


def test_partial_gap_suggests_remaining(calendar_tenant, calendar_history):
    rows = [payment(*MARCH, 4935.48), payment(*APRIL, 5000)]
    suggestion = suggest_next_payment(calendar_tenant, calendar_history, rows, REFERENCE)
    assert suggestion.window == window(*APRIL)
    assert suggestion.amount_due == Decimal("4000.00")


def test_skip_gaps_suggests_cycle_after_current(calendar_tenant, calendar_history):
    suggestion = suggest_next_payment(
        calendar_tenant, calendar_history, [], REFERENCE, skip_gaps=True
    )
    assert not suggestion.is_gap_fill
    assert suggestion.window == window("2025-06-01", "2025-06-30")
    assert suggestion.amount_due == Decimal("9000.00")


def test_no_gaps_suggests_next_cycle(calendar_tenant, calendar_history):
    rows = [payment(*MARCH, 4935.48), payment(*APRIL, 9000), payment(*MAY, 9000)]
    suggestion = suggest_next_payment(calendar_tenant, calendar_history, rows, REFERENCE)
    assert not suggestion.is_gap_fill
    assert suggestion.window == window("2025-06-01", "2025-06-30")
    assert suggestion.message == "Next rent cycle (CALENDAR)"


def test_before_check_in_suggests_join_cycle(calendar_tenant, calendar_history):
    suggestion = suggest_next_payment(calendar_tenant, calendar_history, [], date(2025, 3, 1))
    assert suggestion.window == window(*MARCH)
    assert suggestion.amount_due == Decimal("4935.48")


def test_midmonth_next_cycle(midmonth_tenant, midmonth_history):
    rows = [payment("2025-12-10", "2026-01-09", 8000)]
    suggestion = suggest_next_payment(midmonth_tenant, midmonth_history, rows, date(2026, 1, 5))
    assert suggestion.window == window("2026-01-10", "2026-02-09")
    # 22 January days at 8000/31 plus 9 February days at 8000/28
    assert suggestion.amount_due == Decimal("8248.85")


def test_checked_out_and_settled_has_no_suggestion(calendar_tenant, calendar_history):
    tenant, allocations = check_out_tenant(calendar_tenant, calendar_history, "2025-03-31")
    rows = [payment(*MARCH, 4935.48)]
    assert suggest_next_payment(tenant, allocations, rows, REFERENCE) is None
