# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for portfolio reconciliation and rollups."""

from __future__ import annotations

import logging
import threading
import time
from datetime import date

import pandas as pd
import pytest

from rentledger.core.primitives import BillingConvention, ReconciliationSettings
from rentledger.reporting import (
    TenantSnapshot,
    count_rent_statuses,
    cycles_to_frame,
    outstanding_by_status,
    reconcile_portfolio,
    summaries_to_frame,
    tenants_due_tomorrow,
)
from rentledger.tenancy import AllocationHistory

from tests.conftest import make_tenant, payment

REFERENCE = date(2025, 5, 10)
MARCH = ("2025-03-15", "2025-03-31")
APRIL = ("2025-04-01", "2025-04-30")
MAY = ("2025-05-01", "2025-05-31")


def snapshot(tenant_id, rows=(), advances=("PAID",)) -> TenantSnapshot:
    return TenantSnapshot(
        tenant=make_tenant("2025-03-15", tenant_id=tenant_id),
        allocations=AllocationHistory.start("2025-03-15", 9000),
        payments=rows,
        advance_statuses=advances,
    )


@pytest.fixture
def snapshots():
    return {
        1: snapshot(1, [payment(*MARCH, 4935.48), payment(*APRIL, 9000), payment(*MAY, 9000)]),
        2: snapshot(2, [payment(*APRIL, 9000)], advances=()),
        3: snapshot(3, [payment(*MARCH, 4935.48), payment(*APRIL, 9000), payment(*MAY, 5000)]),
    }


class TestReconcilePortfolio:
    def test_summaries_in_input_order(self, snapshots):
        result = reconcile_portfolio(snapshots.values(), reference_date=REFERENCE)
        assert [s.tenant_id for s in result.summaries] == [1, 2, 3]
        assert result.failures == ()
        assert result.reference_date == REFERENCE
        assert result.advance_pending_ids == (2,)

    def test_loader_failure_is_captured(self, snapshots, caplog):
        def loader(tenant_id):
            return snapshots[tenant_id]

        with caplog.at_level(logging.ERROR, logger="rentledger.reporting.portfolio"):
            result = reconcile_portfolio([1, 99, 2], loader=loader, reference_date=REFERENCE)

        assert [s.tenant_id for s in result.summaries] == [1, 2]
        assert len(result.failures) == 1
        assert result.failures[0].tenant_id == 99
        assert result.failures[0].error_type == "KeyError"
        assert "Tenant 99" in caplog.text

    def test_fan_out_is_bounded(self, snapshots):
        active = 0
        peak = 0
        lock = threading.Lock()

        def loader(tenant_id):
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.01)
            with lock:
                active -= 1
            return snapshots[1 + tenant_id % 3]

        settings = ReconciliationSettings(bulk_fan_out=2)
        result = reconcile_portfolio(
            range(10), loader=loader, reference_date=REFERENCE, settings=settings
        )
        assert len(result.summaries) == 10
        assert peak <= 2

    def test_empty_portfolio(self):
        result = reconcile_portfolio([], reference_date=REFERENCE)
        assert result.summaries == ()
        assert result.counts.total == 0


class TestRollups:
    def test_count_rent_statuses(self, snapshots):
        result = reconcile_portfolio(snapshots.values(), reference_date=REFERENCE)
        counts = count_rent_statuses(result.summaries)
        assert counts.total == 3
        assert counts.paid == 1
        assert counts.pending == 1
        assert counts.partial == 1
        assert result.counts == counts

    def test_due_tomorrow(self, snapshots):
        result = reconcile_portfolio(snapshots.values(), reference_date=date(2025, 5, 31))
        assert [s.tenant_id for s in result.due_tomorrow] == [1, 3]
        earlier = reconcile_portfolio(snapshots.values(), reference_date=REFERENCE)
        assert tenants_due_tomorrow(earlier.summaries) == []

    def test_due_tomorrow_midmonth(self):
        tenant = make_tenant("2025-12-10", convention=BillingConvention.MIDMONTH, tenant_id=5)
        item = TenantSnapshot(
            tenant=tenant,
            allocations=AllocationHistory.start("2025-12-10", 8000),
            payments=[payment("2025-12-10", "2026-01-09", 8000)],
        )
        result = reconcile_portfolio([item], reference_date=date(2026, 1, 9))
        assert [s.tenant_id for s in result.due_tomorrow] == [5]

    def test_partial_tenant_with_unpaid_months_counts_as_partial_only(self):
        item = snapshot(7, [payment(*APRIL, 5000)])
        result = reconcile_portfolio([item], reference_date=REFERENCE)
        summary = result.summaries[0]
        assert summary.has_pending_rent
        assert summary.partial_due_amount == 4000
        counts = result.counts
        assert (counts.total, counts.partial, counts.pending) == (1, 1, 0)

    def test_checked_out_tenants_are_not_counted(self, snapshots):
        gone = TenantSnapshot(
            tenant=make_tenant("2025-03-15", check_out="2025-04-10", tenant_id=8),
            allocations=AllocationHistory.start("2025-03-15", 9000),
        )
        result = reconcile_portfolio([*snapshots.values(), gone], reference_date=REFERENCE)
        assert result.summaries[-1].unpaid_months
        assert not result.summaries[-1].is_active
        counts = result.counts
        assert (counts.total, counts.paid, counts.partial, counts.pending) == (3, 1, 1, 1)

    def test_due_tomorrow_follows_latest_payment(self):
        rows = [
            payment(*MAY, 9000, paid_on="2025-04-28"),
            payment(*APRIL, 9000, paid_on="2025-05-02"),
        ]
        result = reconcile_portfolio([snapshot(9, rows)], reference_date=date(2025, 4, 30))
        assert [s.tenant_id for s in result.due_tomorrow] == [9]
        assert result.summaries[0].last_payment_window.end == date(2025, 4, 30)

    def test_due_tomorrow_skips_checked_out_and_unpaid(self):
        gone = TenantSnapshot(
            tenant=make_tenant("2025-03-15", check_out="2025-05-31", tenant_id=10),
            allocations=AllocationHistory.start("2025-03-15", 9000),
            payments=[payment(*MAY, 9000)],
        )
        result = reconcile_portfolio([gone, snapshot(11)], reference_date=date(2025, 5, 31))
        assert result.due_tomorrow == []
        assert result.summaries[1].last_payment_window is None

    def test_summaries_to_frame(self, snapshots):
        result = reconcile_portfolio(snapshots.values(), reference_date=REFERENCE)
        frame = summaries_to_frame(result.summaries)
        assert list(frame["tenant_id"]) == [1, 2, 3]
        assert list(frame["payment_status"]) == ["PAID", "NO_PAYMENT", "PARTIAL"]
        assert frame["rent_due_amount"].tolist() == [0.0, 4935.48, 4000.0]
        assert frame.loc[1, "unpaid_months"] == 1
        pd.testing.assert_frame_equal(frame, result.to_frame())

    def test_empty_frame_has_columns(self):
        frame = summaries_to_frame([])
        assert frame.empty
        assert "rent_due_amount" in frame.columns

    def test_cycles_to_frame_and_outstanding(self, snapshots):
        result = reconcile_portfolio(snapshots.values(), reference_date=REFERENCE)
        cycles = cycles_to_frame(result.summaries)
        assert len(cycles) == 9
        outstanding = outstanding_by_status(result.summaries)
        assert outstanding.loc["PARTIAL", "remaining_due"] == 4000.0
        assert outstanding.loc["NO_PAYMENT", "cycles"] == 2
        assert outstanding.loc["NO_PAYMENT", "remaining_due"] == pytest.approx(13935.48)
