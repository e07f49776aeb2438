# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for rentledger testing.

Builders create tenants, allocation histories and payment rows with the
fewest arguments a test needs; everything else gets a sensible default.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Union

import pytest

from rentledger.core.primitives import (
    BillingConvention,
    CycleWindow,
    PaymentStatus,
    ReconciliationSettings,
)
from rentledger.reconciliation import PaymentRecord
from rentledger.tenancy import AllocationHistory, AllocationInterval, Tenant


def d(value: str) -> date:
    """Shorthand for ISO dates in test tables."""
    return date.fromisoformat(value)


def window(start: str, end: str) -> CycleWindow:
    return CycleWindow(start=d(start), end=d(end))


def make_tenant(
    check_in: str = "2025-03-15",
    check_out: Optional[str] = None,
    convention: BillingConvention = BillingConvention.CALENDAR,
    tenant_id: Union[int, str, None] = 1,
    current_price: Union[int, str, None] = None,
) -> Tenant:
    return Tenant(
        tenant_id=tenant_id,
        check_in_date=check_in,
        check_out_date=check_out,
        billing_convention=convention,
        current_price=current_price,
    )


def interval(start: str, end: Optional[str], price) -> AllocationInterval:
    return AllocationInterval(effective_from=start, effective_to=end, price=price)


def history(*intervals: AllocationInterval) -> AllocationHistory:
    return AllocationHistory(intervals=intervals)


def payment(
    start: str,
    end: str,
    amount,
    status: PaymentStatus = PaymentStatus.PAID,
    recorded_due=None,
    payment_id=None,
    paid_on: Optional[str] = None,
) -> PaymentRecord:
    return PaymentRecord(
        cycle_window=window(start, end),
        amount_paid=amount,
        status=status,
        recorded_due=recorded_due,
        payment_id=payment_id,
        payment_date=paid_on,
    )


def money(value: str) -> Decimal:
    return Decimal(value)


@pytest.fixture
def settings() -> ReconciliationSettings:
    return ReconciliationSettings()


@pytest.fixture
def calendar_tenant() -> Tenant:
    """CALENDAR tenant joining 2025-03-15 at 9000/month."""
    return make_tenant("2025-03-15", current_price=9000)


@pytest.fixture
def calendar_history() -> AllocationHistory:
    return AllocationHistory.start("2025-03-15", 9000)


@pytest.fixture
def midmonth_tenant() -> Tenant:
    """MIDMONTH tenant joining 2025-12-10."""
    return make_tenant("2025-12-10", convention=BillingConvention.MIDMONTH, current_price=8000)


@pytest.fixture
def midmonth_history() -> AllocationHistory:
    return AllocationHistory.start("2025-12-10", 8000)
