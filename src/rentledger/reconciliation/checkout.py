# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Checkout gate: a tenant may leave only once rent and advance are settled.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple, Union

from ..core.primitives import (
    DateLike,
    PaymentStatus,
    ReconciliationSettings,
    format_money,
    to_date_only,
    today,
)
from ..tenancy.allocation import AllocationHistory
from ..tenancy.tenant import Tenant, check_out_tenant
from .payments import PaymentRecord
from .summary import RentSummary, summarize_tenant

logger = logging.getLogger(__name__)

AdvanceStatuses = Iterable[Union[PaymentStatus, str]]


class SettlementRequiredError(ValueError):
    """Checkout refused: pending rent or advance must be settled first."""

    def __init__(self, tenant_id, reasons: List[str]):
        self.tenant_id = tenant_id
        self.reasons = list(reasons)
        super().__init__(
            f"Cannot checkout tenant. {' and '.join(self.reasons)} must be settled before checkout."
        )


def advance_pending(advance_statuses: AdvanceStatuses) -> bool:
    """
    True when the advance is not settled.

    That is the case with no advance at all, no PAID advance, or any advance
    that is not PAID.
    """
    statuses = [PaymentStatus(s) for s in advance_statuses]
    if not statuses:
        return True
    has_paid = any(s == PaymentStatus.PAID for s in statuses)
    has_unpaid = any(s != PaymentStatus.PAID for s in statuses)
    return not has_paid or has_unpaid


def checkout_blockers(summary: RentSummary, advance_statuses: AdvanceStatuses) -> List[str]:
    """Reasons the tenant cannot check out yet; empty when checkout may proceed."""
    reasons = []
    if summary.rent_due_amount > 0:
        reasons.append(f"Pending rent {format_money(summary.rent_due_amount)}")
    if advance_pending(advance_statuses):
        reasons.append("Advance pending")
    return reasons


def assert_can_checkout(summary: RentSummary, advance_statuses: AdvanceStatuses) -> None:
    """
    Raises:
        SettlementRequiredError: If rent is due or the advance is pending
    """
    reasons = checkout_blockers(summary, advance_statuses)
    if reasons:
        logger.info(f"Tenant {summary.tenant_id}: checkout blocked ({'; '.join(reasons)})")
        raise SettlementRequiredError(summary.tenant_id, reasons)


def settle_checkout(
    tenant: Tenant,
    allocations: AllocationHistory,
    payments: Iterable[PaymentRecord],
    checkout_date: DateLike,
    advance_statuses: AdvanceStatuses,
    reference_date: Optional[DateLike] = None,
    settings: Optional[ReconciliationSettings] = None,
) -> Tuple[Tenant, AllocationHistory, RentSummary]:
    """
    Check a tenant out and verify everything is settled.

    The checkout is applied first (closing the open allocation on the last
    billable day) so the summary prices the final cycle with the stay's real
    end; the gate is then evaluated on that summary. Nothing is returned when
    the gate refuses, so the caller's store must discard the change.

    Returns:
        ``(checked_out_tenant, closed_allocations, summary)``

    Raises:
        ValueError: If the checkout date is invalid
        SettlementRequiredError: If rent is due or the advance is pending
    """
    reference = to_date_only(reference_date) if reference_date is not None else today()
    checked_out, closed = check_out_tenant(tenant, allocations, checkout_date)
    summary = summarize_tenant(checked_out, closed, payments, reference, settings)
    assert_can_checkout(summary, list(advance_statuses))
    return checked_out, closed, summary
