# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
The published rent summary of one tenant.

Listing, dashboards, the checkout gate and notification crons all read the
same ``RentSummary``; none of them recompute cycle status on their own.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

from pydantic import Field

from ..core.primitives import (
    ZERO,
    CycleStatus,
    CycleWindow,
    DateLike,
    Model,
    Money,
    ReconciliationSettings,
    format_money,
    resolve_settings,
    round_money,
    to_date_only,
    today,
)
from ..cycles.ledger import build_ledger, current_window
from ..tenancy.allocation import AllocationsLike, as_intervals
from ..tenancy.tenant import Tenant
from .gaps import CycleLedgerEntry, Gap, evaluate_ledger, gaps_from_entries
from .payments import PaymentRecord, group_payments_by_window

logger = logging.getLogger(__name__)


class RentSummary(Model):
    """
    Rent position of one tenant on ``reference_date``.

    Attributes:
        tenant_id: Tenant identifier, echoed from the input
        reference_date: The day the summary describes
        current_cycle_window: Cycle containing the reference date while the
            tenant is staying
        entries: Per-cycle ledger, chronological
        gaps: Cycles not fully paid, in settlement order
        unpaid_months: NO_PAYMENT/PENDING cycles that are already due
        payment_status: Status of the relevant cycle (the one containing the
            reference date, else the latest started)
        partial_due_amount: Remaining due over PARTIAL cycles
        pending_due_amount: Remaining due over unpaid months
        rent_due_amount: partial + pending
        is_rent_paid: No unpaid months and the relevant cycle is PAID
        is_rent_partial: Not paid and the relevant cycle is PARTIAL with a
            positive partial due
        has_estimated_dues: Some cycle was priced by the legacy fallback
        check_out_date: The tenant's checkout day, when set
        last_payment_window: Cycle of the most recent payment row (latest
            ``payment_date``, later cycle on ties), None without payments
    """

    tenant_id: Optional[Union[int, str]] = None
    reference_date: date
    current_cycle_window: Optional[CycleWindow] = None
    entries: Tuple[CycleLedgerEntry, ...] = Field(default_factory=tuple)
    gaps: Tuple[Gap, ...] = Field(default_factory=tuple)
    unpaid_months: Tuple[CycleLedgerEntry, ...] = Field(default_factory=tuple)
    payment_status: CycleStatus = CycleStatus.NO_PAYMENT
    partial_due_amount: Money = ZERO
    pending_due_amount: Money = ZERO
    rent_due_amount: Money = ZERO
    is_rent_paid: bool = False
    is_rent_partial: bool = False
    has_estimated_dues: bool = False
    check_out_date: Optional[date] = None
    last_payment_window: Optional[CycleWindow] = None

    @property
    def is_active(self) -> bool:
        """Still staying on ``reference_date`` (the checkout day itself counts as gone)."""
        return self.check_out_date is None or self.check_out_date > self.reference_date

    @property
    def has_pending_rent(self) -> bool:
        return bool(self.unpaid_months)

    @property
    def has_partial_rent(self) -> bool:
        return self.partial_due_amount > 0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view: ISO dates and money as fixed-point strings."""

        def window_dict(window: Optional[CycleWindow]) -> Optional[Dict[str, Any]]:
            if window is None:
                return None
            return {
                "start_date": window.start.isoformat(),
                "end_date": window.end.isoformat(),
                "days": window.days,
            }

        def entry_dict(entry: CycleLedgerEntry) -> Dict[str, Any]:
            return {
                **window_dict(entry.window),
                "status": entry.status.value,
                "total_paid": format_money(entry.total_paid),
                "expected_due": format_money(entry.expected_due),
                "remaining_due": format_money(entry.remaining_due),
                "due_source": entry.due_source.value,
                "payment_count": entry.payment_count,
            }

        return {
            "tenant_id": self.tenant_id,
            "reference_date": self.reference_date.isoformat(),
            "rent_cycle": window_dict(self.current_cycle_window),
            "payment_cycle_summaries": [entry_dict(e) for e in self.entries],
            "gaps": [
                {**entry_dict(g.entry), "priority": g.priority, "days_missing": g.days_missing}
                for g in self.gaps
            ],
            "unpaid_months": [
                {
                    "cycle_start": e.start.isoformat(),
                    "cycle_end": e.end.isoformat(),
                    "month": f"{e.start.year}-{e.start.month:02d}",
                    "month_name": e.start.strftime("%B %Y"),
                }
                for e in self.unpaid_months
            ],
            "payment_status": self.payment_status.value,
            "partial_due_amount": format_money(self.partial_due_amount),
            "pending_due_amount": format_money(self.pending_due_amount),
            "rent_due_amount": format_money(self.rent_due_amount),
            "is_rent_paid": self.is_rent_paid,
            "is_rent_partial": self.is_rent_partial,
            "has_estimated_dues": self.has_estimated_dues,
            "check_out_date": (
                self.check_out_date.isoformat() if self.check_out_date is not None else None
            ),
            "last_payment_cycle": window_dict(self.last_payment_window),
        }


def select_relevant_entry(
    entries: Sequence[CycleLedgerEntry], reference_date: date
) -> Optional[CycleLedgerEntry]:
    """
    The entry whose window contains ``reference_date``, else the most
    recently started entry on or before it, else None.
    """
    started = [e for e in entries if e.start <= reference_date]
    for entry in started:
        if entry.window.contains(reference_date):
            return entry
    return max(started, key=lambda e: e.start, default=None)


def derive_rent_flags(
    payment_status: CycleStatus, unpaid_months_count: int, partial_due_amount: Decimal
) -> Tuple[bool, bool]:
    """``(is_rent_paid, is_rent_partial)``; never both True."""
    is_rent_paid = unpaid_months_count == 0 and payment_status == CycleStatus.PAID
    is_rent_partial = (
        not is_rent_paid and payment_status == CycleStatus.PARTIAL and partial_due_amount > 0
    )
    return is_rent_paid, is_rent_partial


def build_summary(
    tenant: Tenant,
    intervals: AllocationsLike,
    ledger_windows: Iterable[CycleWindow],
    payments: Iterable[PaymentRecord],
    reference_date: Optional[DateLike] = None,
    settings: Optional[ReconciliationSettings] = None,
) -> RentSummary:
    """
    Combine the ledger, per-cycle classification and gaps into one summary.

    An unpaid (NO_PAYMENT or PENDING) cycle is an *unpaid month* once it is
    fully in the past, or for any cycle of a tenant who has already checked
    out: a finished stay owes every cycle it has.

    Args:
        tenant: Tenant stay bounds and legacy price
        intervals: AllocationHistory or iterable of AllocationInterval
        ledger_windows: Windows from ``build_ledger``
        payments: All payment rows of the tenant
        reference_date: "Today" for the summary (defaults to today)
        settings: Engine settings

    Returns:
        The tenant's RentSummary
    """
    settings = resolve_settings(settings)
    places = settings.decimal_precision
    reference = to_date_only(reference_date) if reference_date is not None else today()
    payment_rows = list(payments)

    entries = evaluate_ledger(
        ledger_windows,
        payment_rows,
        intervals,
        legacy_price=tenant.current_price,
        check_in_date=tenant.check_in_date,
        settings=settings,
    )
    gaps = gaps_from_entries(entries)

    stay_finished = tenant.has_checked_out(reference)
    unpaid_months = [
        e
        for e in entries
        if e.status.is_unpaid and (stay_finished or e.window.is_past(reference))
    ]
    partial_due = round_money(
        sum((e.remaining_due for e in entries if e.status == CycleStatus.PARTIAL), ZERO), places
    )
    pending_due = round_money(sum((e.remaining_due for e in unpaid_months), ZERO), places)

    relevant = select_relevant_entry(entries, reference)
    payment_status = relevant.status if relevant is not None else CycleStatus.NO_PAYMENT
    is_rent_paid, is_rent_partial = derive_rent_flags(
        payment_status, len(unpaid_months), partial_due
    )
    has_estimated = any(e.is_estimated for e in entries)
    if has_estimated:
        logger.warning(
            f"Tenant {tenant.tenant_id}: rent summary includes legacy-priced (estimated) cycles"
        )
    last_payment = max(
        payment_rows,
        key=lambda p: (p.payment_date or date.min, p.cycle_window.start),
        default=None,
    )

    return RentSummary(
        tenant_id=tenant.tenant_id,
        reference_date=reference,
        current_cycle_window=current_window(tenant, reference, settings=settings),
        entries=tuple(entries),
        gaps=tuple(gaps),
        unpaid_months=tuple(unpaid_months),
        payment_status=payment_status,
        partial_due_amount=partial_due,
        pending_due_amount=pending_due,
        rent_due_amount=round_money(partial_due + pending_due, places),
        is_rent_paid=is_rent_paid,
        is_rent_partial=is_rent_partial,
        has_estimated_dues=has_estimated,
        check_out_date=tenant.check_out_date,
        last_payment_window=last_payment.cycle_window if last_payment is not None else None,
    )


def summarize_tenant(
    tenant: Tenant,
    allocations: AllocationsLike,
    payments: Iterable[PaymentRecord],
    reference_date: Optional[DateLike] = None,
    settings: Optional[ReconciliationSettings] = None,
) -> RentSummary:
    """
    Enumerate the tenant's cycles and build their summary in one call.

    This is the outer boundary: "today" is resolved here once and threaded
    through the ledger and the summary.
    """
    reference = to_date_only(reference_date) if reference_date is not None else today()
    payment_rows = list(payments)
    windows = build_ledger(
        tenant,
        payments_by_window=group_payments_by_window(payment_rows),
        reference_date=reference,
        settings=settings,
    )
    return build_summary(
        tenant, as_intervals(allocations), windows, payment_rows, reference, settings
    )
