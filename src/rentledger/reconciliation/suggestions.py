# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Which cycle the next rent payment should be recorded against.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Optional

from ..core.primitives import (
    CycleWindow,
    DateLike,
    Model,
    ReconciliationSettings,
    resolve_settings,
    to_date_only,
    today,
)
from ..cycles.calculator import compute_window, next_window
from ..cycles.ledger import build_ledger, current_window
from ..tenancy.allocation import AllocationsLike, as_intervals
from ..tenancy.tenant import Tenant
from .gaps import Gap, evaluate_ledger, evaluate_window, gaps_from_entries
from .payments import PaymentRecord, group_payments_by_window

logger = logging.getLogger(__name__)


class PaymentSuggestion(Model):
    """
    Suggested cycle for the next payment.

    Attributes:
        window: Cycle to record the payment against
        amount_due: Remaining due of that cycle
        is_gap_fill: True when the cycle is an earlier unpaid one
        gap: The gap being filled, when ``is_gap_fill``
        message: Human-readable reason
    """

    window: CycleWindow
    amount_due: Decimal
    is_gap_fill: bool = False
    gap: Optional[Gap] = None
    message: str = ""


def suggest_next_payment(
    tenant: Tenant,
    allocations: AllocationsLike,
    payments: Iterable[PaymentRecord],
    reference_date: Optional[DateLike] = None,
    skip_gaps: bool = False,
    settings: Optional[ReconciliationSettings] = None,
) -> Optional[PaymentSuggestion]:
    """
    Suggest the cycle the next payment should settle.

    The earliest gap (the check-in cycle first) is suggested before anything
    else. Without gaps, or with ``skip_gaps``, the cycle after the current
    one is suggested; before check-in that is the check-in cycle.

    Returns:
        The suggestion, or None when nothing is owed and no cycle remains
        before checkout
    """
    settings = resolve_settings(settings)
    reference = to_date_only(reference_date) if reference_date is not None else today()
    intervals = as_intervals(allocations)
    payment_rows = list(payments)
    grouped = group_payments_by_window(payment_rows)

    if not skip_gaps:
        windows = build_ledger(
            tenant, payments_by_window=grouped, reference_date=reference, settings=settings
        )
        entries = evaluate_ledger(
            windows,
            payment_rows,
            intervals,
            legacy_price=tenant.current_price,
            check_in_date=tenant.check_in_date,
            settings=settings,
        )
        gaps = gaps_from_entries(entries)
        if gaps:
            earliest = gaps[0]
            return PaymentSuggestion(
                window=earliest.window,
                amount_due=earliest.remaining_due,
                is_gap_fill=True,
                gap=earliest,
                message=f"Gap detected from {earliest.window.start.isoformat()} to "
                f"{earliest.window.end.isoformat()}. Please fill this gap first.",
            )

    if tenant.has_checked_out(reference):
        logger.debug(f"Tenant {tenant.tenant_id}: checked out, no next cycle to suggest")
        return None

    convention = tenant.resolve_convention(settings)
    current = current_window(tenant, reference, convention)
    if current is None:
        window = compute_window(convention, tenant.check_in_date, tenant.check_in_date)
    else:
        window = next_window(convention, tenant.check_in_date, current)
    if tenant.check_out_date is not None and window.start > tenant.check_out_date:
        return None

    entry = evaluate_window(
        window,
        grouped.get(window, []),
        intervals,
        legacy_price=tenant.current_price,
        is_first_cycle=window.start == tenant.check_in_date,
        settings=settings,
    )
    return PaymentSuggestion(
        window=window,
        amount_due=entry.remaining_due,
        message=f"Next rent cycle ({convention.value})",
    )
