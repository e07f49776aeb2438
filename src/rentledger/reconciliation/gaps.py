# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Per-cycle classification and gap detection.

Each ledger window is priced (allocation first, then the payment-recorded
due, then the legacy flat price), compared with what was paid against that
exact window, and classified. Windows that are not covered are gaps, with
the tenant's check-in cycle always sorted first: the earliest obligation is
settled before later ones.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.primitives import (
    ZERO,
    CycleStatus,
    CycleWindow,
    DueSource,
    Model,
    MoneyLike,
    PositiveInt,
    ReconciliationSettings,
    resolve_settings,
    round_money,
    to_money,
)
from ..proration.calculator import expected_due, flat_price_due
from ..tenancy.allocation import AllocationsLike, as_intervals
from .payments import PaymentRecord, group_payments_by_window, max_recorded_due, paid_total

logger = logging.getLogger(__name__)

FIRST_CYCLE_PRIORITY = -1
DEFAULT_PRIORITY = 0


class CycleLedgerEntry(Model):
    """
    Computed billing facts of one cycle window (a view, never stored).

    Attributes:
        window: The billing cycle
        total_paid: Sum of PAID and PARTIAL payments tagged to the window
        expected_due: Rent owed for the window
        remaining_due: ``max(0, expected_due - total_paid)``
        status: NO_PAYMENT, PENDING, PARTIAL or PAID
        due_source: Where ``expected_due`` came from
        payment_count: Number of payment rows (any status) on the window
        is_first_cycle: Whether this is the tenant's check-in cycle
    """

    window: CycleWindow
    total_paid: Decimal
    expected_due: Decimal
    remaining_due: Decimal
    status: CycleStatus
    due_source: DueSource
    payment_count: PositiveInt = 0
    is_first_cycle: bool = False

    @property
    def start(self) -> date:
        return self.window.start

    @property
    def end(self) -> date:
        return self.window.end

    @property
    def is_estimated(self) -> bool:
        return self.due_source == DueSource.LEGACY_FALLBACK


class Gap(Model):
    """
    A cycle that is not fully paid.

    Attributes:
        entry: The cycle's ledger entry
        priority: -1 for the check-in cycle, 0 otherwise
        days_missing: Days in the unpaid cycle
    """

    entry: CycleLedgerEntry
    priority: int = DEFAULT_PRIORITY
    days_missing: PositiveInt

    @property
    def window(self) -> CycleWindow:
        return self.entry.window

    @property
    def remaining_due(self) -> Decimal:
        return self.entry.remaining_due

    @property
    def status(self) -> CycleStatus:
        return self.entry.status

    @property
    def sort_key(self) -> Tuple[int, date]:
        return (self.priority, self.entry.window.start)


def is_covered(
    total_paid: MoneyLike, expected: MoneyLike, tolerance: MoneyLike = Decimal("0.00001")
) -> bool:
    """
    Coverage rule for one window.

    Covered when a positive due is met (within ``tolerance``), or when no
    due is known but something was paid.
    """
    paid = to_money(total_paid)
    due = to_money(expected)
    if due > 0:
        return paid >= due - to_money(tolerance)
    return paid > 0


def cycle_status(
    total_paid: MoneyLike,
    expected: MoneyLike,
    has_payment_rows: bool,
    tolerance: MoneyLike = Decimal("0.00001"),
) -> CycleStatus:
    """
    Aggregate status of a window.

    Increasing ``total_paid`` only ever moves the status forward
    (NO_PAYMENT/PENDING, then PARTIAL, then PAID).
    """
    if is_covered(total_paid, expected, tolerance):
        return CycleStatus.PAID
    if to_money(total_paid) > 0:
        return CycleStatus.PARTIAL
    if has_payment_rows:
        return CycleStatus.PENDING
    return CycleStatus.NO_PAYMENT


def resolve_expected_due(
    window: CycleWindow,
    window_payments: Sequence[PaymentRecord],
    intervals: AllocationsLike,
    legacy_price: Optional[MoneyLike] = None,
    places: int = 2,
) -> Tuple[Decimal, DueSource]:
    """
    Expected due of ``window`` and the source it was taken from.

    Order: allocation proration, then the largest recorded due among the
    window's payments, then the legacy flat price prorated over the window.
    """
    from_allocations = expected_due(intervals, window.start, window.end, places)
    if from_allocations > 0:
        return from_allocations, DueSource.ALLOCATION

    from_payments = round_money(max_recorded_due(window_payments), places)
    if from_payments > 0:
        return from_payments, DueSource.PAYMENT_RECORD

    legacy = flat_price_due(legacy_price, window.start, window.end, places)
    logger.warning(
        f"No allocation or recorded due for cycle {window}; "
        f"using legacy flat price {legacy_price} -> {legacy}"
    )
    return legacy, DueSource.LEGACY_FALLBACK


def evaluate_window(
    window: CycleWindow,
    window_payments: Sequence[PaymentRecord],
    intervals: AllocationsLike,
    legacy_price: Optional[MoneyLike] = None,
    is_first_cycle: bool = False,
    settings: Optional[ReconciliationSettings] = None,
) -> CycleLedgerEntry:
    """
    Price and classify one window from the payments tagged to it.

    ``window_payments`` must already be restricted to rows tagged to exactly
    this window; rows for other windows are ignored.
    """
    settings = resolve_settings(settings)
    places = settings.decimal_precision
    tagged = [p for p in window_payments if p.covers(window)]

    due, source = resolve_expected_due(window, tagged, intervals, legacy_price, places)
    paid = paid_total(tagged)
    status = cycle_status(paid, due, bool(tagged), settings.coverage_tolerance)
    remaining = max(ZERO, due - paid)

    return CycleLedgerEntry(
        window=window,
        total_paid=round_money(paid, places),
        expected_due=due,
        remaining_due=round_money(remaining, places),
        status=status,
        due_source=source,
        payment_count=len(tagged),
        is_first_cycle=is_first_cycle,
    )


def evaluate_ledger(
    ledger_windows: Iterable[CycleWindow],
    payments: Iterable[PaymentRecord],
    intervals: AllocationsLike,
    legacy_price: Optional[MoneyLike] = None,
    check_in_date: Optional[date] = None,
    settings: Optional[ReconciliationSettings] = None,
) -> List[CycleLedgerEntry]:
    """
    One ledger entry per window, in chronological order.

    The first cycle is the window starting on ``check_in_date`` when given,
    otherwise the earliest window.
    """
    windows = sorted(set(ledger_windows), key=lambda w: w.start)
    if not windows:
        return []

    by_window = group_payments_by_window(payments)
    orphaned = set(by_window) - set(windows)
    if orphaned:
        logger.debug(
            f"{len(orphaned)} payment window(s) match no ledger cycle and are ignored: "
            + ", ".join(str(w) for w in sorted(orphaned, key=lambda w: w.start))
        )

    first_start = check_in_date if check_in_date is not None else windows[0].start
    allocation_intervals = as_intervals(intervals)
    return [
        evaluate_window(
            window,
            by_window.get(window, []),
            allocation_intervals,
            legacy_price,
            is_first_cycle=window.start == first_start,
            settings=settings,
        )
        for window in windows
    ]


def gaps_from_entries(entries: Iterable[CycleLedgerEntry]) -> List[Gap]:
    """Uncovered entries as gaps, check-in cycle first, then by start date."""
    gaps = [
        Gap(
            entry=entry,
            priority=FIRST_CYCLE_PRIORITY if entry.is_first_cycle else DEFAULT_PRIORITY,
            days_missing=entry.window.days,
        )
        for entry in entries
        if entry.status != CycleStatus.PAID
    ]
    gaps.sort(key=lambda g: g.sort_key)
    return gaps


def detect_gaps(
    ledger_windows: Iterable[CycleWindow],
    payments: Iterable[PaymentRecord],
    intervals: AllocationsLike,
    legacy_price: Optional[MoneyLike] = None,
    check_in_date: Optional[date] = None,
    settings: Optional[ReconciliationSettings] = None,
) -> List[Gap]:
    """
    Unpaid and underpaid cycles of a ledger, in settlement order.

    Args:
        ledger_windows: Windows from ``build_ledger``
        payments: All payment rows of the tenant
        intervals: AllocationHistory or iterable of AllocationInterval
        legacy_price: Flat current price for windows with no other price
        check_in_date: Identifies the check-in cycle (defaults to earliest)
        settings: Engine settings (tolerance, precision)

    Returns:
        Gaps ordered by ``(priority, start)``; the check-in cycle has
        priority -1 and so always comes first
    """
    entries = evaluate_ledger(
        ledger_windows, payments, intervals, legacy_price, check_in_date, settings
    )
    gaps = gaps_from_entries(entries)
    logger.debug(f"Found {len(gaps)} gap(s) across {len(entries)} cycle(s)")
    return gaps
