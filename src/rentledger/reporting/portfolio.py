# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Portfolio Reconciliation

Runs the rent summary across many tenants with bounded concurrency and
rolls the results up for dashboards and notification crons.

A failing tenant never aborts the run: the failure is logged and reported
next to the summaries of the tenants that succeeded.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date
from typing import Any, Callable, Iterable, List, Optional, Tuple, Union

import pandas as pd
from pydantic import Field

from ..core.primitives import (
    CycleStatus,
    DateLike,
    Model,
    PaymentStatus,
    PositiveInt,
    ReconciliationSettings,
    resolve_settings,
    to_date_only,
    today,
)
from ..reconciliation.checkout import advance_pending
from ..reconciliation.payments import PaymentRecord
from ..reconciliation.summary import RentSummary, summarize_tenant
from ..tenancy.allocation import AllocationHistory
from ..tenancy.tenant import Tenant

logger = logging.getLogger(__name__)


class TenantSnapshot(Model):
    """Everything the engine needs about one tenant, as loaded by the caller."""

    tenant: Tenant
    allocations: AllocationHistory = Field(default_factory=AllocationHistory)
    payments: Tuple[PaymentRecord, ...] = Field(default_factory=tuple)
    advance_statuses: Tuple[PaymentStatus, ...] = Field(default_factory=tuple)

    @property
    def tenant_id(self) -> Optional[Union[int, str]]:
        return self.tenant.tenant_id


class TenantFailure(Model):
    """A tenant whose reconciliation raised."""

    tenant_id: Any = None
    error_type: str
    message: str


class RentStatusCounts(Model):
    """Counts a notification cron reports on."""

    total: PositiveInt = 0
    paid: PositiveInt = 0
    partial: PositiveInt = 0
    pending: PositiveInt = 0


class PortfolioReconciliation(Model):
    """
    Result of a portfolio run.

    Attributes:
        reference_date: The day every summary was computed for
        summaries: One summary per successful tenant, in input order
        failures: One entry per tenant that raised, in input order
        advance_pending_ids: Tenants whose advance is not settled
    """

    reference_date: date
    summaries: Tuple[RentSummary, ...] = Field(default_factory=tuple)
    failures: Tuple[TenantFailure, ...] = Field(default_factory=tuple)
    advance_pending_ids: Tuple[Any, ...] = Field(default_factory=tuple)

    @property
    def counts(self) -> RentStatusCounts:
        return count_rent_statuses(self.summaries)

    @property
    def due_tomorrow(self) -> List[RentSummary]:
        return tenants_due_tomorrow(self.summaries, self.reference_date)

    def to_frame(self) -> pd.DataFrame:
        return summaries_to_frame(self.summaries)


SnapshotLoader = Callable[[Any], TenantSnapshot]


def _reconcile_one(
    item: Any,
    loader: Optional[SnapshotLoader],
    reference: date,
    settings: ReconciliationSettings,
) -> Tuple[TenantSnapshot, RentSummary]:
    snapshot = loader(item) if loader is not None else item
    summary = summarize_tenant(
        snapshot.tenant,
        snapshot.allocations,
        snapshot.payments,
        reference_date=reference,
        settings=settings,
    )
    return snapshot, summary


def reconcile_portfolio(
    items: Iterable[Any],
    loader: Optional[SnapshotLoader] = None,
    reference_date: Optional[DateLike] = None,
    settings: Optional[ReconciliationSettings] = None,
) -> PortfolioReconciliation:
    """
    Summarize many tenants concurrently.

    At most ``settings.bulk_fan_out`` tenants are loaded and reconciled at
    once, which also bounds the load placed on the caller's data loader.

    Args:
        items: TenantSnapshot objects, or tenant ids when ``loader`` is given
        loader: Called with each item to load its TenantSnapshot
        reference_date: "Today" for every summary (defaults to today)
        settings: Engine settings

    Returns:
        PortfolioReconciliation with summaries and per-tenant failures
    """
    settings = resolve_settings(settings)
    reference = to_date_only(reference_date) if reference_date is not None else today()
    items = list(items)

    results: List[Optional[Tuple[TenantSnapshot, RentSummary]]] = [None] * len(items)
    failures: List[Tuple[int, TenantFailure]] = []

    with ThreadPoolExecutor(max_workers=settings.bulk_fan_out) as executor:
        futures = {
            executor.submit(_reconcile_one, item, loader, reference, settings): index
            for index, item in enumerate(items)
        }
        for future in as_completed(futures):
            index = futures[future]
            item = items[index]
            tenant_id = item.tenant_id if isinstance(item, TenantSnapshot) else item
            try:
                results[index] = future.result()
            except Exception as e:
                logger.error(f"Tenant {tenant_id}: reconciliation failed: {e}", exc_info=True)
                failure = TenantFailure(
                    tenant_id=tenant_id, error_type=type(e).__name__, message=str(e)
                )
                failures.append((index, failure))

    completed = [r for r in results if r is not None]
    logger.info(
        f"Reconciled {len(completed)} of {len(items)} tenant(s) for "
        f"{reference.isoformat()} ({len(failures)} failed)"
    )
    return PortfolioReconciliation(
        reference_date=reference,
        summaries=tuple(summary for _, summary in completed),
        failures=tuple(failure for _, failure in sorted(failures, key=lambda f: f[0])),
        advance_pending_ids=tuple(
            snapshot.tenant_id
            for snapshot, _ in completed
            if advance_pending(snapshot.advance_statuses)
        ),
    )


def count_rent_statuses(summaries: Iterable[RentSummary]) -> RentStatusCounts:
    """
    Paid, partial and pending counts over the tenants still staying.

    Tenants checked out on or before their summary's reference date are not
    counted at all. A tenant with a positive partial due counts as partial
    only, even when it also has unpaid months; otherwise any pending due or
    unpaid month makes it pending.
    """
    total = paid = partial = pending = 0
    for summary in summaries:
        if not summary.is_active:
            continue
        total += 1
        if summary.is_rent_paid:
            paid += 1
        if summary.has_partial_rent:
            partial += 1
        elif summary.pending_due_amount > 0 or summary.has_pending_rent:
            pending += 1
    return RentStatusCounts(total=total, paid=paid, partial=partial, pending=pending)


def tenants_due_tomorrow(
    summaries: Iterable[RentSummary], reference_date: Optional[DateLike] = None
) -> List[RentSummary]:
    """
    Staying tenants whose most recent payment covers a cycle ending on the
    reference date.

    The latest payment is the one with the latest ``payment_date``. Tenants
    without payments are never selected: they are behind, not about to roll
    over.
    """
    selected = []
    for summary in summaries:
        reference = (
            to_date_only(reference_date) if reference_date is not None else summary.reference_date
        )
        window = summary.last_payment_window
        if summary.is_active and window is not None and window.end == reference:
            selected.append(summary)
    return selected


def summaries_to_frame(summaries: Iterable[RentSummary]) -> pd.DataFrame:
    """
    One row per tenant, for dashboards.

    Money columns are floats rounded to cents; the Decimal values stay on the
    summaries for anything that needs exact arithmetic.
    """
    columns = [
        "tenant_id",
        "reference_date",
        "payment_status",
        "cycle_start",
        "cycle_end",
        "unpaid_months",
        "partial_due_amount",
        "pending_due_amount",
        "rent_due_amount",
        "is_rent_paid",
        "is_rent_partial",
        "has_estimated_dues",
    ]
    rows = []
    for summary in summaries:
        window = summary.current_cycle_window
        rows.append(
            {
                "tenant_id": summary.tenant_id,
                "reference_date": summary.reference_date,
                "payment_status": summary.payment_status.value,
                "cycle_start": window.start if window is not None else None,
                "cycle_end": window.end if window is not None else None,
                "unpaid_months": len(summary.unpaid_months),
                "partial_due_amount": float(summary.partial_due_amount),
                "pending_due_amount": float(summary.pending_due_amount),
                "rent_due_amount": float(summary.rent_due_amount),
                "is_rent_paid": summary.is_rent_paid,
                "is_rent_partial": summary.is_rent_partial,
                "has_estimated_dues": summary.has_estimated_dues,
            }
        )
    return pd.DataFrame(rows, columns=columns)


def cycles_to_frame(summaries: Iterable[RentSummary]) -> pd.DataFrame:
    """Long-form ledger: one row per tenant cycle."""
    columns = [
        "tenant_id",
        "cycle_start",
        "cycle_end",
        "status",
        "expected_due",
        "total_paid",
        "remaining_due",
        "due_source",
        "payment_count",
    ]
    rows = [
        {
            "tenant_id": summary.tenant_id,
            "cycle_start": entry.start,
            "cycle_end": entry.end,
            "status": entry.status.value,
            "expected_due": float(entry.expected_due),
            "total_paid": float(entry.total_paid),
            "remaining_due": float(entry.remaining_due),
            "due_source": entry.due_source.value,
            "payment_count": entry.payment_count,
        }
        for summary in summaries
        for entry in summary.entries
    ]
    return pd.DataFrame(rows, columns=columns)


def outstanding_by_status(summaries: Iterable[RentSummary]) -> pd.DataFrame:
    """Remaining due and cycle counts grouped by cycle status."""
    frame = cycles_to_frame(summaries)
    unpaid = frame[frame["status"] != CycleStatus.PAID.value]
    return (
        unpaid.groupby("status")
        .agg(cycles=("cycle_start", "count"), remaining_due=("remaining_due", "sum"))
        .round(2)
    )
