# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Cycle enumeration for one tenant.

Walks the tenant's cycles from check-in to the billing cutoff, one
``compute_window`` call per step. The walk is bounded; exceeding the bound is
treated as corrupted input and raised, never returned as a short ledger.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Iterable, List, Mapping, Optional, Union

from ..core.primitives import (
    BillingConvention,
    CycleWindow,
    DateLike,
    ReconciliationSettings,
    resolve_settings,
    to_date_only,
    today,
)
from .calculator import compute_window

if TYPE_CHECKING:
    from ..tenancy.tenant import Tenant

logger = logging.getLogger(__name__)

WindowsLike = Union[Mapping[CycleWindow, object], Iterable[CycleWindow], None]


class CycleLimitExceededError(RuntimeError):
    """Cycle enumeration hit the iteration cap; the tenant's dates are anomalous."""

    def __init__(self, tenant_id, iterations: int, check_in_date: date, cutoff: date):
        self.tenant_id = tenant_id
        self.iterations = iterations
        self.check_in_date = check_in_date
        self.cutoff = cutoff
        super().__init__(
            f"Tenant {tenant_id}: cycle enumeration exceeded {iterations} iterations "
            f"between {check_in_date.isoformat()} and {cutoff.isoformat()}"
        )


def _enumeration_end(tenant: "Tenant", cutoff: date, tagged: WindowsLike) -> date:
    """
    Day the enumeration must reach.

    Normally the cutoff; windows already tagged by payments beyond it
    (prepaid cycles) extend it, but never past the checkout date.
    """
    latest = max((w.end for w in (tagged or ())), default=None)
    if latest is None or latest <= cutoff:
        return cutoff
    if tenant.check_out_date is not None:
        latest = min(latest, tenant.check_out_date)
    return max(latest, cutoff)


def build_ledger(
    tenant: "Tenant",
    convention: Optional[BillingConvention] = None,
    payments_by_window: WindowsLike = None,
    reference_date: Optional[DateLike] = None,
    settings: Optional[ReconciliationSettings] = None,
) -> List[CycleWindow]:
    """
    Enumerate the tenant's cycle windows from check-in to the cutoff.

    The cutoff is ``reference_date`` (today when omitted), or the checkout
    date when the tenant checked out on or before it. The last window
    returned is the one whose end reaches or passes the cutoff.

    Args:
        tenant: Tenant stay bounds
        convention: Overrides the tenant's billing convention when given;
            otherwise the tenant's, else ``settings.default_convention``
        payments_by_window: Windows (or a mapping keyed by window) already
            carrying payments; prepaid windows after the cutoff are included
        reference_date: "Today" for the calculation
        settings: Engine settings (iteration cap)

    Returns:
        Contiguous, chronological windows; empty when check-in is after
        the cutoff

    Raises:
        CycleLimitExceededError: If the iteration cap is reached
    """
    settings = resolve_settings(settings)
    reference = to_date_only(reference_date) if reference_date is not None else today()
    convention = BillingConvention(convention or tenant.resolve_convention(settings))

    cutoff = tenant.billing_cutoff(reference)
    check_in = tenant.check_in_date
    if check_in > cutoff:
        logger.debug(
            f"Tenant {tenant.tenant_id}: check-in {check_in.isoformat()} is after "
            f"cutoff {cutoff.isoformat()}; no cycles yet"
        )
        return []

    stop = _enumeration_end(tenant, cutoff, payments_by_window)
    windows: List[CycleWindow] = []
    cursor = check_in
    for _ in range(settings.max_cycle_iterations):
        window = compute_window(convention, check_in, cursor)
        windows.append(window)
        if window.end >= stop:
            logger.debug(
                f"Tenant {tenant.tenant_id}: {len(windows)} {convention.value} cycle(s) "
                f"through {stop.isoformat()}"
            )
            return windows
        cursor = window.next_start

    logger.error(
        f"Tenant {tenant.tenant_id}: cycle enumeration hit the cap of "
        f"{settings.max_cycle_iterations} (check-in {check_in.isoformat()}, "
        f"cutoff {stop.isoformat()})"
    )
    raise CycleLimitExceededError(tenant.tenant_id, settings.max_cycle_iterations, check_in, stop)


def current_window(
    tenant: "Tenant",
    reference_date: DateLike,
    convention: Optional[BillingConvention] = None,
    settings: Optional[ReconciliationSettings] = None,
) -> Optional[CycleWindow]:
    """
    The cycle containing ``reference_date`` while the tenant is staying.

    None before check-in and after checkout.
    """
    reference = to_date_only(reference_date)
    if reference < tenant.check_in_date:
        return None
    if tenant.check_out_date is not None and reference > tenant.check_out_date:
        return None
    convention = convention or tenant.resolve_convention(settings)
    return compute_window(convention, tenant.check_in_date, reference)
