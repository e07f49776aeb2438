# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tenant stay bounds and the lifecycle operations that change allocations.

The store (an external collaborator) persists tenants and allocation rows;
these functions hold the validation rules it must apply before committing a
transfer or a checkout.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Tuple, Union

from pydantic import field_validator, model_validator

from ..core.primitives import (
    BillingConvention,
    DateLike,
    Model,
    MoneyLike,
    NonNegativeMoney,
    ReconciliationSettings,
    resolve_settings,
    to_date_only,
)
from ..cycles.calculator import compute_window
from .allocation import AllocationHistory

logger = logging.getLogger(__name__)


class Tenant(Model):
    """
    Billing-relevant facts about one tenant's stay.

    Attributes:
        tenant_id: Identifier in the caller's store (opaque to the engine)
        check_in_date: First day of the stay; anchors every cycle
        check_out_date: Last day of the stay, once checked out
        billing_convention: Cycle convention of the tenant's property; None
            when the property has none set (settings decide)
        current_price: Current flat bed price, used only as the legacy
            fallback when a cycle has no allocation or recorded due
    """

    tenant_id: Optional[Union[int, str]] = None
    check_in_date: date
    check_out_date: Optional[date] = None
    billing_convention: Optional[BillingConvention] = None
    current_price: Optional[NonNegativeMoney] = None

    @field_validator("check_in_date", mode="before")
    @classmethod
    def normalize_check_in(cls, v: Any) -> date:
        return to_date_only(v)

    @field_validator("check_out_date", mode="before")
    @classmethod
    def normalize_check_out(cls, v: Any) -> Optional[date]:
        return None if v is None else to_date_only(v)

    @model_validator(mode="after")
    def check_stay_bounds(self) -> "Tenant":
        if self.check_out_date is not None and self.check_out_date < self.check_in_date:
            raise ValueError(
                "Checkout date must be the same as or after check-in date. "
                f"Check-in date: {self.check_in_date.isoformat()}, "
                f"Checkout date: {self.check_out_date.isoformat()}"
            )
        return self

    @property
    def anchor_day(self) -> int:
        return self.check_in_date.day

    def has_checked_out(self, reference_date: date) -> bool:
        """True when the stay ended on or before ``reference_date``."""
        return self.check_out_date is not None and self.check_out_date <= reference_date

    def billing_cutoff(self, reference_date: date) -> date:
        """Last day billing runs to: the reference date, or an earlier checkout."""
        if self.has_checked_out(reference_date):
            return self.check_out_date
        return reference_date

    def resolve_convention(
        self, settings: Optional[ReconciliationSettings] = None
    ) -> BillingConvention:
        """The property's convention, else ``settings.default_convention``."""
        if self.billing_convention is not None:
            return self.billing_convention
        return resolve_settings(settings).default_convention


def transfer_tenant(
    tenant: Tenant,
    allocations: AllocationHistory,
    effective_from: DateLike,
    price: MoneyLike,
    settings: Optional[ReconciliationSettings] = None,
) -> AllocationHistory:
    """
    Validate and apply a bed transfer, returning the new allocation history.

    Rules:
        - checked-out tenants cannot be transferred
        - the transfer cannot start before check-in
        - a tenant can be transferred only once per rent cycle (the initial
          join allocation does not count)
        - the new interval must start after the latest interval's start

    Raises:
        ValueError: When any rule is violated
    """
    start = to_date_only(effective_from)

    if tenant.check_out_date is not None:
        raise ValueError("Only active tenants can be transferred.")
    if start < tenant.check_in_date:
        raise ValueError(
            f"Invalid effective_from date. It cannot be before tenant check-in date "
            f"({tenant.check_in_date.isoformat()})."
        )

    window = compute_window(tenant.resolve_convention(settings), tenant.check_in_date, start)
    for interval in allocations.intervals:
        if interval.effective_from == tenant.check_in_date:
            continue
        if window.contains(interval.effective_from):
            raise ValueError("Tenant can be transferred only once per rent cycle.")

    updated = allocations.transfer(start, price)
    logger.info(
        f"Tenant {tenant.tenant_id}: transferred from {start.isoformat()} "
        f"(cycle {window}) at monthly price {price}"
    )
    return updated


def check_out_tenant(
    tenant: Tenant,
    allocations: AllocationHistory,
    check_out_date: DateLike,
) -> Tuple[Tenant, AllocationHistory]:
    """
    Record a checkout: set the checkout date and close the open allocation.

    The checkout date is the last billable day. Settlement (no rent due,
    advance paid) is checked separately by
    ``rentledger.reconciliation.checkout`` against the returned state.

    Raises:
        ValueError: If the checkout date precedes check-in or the open
            allocation's start
    """
    end = to_date_only(check_out_date)
    updated_tenant = tenant.copy(updates={"check_out_date": end})
    updated_allocations = allocations.close(end)
    logger.info(f"Tenant {tenant.tenant_id}: checkout recorded for {end.isoformat()}")
    return updated_tenant, updated_allocations
