# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from .enums import BillingConvention
from .model import Model
from .types import PositiveIntGt1


class ReconciliationSettings(Model):
    """
    Configuration for the rent cycle and reconciliation engine.

    These settings bound cycle enumeration, set the tolerance used when
    comparing paid amounts against dues, and control bulk portfolio runs.
    Every entry point accepts ``settings=None`` meaning these defaults.

    Attributes:
        max_cycle_iterations: Hard cap on cycles enumerated for one tenant.
            Hitting it means the tenant data is anomalous (e.g. a check-in
            decades in the past or corrupted dates) and is a hard failure.
        coverage_tolerance: Absolute tolerance absorbing rounding noise when
            deciding whether a cycle is covered.
        decimal_precision: Decimal places for money leaving the engine.
        bulk_fan_out: Max tenants reconciled concurrently in portfolio runs.
        default_convention: Convention used when a property has none set.
    """

    max_cycle_iterations: PositiveIntGt1 = Field(
        default=240,
        description="Max cycles enumerated per tenant before failing (20 years monthly).",
    )
    coverage_tolerance: Decimal = Field(
        default=Decimal("0.00001"),
        ge=0,
        description="Tolerance when comparing paid amounts to expected dues.",
    )
    decimal_precision: int = Field(
        default=2, ge=0, le=6, description="Decimal places for output money values."
    )
    bulk_fan_out: int = Field(
        default=5,
        ge=1,
        description="Concurrent tenants in portfolio reconciliation.",
    )
    default_convention: BillingConvention = BillingConvention.CALENDAR


DEFAULT_SETTINGS = ReconciliationSettings()


def resolve_settings(settings: "ReconciliationSettings | None") -> ReconciliationSettings:
    return settings if settings is not None else DEFAULT_SETTINGS
