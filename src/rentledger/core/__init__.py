# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
rentledger Core Framework

Foundational primitives shared by the cycle, proration, tenancy and
reconciliation packages.
"""

from . import primitives
from .primitives import (
    BillingConvention,
    CycleStatus,
    CycleWindow,
    DueSource,
    Model,
    PaymentStatus,
    ReconciliationSettings,
)

__all__ = [
    "BillingConvention",
    "CycleStatus",
    "CycleWindow",
    "DueSource",
    "Model",
    "PaymentStatus",
    "ReconciliationSettings",
    "primitives",
]
