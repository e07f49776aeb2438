# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging

"""
rentledger - Rent Cycle & Payment Reconciliation Engine

One shared implementation of billing cycles, allocation proration, gap
detection and the tenant rent summary, consumed by listings, dashboards,
the checkout gate and notification crons.

Key Entry Points:
- rentledger.cycles.compute_window() - Cycle boundaries for a convention
- rentledger.proration.expected_due() - Rent owed for a period
- rentledger.reconciliation.summarize_tenant() - The tenant rent summary
- rentledger.reporting.reconcile_portfolio() - Many tenants at once

Example Usage:
    ```python
    from rentledger.tenancy import AllocationHistory, Tenant
    from rentledger.reconciliation import summarize_tenant

    tenant = Tenant(tenant_id=7, check_in_date="2025-03-15")
    history = AllocationHistory.start("2025-03-15", 9000)
    summary = summarize_tenant(tenant, history, payments=[], reference_date="2025-04-10")
    print(summary.rent_due_amount)
    ```
"""

# Libraries leave handler configuration to the application.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "core",
    "cycles",
    "proration",
    "reconciliation",
    "reporting",
    "tenancy",
]


_LAZY_MODULES = {
    "core": "rentledger.core",
    "cycles": "rentledger.cycles",
    "proration": "rentledger.proration",
    "reconciliation": "rentledger.reconciliation",
    "reporting": "rentledger.reporting",
    "tenancy": "rentledger.tenancy",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'rentledger' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
