# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
rentledger Reporting

Portfolio-wide reconciliation and pandas rollups of rent summaries.
"""

from .portfolio import (
    PortfolioReconciliation,
    RentStatusCounts,
    TenantFailure,
    TenantSnapshot,
    count_rent_statuses,
    cycles_to_frame,
    outstanding_by_status,
    reconcile_portfolio,
    summaries_to_frame,
    tenants_due_tomorrow,
)

__all__ = [
    "PortfolioReconciliation",
    "RentStatusCounts",
    "TenantFailure",
    "TenantSnapshot",
    "count_rent_statuses",
    "cycles_to_frame",
    "outstanding_by_status",
    "reconcile_portfolio",
    "summaries_to_frame",
    "tenants_due_tomorrow",
]
