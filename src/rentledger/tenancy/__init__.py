# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tenancy: stay bounds, allocation (price) history and the transfer and
checkout rules that change them.
"""

from .allocation import AllocationHistory, AllocationInterval, AllocationsLike, as_intervals
from .tenant import Tenant, check_out_tenant, transfer_tenant

__all__ = [
    "AllocationHistory",
    "AllocationInterval",
    "AllocationsLike",
    "Tenant",
    "as_intervals",
    "check_out_tenant",
    "transfer_tenant",
]
