# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Billing cycles: window boundaries per convention and per-tenant enumeration.
"""

from .calculator import calendar_window, compute_window, midmonth_window, next_window
from .ledger import CycleLimitExceededError, build_ledger, current_window

__all__ = [
    "CycleLimitExceededError",
    "build_ledger",
    "calendar_window",
    "compute_window",
    "current_window",
    "midmonth_window",
    "next_window",
]
