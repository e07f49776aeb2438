# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Proration of monthly bed prices over arbitrary billing periods.
"""

from .calculator import (
    expected_due,
    expected_due_exact,
    flat_price_due,
    month_segments,
    prorate_period,
    prorate_segment,
)

__all__ = [
    "expected_due",
    "expected_due_exact",
    "flat_price_due",
    "month_segments",
    "prorate_period",
    "prorate_segment",
]
