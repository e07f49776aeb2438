# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
rentledger Core Primitives

Building blocks shared by every billing calculation: date-only calendar
arithmetic, decimal money, cycle windows, enums and engine settings.
"""

from .dates import (
    ONE_DAY,
    DateLike,
    clamp_day,
    clamped_date,
    days_in_month,
    inclusive_days,
    month_end,
    month_start,
    same_month,
    to_date_only,
    today,
)
from .enums import BillingConvention, CycleStatus, DueSource, PaymentStatus
from .model import Model
from .money import (
    CENT,
    ZERO,
    MoneyLike,
    format_money,
    round_money,
    sum_money,
    to_money,
)
from .settings import DEFAULT_SETTINGS, ReconciliationSettings, resolve_settings
from .types import Money, NonNegativeMoney, PositiveInt, PositiveIntGt1
from .window import CycleWindow, cycle_cache_key

__all__ = [
    "BillingConvention",
    "CENT",
    "CycleStatus",
    "CycleWindow",
    "DEFAULT_SETTINGS",
    "DateLike",
    "DueSource",
    "Model",
    "Money",
    "MoneyLike",
    "NonNegativeMoney",
    "ONE_DAY",
    "PaymentStatus",
    "PositiveInt",
    "PositiveIntGt1",
    "ReconciliationSettings",
    "ZERO",
    "clamp_day",
    "clamped_date",
    "cycle_cache_key",
    "days_in_month",
    "format_money",
    "inclusive_days",
    "month_end",
    "month_start",
    "resolve_settings",
    "round_money",
    "same_month",
    "sum_money",
    "to_date_only",
    "to_money",
    "today",
]
