# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum


class BillingConvention(str, Enum):
    """
    How a property slices a tenant's stay into billing cycles.

    Options:
        CALENDAR: 1st to last day of each month; the join month starts on the
            check-in day (partial first month)
        MIDMONTH: anchored to the check-in day-of-month, running from the
            anchor day to the day before the next month's anchor day
    """

    CALENDAR = "CALENDAR"
    MIDMONTH = "MIDMONTH"


class PaymentStatus(str, Enum):
    """
    Status of a single recorded rent payment row.

    Only PAID and PARTIAL rows count towards a cycle's paid amount.
    """

    PAID = "PAID"
    PARTIAL = "PARTIAL"
    PENDING = "PENDING"
    FAILED = "FAILED"

    @property
    def is_paying(self) -> bool:
        return self in (PaymentStatus.PAID, PaymentStatus.PARTIAL)


class CycleStatus(str, Enum):
    """
    Aggregate status of one billing cycle, derived from all its payments.

    Options:
        NO_PAYMENT: no payment row is tagged to the cycle
        PENDING: only PENDING/FAILED rows are tagged to the cycle
        PARTIAL: something was paid but less than the expected due
        PAID: the expected due is covered
    """

    NO_PAYMENT = "NO_PAYMENT"
    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"

    @property
    def is_unpaid(self) -> bool:
        return self in (CycleStatus.NO_PAYMENT, CycleStatus.PENDING)


class DueSource(str, Enum):
    """
    Where a cycle's expected due amount came from.

    Options:
        ALLOCATION: prorated from the tenant's allocation (price) history
        PAYMENT_RECORD: the largest due recorded on the cycle's payments
        LEGACY_FALLBACK: the bed's current flat price, prorated (best effort)
    """

    ALLOCATION = "ALLOCATION"
    PAYMENT_RECORD = "PAYMENT_RECORD"
    LEGACY_FALLBACK = "LEGACY_FALLBACK"
