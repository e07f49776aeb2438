# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Rent payment rows and the rules applied when one is recorded.

A payment is tagged to exactly one cycle window; it counts towards that
cycle only, never towards a neighbouring one.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import field_validator

from ..core.primitives import (
    ZERO,
    CycleWindow,
    DateLike,
    Model,
    MoneyLike,
    NonNegativeMoney,
    PaymentStatus,
    inclusive_days,
    round_money,
    same_month,
    to_date_only,
    to_money,
)
from ..proration.calculator import prorate_period

logger = logging.getLogger(__name__)


class PaymentRecord(Model):
    """
    One recorded rent payment.

    Attributes:
        cycle_window: The billing cycle the payment was recorded against
        amount_paid: Amount received
        status: PAID, PARTIAL, PENDING or FAILED
        recorded_due: Rent due the store recorded for the cycle when the
            payment was taken, if any
        payment_date: Day the payment was made
        payment_id: Identifier in the caller's store
    """

    cycle_window: CycleWindow
    amount_paid: NonNegativeMoney
    status: PaymentStatus
    recorded_due: Optional[NonNegativeMoney] = None
    payment_date: Optional[date] = None
    payment_id: Optional[Union[int, str]] = None

    @field_validator("payment_date", mode="before")
    @classmethod
    def normalize_payment_date(cls, v: Any) -> Optional[date]:
        return None if v is None else to_date_only(v)

    @property
    def is_paying(self) -> bool:
        return PaymentStatus(self.status).is_paying

    def covers(self, window: CycleWindow) -> bool:
        """True when this payment is tagged to exactly ``window``."""
        return self.cycle_window == window


def group_payments_by_window(
    payments: Iterable[PaymentRecord],
) -> Dict[CycleWindow, List[PaymentRecord]]:
    grouped: Dict[CycleWindow, List[PaymentRecord]] = {}
    for payment in payments:
        grouped.setdefault(payment.cycle_window, []).append(payment)
    return grouped


def paid_total(payments: Iterable[PaymentRecord]) -> Decimal:
    """Exact sum of ``amount_paid`` over PAID and PARTIAL rows."""
    return sum((p.amount_paid for p in payments if p.is_paying), ZERO)


def max_recorded_due(payments: Iterable[PaymentRecord]) -> Decimal:
    """Largest ``recorded_due`` among the rows (0 when none recorded one)."""
    return max((p.recorded_due for p in payments if p.recorded_due is not None), default=ZERO)


def classify_payment(amount_paid: MoneyLike, due: MoneyLike) -> PaymentStatus:
    """
    Status a new payment row is stored with.

    PAID when it covers the due, PARTIAL when something was paid, PENDING
    otherwise.
    """
    paid = to_money(amount_paid)
    if paid >= to_money(due):
        return PaymentStatus.PAID
    if paid > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PENDING


def validate_payment_amount(amount_paid: MoneyLike, due: MoneyLike) -> None:
    """
    Raises:
        ValueError: If the amount is negative or exceeds the due
    """
    paid = to_money(amount_paid)
    expected = to_money(due)
    if paid < 0:
        raise ValueError(f"Amount paid ({paid}) cannot be negative")
    if paid > expected:
        raise ValueError(f"Amount paid ({paid}) cannot exceed actual rent amount ({expected})")


def join_month_due(monthly_rent: MoneyLike, window: CycleWindow, check_in_date: DateLike) -> Decimal:
    """
    Rent due for a CALENDAR cycle when only the flat monthly rent is known.

    A tenant joining after the 1st pays from check-in to month end,
    prorated by the month's length; every other cycle is the full rent.
    """
    rent = to_money(monthly_rent)
    if rent <= 0:
        return round_money(ZERO)
    check_in = to_date_only(check_in_date)
    if same_month(window.start, check_in) and check_in.day > 1:
        if inclusive_days(check_in, window.end) == 0:
            return round_money(ZERO)
        return round_money(prorate_period(rent, check_in, window.end))
    return round_money(rent)


def record_payment(
    window: CycleWindow,
    amount_paid: MoneyLike,
    due: MoneyLike,
    payment_date: Optional[DateLike] = None,
    payment_id: Optional[Union[int, str]] = None,
) -> PaymentRecord:
    """
    Build the row to store for a payment against ``window``.

    The amount is validated against the cycle's due, rounded to cents, and
    classified; the due is kept as the row's ``recorded_due``.

    Raises:
        ValueError: If the amount is negative or exceeds the due
    """
    validate_payment_amount(amount_paid, due)
    paid = round_money(amount_paid)
    recorded = round_money(due)
    status = classify_payment(paid, recorded)
    logger.debug(f"Payment {payment_id} of {paid} against {window} (due {recorded}): {status.value}")
    return PaymentRecord(
        cycle_window=window,
        amount_paid=paid,
        status=status,
        recorded_due=recorded,
        payment_date=payment_date,
        payment_id=payment_id,
    )
