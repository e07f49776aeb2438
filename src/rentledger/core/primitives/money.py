# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Decimal money helpers.

Amounts travel through the engine as ``decimal.Decimal`` at full precision
and are rounded (half away from zero) only when they leave a calculator.
Floats are converted through ``str()`` so the binary representation noise of
values such as ``0.1`` never enters a sum.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

MoneyLike = Union[Decimal, int, float, str]

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_money(value: MoneyLike) -> Decimal:
    """
    Convert a numeric value into an exact ``Decimal``.

    Raises:
        ValueError: If the value is missing, not numeric, or not finite
    """
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, bool) or value is None:
        raise ValueError(f"Invalid money amount: {value!r}")
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid money amount: {value!r}") from e
    else:
        raise ValueError(f"Invalid money amount: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Money amount must be finite, got {value!r}")
    return amount


def round_money(value: MoneyLike, places: int = 2) -> Decimal:
    """Round to ``places`` decimals, ties away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return to_money(value).quantize(quantum, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[MoneyLike]) -> Decimal:
    """Exact sum of money values (unrounded)."""
    total = ZERO
    for value in values:
        total += to_money(value)
    return total


def format_money(value: MoneyLike, places: int = 2) -> str:
    """Render a money value as a plain fixed-point string, e.g. ``'4935.48'``."""
    return f"{round_money(value, places):.{places}f}"
