# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Allocation (bed price) history of a tenant.

Each interval is one price-validity segment of a stay: the initial join, or
the period after a mid-stay transfer. Transfers close the open interval on
the day before the new one starts, so intervals never overlap and at most
one is open at any time.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Tuple, Union

from pydantic import Field, field_validator, model_validator

from ..core.primitives import (
    ONE_DAY,
    DateLike,
    Model,
    MoneyLike,
    NonNegativeMoney,
    to_date_only,
)

logger = logging.getLogger(__name__)


class AllocationInterval(Model):
    """
    One price-validity segment of a tenant's occupancy.

    Attributes:
        effective_from: First day the price applies
        effective_to: Last day the price applies (inclusive); None while the
            tenant still occupies this bed
        price: Monthly bed price snapshot for the segment
    """

    effective_from: date
    effective_to: Optional[date] = None
    price: NonNegativeMoney

    @field_validator("effective_from", mode="before")
    @classmethod
    def normalize_from(cls, v: Any) -> date:
        return to_date_only(v)

    @field_validator("effective_to", mode="before")
    @classmethod
    def normalize_to(cls, v: Any) -> Optional[date]:
        return None if v is None else to_date_only(v)

    @model_validator(mode="after")
    def check_ordering(self) -> "AllocationInterval":
        if self.effective_to is not None and self.effective_to < self.effective_from:
            raise ValueError(
                f"Allocation effective_to {self.effective_to.isoformat()} is before "
                f"effective_from {self.effective_from.isoformat()}"
            )
        return self

    @property
    def is_open(self) -> bool:
        return self.effective_to is None

    def end_within(self, period_end: date) -> date:
        """Last day of this interval inside a period ending on ``period_end``."""
        if self.effective_to is None or self.effective_to > period_end:
            return period_end
        return self.effective_to

    def overlaps(self, start: date, end: date) -> bool:
        return self.effective_from <= end and self.end_within(end) >= start

    def contains(self, day: date) -> bool:
        return self.effective_from <= day and (self.effective_to is None or day <= self.effective_to)


class AllocationHistory(Model):
    """
    Ordered, non-overlapping allocation intervals of one tenant.

    The history is immutable: ``transfer`` and ``close`` return a new history,
    mirroring how the store applies both changes in one atomic step.

    Examples:
        >>> history = AllocationHistory.start(date(2025, 3, 1), 6000)
        >>> history = history.transfer(date(2025, 3, 16), 8000)
        >>> [(i.effective_from.day, i.effective_to) for i in history.intervals]
        [(1, datetime.date(2025, 3, 15)), (16, None)]
    """

    intervals: Tuple[AllocationInterval, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def check_intervals(self) -> "AllocationHistory":
        previous: Optional[AllocationInterval] = None
        for interval in self.intervals:
            if previous is not None:
                if previous.is_open:
                    raise ValueError(
                        "Only the latest allocation interval may be open; interval from "
                        f"{previous.effective_from.isoformat()} has no effective_to"
                    )
                if interval.effective_from <= previous.effective_to:
                    raise ValueError(
                        f"Allocation starting {interval.effective_from.isoformat()} overlaps "
                        f"or precedes the interval ending {previous.effective_to.isoformat()}"
                    )
            previous = interval
        return self

    @classmethod
    def start(cls, check_in_date: DateLike, price: MoneyLike) -> "AllocationHistory":
        """Open the initial allocation at check-in."""
        return cls(intervals=(AllocationInterval(effective_from=check_in_date, price=price),))

    @property
    def current(self) -> Optional[AllocationInterval]:
        """The open interval, if the tenant still occupies a bed."""
        if self.intervals and self.intervals[-1].is_open:
            return self.intervals[-1]
        return None

    @property
    def is_empty(self) -> bool:
        return not self.intervals

    def transfer(self, effective_from: DateLike, price: MoneyLike) -> "AllocationHistory":
        """
        Move the tenant to a new bed price from ``effective_from``.

        The open (or still overlapping) latest interval is closed on the day
        before ``effective_from`` and a new open interval is appended.

        Raises:
            ValueError: If ``effective_from`` is not after the latest
                interval's start
        """
        start = to_date_only(effective_from)
        if not self.intervals:
            return type(self).start(start, price)

        last = self.intervals[-1]
        if start <= last.effective_from:
            raise ValueError(
                f"Invalid effective_from date {start.isoformat()}. It must be after the "
                f"previous allocation start date ({last.effective_from.isoformat()})."
            )

        kept: List[AllocationInterval] = list(self.intervals[:-1])
        if last.effective_to is None or last.effective_to >= start:
            last = last.copy(updates={"effective_to": start - ONE_DAY})
        kept.append(last)
        kept.append(AllocationInterval(effective_from=start, price=price))

        logger.debug(f"Allocation transferred from {start.isoformat()} at price {price}")
        return type(self)(intervals=tuple(kept))

    def close(self, last_day: DateLike) -> "AllocationHistory":
        """
        Close the open interval with ``last_day`` as its final billable day.

        A history with no open interval is returned unchanged.

        Raises:
            ValueError: If ``last_day`` precedes the open interval's start
        """
        end = to_date_only(last_day)
        current = self.current
        if current is None:
            return self
        if end < current.effective_from:
            raise ValueError(
                f"Cannot close allocation on {end.isoformat()}; it starts on "
                f"{current.effective_from.isoformat()}"
            )
        closed = current.copy(updates={"effective_to": end})
        return type(self)(intervals=self.intervals[:-1] + (closed,))

    def price_on(self, day: DateLike) -> Optional[Decimal]:
        """Monthly price in force on ``day``, or None outside every interval."""
        target = to_date_only(day)
        for interval in self.intervals:
            if interval.contains(target):
                return interval.price
        return None

    def overlapping(self, start: date, end: date) -> List[AllocationInterval]:
        return [i for i in self.intervals if i.overlaps(start, end)]


AllocationsLike = Union[AllocationHistory, Iterable[AllocationInterval], None]


def as_intervals(allocations: AllocationsLike) -> Tuple[AllocationInterval, ...]:
    """Accept a history, any iterable of intervals, or None."""
    if allocations is None:
        return ()
    if isinstance(allocations, AllocationHistory):
        return allocations.intervals
    return tuple(allocations)
