# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date
from typing import Any, Tuple

from pydantic import field_validator, model_validator

from .dates import ONE_DAY, inclusive_days, to_date_only
from .model import Model


class CycleWindow(Model):
    """
    One billing period, inclusive at both ends, with no time-of-day.

    Windows are frozen and hashable so they can key payment lookups. Two
    windows are equal only when both start and end match, which is the
    coverage rule for payments: a payment counts for a cycle only when its
    tagged window is exactly that cycle.

    Attributes:
        start: First billable day of the cycle
        end: Last billable day of the cycle

    Examples:
        >>> window = CycleWindow(start=date(2025, 12, 10), end=date(2026, 1, 9))
        >>> window.days
        31
        >>> window.next_start
        datetime.date(2026, 1, 10)
    """

    start: date
    end: date

    @field_validator("start", "end", mode="before")
    @classmethod
    def normalize_dates(cls, v: Any) -> date:
        return to_date_only(v)

    @model_validator(mode="after")
    def check_ordering(self) -> "CycleWindow":
        if self.start > self.end:
            raise ValueError(
                f"Cycle window start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )
        return self

    @property
    def days(self) -> int:
        return inclusive_days(self.start, self.end)

    @property
    def next_start(self) -> date:
        """The day after this window, where the following cycle begins."""
        return self.end + ONE_DAY

    @property
    def key(self) -> Tuple[date, date]:
        return (self.start, self.end)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def overlaps(self, start: date, end: date) -> bool:
        return start <= self.end and end >= self.start

    def is_past(self, reference_date: date) -> bool:
        """True once the whole window lies before ``reference_date``."""
        return self.end < reference_date

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


def cycle_cache_key(tenant_id: Any, window: CycleWindow) -> Tuple[Any, date]:
    """
    Identity key for a persisted cycle row: ``(tenant, cycle_start)``.

    Stores caching cycles should keep at most one row per key so concurrent
    upserts of the same computed window converge.
    """
    return (tenant_id, window.start)
