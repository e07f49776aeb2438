# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for CycleWindow and engine settings."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from rentledger.core.primitives import (
    BillingConvention,
    CycleWindow,
    ReconciliationSettings,
    cycle_cache_key,
)


class TestCycleWindow:
    """Tests for the inclusive billing window."""

    def test_days_and_next_start(self):
        window = CycleWindow(start=date(2025, 12, 10), end=date(2026, 1, 9))
        assert window.days == 31
        assert window.next_start == date(2026, 1, 10)

    def test_single_day_window(self):
        window = CycleWindow(start=date(2025, 3, 31), end=date(2025, 3, 31))
        assert window.days == 1

    def test_start_after_end_rejected(self):
        with pytest.raises(ValidationError):
            CycleWindow(start=date(2025, 3, 2), end=date(2025, 3, 1))

    def test_normalizes_datetimes_and_strings(self):
        window = CycleWindow(start=datetime(2025, 3, 1, 18, 30), end="2025-03-31")
        assert window.start == date(2025, 3, 1)
        assert window.end == date(2025, 3, 31)

    def test_equality_requires_exact_bounds(self):
        a = CycleWindow(start=date(2025, 3, 1), end=date(2025, 3, 31))
        b = CycleWindow(start="2025-03-01", end="2025-03-31")
        c = CycleWindow(start=date(2025, 3, 1), end=date(2025, 3, 30))
        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert {a: 1}[b] == 1

    def test_frozen(self):
        window = CycleWindow(start=date(2025, 3, 1), end=date(2025, 3, 31))
        with pytest.raises(ValidationError):
            window.start = date(2025, 3, 2)

    def test_contains_overlaps_is_past(self):
        window = CycleWindow(start=date(2025, 3, 1), end=date(2025, 3, 31))
        assert window.contains(date(2025, 3, 31))
        assert not window.contains(date(2025, 4, 1))
        assert window.overlaps(date(2025, 3, 31), date(2025, 4, 30))
        assert not window.overlaps(date(2025, 4, 1), date(2025, 4, 30))
        assert not window.is_past(date(2025, 3, 31))
        assert window.is_past(date(2025, 4, 1))

    def test_str(self):
        window = CycleWindow(start=date(2025, 3, 1), end=date(2025, 3, 31))
        assert str(window) == "2025-03-01..2025-03-31"

    def test_cycle_cache_key(self):
        window = CycleWindow(start=date(2025, 3, 1), end=date(2025, 3, 31))
        assert cycle_cache_key(7, window) == (7, date(2025, 3, 1))
        assert window.key == (date(2025, 3, 1), date(2025, 3, 31))


class TestReconciliationSettings:
    def test_defaults(self):
        settings = ReconciliationSettings()
        assert settings.max_cycle_iterations == 240
        assert settings.coverage_tolerance == Decimal("0.00001")
        assert settings.decimal_precision == 2
        assert settings.bulk_fan_out == 5
        assert settings.default_convention == BillingConvention.CALENDAR

    @pytest.mark.parametrize(
        "overrides",
        [
            {"max_cycle_iterations": 1},
            {"coverage_tolerance": Decimal("-1")},
            {"decimal_precision": 7},
            {"bulk_fan_out": 0},
            {"unknown": 1},
        ],
    )
    def test_invalid_settings_rejected(self, overrides):
        with pytest.raises(ValidationError):
            ReconciliationSettings(**overrides)
