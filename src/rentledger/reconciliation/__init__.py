# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
rentledger Reconciliation

Payment rows, per-cycle classification and gaps, the tenant rent summary,
the checkout gate and next-payment suggestions.
"""

from .checkout import (
    SettlementRequiredError,
    advance_pending,
    assert_can_checkout,
    checkout_blockers,
    settle_checkout,
)
from .gaps import (
    DEFAULT_PRIORITY,
    FIRST_CYCLE_PRIORITY,
    CycleLedgerEntry,
    Gap,
    cycle_status,
    detect_gaps,
    evaluate_ledger,
    evaluate_window,
    gaps_from_entries,
    is_covered,
)
from .payments import (
    PaymentRecord,
    classify_payment,
    group_payments_by_window,
    join_month_due,
    paid_total,
    record_payment,
    validate_payment_amount,
)
from .suggestions import PaymentSuggestion, suggest_next_payment
from .summary import RentSummary, build_summary, summarize_tenant

__all__ = [
    "CycleLedgerEntry",
    "DEFAULT_PRIORITY",
    "FIRST_CYCLE_PRIORITY",
    "Gap",
    "PaymentRecord",
    "PaymentSuggestion",
    "RentSummary",
    "SettlementRequiredError",
    "advance_pending",
    "assert_can_checkout",
    "build_summary",
    "checkout_blockers",
    "classify_payment",
    "cycle_status",
    "detect_gaps",
    "evaluate_ledger",
    "evaluate_window",
    "gaps_from_entries",
    "group_payments_by_window",
    "is_covered",
    "join_month_due",
    "paid_total",
    "record_payment",
    "settle_checkout",
    "suggest_next_payment",
    "summarize_tenant",
    "validate_payment_amount",
]
