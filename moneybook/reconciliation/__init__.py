"""Account reconciliation package."""

from moneybook.reconciliation.reconciler import (
    build_batch_items,
    find_match,
    reconcile_accounts,
    summarize_decisions,
)

__all__ = [
    "build_batch_items",
    "find_match",
    "reconcile_accounts",
    "summarize_decisions",
]
