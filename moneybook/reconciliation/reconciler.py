"""
Account Reconciliation

Pairs each parsed account with an existing one so that "카카오뱅크 잔액
150만원" updates the user's 카카오뱅크 account instead of creating a twin.

Matching rules (first hit wins, case-sensitive, no trimming):
1. Same name AND same type
2. Same name, any type
3. No match -> create

DESIGN DECISION: Reconciliation only proposes. The UI shows each decision
and the user may flip update <-> create before commit, so a wrong guess
here costs one tap, not data.
"""

from typing import Optional, Sequence

import structlog

from moneybook.models.account import (
    Account,
    AccountBatchItem,
    MatchAction,
    MatchDecision,
)
from moneybook.models.parsing import ParsedAccount

logger = structlog.get_logger(__name__)


def find_match(parsed: ParsedAccount, existing: Sequence[Account]) -> Optional[Account]:
    """
    Find the existing account a parsed account refers to.

    Returns:
        The first exact (name, type) match, else the first name match,
        else None
    """
    for account in existing:
        if account.name == parsed.name and account.type == parsed.type:
            return account

    for account in existing:
        if account.name == parsed.name:
            return account

    return None


def reconcile_accounts(
    parsed_items: Sequence[ParsedAccount],
    existing: Sequence[Account],
) -> list[MatchDecision]:
    """
    Propose a default action for every parsed account.

    Matched -> update, unmatched -> create. Order is preserved and two
    parsed items may resolve to the same existing account.
    """
    decisions = []
    for parsed in parsed_items:
        match = find_match(parsed, existing)
        decisions.append(MatchDecision(
            parsed=parsed,
            matched_account=match,
            action=MatchAction.UPDATE if match else MatchAction.CREATE,
        ))

    logger.debug(
        "accounts_reconciled",
        parsed_count=len(parsed_items),
        existing_count=len(existing),
        matched_count=sum(1 for d in decisions if d.matched_account),
    )
    return decisions


def summarize_decisions(decisions: Sequence[MatchDecision]) -> dict[str, int]:
    """Count decisions per action, e.g. {"create": 1, "update": 2}."""
    summary = {action.value: 0 for action in MatchAction}
    for decision in decisions:
        summary[decision.action.value] += 1
    return summary


def build_batch_items(decisions: Sequence[MatchDecision]) -> list[AccountBatchItem]:
    """
    Turn user-confirmed decisions into store upsert items.

    Updates carry the matched account's id; the parsed record supplies
    every other field.
    """
    items = []
    for decision in decisions:
        parsed = decision.parsed
        account_id = None
        if decision.action == MatchAction.UPDATE and decision.matched_account:
            account_id = decision.matched_account.id

        items.append(AccountBatchItem(
            action=decision.action,
            account_id=account_id,
            name=parsed.name,
            type=parsed.type,
            sub_type=parsed.sub_type,
            icon=parsed.icon,
            balance=parsed.balance,
        ))
    return items
