"""
Tests for account reconciliation and decision handling.
"""

import pytest
from pydantic import ValidationError

from moneybook.models.account import MatchAction
from moneybook.models.parsing import AccountSubType, AccountType, ParsedAccount
from moneybook.reconciliation import (
    build_batch_items,
    find_match,
    reconcile_accounts,
    summarize_decisions,
)


def _parsed(name, type_=AccountType.ASSET, sub_type=AccountSubType.BANK, balance=1_500_000):
    return ParsedAccount(name=name, type=type_, sub_type=sub_type, balance=balance)


class TestFindMatch:
    """Tests for matching a parsed account to an existing one."""

    def test_exact_name_and_type(self, existing_accounts):
        assert find_match(_parsed("카카오뱅크"), existing_accounts).id == "acc-kakao"

    def test_name_only_fallback(self, existing_accounts):
        """A debt statement for an asset-typed account still matches by name."""
        parsed = _parsed("카카오뱅크", type_=AccountType.DEBT, sub_type=AccountSubType.LOAN)
        assert find_match(parsed, existing_accounts).id == "acc-kakao"

    def test_exact_match_preferred_over_earlier_name_match(self, existing_accounts):
        twin = existing_accounts[0].model_copy(update={"id": "acc-kakao-loan", "type": AccountType.DEBT})
        accounts = [existing_accounts[0], twin]
        parsed = _parsed("카카오뱅크", type_=AccountType.DEBT)
        assert find_match(parsed, accounts).id == "acc-kakao-loan"

    def test_no_match(self, existing_accounts):
        assert find_match(_parsed("새통장"), existing_accounts) is None

    def test_match_is_case_sensitive(self, existing_accounts):
        accounts = [existing_accounts[0].model_copy(update={"name": "Toss"})]
        assert find_match(_parsed("toss"), accounts) is None


class TestReconcileAccounts:
    """Tests for the default update/create policy."""

    def test_default_policy(self, existing_accounts):
        decisions = reconcile_accounts(
            [_parsed("카카오뱅크"), _parsed("새통장", balance=100_000)],
            existing_accounts,
        )

        assert decisions[0].action == MatchAction.UPDATE
        assert decisions[0].matched_account.id == "acc-kakao"
        assert decisions[1].action == MatchAction.CREATE
        assert decisions[1].matched_account is None

    def test_no_dedup_across_parsed_items(self, existing_accounts):
        decisions = reconcile_accounts(
            [_parsed("카카오뱅크"), _parsed("카카오뱅크", balance=10)],
            existing_accounts,
        )
        assert [d.matched_account.id for d in decisions] == ["acc-kakao", "acc-kakao"]

    def test_empty(self, existing_accounts):
        assert reconcile_accounts([], existing_accounts) == []

    def test_summary(self, existing_accounts):
        decisions = reconcile_accounts(
            [_parsed("카카오뱅크"), _parsed("새통장"), _parsed("현금", sub_type=AccountSubType.CASH)],
            existing_accounts,
        )
        assert summarize_decisions(decisions) == {"create": 2, "update": 1}


class TestMatchDecision:
    """Tests for user edits to decisions."""

    def test_flip_update_to_create(self, existing_accounts):
        decision = reconcile_accounts([_parsed("카카오뱅크")], existing_accounts)[0]
        flipped = decision.with_action(MatchAction.CREATE)

        assert flipped.action == MatchAction.CREATE
        assert decision.action == MatchAction.UPDATE

    def test_update_without_match_refused(self, existing_accounts):
        decision = reconcile_accounts([_parsed("새통장")], existing_accounts)[0]
        with pytest.raises(ValidationError):
            decision.with_action(MatchAction.UPDATE)

    def test_edit_parsed_record(self, existing_accounts):
        decision = reconcile_accounts([_parsed("카카오뱅크")], existing_accounts)[0]
        edited = decision.with_parsed(_parsed("카카오뱅크", balance=2_000_000))
        assert edited.parsed.balance == 2_000_000
        assert edited.matched_account.id == "acc-kakao"


class TestBuildBatchItems:
    """Tests for converting decisions into store items."""

    def test_update_carries_matched_id(self, existing_accounts):
        decisions = reconcile_accounts([_parsed("카카오뱅크")], existing_accounts)
        item = build_batch_items(decisions)[0]

        assert item.action == MatchAction.UPDATE
        assert item.account_id == "acc-kakao"
        assert item.balance == 1_500_000

    def test_create_has_no_id(self, existing_accounts):
        decisions = reconcile_accounts([_parsed("새통장")], existing_accounts)
        assert build_batch_items(decisions)[0].account_id is None

    def test_flipped_to_create_drops_id(self, existing_accounts):
        decision = reconcile_accounts([_parsed("카카오뱅크")], existing_accounts)[0]
        item = build_batch_items([decision.with_action(MatchAction.CREATE)])[0]
        assert item.action == MatchAction.CREATE
        assert item.account_id is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
