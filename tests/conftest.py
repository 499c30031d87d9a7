"""
Shared test fixtures.

No test talks to a real provider: ScriptedClient replays canned replies
(or raises canned exceptions) and records every request it receives.
"""

import pytest

from moneybook.config import ProviderKind
from moneybook.models.account import Account
from moneybook.models.parsing import (
    AccountSubType,
    AccountType,
    LLMCategory,
    TransactionType,
)
from moneybook.services.llm import LLMGateway, ProviderConfig
from tests.fakes import ScriptedClient


@pytest.fixture
def provider_config():
    return ProviderConfig(
        kind=ProviderKind.KIMI,
        api_key="test-key",
        base_url="https://api.moonshot.ai/v1",
        model="kimi-k2.5",
        temperature=1.0,
    )


@pytest.fixture
def scripted_gateway(provider_config):
    """Factory: scripted_gateway(*replies) -> (client, gateway)."""

    def _make(*replies):
        client = ScriptedClient(*replies)
        return client, LLMGateway(provider_config, client=client)

    return _make


@pytest.fixture
def categories():
    return [
        LLMCategory(name="식비", type=TransactionType.EXPENSE),
        LLMCategory(name="카페/간식", type=TransactionType.EXPENSE),
        LLMCategory(name="기타 지출", type=TransactionType.EXPENSE),
        LLMCategory(name="급여", type=TransactionType.INCOME),
        LLMCategory(name="기타 수입", type=TransactionType.INCOME),
    ]


@pytest.fixture
def existing_accounts():
    return [
        Account(
            id="acc-kakao",
            user_id="user-1",
            name="카카오뱅크",
            type=AccountType.ASSET,
            sub_type=AccountSubType.BANK,
            balance=1_000_000,
        ),
        Account(
            id="acc-shinhan",
            user_id="user-1",
            name="신한카드",
            type=AccountType.DEBT,
            sub_type=AccountSubType.CREDIT_CARD,
            icon="💳",
            balance=200_000,
        ),
    ]
