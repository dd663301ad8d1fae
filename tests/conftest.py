"""
Pytest fixtures for the Fuel Accounts SDK tests.
"""
import time

import pytest

from fuel_accounts_sdk import WalletUnlocked
from fuel_accounts_sdk._rate_limited_log import reset as reset_rate_limited_log
from test_helpers import FakeProvider, make_coin

# Test constants used throughout tests
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_RECIPIENT = "0x1234567890123456789012345678901234567890"
TEST_CONTRACT = "0x" + "ab" * 32
TEST_ASSET = "0x" + "cd" * 32
TEST_RPC_URL = "https://node.example.com/v1/jsonrpc"


@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    """Make time.sleep instantaneous so commit polling doesn't slow the suite down"""
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _fresh_rate_limits():
    reset_rate_limited_log()
    yield
    reset_rate_limited_log()


@pytest.fixture
def fake_provider():
    """Empty in-memory node with a zero fee"""
    return FakeProvider()


@pytest.fixture
def wallet(fake_provider):
    """Deterministic wallet bound to the in-memory node"""
    return WalletUnlocked.from_private_key(TEST_PRIV_KEY, fake_provider)


@pytest.fixture
def funded_wallet(wallet, fake_provider):
    """Wallet owning a single 10,000,000 base asset coin, paying a fee of 500"""
    fake_provider.add(make_coin(wallet.address, 10_000_000, 1))
    fake_provider.fee = 500
    return wallet
