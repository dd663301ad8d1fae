"""
Shared helpers for the Fuel Accounts SDK tests.
"""
from .fake_provider import (
    FakeProvider,
    TEST_CHAIN_ID,
    make_coin,
    make_message,
    total_input_value,
)
