"""
Tests for spendable resource selection.
"""
import pytest
from unittest.mock import MagicMock

from fuel_accounts_sdk.constants import BASE_ASSET_ID
from fuel_accounts_sdk.exceptions import InsufficientFundsError
from fuel_accounts_sdk.selection import ResourceSelector, SelectionStrategy
from conftest import TEST_ASSET
from test_helpers import FakeProvider, make_coin, make_message

OWNER = "0x" + "11" * 20


@pytest.fixture
def provider():
    return FakeProvider([
        make_coin(OWNER, 100, 1),
        make_coin(OWNER, 200, 2),
        make_coin(OWNER, 300, 3),
        make_coin(OWNER, 50, 4, asset_id=TEST_ASSET),
    ])


def test_select_covers_amount(provider):
    selected = ResourceSelector(provider).select(OWNER, BASE_ASSET_ID, 250)
    assert [r.amount for r in selected] == [100, 200]
    assert sum(r.amount for r in selected) >= 250


def test_select_stops_at_first_sufficient_resource(provider):
    selected = ResourceSelector(provider).select(OWNER, BASE_ASSET_ID, 100)
    assert len(selected) == 1


def test_zero_amount_makes_no_query():
    provider = MagicMock()
    assert ResourceSelector(provider).select(OWNER, BASE_ASSET_ID, 0) == []
    provider.get_spendable_resources.assert_not_called()


def test_negative_amount_rejected(provider):
    with pytest.raises(ValueError, match="must not be negative"):
        ResourceSelector(provider).select(OWNER, BASE_ASSET_ID, -1)


def test_insufficient_funds_reports_totals(provider):
    with pytest.raises(InsufficientFundsError) as exc_info:
        ResourceSelector(provider).select(OWNER, BASE_ASSET_ID, 1000)

    assert exc_info.value.asset_id == BASE_ASSET_ID
    assert exc_info.value.requested == 1000
    assert exc_info.value.available == 600


def test_other_assets_are_separate(provider):
    selected = ResourceSelector(provider).select(OWNER, TEST_ASSET, 50)
    assert [r.asset_id for r in selected] == [TEST_ASSET]

    with pytest.raises(InsufficientFundsError):
        ResourceSelector(provider).select(OWNER, TEST_ASSET, 51)


def test_excluded_resources_are_not_selected(provider):
    excluded = make_coin(OWNER, 100, 1).utxo_id
    selected = ResourceSelector(provider).select(
        OWNER, BASE_ASSET_ID, 150, excluded_utxos=[excluded]
    )
    assert excluded not in {r.resource_id for r in selected}
    assert provider.queries[0].excluded_utxos == [excluded]


def test_pages_are_fetched_lazily():
    provider = FakeProvider([make_coin(OWNER, 10, i) for i in range(1, 11)])
    selector = ResourceSelector(provider, page_size=3)

    selected = selector.select(OWNER, BASE_ASSET_ID, 40)

    assert len(selected) == 4
    # The fourth coin is on the second page; the rest are never requested
    assert len(provider.queries) == 2
    assert provider.queries[1].cursor == selected[2].resource_id


def test_paging_walks_every_page_before_failing():
    provider = FakeProvider([make_coin(OWNER, 10, i) for i in range(1, 7)])
    with pytest.raises(InsufficientFundsError) as exc_info:
        ResourceSelector(provider, page_size=3).select(OWNER, BASE_ASSET_ID, 100)

    assert exc_info.value.available == 60
    assert len(provider.queries) == 3


def test_largest_first_uses_fewer_resources(provider):
    selector = ResourceSelector(provider, strategy=SelectionStrategy.LARGEST_FIRST)
    selected = selector.select(OWNER, BASE_ASSET_ID, 250)
    assert [r.amount for r in selected] == [300]


def test_strategy_accepts_string_value(provider):
    selector = ResourceSelector(provider, strategy="largest_first")
    assert selector.strategy is SelectionStrategy.LARGEST_FIRST


def test_invalid_page_size(provider):
    with pytest.raises(ValueError):
        ResourceSelector(provider, page_size=0)


def test_messages_are_selected_with_coins():
    provider = FakeProvider([make_message(OWNER, 70, 1), make_coin(OWNER, 40, 2)])
    selected = ResourceSelector(provider).select(OWNER, BASE_ASSET_ID, 100)
    assert {r.kind for r in selected} == {"message", "coin"}


def test_messages_with_data_are_skipped():
    provider = FakeProvider([
        make_message(OWNER, 1000, 1, data="0xdeadbeef"),
        make_coin(OWNER, 40, 2),
    ])
    with pytest.raises(InsufficientFundsError) as exc_info:
        ResourceSelector(provider).select(OWNER, BASE_ASSET_ID, 100)
    assert exc_info.value.available == 40


def test_zero_amount_resources_are_skipped():
    provider = FakeProvider([make_coin(OWNER, 0, 1), make_coin(OWNER, 5, 2)])
    selected = ResourceSelector(provider).select(OWNER, BASE_ASSET_ID, 5)
    assert [r.amount for r in selected] == [5]


class CursorIgnoringProvider(FakeProvider):
    """Node that always serves the first page"""

    def get_spendable_resources(self, filter):
        return super().get_spendable_resources(filter.model_copy(update={"cursor": None}))


def test_selection_stops_when_node_ignores_cursor():
    provider = CursorIgnoringProvider([make_coin(OWNER, 10, i) for i in range(1, 7)])

    with pytest.raises(InsufficientFundsError) as exc_info:
        ResourceSelector(provider, page_size=3).select(OWNER, BASE_ASSET_ID, 100)

    assert exc_info.value.available == 30
    assert len(provider.queries) == 2
