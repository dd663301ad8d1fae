"""
Tests for the script transaction builder and signing.
"""
import pytest
from unittest.mock import MagicMock

from fuel_accounts_sdk.constants import BASE_ASSET_ID, SIGNATURE_LENGTH
from fuel_accounts_sdk.exceptions import AccountError
from fuel_accounts_sdk.models import TxPolicies
from fuel_accounts_sdk.signer import LocalSigner, recover_address
from fuel_accounts_sdk.transaction import ScriptTransactionBuilder
from fuel_accounts_sdk.types import (
    ChangeOutput,
    CoinOutput,
    ContractInput,
    MessageOutput,
    ResourcePredicate,
    ResourceSigned,
)
from conftest import TEST_ASSET, TEST_CONTRACT, TEST_PRIV_KEY, TEST_RECIPIENT
from test_helpers import TEST_CHAIN_ID, make_coin


@pytest.fixture
def signer():
    return LocalSigner.from_key(TEST_PRIV_KEY)


@pytest.fixture
def provider():
    provider = MagicMock()
    provider.chain_id.return_value = TEST_CHAIN_ID
    provider.min_gas_price.return_value = 3
    return provider


def builder_for(owner, *amounts):
    inputs = [ResourceSigned(resource=make_coin(owner, a, i)) for i, a in enumerate(amounts, 1)]
    outputs = [
        CoinOutput(to=TEST_RECIPIENT, amount=1, asset_id=BASE_ASSET_ID),
        ChangeOutput(to=owner, asset_id=BASE_ASSET_ID),
    ]
    return ScriptTransactionBuilder.prepare_transfer(inputs, outputs)


def test_build_signs_transaction_id(signer, provider):
    tb = builder_for(signer.address, 100, 200).add_signer(signer)

    tx = tb.build(provider)

    assert len(tx.witnesses) == 1
    assert len(tx.witnesses[0]) == SIGNATURE_LENGTH
    tx_id = tx.id(TEST_CHAIN_ID)
    assert recover_address(bytes.fromhex(tx_id[2:]), tx.witnesses[0]) == signer.address
    assert all(i.witness_index == 0 for i in tx.inputs)
    assert tx.gas_price == 3


def test_id_ignores_witnesses(signer, provider):
    tb = builder_for(signer.address, 100).add_signer(signer)
    tb.gas_price = 3
    assert tb.build(provider).id(TEST_CHAIN_ID) == tb.draft().id(TEST_CHAIN_ID)


def test_id_depends_on_chain(signer):
    tx = builder_for(signer.address, 100).draft()
    assert tx.id(0) != tx.id(TEST_CHAIN_ID)
    assert tx.id(0).startswith("0x") and len(tx.id(0)) == 66


def test_draft_has_placeholder_witness_per_signer(signer):
    other = LocalSigner.generate()
    tb = builder_for(signer.address, 100).add_signer(signer).add_signer(other)

    draft = tb.draft()

    assert draft.witnesses == (bytes(SIGNATURE_LENGTH), bytes(SIGNATURE_LENGTH))
    assert draft.witness_size == 2 * SIGNATURE_LENGTH


def test_draft_does_not_mutate_builder(signer):
    tb = builder_for(signer.address, 100).add_signer(signer)
    tb.draft()
    assert tb.inputs[0].witness_index == -1


def test_adding_signer_twice_is_idempotent(signer):
    tb = ScriptTransactionBuilder().add_signer(signer).add_signer(signer)
    assert len(tb.signers) == 1


def test_missing_witness_owners(signer):
    tb = builder_for(signer.address, 100)
    assert tb.missing_witness_owners() == {signer.address}
    tb.add_signer(signer)
    assert tb.missing_witness_owners() == set()


def test_predicate_inputs_need_no_signer():
    coin = make_coin("0x" + "33" * 32, 100, 1)
    tb = ScriptTransactionBuilder(inputs=[ResourcePredicate(resource=coin, code=b"\x01")])
    assert tb.missing_witness_owners() == set()


def test_witness_limit_enforced(signer, provider):
    tb = builder_for(signer.address, 100)
    tb.policies = TxPolicies(witness_limit=10)
    tb.add_signer(signer)

    with pytest.raises(AccountError, match="witness limit"):
        tb.build(provider)


def test_inspection_helpers(signer):
    tb = ScriptTransactionBuilder(inputs=[
        ContractInput.placeholder(TEST_CONTRACT),
        ResourceSigned(resource=make_coin(signer.address, 100, 1)),
        ResourceSigned(resource=make_coin(signer.address, 7, 2, asset_id=TEST_ASSET)),
    ])
    assert tb.contract_input_count() == 1
    assert len(tb.resource_inputs()) == 2
    assert tb.base_input_value() == 100
    assert tb.used_utxo_ids() == {i.resource_id for i in tb.inputs[1:]}
    assert tb.used_message_nonces() == set()


def test_contract_transfer_script_data():
    tb = ScriptTransactionBuilder.prepare_contract_transfer(
        TEST_CONTRACT, 5, BASE_ASSET_ID, [ContractInput.placeholder(TEST_CONTRACT)], []
    )
    assert tb.script_data[:32] == bytes.fromhex(TEST_CONTRACT[2:])
    assert int.from_bytes(tb.script_data[32:40], "big") == 5
    assert tb.script_data[40:] == bytes(32)


def test_message_to_output_layout():
    owner = "0x" + "44" * 20
    tb = ScriptTransactionBuilder.prepare_message_to_output(TEST_RECIPIENT, 9, [], owner)
    assert isinstance(tb.outputs[0], MessageOutput)
    assert tb.outputs[0].amount == 9
    assert tb.outputs[1] == ChangeOutput(to=owner, asset_id=BASE_ASSET_ID)


def test_serialized_transaction(signer, provider):
    tx = builder_for(signer.address, 100).add_signer(signer).build(provider)
    body = tx.to_dict()
    assert body["type"] == "Script"
    assert len(body["inputs"]) == 1
    assert body["witnesses"][0].startswith("0x")
    assert "witnesses" not in tx.to_dict(include_witnesses=False)
