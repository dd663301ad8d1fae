"""
In-memory stand-in for a node, used by the account and fee tests.
"""
from typing import Callable, Dict, List, Optional, Union

from fuel_accounts_sdk.constants import BASE_ASSET_ID
from fuel_accounts_sdk.exceptions import SubmissionRejectedError
from fuel_accounts_sdk.models import (
    Coin,
    Message,
    MessageOutReceipt,
    PaginatedResult,
    PaginationRequest,
    ResourceFilter,
    ScriptResultReceipt,
    TransactionResponse,
    TxStatus,
)
from fuel_accounts_sdk.transaction import Transaction
from fuel_accounts_sdk.types import MessageOutput, ResourcePredicate, ResourceSigned

Resource = Union[Coin, Message]

TEST_CHAIN_ID = 9889


def make_coin(owner: str, amount: int, index: int, asset_id: str = BASE_ASSET_ID) -> Coin:
    return Coin(
        utxo_id="0x" + f"{index:064x}" + "0000",
        owner=owner,
        asset_id=asset_id,
        amount=amount,
    )


def make_message(recipient: str, amount: int, index: int, data: str = "0x") -> Message:
    return Message(
        nonce="0x" + f"{index:064x}",
        sender="0x" + "ee" * 32,
        recipient=recipient,
        amount=amount,
        data=data,
    )


class FakeProvider:
    """
    Models a node closely enough for the account layer:
    resource pages with cursors, a pluggable fee function, and submission that
    spends the consumed resources.
    """

    def __init__(
        self,
        resources: Optional[List[Resource]] = None,
        fee: Union[int, Callable[[Transaction], int]] = 0,
        gas_price: int = 1,
        chain_id: int = TEST_CHAIN_ID,
    ):
        self.resources: List[Resource] = list(resources or [])
        self.fee = fee
        self.gas_price = gas_price
        self._chain_id = chain_id
        self.queries: List[ResourceFilter] = []
        self.estimates: List[Transaction] = []
        self.submitted: List[Transaction] = []
        self.emit_message_receipts = True
        self.status_override: Optional[TxStatus] = None
        self.reject_with: Optional[str] = None

    def add(self, *resources: Resource) -> None:
        self.resources.extend(resources)

    def chain_id(self) -> int:
        return self._chain_id

    def min_gas_price(self) -> int:
        return self.gas_price

    def estimate_fee(self, tx: Transaction, gas_price: int) -> int:
        self.estimates.append(tx)
        return self.fee(tx) if callable(self.fee) else self.fee

    def get_spendable_resources(self, filter: ResourceFilter) -> List[Resource]:
        self.queries.append(filter)
        excluded = set(filter.excluded_utxos) | set(filter.excluded_messages)
        matching = [
            r for r in self.resources
            if r.owner == filter.from_address
            and r.asset_id == filter.asset_id
            and r.resource_id not in excluded
        ]
        if filter.cursor is not None:
            ids = [r.resource_id for r in matching]
            start = ids.index(filter.cursor) + 1 if filter.cursor in ids else len(ids)
            matching = matching[start:]
        return matching[:filter.page_size]

    def get_coins(self, address: str, asset_id: str) -> List[Coin]:
        return [
            r for r in self.resources
            if isinstance(r, Coin) and r.owner == address and r.asset_id == asset_id
        ]

    def get_messages(self, address: str) -> List[Message]:
        return [r for r in self.resources if isinstance(r, Message) and r.recipient == address]

    def get_balances(self, address: str) -> Dict[str, int]:
        balances: Dict[str, int] = {}
        for r in self.resources:
            if r.owner == address:
                balances[r.asset_id] = balances.get(r.asset_id, 0) + r.amount
        return balances

    def get_asset_balance(self, address: str, asset_id: str) -> int:
        return self.get_balances(address).get(asset_id, 0)

    def get_transactions_by_owner(self, address: str, request: PaginationRequest) -> PaginatedResult:
        results = [
            TransactionResponse(tx_id=tx.id(self._chain_id), status="success")
            for tx in self.submitted
        ]
        return PaginatedResult(results=results[:request.results])

    def _receipts(self, tx: Transaction) -> list:
        receipts = []
        if self.emit_message_receipts:
            for index, output in enumerate(tx.outputs):
                if isinstance(output, MessageOutput):
                    receipts.append(MessageOutReceipt(
                        sender="0x" + "00" * 32,
                        recipient=output.recipient,
                        amount=output.amount,
                        nonce="0x" + f"{len(self.submitted):062x}{index:02x}",
                    ))
        receipts.append(ScriptResultReceipt(result="Success", gas_used=100))
        return receipts

    def send_transaction_and_await_commit(self, tx: Transaction) -> TxStatus:
        tx_id = tx.id(self._chain_id)
        if self.reject_with is not None:
            raise SubmissionRejectedError(self.reject_with, code=-32011, tx_id=tx_id)

        self.submitted.append(tx)
        spent = {
            i.resource_id for i in tx.inputs
            if isinstance(i, (ResourceSigned, ResourcePredicate))
        }
        self.resources = [r for r in self.resources if r.resource_id not in spent]

        if self.status_override is not None:
            return self.status_override
        return TxStatus(status="success", tx_id=tx_id, receipts=self._receipts(tx))


def total_input_value(tx: Transaction, asset_id: str = BASE_ASSET_ID) -> int:
    return sum(
        i.amount for i in tx.inputs
        if isinstance(i, (ResourceSigned, ResourcePredicate)) and i.asset_id == asset_id
    )


