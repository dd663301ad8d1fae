"""
Transaction inputs and outputs.

Inputs and outputs are plain dataclasses; `to_dict()` gives the wire form the
node expects inside a transaction.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from .constants import ZERO_BYTES32, ZERO_UTXO_ID
from .models import Coin, Message


Resource = Union[Coin, Message]


def _resource_dict(resource: Resource) -> Dict[str, Any]:
    return resource.model_dump(by_alias=True)


@dataclass
class ResourceSigned:
    """Coin or message input unlocked by a signature of its owner."""
    resource: Resource
    witness_index: int = -1

    @property
    def owner(self) -> str:
        return self.resource.owner

    @property
    def asset_id(self) -> str:
        return self.resource.asset_id

    @property
    def amount(self) -> int:
        return self.resource.amount

    @property
    def resource_id(self) -> str:
        return self.resource.resource_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "ResourceSigned",
            "resource": _resource_dict(self.resource),
            "witnessIndex": self.witness_index,
        }


@dataclass
class ResourcePredicate:
    """Coin or message input unlocked by running a predicate."""
    resource: Resource
    code: bytes = b""
    data: bytes = b""

    @property
    def owner(self) -> str:
        return self.resource.owner

    @property
    def asset_id(self) -> str:
        return self.resource.asset_id

    @property
    def amount(self) -> int:
        return self.resource.amount

    @property
    def resource_id(self) -> str:
        return self.resource.resource_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "ResourcePredicate",
            "resource": _resource_dict(self.resource),
            "code": "0x" + self.code.hex(),
            "data": "0x" + self.data.hex(),
        }


@dataclass
class ContractInput:
    """
    Input referencing a contract's state.

    Outputs refer to contract inputs by index, so contract inputs are kept at
    the front of the input list.
    """
    contract_id: str
    utxo_id: str = ZERO_UTXO_ID
    balance_root: str = ZERO_BYTES32
    state_root: str = ZERO_BYTES32
    tx_pointer: str = "0x" + "00" * 6

    @classmethod
    def placeholder(cls, contract_id: str) -> "ContractInput":
        """Contract input with zeroed references; the node fills them in."""
        return cls(contract_id=contract_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "Contract",
            "contractId": self.contract_id,
            "utxoId": self.utxo_id,
            "balanceRoot": self.balance_root,
            "stateRoot": self.state_root,
            "txPointer": self.tx_pointer,
        }


Input = Union[ResourceSigned, ResourcePredicate, ContractInput]


def is_resource_input(item: Input) -> bool:
    return isinstance(item, (ResourceSigned, ResourcePredicate))


@dataclass
class CoinOutput:
    to: str
    amount: int
    asset_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "Coin", "to": self.to, "amount": self.amount, "assetId": self.asset_id}


@dataclass
class ChangeOutput:
    """Returns what is left of `asset_id` to `to`; the node computes the amount."""
    to: str
    asset_id: str
    amount: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "Change", "to": self.to, "amount": self.amount, "assetId": self.asset_id}


@dataclass
class ContractOutput:
    input_index: int
    balance_root: str = ZERO_BYTES32
    state_root: str = ZERO_BYTES32

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "Contract",
            "inputIndex": self.input_index,
            "balanceRoot": self.balance_root,
            "stateRoot": self.state_root,
        }


@dataclass
class MessageOutput:
    """Message sent to `recipient` on the base layer."""
    recipient: str
    amount: int
    data: bytes = field(default=b"")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "Message",
            "recipient": self.recipient,
            "amount": self.amount,
            "data": "0x" + self.data.hex(),
        }


Output = Union[CoinOutput, ChangeOutput, ContractOutput, MessageOutput]
