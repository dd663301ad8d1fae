"""
Script transaction builder.

A `ScriptTransactionBuilder` is created per workflow, mutated while inputs are
selected and fees are covered, then consumed by `build()` into an immutable,
witnessed `Transaction`.
"""
import hashlib
import json
import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Set, Tuple

from .constants import BASE_ASSET_ID, SIGNATURE_LENGTH
from .exceptions import AccountError
from .models import Coin, Message, TxPolicies
from .signer import Signer
from .types import (
    ChangeOutput,
    ContractInput,
    Input,
    MessageOutput,
    Output,
    ResourceSigned,
    is_resource_input,
)

if TYPE_CHECKING:
    from .provider import Provider

logger = logging.getLogger(__name__)


def _hex_to_bytes(value: str) -> bytes:
    return bytes.fromhex(value[2:] if value.startswith("0x") else value)


@dataclass(frozen=True)
class Transaction:
    """A finished script transaction, ready for submission"""
    inputs: Tuple[Input, ...]
    outputs: Tuple[Output, ...]
    witnesses: Tuple[bytes, ...]
    policies: TxPolicies
    gas_price: int
    script: bytes = b""
    script_data: bytes = b""

    def to_dict(self, include_witnesses: bool = True) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "type": "Script",
            "inputs": [i.to_dict() for i in self.inputs],
            "outputs": [o.to_dict() for o in self.outputs],
            "policies": self.policies.to_dict(),
            "gasPrice": self.gas_price,
            "script": "0x" + self.script.hex(),
            "scriptData": "0x" + self.script_data.hex(),
        }
        if include_witnesses:
            body["witnesses"] = ["0x" + w.hex() for w in self.witnesses]
        return body

    def id(self, chain_id: int) -> str:
        """
        Transaction id on the chain `chain_id`.

        Witnesses are not part of the id, so the id can be signed.
        """
        encoded = json.dumps(
            self.to_dict(include_witnesses=False), sort_keys=True, separators=(",", ":")
        ).encode()
        digest = hashlib.sha256(chain_id.to_bytes(8, "big") + encoded).hexdigest()
        return "0x" + digest

    @property
    def witness_size(self) -> int:
        return sum(len(w) for w in self.witnesses)


class ScriptTransactionBuilder:
    """Accumulates inputs, outputs, policies and signers of a script transaction"""

    def __init__(
        self,
        inputs: Optional[Sequence[Input]] = None,
        outputs: Optional[Sequence[Output]] = None,
        tx_policies: Optional[TxPolicies] = None,
        script: bytes = b"",
        script_data: bytes = b"",
    ):
        self.inputs: List[Input] = list(inputs or [])
        self.outputs: List[Output] = list(outputs or [])
        self.policies = tx_policies or TxPolicies()
        self.script = script
        self.script_data = script_data
        self.gas_price: Optional[int] = None
        self._signers: Dict[str, Signer] = {}

    @classmethod
    def prepare_transfer(
        cls,
        inputs: Sequence[Input],
        outputs: Sequence[Output],
        tx_policies: Optional[TxPolicies] = None,
    ) -> "ScriptTransactionBuilder":
        return cls(inputs, outputs, tx_policies)

    @classmethod
    def prepare_contract_transfer(
        cls,
        contract_id: str,
        amount: int,
        asset_id: str,
        inputs: Sequence[Input],
        outputs: Sequence[Output],
        tx_policies: Optional[TxPolicies] = None,
    ) -> "ScriptTransactionBuilder":
        """
        Builder for a script that moves `amount` of `asset_id` into a contract.

        The script data carries (contract id, amount, asset id).
        """
        script_data = _hex_to_bytes(contract_id) + amount.to_bytes(8, "big") + _hex_to_bytes(asset_id)
        return cls(inputs, outputs, tx_policies, script_data=script_data)

    @classmethod
    def prepare_message_to_output(
        cls,
        to: str,
        amount: int,
        inputs: Sequence[Input],
        change_owner: str,
        tx_policies: Optional[TxPolicies] = None,
    ) -> "ScriptTransactionBuilder":
        """Builder for a script that sends `amount` of the base asset to `to` on the base layer"""
        outputs: List[Output] = [
            MessageOutput(recipient=to, amount=amount),
            ChangeOutput(to=change_owner, asset_id=BASE_ASSET_ID),
        ]
        script_data = _hex_to_bytes(to) + amount.to_bytes(8, "big")
        return cls(inputs, outputs, tx_policies, script_data=script_data)

    # ── signers ──────────────────────────────────────────────────────────

    def add_signer(self, signer: Signer) -> "ScriptTransactionBuilder":
        """Register `signer`; it will sign every signed input it owns at build time"""
        if signer.address not in self._signers:
            self._signers[signer.address] = signer
            logger.debug(f"Registered signer {signer.address}")
        return self

    @property
    def signers(self) -> List[Signer]:
        return list(self._signers.values())

    def missing_witness_owners(self) -> Set[str]:
        """Owners of signed inputs for which no signer is registered"""
        return {
            i.owner for i in self.inputs
            if isinstance(i, ResourceSigned) and i.owner not in self._signers
        }

    # ── inspection ───────────────────────────────────────────────────────

    def resource_inputs(self) -> List[Input]:
        return [i for i in self.inputs if is_resource_input(i)]

    def contract_input_count(self) -> int:
        return sum(1 for i in self.inputs if isinstance(i, ContractInput))

    def used_resource_ids(self) -> Set[str]:
        return {i.resource_id for i in self.resource_inputs()}

    def used_utxo_ids(self) -> Set[str]:
        return {i.resource_id for i in self.resource_inputs() if isinstance(i.resource, Coin)}

    def used_message_nonces(self) -> Set[str]:
        return {i.resource_id for i in self.resource_inputs() if isinstance(i.resource, Message)}

    def base_input_value(self) -> int:
        """Total base asset carried by the resource inputs"""
        return sum(i.amount for i in self.resource_inputs() if i.asset_id == BASE_ASSET_ID)

    def is_consuming_utxos(self) -> bool:
        return bool(self.resource_inputs())

    # ── building ─────────────────────────────────────────────────────────

    def _indexed_inputs(self) -> Tuple[Input, ...]:
        order = {address: index for index, address in enumerate(self._signers)}
        indexed = []
        for item in self.inputs:
            if isinstance(item, ResourceSigned):
                item = replace(item, witness_index=order.get(item.owner, -1))
            else:
                item = replace(item)
            indexed.append(item)
        return tuple(indexed)

    def _transaction(self, witnesses: Tuple[bytes, ...], gas_price: int) -> Transaction:
        return Transaction(
            inputs=self._indexed_inputs(),
            outputs=tuple(replace(o) for o in self.outputs),
            witnesses=witnesses,
            policies=self.policies,
            gas_price=gas_price,
            script=self.script,
            script_data=self.script_data,
        )

    def draft(self) -> Transaction:
        """
        Snapshot used for fee estimation.

        Each registered signer gets a zeroed placeholder witness of real
        signature size, so the draft weighs what the final transaction will.
        """
        placeholders = tuple(bytes(SIGNATURE_LENGTH) for _ in self._signers)
        return self._transaction(placeholders, self.gas_price or 0)

    def build(self, provider: "Provider") -> Transaction:
        """
        Finalize the transaction and attach one witness per registered signer.

        Args:
            provider: Supplies the chain id and, if unset, the gas price

        Returns:
            Immutable, witnessed transaction

        Raises:
            AccountError: If the witnesses exceed the witness limit policy
        """
        gas_price = self.gas_price if self.gas_price is not None else provider.min_gas_price()
        unsigned = self._transaction((), gas_price)
        tx_id = unsigned.id(provider.chain_id())
        message = _hex_to_bytes(tx_id)

        witnesses = tuple(signer.sign(message) for signer in self._signers.values())
        tx = replace(unsigned, witnesses=witnesses)

        limit = self.policies.witness_limit
        if limit is not None and tx.witness_size > limit:
            raise AccountError(
                f"Witnesses take {tx.witness_size} bytes, above the witness limit of {limit}"
            )

        missing = self.missing_witness_owners()
        if missing:
            logger.warning(f"Building {tx_id} with unsigned inputs owned by {sorted(missing)}")

        logger.debug(
            f"Built {tx_id}: {len(tx.inputs)} inputs, {len(tx.outputs)} outputs, "
            f"{len(tx.witnesses)} witnesses"
        )
        return tx
