"""
Helpers shared by the spending accounts: input/output assembly, fee
reconciliation and receipt parsing.
"""
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional, Sequence

from .constants import BASE_ASSET_ID
from .exceptions import EstimationError
from .models import MessageOutReceipt
from .transaction import ScriptTransactionBuilder
from .types import ChangeOutput, Input, is_resource_input

if TYPE_CHECKING:
    from .provider import Provider

logger = logging.getLogger(__name__)

# (asset_id, amount, excluded_utxos, excluded_messages) -> inputs
InputSelector = Callable[[str, int, Iterable[str], Iterable[str]], List[Input]]


def adjust_inputs_outputs(
    tb: ScriptTransactionBuilder,
    new_inputs: Sequence[Input],
    change_owner: str,
) -> None:
    """
    Append `new_inputs` to the builder and make sure each of their assets has a
    change output owned by `change_owner`.

    Inputs are only ever appended, so contract inputs at the front keep the
    indices their outputs refer to.

    Raises:
        ValueError: If a contract input is passed
    """
    for item in new_inputs:
        if not is_resource_input(item):
            raise ValueError("Only coin and message inputs can be appended to a transaction")

    tb.inputs.extend(new_inputs)

    existing = {
        (o.to, o.asset_id) for o in tb.outputs if isinstance(o, ChangeOutput)
    }
    for item in new_inputs:
        key = (change_owner, item.asset_id)
        if key not in existing:
            tb.outputs.append(ChangeOutput(to=change_owner, asset_id=item.asset_id))
            existing.add(key)


def calculate_missing_base_amount(
    tb: ScriptTransactionBuilder,
    used_base_amount: int,
    fee: int,
) -> int:
    """
    Base asset still needed for the builder to pay `fee` on top of
    `used_base_amount` already spent by its outputs.

    A transaction must consume at least one resource, so a builder without
    resource inputs is always missing at least 1.
    """
    available = tb.base_input_value()
    required = fee + used_base_amount
    if required > available:
        return required - available
    if not tb.is_consuming_utxos():
        return 1
    return 0


def added_new_inputs(inputs_before: int, inputs_after: int) -> bool:
    """Whether a reconciliation pass changed the input set"""
    return inputs_after > inputs_before


@dataclass(frozen=True)
class ReconciliationReport:
    passes: int
    fee: int
    required_base_amount: int
    committed_base_amount: int
    inputs_added: int


class FeeReconciler:
    """
    Tops a transaction up with base asset until it pays its own fee.

    Each pass estimates the fee of the current draft and selects base asset
    for whatever is missing. New inputs make the transaction bigger, so after a
    pass that added inputs the fee is estimated again; the loop stops after the
    first pass that adds nothing. Every adding pass consumes at least one new
    resource, so the loop ends once the owner's resources are covered or
    exhausted (InsufficientFundsError).
    """

    def __init__(
        self,
        provider: "Provider",
        select_inputs: InputSelector,
        change_owner: str,
    ):
        self.provider = provider
        self.select_inputs = select_inputs
        self.change_owner = change_owner

    def resolve_gas_price(self, tb: ScriptTransactionBuilder) -> int:
        """
        Fix the builder's gas price to the node's current price.

        Raises:
            EstimationError: If the node price exceeds the gas price ceiling
        """
        if tb.gas_price is None:
            tb.gas_price = self.provider.min_gas_price()
        ceiling = tb.policies.gas_price
        if ceiling is not None and tb.gas_price > ceiling:
            raise EstimationError(
                f"Gas price {tb.gas_price} is above the ceiling of {ceiling}",
                method="min_gas_price",
            )
        return tb.gas_price

    def cover_fee(
        self,
        tb: ScriptTransactionBuilder,
        used_base_amount: int,
    ) -> ReconciliationReport:
        """
        Add base asset inputs to `tb` until it covers its estimated fee.

        Args:
            tb: Builder to mutate in place
            used_base_amount: Base asset already spent by the builder's outputs

        Returns:
            Summary of the reconciliation

        Raises:
            InsufficientFundsError: If the fee cannot be covered
            EstimationError: If the fee cannot be estimated
        """
        gas_price = self.resolve_gas_price(tb)
        passes = 0
        inputs_added = 0

        while True:
            passes += 1
            fee = self.provider.estimate_fee(tb.draft(), gas_price)
            missing = calculate_missing_base_amount(tb, used_base_amount, fee)

            before = len(tb.inputs)
            if missing > 0:
                new_inputs = self.select_inputs(
                    BASE_ASSET_ID, missing, tb.used_utxo_ids(), tb.used_message_nonces()
                )
                adjust_inputs_outputs(tb, new_inputs, self.change_owner)
            after = len(tb.inputs)
            inputs_added += after - before

            logger.debug(
                f"Fee pass {passes}: fee={fee} missing={missing} added={after - before}"
            )
            if not added_new_inputs(before, after):
                break

        return ReconciliationReport(
            passes=passes,
            fee=fee,
            required_base_amount=fee + used_base_amount,
            committed_base_amount=tb.base_input_value(),
            inputs_added=inputs_added,
        )


def extract_message_nonce(receipts: Iterable[object]) -> Optional[str]:
    """Nonce of the first MessageOut receipt, if any"""
    for receipt in receipts:
        if isinstance(receipt, MessageOutReceipt):
            return receipt.nonce
    return None
