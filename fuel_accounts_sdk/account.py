"""
Accounts - view-only and spending.

`ViewOnlyAccount` can query what an address owns. `Account` adds everything
needed to spend: input selection, fee reconciliation, witnesses and the three
transfer workflows.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Union

from .accounts_utils import (
    FeeReconciler,
    ReconciliationReport,
    adjust_inputs_outputs,
    extract_message_nonce,
)
from .constants import BASE_ASSET_ID
from .exceptions import AccountError, NoProviderError, ResultExtractionError, SubmissionRejectedError
from .models import Coin, Message, PaginatedResult, PaginationRequest, TxPolicies
from .provider import Provider
from .resource_cache import SpentResourceCache
from .selection import ResourceSelector, SelectionStrategy
from .transaction import ScriptTransactionBuilder
from .types import ChangeOutput, CoinOutput, ContractInput, ContractOutput, Input, Output
from .workflow import (
    ContractTransferResult,
    TransferResult,
    WithdrawalResult,
    WorkflowRun,
    WorkflowState,
)

logger = logging.getLogger(__name__)

Resource = Union[Coin, Message]


class ViewOnlyAccount(ABC):
    """
    An address, optionally bound to a provider.

    All queries go to the provider; the account holds no transaction state.
    """

    def __init__(
        self,
        provider: Optional[Provider] = None,
        selection_strategy: SelectionStrategy = SelectionStrategy.FIRST_FIT,
        resource_cache: Optional[SpentResourceCache] = None,
    ):
        self._provider = provider
        self.selection_strategy = SelectionStrategy(selection_strategy)
        self.resource_cache = resource_cache

    @property
    @abstractmethod
    def address(self) -> str:
        ...

    @property
    def provider(self) -> Optional[Provider]:
        return self._provider

    def set_provider(self, provider: Provider) -> None:
        self._provider = provider

    def try_provider(self) -> Provider:
        """
        Raises:
            NoProviderError: If no provider is bound
        """
        if self._provider is None:
            raise NoProviderError()
        return self._provider

    def resource_selector(self) -> ResourceSelector:
        return ResourceSelector(self.try_provider(), strategy=self.selection_strategy)

    def get_transactions(self, request: Optional[PaginationRequest] = None) -> PaginatedResult:
        return self.try_provider().get_transactions_by_owner(
            self.address, request or PaginationRequest()
        )

    def get_coins(self, asset_id: str = BASE_ASSET_ID) -> List[Coin]:
        """Gets all unspent coins of asset `asset_id` owned by the account."""
        return self.try_provider().get_coins(self.address, asset_id)

    def get_asset_balance(self, asset_id: str = BASE_ASSET_ID) -> int:
        """
        Get the balance of all spendable coins of `asset_id` for the account.
        This is a single number (the sum of the UTXO amounts), not the UTXOs.
        """
        return self.try_provider().get_asset_balance(self.address, asset_id)

    def get_messages(self) -> List[Message]:
        """Gets all unspent messages owned by the account."""
        return self.try_provider().get_messages(self.address)

    def get_balances(self) -> Dict[str, int]:
        """Spendable balance of every asset owned by the account, keyed by asset id."""
        return self.try_provider().get_balances(self.address)

    def get_spendable_resources(
        self,
        asset_id: str,
        amount: int,
        excluded_utxos: Iterable[str] = (),
        excluded_messages: Iterable[str] = (),
    ) -> List[Resource]:
        """
        Get spendable coins and messages of `asset_id` adding up to at least
        `amount`. Selection is greedy and stops at the first resource that
        reaches the amount, which keeps the number of UTXOs consumed low.

        Raises:
            NoProviderError: If no provider is bound
            InsufficientFundsError: If the account cannot cover `amount`
        """
        utxos = set(excluded_utxos)
        messages = set(excluded_messages)
        if self.resource_cache is not None:
            utxos.update(self.resource_cache.excluded_utxos())
            messages.update(self.resource_cache.excluded_messages())
        return self.resource_selector().select(self.address, asset_id, amount, utxos, messages)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self.address!r})"


class Account(ViewOnlyAccount):
    """An account that can spend its resources."""

    @abstractmethod
    def _resource_input(self, resource: Resource) -> Input:
        """Wrap a selected resource into the input type this account spends with"""

    def get_asset_inputs_for_amount(
        self,
        asset_id: str,
        amount: int,
        excluded_utxos: Iterable[str] = (),
        excluded_messages: Iterable[str] = (),
    ) -> List[Input]:
        """
        Inputs of `asset_id` covering at least `amount`.

        Raises:
            InsufficientFundsError: If the account cannot cover `amount`
        """
        resources = self.get_spendable_resources(asset_id, amount, excluded_utxos, excluded_messages)
        return [self._resource_input(r) for r in resources]

    def get_asset_outputs_for_amount(self, to: str, asset_id: str, amount: int) -> List[Output]:
        """The coin output to `to` plus the change output back to this account"""
        return [
            CoinOutput(to=to, amount=amount, asset_id=asset_id),
            # The node computes the change amount; only owner and asset are set here
            ChangeOutput(to=self.address, asset_id=asset_id),
        ]

    def adjust_for_fee(
        self,
        tb: ScriptTransactionBuilder,
        used_base_amount: int,
    ) -> ReconciliationReport:
        """
        Add base asset inputs to `tb` to cover its estimated fee.

        Contract inputs must already be at the start of `tb.inputs`; new inputs
        are appended so their indices are kept.
        """
        reconciler = FeeReconciler(
            self.try_provider(), self.get_asset_inputs_for_amount, self.address
        )
        report = reconciler.cover_fee(tb, used_base_amount)
        logger.debug(
            f"{self.address}: fee {report.fee} covered in {report.passes} passes "
            f"({report.inputs_added} inputs added)"
        )
        return report

    def add_witnesses(self, tb: ScriptTransactionBuilder) -> None:
        """Register this account's signer on `tb`; accounts without one do nothing"""
        return None

    # ── workflows ────────────────────────────────────────────────────────

    def _finalize(
        self,
        run: WorkflowRun,
        tb: ScriptTransactionBuilder,
        used_base_amount: int,
    ) -> tuple:
        provider = self.try_provider()

        run.advance(WorkflowState.RECONCILING_FEE)
        self.adjust_for_fee(tb, used_base_amount)

        run.advance(WorkflowState.SIGNING)
        self.add_witnesses(tb)
        missing = tb.missing_witness_owners()
        if missing:
            raise AccountError(f"No signer for inputs owned by {sorted(missing)}")

        run.advance(WorkflowState.BUILDING)
        tx = tb.build(provider)
        tx_id = tx.id(provider.chain_id())

        run.advance(WorkflowState.SUBMITTING)
        if self.resource_cache is not None:
            self.resource_cache.reserve(tx.inputs)
        try:
            run.advance(WorkflowState.AWAITING_COMMIT)
            status = provider.send_transaction_and_await_commit(tx)
        except SubmissionRejectedError:
            if self.resource_cache is not None:
                self.resource_cache.release(tx.inputs)
            raise

        run.advance(WorkflowState.EXTRACTING_RESULT)
        receipts = status.take_receipts_checked(None)
        return tx_id, receipts

    def transfer(
        self,
        to: str,
        amount: int,
        asset_id: str = BASE_ASSET_ID,
        tx_policies: Optional[TxPolicies] = None,
    ) -> TransferResult:
        """
        Transfer funds from this account to another address.

        Args:
            to: Recipient address
            amount: Amount to send
            asset_id: Asset to send (defaults to the base asset)
            tx_policies: Optional transaction policies

        Returns:
            Transaction id and receipts

        Raises:
            NoProviderError: If no provider is bound
            InsufficientFundsError: If the account cannot cover amount and fee
            EstimationError: If the fee cannot be estimated
            SubmissionRejectedError: If the node refuses the transaction
            CheckedExecutionError: If the transaction reverts
        """
        self.try_provider()
        run = WorkflowRun("transfer", logger)
        with run.running():
            inputs = self.get_asset_inputs_for_amount(asset_id, amount)

            run.advance(WorkflowState.ASSEMBLING)
            outputs = self.get_asset_outputs_for_amount(to, asset_id, amount)
            tb = ScriptTransactionBuilder.prepare_transfer(inputs, outputs, tx_policies)
            self.add_witnesses(tb)

            used_base_amount = amount if asset_id == BASE_ASSET_ID else 0
            tx_id, receipts = self._finalize(run, tb, used_base_amount)

        return TransferResult(tx_id=tx_id, receipts=receipts)

    def force_transfer_to_contract(
        self,
        to: str,
        balance: int,
        asset_id: str = BASE_ASSET_ID,
        tx_policies: Optional[TxPolicies] = None,
    ) -> ContractTransferResult:
        """
        Unconditionally transfer `balance` of `asset_id` to the contract `to`.

        CAUTION: this moves coins into a contract. If the contract has no way
        to release them they are lost permanently; nothing here checks that.

        Returns:
            Transaction id (as a display string) and receipts

        Raises:
            NoProviderError: If no provider is bound
            InsufficientFundsError: If the account cannot cover balance and fee
            SubmissionRejectedError: If the node refuses the transaction
            CheckedExecutionError: If the transaction reverts
        """
        self.try_provider()
        run = WorkflowRun("force_transfer_to_contract", logger)
        with run.running():
            inputs: List[Input] = [ContractInput.placeholder(to)]
            selected = self.get_asset_inputs_for_amount(asset_id, balance)

            run.advance(WorkflowState.ASSEMBLING)
            outputs: List[Output] = [
                ContractOutput(input_index=0),
                ChangeOutput(to=self.address, asset_id=asset_id),
            ]
            tb = ScriptTransactionBuilder.prepare_contract_transfer(
                to, balance, asset_id, inputs, outputs, tx_policies
            )
            adjust_inputs_outputs(tb, selected, self.address)
            self.add_witnesses(tb)

            used_base_amount = balance if asset_id == BASE_ASSET_ID else 0
            tx_id, receipts = self._finalize(run, tb, used_base_amount)

        return ContractTransferResult(tx_id=str(tx_id), receipts=receipts)

    def withdraw_to_base_layer(
        self,
        to: str,
        amount: int,
        tx_policies: Optional[TxPolicies] = None,
    ) -> WithdrawalResult:
        """
        Withdraw `amount` of the base asset to `to` on the base layer.

        Returns:
            Transaction id, message nonce and receipts

        Raises:
            NoProviderError: If no provider is bound
            InsufficientFundsError: If the account cannot cover amount and fee
            SubmissionRejectedError: If the node refuses the transaction
            CheckedExecutionError: If the transaction reverts
            ResultExtractionError: If the receipts hold no MessageOut record
        """
        self.try_provider()
        run = WorkflowRun("withdraw_to_base_layer", logger)
        with run.running():
            inputs = self.get_asset_inputs_for_amount(BASE_ASSET_ID, amount)

            run.advance(WorkflowState.ASSEMBLING)
            tb = ScriptTransactionBuilder.prepare_message_to_output(
                to, amount, inputs, self.address, tx_policies
            )
            self.add_witnesses(tb)

            tx_id, receipts = self._finalize(run, tb, amount)

            nonce = extract_message_nonce(receipts)
            if nonce is None:
                logger.error(f"Withdrawal {tx_id} committed without a MessageOut receipt")
                raise ResultExtractionError(
                    f"MessageId could not be retrieved from the receipts of {tx_id}"
                )

        return WithdrawalResult(tx_id=tx_id, nonce=nonce, receipts=receipts)
