"""
Fuel Accounts SDK - build, fund, sign and submit transactions from an account.
"""
from .version import __version__
from .constants import BASE_ASSET_ID
from .exceptions import (
    FuelAccountsError,
    AccountError,
    NoProviderError,
    InsufficientFundsError,
    ProviderError,
    RpcResponseError,
    EstimationError,
    SubmissionRejectedError,
    CommitTimeoutError,
    CheckedExecutionError,
    ResultExtractionError,
    RejectReason,
)
from .models import (
    Coin,
    Message,
    ResourceFilter,
    TxPolicies,
    TxStatus,
    MessageOutReceipt,
    ScriptResultReceipt,
    PaginationRequest,
    PaginatedResult,
)
from .config import NetworkConfig
from .provider import Provider
from .signer import Signer, LocalSigner
from .transaction import ScriptTransactionBuilder, Transaction
from .selection import ResourceSelector, SelectionStrategy
from .resource_cache import SpentResourceCache
from .accounts_utils import FeeReconciler, ReconciliationReport
from .account import ViewOnlyAccount, Account
from .wallet import Wallet, WalletUnlocked
from .predicate import Predicate
from .workflow import WorkflowState, TransferResult, ContractTransferResult, WithdrawalResult

__all__ = [
    "__version__",
    "BASE_ASSET_ID",
    "FuelAccountsError",
    "AccountError",
    "NoProviderError",
    "InsufficientFundsError",
    "ProviderError",
    "RpcResponseError",
    "EstimationError",
    "SubmissionRejectedError",
    "CommitTimeoutError",
    "CheckedExecutionError",
    "ResultExtractionError",
    "RejectReason",
    "Coin",
    "Message",
    "ResourceFilter",
    "TxPolicies",
    "TxStatus",
    "MessageOutReceipt",
    "ScriptResultReceipt",
    "PaginationRequest",
    "PaginatedResult",
    "NetworkConfig",
    "Provider",
    "Signer",
    "LocalSigner",
    "ScriptTransactionBuilder",
    "Transaction",
    "ResourceSelector",
    "SelectionStrategy",
    "SpentResourceCache",
    "FeeReconciler",
    "ReconciliationReport",
    "ViewOnlyAccount",
    "Account",
    "Wallet",
    "WalletUnlocked",
    "Predicate",
    "WorkflowState",
    "TransferResult",
    "ContractTransferResult",
    "WithdrawalResult",
]
