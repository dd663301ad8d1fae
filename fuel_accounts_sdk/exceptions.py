"""
Exceptions for the Fuel Accounts SDK.
"""
from enum import Enum
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Receipt


class RejectReason(str, Enum):
    """
    Common reasons a node gives for refusing a transaction.

    Nodes report free-form messages; these values are matched against the
    message text so callers can branch on the usual cases.
    """
    UNKNOWN = "UNKNOWN"
    DOUBLE_SPEND = "DOUBLE_SPEND"
    MATURITY = "MATURITY"
    EXPIRED = "EXPIRED"
    INSUFFICIENT_FEE = "INSUFFICIENT_FEE"
    INVALID_WITNESS = "INVALID_WITNESS"

    @classmethod
    def from_message(cls, message: str) -> "RejectReason":
        text = (message or "").lower()
        if "already spent" in text or "double spend" in text or "not found in utxo" in text:
            return cls.DOUBLE_SPEND
        if "maturity" in text:
            return cls.MATURITY
        if "expir" in text:
            return cls.EXPIRED
        if "fee" in text or "gas price" in text:
            return cls.INSUFFICIENT_FEE
        if "witness" in text or "signature" in text:
            return cls.INVALID_WITNESS
        return cls.UNKNOWN


class FuelAccountsError(Exception):
    """Base exception for all SDK errors."""
    pass


class AccountError(FuelAccountsError):
    """Raised when an account is used in a way it does not support."""
    pass


class NoProviderError(AccountError):
    """Raised when an account is used without a bound provider."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message or "No provider was setup: make sure to set_provider in your account!"
        )


class InsufficientFundsError(FuelAccountsError):
    """Raised when the spendable resources cannot reach the requested amount."""

    def __init__(self, asset_id: str, requested: int, available: int):
        self.asset_id = asset_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient funds for asset {asset_id}: requested {requested}, "
            f"available {available}"
        )


class ProviderError(FuelAccountsError):
    """Raised when a call to the node fails."""

    def __init__(self, message: str, code: Optional[int] = None, method: Optional[str] = None):
        self.code = code
        self.method = method
        super().__init__(message)


class RpcResponseError(ProviderError):
    """Raised when the node answers a call with a JSON-RPC error object."""
    pass


class EstimationError(ProviderError):
    """Raised when the node cannot estimate the fee of a draft transaction."""
    pass


class SubmissionRejectedError(ProviderError):
    """Raised when the node refuses a finished transaction."""

    def __init__(self, reason: str, code: Optional[int] = None, tx_id: Optional[str] = None):
        self.reason = reason
        self.tx_id = tx_id
        self.reject_reason = RejectReason.from_message(reason)
        super().__init__(reason, code=code, method="submit_transaction")


class CommitTimeoutError(ProviderError):
    """Raised when a submitted transaction does not reach a terminal status in time."""

    def __init__(self, tx_id: str, timeout: float):
        self.tx_id = tx_id
        self.timeout = timeout
        super().__init__(f"Transaction {tx_id} was not committed within {timeout}s")


class CheckedExecutionError(FuelAccountsError):
    """
    Raised when a transaction was included but its script failed.

    The receipts are kept on the exception for inspection.
    """

    def __init__(self, reason: str, receipts: Optional[List["Receipt"]] = None):
        self.reason = reason
        self.receipts = list(receipts or [])
        super().__init__(f"Transaction execution failed: {reason}")


class ResultExtractionError(FuelAccountsError):
    """Raised when the receipts of a committed transaction lack an expected record."""
    pass
