"""
Data models for the Fuel Accounts SDK.

These are the records exchanged with the node: spendable resources, query
filters, transaction policies, execution receipts and statuses.
"""
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Discriminator, Field, Tag, TypeAdapter, model_validator

from .constants import BASE_ASSET_ID, DEFAULT_PAGE_SIZE
from .exceptions import CheckedExecutionError, ProviderError, SubmissionRejectedError


class Coin(BaseModel):
    """Unspent transaction output of a single asset"""
    kind: Literal["coin"] = "coin"
    utxo_id: str = Field(..., alias="utxoId")
    owner: str
    asset_id: str = Field(..., alias="assetId")
    amount: int = Field(..., ge=0)
    block_created: int = Field(0, alias="blockCreated")

    class Config:
        populate_by_name = True

    @property
    def resource_id(self) -> str:
        return self.utxo_id


class Message(BaseModel):
    """Bridged message spendable once as an input; always carries the base asset"""
    kind: Literal["message"] = "message"
    nonce: str
    sender: str
    recipient: str
    amount: int = Field(..., ge=0)
    data: str = "0x"
    da_height: int = Field(0, alias="daHeight")

    class Config:
        populate_by_name = True

    @property
    def resource_id(self) -> str:
        return self.nonce

    @property
    def owner(self) -> str:
        return self.recipient

    @property
    def asset_id(self) -> str:
        return BASE_ASSET_ID


SpendableResource = Annotated[Union[Coin, Message], Field(discriminator="kind")]
_resource_list = TypeAdapter(List[SpendableResource])


def parse_resources(raw: List[Dict[str, Any]]) -> List[Union[Coin, Message]]:
    """Validate a JSON list of coins and messages"""
    return _resource_list.validate_python(raw)


class ResourceFilter(BaseModel):
    """Query for spendable resources of one owner and asset"""
    from_address: str = Field(..., alias="owner")
    asset_id: str = Field(BASE_ASSET_ID, alias="assetId")
    amount: int = Field(0, ge=0)
    excluded_utxos: List[str] = Field(default_factory=list, alias="excludedUtxos")
    excluded_messages: List[str] = Field(default_factory=list, alias="excludedMessages")
    cursor: Optional[str] = None
    page_size: int = Field(DEFAULT_PAGE_SIZE, gt=0, alias="first")

    class Config:
        populate_by_name = True

    def to_params(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class TxPolicies(BaseModel):
    """
    Optional policies attached to a transaction.

    Every field left as None falls back to the node's default.
    `gas_price` is a ceiling: the SDK refuses to build when the node's
    current price is above it.
    """
    gas_price: Optional[int] = Field(None, ge=0)
    maturity: Optional[int] = Field(None, ge=0)
    expiration: Optional[int] = Field(None, ge=0)
    witness_limit: Optional[int] = Field(None, ge=0)
    script_gas_limit: Optional[int] = Field(None, ge=0)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_window(self) -> "TxPolicies":
        if (
            self.maturity is not None
            and self.expiration is not None
            and self.expiration < self.maturity
        ):
            raise ValueError(
                f"expiration ({self.expiration}) must not be lower than maturity ({self.maturity})"
            )
        return self

    def to_dict(self) -> Dict[str, int]:
        return self.model_dump(exclude_none=True)


# ─────────────────────────────────────────────────────────────────────────
#  Receipts
# ─────────────────────────────────────────────────────────────────────────

class _ReceiptBase(BaseModel):
    class Config:
        populate_by_name = True


class CallReceipt(_ReceiptBase):
    type: Literal["Call"] = "Call"
    id: str
    to: str
    amount: int = 0
    asset_id: str = Field(BASE_ASSET_ID, alias="assetId")
    gas: int = 0


class ReturnReceipt(_ReceiptBase):
    type: Literal["Return"] = "Return"
    id: str
    val: int = 0


class LogReceipt(_ReceiptBase):
    type: Literal["Log"] = "Log"
    id: str
    ra: int = 0
    rb: int = 0


class RevertReceipt(_ReceiptBase):
    type: Literal["Revert"] = "Revert"
    id: str
    ra: int = 0


class PanicReceipt(_ReceiptBase):
    type: Literal["Panic"] = "Panic"
    id: str
    reason: str = ""


class TransferReceipt(_ReceiptBase):
    type: Literal["Transfer"] = "Transfer"
    id: str
    to: str
    amount: int
    asset_id: str = Field(..., alias="assetId")


class TransferOutReceipt(_ReceiptBase):
    type: Literal["TransferOut"] = "TransferOut"
    id: str
    to: str
    amount: int
    asset_id: str = Field(..., alias="assetId")


class ScriptResultReceipt(_ReceiptBase):
    type: Literal["ScriptResult"] = "ScriptResult"
    result: str
    gas_used: int = Field(0, alias="gasUsed")


class MessageOutReceipt(_ReceiptBase):
    type: Literal["MessageOut"] = "MessageOut"
    sender: str
    recipient: str
    amount: int
    nonce: str
    data: str = "0x"


class UnknownReceipt(_ReceiptBase):
    """Receipt of a type this SDK does not model; every field is kept as sent"""
    type: str

    class Config:
        populate_by_name = True
        extra = "allow"


_RECEIPT_MODELS = (
    CallReceipt,
    ReturnReceipt,
    LogReceipt,
    RevertReceipt,
    PanicReceipt,
    TransferReceipt,
    TransferOutReceipt,
    ScriptResultReceipt,
    MessageOutReceipt,
)
_KNOWN_RECEIPT_TYPES = {model.model_fields["type"].default for model in _RECEIPT_MODELS}


def _receipt_tag(value: Any) -> str:
    receipt_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if isinstance(value, UnknownReceipt) or receipt_type not in _KNOWN_RECEIPT_TYPES:
        return "Unknown"
    return receipt_type


Receipt = Annotated[
    Union[
        Annotated[CallReceipt, Tag("Call")],
        Annotated[ReturnReceipt, Tag("Return")],
        Annotated[LogReceipt, Tag("Log")],
        Annotated[RevertReceipt, Tag("Revert")],
        Annotated[PanicReceipt, Tag("Panic")],
        Annotated[TransferReceipt, Tag("Transfer")],
        Annotated[TransferOutReceipt, Tag("TransferOut")],
        Annotated[ScriptResultReceipt, Tag("ScriptResult")],
        Annotated[MessageOutReceipt, Tag("MessageOut")],
        Annotated[UnknownReceipt, Tag("Unknown")],
    ],
    Discriminator(_receipt_tag),
]


def _failure_reason(receipts: List[Any]) -> str:
    for receipt in reversed(receipts):
        if isinstance(receipt, PanicReceipt):
            return f"Panic({receipt.reason})"
        if isinstance(receipt, RevertReceipt):
            return f"Revert({receipt.ra})"
    for receipt in receipts:
        if isinstance(receipt, ScriptResultReceipt):
            return receipt.result
    return "unknown failure"


class TxStatus(BaseModel):
    """Status of a submitted transaction as reported by the node"""
    status: Literal["submitted", "success", "failure", "squeezed_out"]
    tx_id: Optional[str] = Field(None, alias="txId")
    block_height: Optional[int] = Field(None, alias="blockHeight")
    reason: Optional[str] = None
    receipts: List[Receipt] = Field(default_factory=list)

    class Config:
        populate_by_name = True

    @property
    def is_terminal(self) -> bool:
        return self.status != "submitted"

    def take_receipts(self) -> List[Any]:
        """Return the receipts without checking the execution result"""
        receipts, self.receipts = self.receipts, []
        return receipts

    def take_receipts_checked(self, expected_script_result: Optional[str] = None) -> List[Any]:
        """
        Return the receipts of a successfully executed transaction.

        Args:
            expected_script_result: If set, the ScriptResult receipt must carry
                this result (e.g. "Success") or the execution counts as failed

        Raises:
            CheckedExecutionError: If the script failed or its result differs
                from `expected_script_result`; receipts are attached
            SubmissionRejectedError: If the node dropped the transaction
            ProviderError: If the transaction is not committed yet
        """
        if self.status == "success":
            receipts = self.take_receipts()
            if expected_script_result is not None:
                results = [r.result for r in receipts if isinstance(r, ScriptResultReceipt)]
                if expected_script_result not in results:
                    actual = results[0] if results else "no ScriptResult receipt"
                    raise CheckedExecutionError(
                        f"expected script result {expected_script_result}, got {actual}",
                        receipts,
                    )
            return receipts
        if self.status == "failure":
            receipts = self.take_receipts()
            raise CheckedExecutionError(self.reason or _failure_reason(receipts), receipts)
        if self.status == "squeezed_out":
            raise SubmissionRejectedError(self.reason or "squeezed out", tx_id=self.tx_id)
        raise ProviderError(f"Transaction {self.tx_id} is not committed yet")


# ─────────────────────────────────────────────────────────────────────────
#  Transaction history
# ─────────────────────────────────────────────────────────────────────────

class TransactionResponse(BaseModel):
    """A transaction as returned by the history queries"""
    tx_id: str = Field(..., alias="id")
    status: str
    block_height: Optional[int] = Field(None, alias="blockHeight")
    transaction: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        populate_by_name = True


class PaginationRequest(BaseModel):
    cursor: Optional[str] = None
    results: int = Field(10, gt=0)
    direction: Literal["forward", "backward"] = "forward"


class PaginatedResult(BaseModel):
    cursor: Optional[str] = None
    results: List[TransactionResponse] = Field(default_factory=list)
    has_next_page: bool = Field(False, alias="hasNextPage")
    has_previous_page: bool = Field(False, alias="hasPreviousPage")

    class Config:
        populate_by_name = True
