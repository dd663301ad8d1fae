"""
Provider - JSON-RPC client for a Fuel node.

The provider is the only component that talks to the network. Every call is a
blocking round-trip; the account layer performs no local caching of node state.
"""
import logging
import os
import time
import urllib.parse
from typing import Any, Dict, List, Optional, Union

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from web3 import HTTPProvider
from web3.exceptions import Web3Exception

from ._rate_limited_log import rate_limited_log
from .config import NetworkConfig
from .exceptions import (
    CommitTimeoutError,
    EstimationError,
    ProviderError,
    RpcResponseError,
    SubmissionRejectedError,
)
from .models import (
    Coin,
    Message,
    PaginatedResult,
    PaginationRequest,
    ResourceFilter,
    TxStatus,
    parse_resources,
)
from .transaction import Transaction

__all__ = ["Provider"]


class Provider:
    """
    Client for a node's JSON-RPC endpoint.

    Settings:
        retry_count: Retries for connection errors and 5xx responses
        timeout: Per-request timeout in seconds
        poll_interval: Delay between status polls while awaiting a commit
        commit_timeout: Maximum time to wait for a terminal status
    """

    def __init__(
        self,
        url: str,
        retry_count: int = 3,
        timeout: int = 30,
        poll_interval: float = 0.5,
        commit_timeout: float = 60.0,
        chain_id: Optional[int] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the Provider

        Args:
            url: Node JSON-RPC URL (e.g., "https://testnet.fuel.network/v1/jsonrpc")
            retry_count: Number of retries for HTTP requests
            timeout: Timeout for HTTP requests in seconds
            poll_interval: Seconds between two status polls
            commit_timeout: Seconds to wait for a submitted transaction
            chain_id: Known chain id; queried from the node when omitted
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ValueError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
        """
        parsed = urllib.parse.urlparse(url)
        host = parsed.netloc.split(':')[0] if parsed.netloc else ''
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme != 'https' and not is_local:
            raise ValueError(f"url must use https:// for security (got: {parsed.scheme}://)")

        self.url = url
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.commit_timeout = commit_timeout
        self.logger = logger or logging.getLogger(__name__)
        self._chain_id = chain_id

        # Setup HTTP session with retries
        self.session = requests.Session()
        retries = Retry(
            total=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["POST"],
            raise_on_status=False,
            connect=retry_count,
            read=retry_count,
            other=retry_count
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))

        self._rpc = HTTPProvider(url, request_kwargs={"timeout": timeout}, session=self.session)

    @classmethod
    def connect(cls, url: str, **kwargs: Any) -> "Provider":
        return cls(url, **kwargs)

    @classmethod
    def from_network(cls, network: Optional[str] = None, **kwargs: Any) -> "Provider":
        """
        Create a provider for a bundled network.

        Args:
            network: Network name; defaults to $FUEL_NETWORK, then "local"
            **kwargs: Extra Provider settings

        Raises:
            ValueError: If the network is unknown
        """
        name = network or os.environ.get("FUEL_NETWORK", "local")
        url = NetworkConfig.get_rpc_url(name, override=kwargs.pop("url", None))
        kwargs.setdefault("chain_id", NetworkConfig.get_chain_id(name))
        return cls(url, **kwargs)

    def __repr__(self) -> str:
        return f"Provider(url={self.url!r})"

    # ── transport ────────────────────────────────────────────────────────

    def _call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        self.logger.debug(f"RPC {method}")
        try:
            response = self._rpc.make_request(method, params or [])
        except (requests.RequestException, Web3Exception, ValueError) as e:
            self.logger.error(f"RPC {method} failed: {e}")
            raise ProviderError(f"{method} failed: {e}", method=method) from e

        error = response.get("error")
        if error:
            if isinstance(error, dict):
                code = error.get("code")
                message = str(error.get("message", "Unknown JSON-RPC error"))
            else:
                code, message = None, str(error)
            raise RpcResponseError(message, code=code, method=method)
        return response.get("result")

    # ── chain ────────────────────────────────────────────────────────────

    def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = int(self._call("chain_id"))
        return self._chain_id

    def min_gas_price(self) -> int:
        """Current minimum gas price accepted by the node"""
        try:
            return int(self._call("min_gas_price"))
        except ProviderError as e:
            raise EstimationError(str(e), code=e.code, method=e.method) from e

    def estimate_fee(self, tx: Transaction, gas_price: int) -> int:
        """
        Dry-run `tx` and return the fee it would cost at `gas_price`.

        Raises:
            EstimationError: If the node cannot estimate the transaction
        """
        try:
            result = self._call("estimate_fee", [tx.to_dict(), gas_price])
        except ProviderError as e:
            raise EstimationError(str(e), code=e.code, method=e.method) from e

        fee = result.get("fee") if isinstance(result, dict) else result
        try:
            fee = int(fee)
        except (TypeError, ValueError):
            raise EstimationError(f"Invalid fee estimate: {result!r}", method="estimate_fee")
        if fee < 0:
            raise EstimationError(f"Negative fee estimate: {fee}", method="estimate_fee")
        return fee

    # ── resources ────────────────────────────────────────────────────────

    def get_spendable_resources(self, filter: ResourceFilter) -> List[Union[Coin, Message]]:
        result = self._call("get_spendable_resources", [filter.to_params()])
        return parse_resources(result or [])

    def get_coins(self, address: str, asset_id: str) -> List[Coin]:
        result = self._call("get_coins", [address, asset_id])
        return [Coin.model_validate(c) for c in result or []]

    def get_messages(self, address: str) -> List[Message]:
        result = self._call("get_messages", [address])
        return [Message.model_validate(m) for m in result or []]

    def get_balances(self, address: str) -> Dict[str, int]:
        result = self._call("get_balances", [address]) or []
        try:
            if isinstance(result, dict):
                return {asset: int(amount) for asset, amount in result.items()}
            return {entry["assetId"]: int(entry["amount"]) for entry in result}
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(
                f"Malformed balances for {address}: {result!r}", method="get_balances"
            ) from e

    def get_asset_balance(self, address: str, asset_id: str) -> int:
        return int(self._call("get_balance", [address, asset_id]) or 0)

    def get_transactions_by_owner(
        self, address: str, request: PaginationRequest
    ) -> PaginatedResult:
        result = self._call("get_transactions_by_owner", [address, request.model_dump()])
        return PaginatedResult.model_validate(result or {})

    # ── submission ───────────────────────────────────────────────────────

    def send_transaction(self, tx: Transaction) -> str:
        """
        Submit `tx` without waiting for it.

        Returns:
            Transaction id reported by the node

        Raises:
            SubmissionRejectedError: If the node refuses the transaction
            ProviderError: On transport failure
        """
        tx_id = tx.id(self.chain_id())
        try:
            result = self._call("submit_transaction", [tx.to_dict()])
        except RpcResponseError as e:
            self.logger.error(f"Node rejected {tx_id}: {e}")
            raise SubmissionRejectedError(str(e), code=e.code, tx_id=tx_id) from e

        node_tx_id = result if isinstance(result, str) else tx_id
        if node_tx_id != tx_id:
            self.logger.warning(f"Node reported id {node_tx_id} for local id {tx_id}")
        self.logger.info(f"Transaction sent: {node_tx_id}")
        return node_tx_id

    def get_transaction_status(self, tx_id: str) -> TxStatus:
        result = self._call("get_transaction_status", [tx_id])
        try:
            status = TxStatus.model_validate(result or {"status": "submitted"})
        except ValidationError as e:
            self.logger.error(f"Unreadable status for {tx_id}: {e}")
            raise ProviderError(
                f"Malformed status for {tx_id}: {e}", method="get_transaction_status"
            ) from e
        if status.tx_id is None:
            status.tx_id = tx_id
        return status

    def send_transaction_and_await_commit(self, tx: Transaction) -> TxStatus:
        """
        Submit `tx` and block until the node reports a terminal status.

        Raises:
            SubmissionRejectedError: If the node refuses the transaction
            CommitTimeoutError: If no terminal status arrives within commit_timeout
        """
        tx_id = self.send_transaction(tx)
        deadline = time.monotonic() + self.commit_timeout

        while True:
            status = self.get_transaction_status(tx_id)
            if status.is_terminal:
                self.logger.info(f"Transaction {tx_id} committed with status {status.status}")
                return status
            if time.monotonic() >= deadline:
                raise CommitTimeoutError(tx_id, self.commit_timeout)
            rate_limited_log(
                tx_id,
                f"Transaction {tx_id} still pending",
                level="info",
                logger_instance=self.logger,
            )
            time.sleep(self.poll_interval)
