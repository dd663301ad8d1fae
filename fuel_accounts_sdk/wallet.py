"""
Wallets - accounts identified by a secp256k1 key.
"""
import logging
from typing import Any, Optional

from .account import Account, Resource, ViewOnlyAccount
from .provider import Provider
from .signer import LocalSigner, Signer
from .transaction import ScriptTransactionBuilder
from .types import Input, ResourceSigned

logger = logging.getLogger(__name__)


class Wallet(ViewOnlyAccount):
    """View-only wallet: an address without its key"""

    def __init__(self, address: str, provider: Optional[Provider] = None, **kwargs: Any):
        super().__init__(provider, **kwargs)
        self._address = address

    @property
    def address(self) -> str:
        return self._address

    def unlock(self, private_key: str) -> "WalletUnlocked":
        """
        Pair this wallet with its private key.

        Raises:
            ValueError: If the key does not belong to this wallet's address
        """
        signer = LocalSigner.from_key(private_key)
        if signer.address.lower() != self._address.lower():
            raise ValueError("Private key does not match the wallet address")
        return WalletUnlocked(
            signer,
            self.provider,
            selection_strategy=self.selection_strategy,
            resource_cache=self.resource_cache,
        )


class WalletUnlocked(Account):
    """Wallet holding a signer; spends signed coin and message inputs"""

    def __init__(self, signer: Signer, provider: Optional[Provider] = None, **kwargs: Any):
        super().__init__(provider, **kwargs)
        self._signer = signer

    @classmethod
    def from_private_key(
        cls, private_key: str, provider: Optional[Provider] = None, **kwargs: Any
    ) -> "WalletUnlocked":
        return cls(LocalSigner.from_key(private_key), provider, **kwargs)

    @classmethod
    def generate(cls, provider: Optional[Provider] = None, **kwargs: Any) -> "WalletUnlocked":
        """Wallet with a fresh random key"""
        wallet = cls(LocalSigner.generate(), provider, **kwargs)
        logger.debug(f"Generated wallet {wallet.address}")
        return wallet

    @property
    def address(self) -> str:
        return self._signer.address

    @property
    def signer(self) -> Signer:
        return self._signer

    def sign(self, message: bytes) -> bytes:
        return self._signer.sign(message)

    def lock(self) -> Wallet:
        """View-only copy of this wallet"""
        return Wallet(
            self.address,
            self.provider,
            selection_strategy=self.selection_strategy,
            resource_cache=self.resource_cache,
        )

    def _resource_input(self, resource: Resource) -> Input:
        return ResourceSigned(resource=resource)

    def add_witnesses(self, tb: ScriptTransactionBuilder) -> None:
        tb.add_signer(self._signer)
