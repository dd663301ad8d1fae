"""
Local private-key signer backed by eth_account.
"""
import hashlib
import logging
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_keys import keys
from eth_keys.exceptions import ValidationError as KeyValidationError

from ..constants import SIGNATURE_LENGTH

logger = logging.getLogger(__name__)


def _digest(message: bytes) -> bytes:
    return hashlib.sha256(message).digest()


class LocalSigner:
    """
    Signs messages with a secp256k1 private key held in memory.

    Messages are hashed with sha256 before signing; the signature is the
    65-byte recoverable form (r || s || v).
    """

    def __init__(self, account: LocalAccount):
        self._account = account
        self.address = account.address

    @classmethod
    def from_key(cls, private_key: str) -> "LocalSigner":
        """
        Create a signer from a hex private key.

        Args:
            private_key: 32-byte key as hex, with or without 0x prefix

        Raises:
            ValueError: If the key is malformed
        """
        try:
            return cls(Account.from_key(private_key))
        except (ValueError, TypeError, KeyValidationError) as e:
            raise ValueError(f"Invalid private key: {e}") from e

    @classmethod
    def generate(cls, extra_entropy: Optional[str] = None) -> "LocalSigner":
        """Create a signer with a fresh random key"""
        return cls(Account.create(extra_entropy or ""))

    def sign(self, message: bytes) -> bytes:
        signed = self._account.unsafe_sign_hash(_digest(message))
        signature = bytes(signed.signature)
        if len(signature) != SIGNATURE_LENGTH:
            raise ValueError(f"Unexpected signature length {len(signature)}")
        return signature

    def __repr__(self) -> str:
        # Never expose key material
        return f"LocalSigner(address={self.address!r})"


def recover_address(message: bytes, signature: bytes) -> str:
    """
    Recover the checksum address that produced `signature` over `message`.

    Raises:
        ValueError: If the signature is malformed
    """
    if len(signature) != SIGNATURE_LENGTH:
        raise ValueError(f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}")
    v = signature[64]
    if v >= 27:
        v -= 27
    sig = keys.Signature(signature[:64] + bytes([v]))
    public_key = sig.recover_public_key_from_msg_hash(_digest(message))
    return public_key.to_checksum_address()
