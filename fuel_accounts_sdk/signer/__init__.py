"""
Signer interface for the Fuel Accounts SDK.
"""
from typing import Protocol, runtime_checkable


@runtime_checkable
class Signer(Protocol):
    """Protocol for custom signers"""
    address: str

    def sign(self, message: bytes) -> bytes:
        """Sign `message` and return the raw signature bytes"""
        ...


from .local import LocalSigner, recover_address  # noqa: E402

__all__ = ["Signer", "LocalSigner", "recover_address"]
