"""
Predicates - accounts whose resources are unlocked by code instead of a key.
"""
import hashlib
from typing import Any, Optional

from .account import Account, Resource
from .provider import Provider
from .types import Input, ResourcePredicate


class Predicate(Account):
    """
    Account owned by a predicate's bytecode.

    The address is the sha256 of the code. Inputs carry the code and the
    predicate data; no witnesses are needed, so `add_witnesses` does nothing.
    """

    def __init__(
        self,
        code: bytes,
        data: bytes = b"",
        provider: Optional[Provider] = None,
        **kwargs: Any
    ):
        if not code:
            raise ValueError("Predicate code must not be empty")
        super().__init__(provider, **kwargs)
        self.code = bytes(code)
        self.data = bytes(data)
        self._address = self.address_from_code(self.code)

    @staticmethod
    def address_from_code(code: bytes) -> str:
        return "0x" + hashlib.sha256(code).hexdigest()

    @property
    def address(self) -> str:
        return self._address

    def with_data(self, data: bytes) -> "Predicate":
        """Same predicate with different predicate data"""
        return Predicate(
            self.code,
            data,
            self.provider,
            selection_strategy=self.selection_strategy,
            resource_cache=self.resource_cache,
        )

    def _resource_input(self, resource: Resource) -> Input:
        return ResourcePredicate(resource=resource, code=self.code, data=self.data)
