"""
Shared pool of resources already committed to in-flight transactions.

Accounts work without it and re-query the node every time. When several
workflows spend from the same owner concurrently, attaching one
`SpentResourceCache` to all of them keeps a resource chosen by one workflow out
of the others' selections until the entry expires. The cache only guards its
own map; callers that need strictly serialized spending still order their calls.
"""
import logging
import threading
from typing import Iterable, List

from cachetools import TTLCache

from .types import Input, ResourceSigned, ResourcePredicate
from .models import Message

logger = logging.getLogger(__name__)


class SpentResourceCache:
    """Thread-safe TTL set of reserved resource ids"""

    def __init__(self, ttl: float = 60.0, maxsize: int = 10_000):
        self._entries: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.RLock()

    def reserve(self, inputs: Iterable[Input]) -> int:
        """
        Mark the resources behind `inputs` as spent.

        Returns:
            Number of resources reserved
        """
        count = 0
        with self._lock:
            for item in inputs:
                if isinstance(item, (ResourceSigned, ResourcePredicate)):
                    kind = "message" if isinstance(item.resource, Message) else "coin"
                    self._entries[item.resource_id] = kind
                    count += 1
        logger.debug(f"Reserved {count} resources")
        return count

    def release(self, inputs: Iterable[Input]) -> None:
        with self._lock:
            for item in inputs:
                if isinstance(item, (ResourceSigned, ResourcePredicate)):
                    self._entries.pop(item.resource_id, None)

    def _ids(self, kind: str) -> List[str]:
        with self._lock:
            return [key for key, value in self._entries.items() if value == kind]

    def excluded_utxos(self) -> List[str]:
        return self._ids("coin")

    def excluded_messages(self) -> List[str]:
        return self._ids("message")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, resource_id: object) -> bool:
        with self._lock:
            return resource_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
