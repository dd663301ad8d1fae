"""
Spendable resource selection.

Resources are pulled from the provider page by page and accumulated greedily
until they cover the requested amount. Greedy selection bounds dust by never
taking more resources than needed, but it is not an optimal subset search; the
strategy is configurable.
"""
import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Set, Union

from .constants import DEFAULT_PAGE_SIZE
from .exceptions import InsufficientFundsError
from .models import Coin, Message, ResourceFilter

if TYPE_CHECKING:
    from .provider import Provider

logger = logging.getLogger(__name__)

Resource = Union[Coin, Message]


class SelectionStrategy(str, Enum):
    """How candidate resources are ordered before greedy accumulation"""
    FIRST_FIT = "first_fit"          # node order, pages fetched lazily
    LARGEST_FIRST = "largest_first"  # all pages fetched, biggest resources first


class ResourceSelector:
    """Selects spendable resources of one owner covering a target amount"""

    def __init__(
        self,
        provider: "Provider",
        strategy: SelectionStrategy = SelectionStrategy.FIRST_FIT,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.provider = provider
        self.strategy = SelectionStrategy(strategy)
        self.page_size = page_size

    def _candidates(
        self,
        owner: str,
        asset_id: str,
        amount: int,
        excluded_utxos: Set[str],
        excluded_messages: Set[str],
    ) -> Iterator[Resource]:
        cursor: Optional[str] = None
        while True:
            query = ResourceFilter(
                from_address=owner,
                asset_id=asset_id,
                amount=amount,
                excluded_utxos=sorted(excluded_utxos),
                excluded_messages=sorted(excluded_messages),
                cursor=cursor,
                page_size=self.page_size,
            )
            page = self.provider.get_spendable_resources(query)
            yield from page
            if len(page) < self.page_size:
                return
            # A node that ignores the cursor would serve this page forever
            if page[-1].resource_id == cursor:
                logger.warning(f"Node repeated the page after cursor {cursor}; stopping")
                return
            cursor = page[-1].resource_id

    @staticmethod
    def _usable(resource: Resource, asset_id: str, seen: Set[str]) -> bool:
        if resource.resource_id in seen or resource.amount == 0:
            return False
        if resource.asset_id != asset_id:
            return False
        # Messages with a data payload can only be consumed by a predicate or script
        if isinstance(resource, Message) and resource.data not in ("", "0x"):
            return False
        return True

    def select(
        self,
        owner: str,
        asset_id: str,
        amount: int,
        excluded_utxos: Iterable[str] = (),
        excluded_messages: Iterable[str] = (),
    ) -> List[Resource]:
        """
        Select resources of `asset_id` owned by `owner` summing to at least `amount`.

        Args:
            owner: Address owning the resources
            asset_id: Asset to select
            amount: Target amount; 0 selects nothing and makes no query
            excluded_utxos: Coin ids that must not be selected
            excluded_messages: Message nonces that must not be selected

        Returns:
            Resources in selection order

        Raises:
            ValueError: If amount is negative
            InsufficientFundsError: If the owner's resources cannot reach amount
        """
        if amount < 0:
            raise ValueError(f"amount must not be negative, got {amount}")
        if amount == 0:
            return []

        utxos, messages = set(excluded_utxos), set(excluded_messages)
        seen = utxos | messages
        candidates: Iterable[Resource] = self._candidates(owner, asset_id, amount, utxos, messages)
        if self.strategy is SelectionStrategy.LARGEST_FIRST:
            candidates = sorted(candidates, key=lambda r: r.amount, reverse=True)

        selected: List[Resource] = []
        total = 0
        for resource in candidates:
            if not self._usable(resource, asset_id, seen):
                continue
            seen.add(resource.resource_id)
            selected.append(resource)
            total += resource.amount
            if total >= amount:
                logger.debug(
                    f"Selected {len(selected)} resources of {asset_id} totalling {total} "
                    f"for {amount}"
                )
                return selected

        logger.debug(f"Selection for {amount} of {asset_id} stopped at {total}")
        raise InsufficientFundsError(asset_id, amount, total)
