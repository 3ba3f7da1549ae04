"""Cart decomposition — one priced order draft per restaurant group.

Groups keep the order of first appearance in the persisted cart. The sequencer
relies on that order for checkpoint indexing, so it must not change between a
failed run and its retry.
"""

from dataclasses import dataclass

import structlog

from checkout.cart import CartGroup, load_cart
from checkout.draft import OrderDraft
from checkout.exceptions import EmptyCartError
from checkout.store import KeyValueStore

logger = structlog.get_logger(__name__)

# Keys a corrupted cart can carry instead of a restaurant id
_SENTINEL_KEYS = frozenset({"null", "undefined"})


@dataclass(frozen=True)
class DraftGroup:
    index: int
    restaurant_id: str
    draft: OrderDraft


@dataclass(frozen=True)
class Decomposition:
    groups: tuple[DraftGroup, ...]

    @property
    def restaurant_count(self) -> int:
        return len(self.groups)

    def __iter__(self):
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)


def is_valid_restaurant_key(key) -> bool:
    return key is not None and str(key) not in _SENTINEL_KEYS


def decompose_cart(cart: dict) -> Decomposition:
    """Turn a persisted cart mapping into ordered, priced drafts.

    Raises:
        EmptyCartError: no valid restaurant group remains after filtering.
    """
    groups = []
    for key, payload in (cart or {}).items():
        if not is_valid_restaurant_key(key):
            logger.warning("cart.invalid_restaurant_key_skipped", key=key)
            continue
        group = CartGroup.from_payload(key, payload)
        groups.append(DraftGroup(index=len(groups), restaurant_id=group.restaurant_id, draft=OrderDraft.from_group(group)))

    if not groups:
        raise EmptyCartError()

    logger.debug("cart.decomposed", restaurant_count=len(groups))
    return Decomposition(groups=tuple(groups))


class CartDecomposer:
    """Reads the persisted cart from an injected store and decomposes it."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def decompose(self) -> Decomposition:
        return decompose_cart(load_cart(self._store))
