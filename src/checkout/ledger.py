"""Checkpoint ledger — which per-restaurant orders of the current checkout exist.

Persisted as a JSON list of ``{"restaurantId", "orderId"}`` entries under
``LEDGER_KEY``. Appends re-read the stored list first, so a ledger written by an
earlier run (before a reload) is never overwritten.
"""

from dataclasses import dataclass

from checkout.store import LEDGER_KEY, KeyValueStore


@dataclass(frozen=True)
class LedgerEntry:
    restaurant_id: str
    order_id: str


class CheckpointLedger:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def entries(self) -> list[LedgerEntry]:
        raw = self._store.get(LEDGER_KEY) or []
        return [LedgerEntry(restaurant_id=str(e["restaurantId"]), order_id=str(e["orderId"])) for e in raw]

    def order_id_for(self, restaurant_id: str) -> str | None:
        for entry in self.entries():
            if entry.restaurant_id == str(restaurant_id):
                return entry.order_id
        return None

    def append(self, restaurant_id: str, order_id: str) -> None:
        raw = self._store.get(LEDGER_KEY) or []
        raw.append({"restaurantId": str(restaurant_id), "orderId": str(order_id)})
        self._store.set(LEDGER_KEY, raw)

    def clear(self) -> None:
        self._store.clear(LEDGER_KEY)

    def __len__(self) -> int:
        return len(self.entries())
