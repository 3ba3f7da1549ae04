"""Client-local key-value persistence for the cart and the checkpoint ledger.

Values must be JSON-serializable. ``JsonFileStore`` keeps every key in one file
and replaces it atomically on write, so a reload mid-checkout sees either the
old ledger or the new one, never a torn write.
"""

import copy
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from shared.settings import get_settings

CART_KEY = "cartRestaurantGroups"
LEDGER_KEY = "checkoutLedger"


class KeyValueStore(ABC):
    """Abstract get/set/clear store injected into the checkout core."""

    @abstractmethod
    def get(self, key: str, default=None):
        ...

    @abstractmethod
    def set(self, key: str, value) -> None:
        ...

    @abstractmethod
    def clear(self, key: str) -> None:
        ...


class InMemoryStore(KeyValueStore):
    def __init__(self, initial: dict | None = None) -> None:
        self._data: dict = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default=None):
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value) -> None:
        self._data[key] = copy.deepcopy(value)

    def clear(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as fh:
            return json.load(fh)

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise

    def get(self, key: str, default=None):
        return self._read().get(key, default)

    def set(self, key: str, value) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def clear(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


def default_store() -> KeyValueStore:
    """Store configured by ``CART_STORE_PATH``; in-memory when unset."""
    path = get_settings().cart_store_path
    if path:
        return JsonFileStore(path)
    return InMemoryStore()
