"""In-memory options store for tests and local runs."""

from __future__ import annotations

import copy
from typing import Any


class InMemoryOptionsStore:
    """Dict-backed options; values are deep-copied in and out like a real store."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._items: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._items:
            return default
        return copy.deepcopy(self._items[key])

    def set(self, key: str, value: Any) -> None:
        self._items[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        if key not in self._items:
            return False
        del self._items[key]
        return True
