"""Key-value options store protocol."""

from __future__ import annotations

from typing import Any, Protocol


class OptionsStore(Protocol):
    """Persisted site settings; values are JSON-compatible."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or *default* when the key is unset."""

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""

    def delete(self, key: str) -> bool:
        """Remove *key*; False when it was not set."""
