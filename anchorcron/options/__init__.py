"""Persisted key-value options stores."""

from anchorcron.options.memory import InMemoryOptionsStore
from anchorcron.options.protocols import OptionsStore

__all__ = [
    "InMemoryOptionsStore",
    "OptionsStore",
]
