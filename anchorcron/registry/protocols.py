"""Task registry protocol shared by the adapter and the backends."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from anchorcron.registry.models import ScheduledTask


class TaskRegistry(Protocol):
    """Cron-like table of scheduled tasks keyed by (due_at, kind, args)."""

    def list_all(self) -> list[ScheduledTask]:
        """Return a snapshot of every scheduled task."""

    def remove_instance(self, kind: str, due_at: int, args: Sequence[Any]) -> bool:
        """Remove the entry matching the full natural key; False when absent."""

    def insert_once(self, kind: str, due_at: int, args: Sequence[Any]) -> None:
        """Schedule a single non-recurring instance."""

    def insert_recurring(self, kind: str, due_at: int, recurrence: str, args: Sequence[Any]) -> None:
        """Schedule a recurring instance first due at *due_at*."""
