"""Event registry adapter — the scheduler's only window onto the task table."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from anchorcron.registry.models import ScheduledTask, args_signature, validate_kind, recurrence_interval
from anchorcron.registry.protocols import TaskRegistry

logger = logging.getLogger(__name__)


class EventRegistryAdapter:
    """Read/write view over a :class:`TaskRegistry` backend.

    The backend removal primitive matches a whole natural key, so removing
    every instance of a kind means enumerating the snapshot and removing each
    ``(due_at, kind, args)`` entry individually. Backend failures are logged
    and degrade to "nothing happened"; the caller's next pass re-converges.
    """

    def __init__(self, registry: TaskRegistry) -> None:
        self.registry = registry

    def list_all(self) -> list[ScheduledTask]:
        """Return a full snapshot; an unavailable backend reads as empty."""
        try:
            return list(self.registry.list_all())
        except Exception as exc:
            logger.warning("registry_unavailable error=%s", exc)
            return []

    def remove_all_instances(self, kind: str) -> int:
        """Remove every instance of *kind* regardless of args or due time."""
        kind = validate_kind(kind)
        removed = 0
        for task in self.list_all():
            if task.kind != kind:
                continue
            try:
                if self.registry.remove_instance(task.kind, task.due_at, task.args):
                    removed += 1
            except Exception as exc:
                logger.exception(
                    "registry_remove_failed kind=%s due_at=%s error=%s",
                    task.kind,
                    task.due_at,
                    exc,
                )
        if removed:
            logger.debug("registry_removed kind=%s count=%s", kind, removed)
        return removed

    def insert_once(self, kind: str, due_at: int, args: Sequence[Any] = ()) -> bool:
        """Schedule a single non-recurring instance; False if the backend failed."""
        kind = validate_kind(kind)
        try:
            self.registry.insert_once(kind, int(due_at), tuple(args))
        except Exception as exc:
            logger.exception("registry_insert_failed kind=%s due_at=%s error=%s", kind, due_at, exc)
            return False
        return True

    def next_scheduled(self, kind: str, args: Sequence[Any] = ()) -> int | None:
        """Return the earliest due time of *kind* with exactly *args*, if any."""
        kind = validate_kind(kind)
        signature = args_signature(args)
        due_times = [
            task.due_at
            for task in self.list_all()
            if task.kind == kind and args_signature(task.args) == signature
        ]
        return min(due_times) if due_times else None

    def ensure_recurring(
        self,
        kind: str,
        recurrence: str,
        first_due_at: int,
        args: Sequence[Any] = (),
    ) -> bool:
        """Schedule a recurring instance unless one is already pending.

        Returns True when a new instance was inserted.
        """
        kind = validate_kind(kind)
        recurrence_interval(recurrence)
        if self.next_scheduled(kind, args) is not None:
            return False
        try:
            self.registry.insert_recurring(kind, int(first_due_at), recurrence, tuple(args))
        except Exception as exc:
            logger.exception("registry_insert_failed kind=%s recurrence=%s error=%s", kind, recurrence, exc)
            return False
        logger.info("registry_scheduled kind=%s recurrence=%s first_due_at=%s", kind, recurrence, first_due_at)
        return True

    def unschedule_next(self, kind: str, args: Sequence[Any] = ()) -> bool:
        """Remove the next pending instance of *kind*; False when none exists."""
        due_at = self.next_scheduled(kind, args)
        if due_at is None:
            return False
        try:
            return bool(self.registry.remove_instance(validate_kind(kind), due_at, tuple(args)))
        except Exception as exc:
            logger.exception("registry_remove_failed kind=%s due_at=%s error=%s", kind, due_at, exc)
            return False
