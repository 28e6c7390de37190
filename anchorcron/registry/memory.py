"""In-memory task registry for tests and local runs."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from anchorcron.registry.models import ScheduledTask, args_signature, validate_kind, recurrence_interval


class InMemoryTaskRegistry:
    """Dict-backed task table; inserting an existing natural key overwrites it."""

    def __init__(self, tasks: Sequence[ScheduledTask] = ()) -> None:
        self._tasks: dict[tuple[int, str, str], ScheduledTask] = {}
        for task in tasks:
            self._tasks[task.natural_key] = task

    def __len__(self) -> int:
        return len(self._tasks)

    def list_all(self) -> list[ScheduledTask]:
        return sorted(self._tasks.values(), key=lambda task: (task.due_at, task.kind))

    def remove_instance(self, kind: str, due_at: int, args: Sequence[Any]) -> bool:
        key = (int(due_at), kind, args_signature(args))
        return self._tasks.pop(key, None) is not None

    def insert_once(self, kind: str, due_at: int, args: Sequence[Any]) -> None:
        task = ScheduledTask(kind=validate_kind(kind), due_at=int(due_at), args=tuple(args))
        self._tasks[task.natural_key] = task

    def insert_recurring(self, kind: str, due_at: int, recurrence: str, args: Sequence[Any]) -> None:
        recurrence_interval(recurrence)
        task = ScheduledTask(
            kind=validate_kind(kind),
            due_at=int(due_at),
            recurrence=recurrence,
            args=tuple(args),
        )
        self._tasks[task.natural_key] = task
