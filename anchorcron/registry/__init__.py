"""Scheduled-task registry: model, protocol, adapter and backends."""

from anchorcron.registry.adapter import EventRegistryAdapter
from anchorcron.registry.memory import InMemoryTaskRegistry
from anchorcron.registry.models import (
    RECURRENCE_INTERVALS,
    ScheduledTask,
    args_signature,
    recurrence_interval,
)
from anchorcron.registry.protocols import TaskRegistry

__all__ = [
    "EventRegistryAdapter",
    "InMemoryTaskRegistry",
    "RECURRENCE_INTERVALS",
    "ScheduledTask",
    "TaskRegistry",
    "args_signature",
    "recurrence_interval",
]
