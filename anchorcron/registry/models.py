"""Scheduled task model and recurrence schedules."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

# Named recurrence intervals in seconds; "weekly" is the one the host lacks
# out of the box and anchorcron adds.
RECURRENCE_INTERVALS: dict[str, int] = {
    "hourly": 3600,
    "twicedaily": 43200,
    "daily": 86400,
    "weekly": 604800,
}


def recurrence_interval(name: str) -> int:
    """Return the interval in seconds for a named recurrence."""
    try:
        return RECURRENCE_INTERVALS[name]
    except KeyError:
        raise ValueError(f"Unknown recurrence: '{name}'") from None


def validate_kind(kind: str) -> str:
    """Reject non-string or blank kinds; any other kind is returned verbatim.

    Kinds are registry keys owned by the host, so padding is part of the key.
    """
    if not isinstance(kind, str):
        raise ValueError("kind must be a non-empty string")
    if not kind.strip():
        raise ValueError("kind must not be empty")
    return kind


def args_signature(args: Sequence[Any]) -> str:
    """Stable digest of an argument list, used as part of the natural key."""
    encoded = json.dumps(list(args), sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.md5(encoded.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ScheduledTask:
    """One entry of the task registry.

    Identity is the natural key ``(due_at, kind, args)``; tasks sharing kind and
    due time but carrying different args are separate instances.
    """

    kind: str
    due_at: int
    recurrence: str | None = None
    args: tuple[Any, ...] = ()

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    @property
    def natural_key(self) -> tuple[int, str, str]:
        return (self.due_at, self.kind, args_signature(self.args))
