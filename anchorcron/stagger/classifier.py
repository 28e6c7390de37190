"""Heuristic detection of scanner scan jobs among registered tasks.

The task registry has no category field, so the only signal is the task kind.
A kind is a stagger target when it names the scanner subsystem (its full
marker anywhere, or its short code as a standalone token) and also names
scan-type work. Requiring both keeps unrelated maintenance hooks of the same
subsystem, and other plugins' scan jobs, out of the result.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from anchorcron.registry.models import ScheduledTask

DEFAULT_SUBSYSTEM_MARKER = "wordfence"
DEFAULT_SHORT_CODE = "wf"
DEFAULT_SCAN_MARKER = "scan"


@lru_cache(maxsize=32)
def _short_code_pattern(short_code: str) -> re.Pattern[str]:
    # Underscores and dashes count as separators: "wf_scan" has the token "wf".
    return re.compile(rf"(?:^|[^a-z0-9]){re.escape(short_code.lower())}(?:[^a-z0-9]|$)")


def is_stagger_target(
    kind: str,
    *,
    subsystem_marker: str = DEFAULT_SUBSYSTEM_MARKER,
    short_code: str = DEFAULT_SHORT_CODE,
    scan_marker: str = DEFAULT_SCAN_MARKER,
) -> bool:
    """Return whether a task kind looks like a scanner scan job."""
    if not isinstance(kind, str) or not kind:
        return False
    lowered = kind.lower()
    names_subsystem = subsystem_marker.lower() in lowered or bool(
        _short_code_pattern(short_code).search(lowered)
    )
    return names_subsystem and scan_marker.lower() in lowered


@dataclass(frozen=True)
class ClassifiedEvent:
    """A scheduled task annotated with its stagger-target flag."""

    task: ScheduledTask
    is_target: bool

    @property
    def kind(self) -> str:
        return self.task.kind

    @property
    def due_at(self) -> int:
        return self.task.due_at

    @property
    def args(self) -> tuple[Any, ...]:
        return self.task.args

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.task.kind,
            "due_at": self.task.due_at,
            "recurrence": self.task.recurrence,
            "args": list(self.task.args),
            "is_target": self.is_target,
        }


class EventClassifier:
    """Select stagger targets from a registry snapshot."""

    def __init__(
        self,
        subsystem_marker: str = DEFAULT_SUBSYSTEM_MARKER,
        short_code: str = DEFAULT_SHORT_CODE,
        scan_marker: str = DEFAULT_SCAN_MARKER,
    ) -> None:
        self.subsystem_marker = subsystem_marker
        self.short_code = short_code
        self.scan_marker = scan_marker

    def matches(self, kind: str) -> bool:
        return is_stagger_target(
            kind,
            subsystem_marker=self.subsystem_marker,
            short_code=self.short_code,
            scan_marker=self.scan_marker,
        )

    def annotate(self, tasks: Sequence[ScheduledTask]) -> list[ClassifiedEvent]:
        """Flag every task, preserving input order."""
        return [ClassifiedEvent(task=task, is_target=self.matches(task.kind)) for task in tasks]

    def classify(self, tasks: Sequence[ScheduledTask]) -> list[ClassifiedEvent]:
        """Return only the targets, ordered by due time (stable for ties)."""
        targets = [event for event in self.annotate(tasks) if event.is_target]
        return sorted(targets, key=lambda event: event.due_at)
