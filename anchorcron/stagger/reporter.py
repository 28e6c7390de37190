"""Read-only status report for the stagger scheduler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from anchorcron.stagger.classifier import ClassifiedEvent
from anchorcron.stagger.scheduler import StaggerScheduler


@dataclass
class StaggerReport:
    """Snapshot of scheduler state for display."""

    site_identity: str
    enabled: bool
    target: int
    last_reschedule_at: int
    cooldown_seconds: int
    events: list[ClassifiedEvent] = field(default_factory=list)

    @property
    def next_eligible_at(self) -> int | None:
        """Earliest time a non-forced run may reschedule; None means now."""
        if self.last_reschedule_at <= 0:
            return None
        return self.last_reschedule_at + self.cooldown_seconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "site_identity": self.site_identity,
            "enabled": self.enabled,
            "target": self.target,
            "last_reschedule_at": self.last_reschedule_at,
            "cooldown_seconds": self.cooldown_seconds,
            "next_eligible_at": self.next_eligible_at,
            "events": [event.to_dict() for event in self.events],
        }


class StatusReporter:
    """Aggregate state, derived slot and detected events; never mutates anything."""

    def __init__(self, scheduler: StaggerScheduler) -> None:
        self.scheduler = scheduler

    def report(self) -> StaggerReport:
        now = self.scheduler.now()
        state = self.scheduler.state_store.load()
        return StaggerReport(
            site_identity=self.scheduler.site_identity,
            enabled=state.enabled,
            target=self.scheduler.compute_target(now),
            last_reschedule_at=state.last_reschedule_at,
            cooldown_seconds=self.scheduler.cooldown_seconds,
            events=self.scheduler.detect(),
        )
