"""Stagger scheduler — moves detected scan jobs onto the site's derived slot.

Each pass removes every instance of a detected task kind and inserts exactly
one non-recurring instance at the target time. The registry offers no
transactions and removal matches a full natural key, so the exactly-one
outcome rests on the sequence being idempotent: repeating it (including from
concurrent requests racing past the cooldown check) always ends in the same
state, because the target only depends on the site identity and the day.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from anchorcron.registry.adapter import EventRegistryAdapter
from anchorcron.stagger.classifier import ClassifiedEvent, EventClassifier
from anchorcron.stagger.state import StaggerStateStore
from anchorcron.stagger.target_time import DEFAULT_MIN_LEAD_SECONDS, TargetTimeDeriver, roll_forward

if TYPE_CHECKING:
    from anchorcron.config.models import AnchorCronConfig, SiteConfig, StaggerConfig

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 20 * 3600


class StaggerStatus(str, Enum):
    """Outcome of a single scheduler run."""

    DISABLED = "disabled"
    NO_EVENTS = "no_events"
    COOLDOWN = "cooldown"
    RESCHEDULED = "rescheduled"


@dataclass
class StaggerResult:
    """What one call to :meth:`StaggerScheduler.run` did."""

    status: StaggerStatus
    ran_at: int
    forced: bool = False
    target: int | None = None
    kinds: list[str] = field(default_factory=list)
    removed: dict[str, int] = field(default_factory=dict)
    failed_inserts: list[str] = field(default_factory=list)

    @property
    def rescheduled(self) -> bool:
        return self.status is StaggerStatus.RESCHEDULED

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "ran_at": self.ran_at,
            "forced": self.forced,
            "target": self.target,
            "kinds": list(self.kinds),
            "removed": dict(self.removed),
            "failed_inserts": list(self.failed_inserts),
        }


class StaggerLogger:
    """Structured-style logging helper for scheduler events."""

    def log_skip(self, site: str, status: StaggerStatus, detail: str = "") -> None:
        logger.debug("stagger_skip site=%s status=%s detail=%s", site, status.value, detail)

    def log_kind_rescheduled(self, kind: str, removed: int, target: int) -> None:
        logger.info("stagger_kind_rescheduled kind=%s removed=%s target=%s", kind, removed, target)

    def log_insert_failed(self, kind: str, target: int) -> None:
        logger.warning("stagger_insert_failed kind=%s target=%s", kind, target)

    def log_rescheduled(self, site: str, target: int, kinds: Sequence[str], forced: bool) -> None:
        logger.info(
            "stagger_rescheduled site=%s target=%s kinds=%s forced=%s",
            site,
            target,
            list(kinds),
            forced,
        )


def retained_arguments(events: Sequence[ClassifiedEvent]) -> dict[str, tuple[Any, ...]]:
    """Pick, per kind, the args of its first event in *events*.

    With events sorted by due time this is the earliest instance; the scanner
    schedules its scan jobs with one argument shape, so that instance is a
    faithful template. Dict order follows first appearance.
    """
    retained: dict[str, tuple[Any, ...]] = {}
    for event in events:
        retained.setdefault(event.kind, tuple(event.args))
    return retained


class StaggerScheduler:
    """Detect scanner scan jobs and reschedule them onto one per-site slot."""

    def __init__(
        self,
        adapter: EventRegistryAdapter,
        state_store: StaggerStateStore,
        *,
        classifier: EventClassifier | None = None,
        deriver: TargetTimeDeriver | None = None,
        cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS,
        min_lead_seconds: int = DEFAULT_MIN_LEAD_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.adapter = adapter
        self.state_store = state_store
        self.classifier = classifier or EventClassifier()
        self.deriver = deriver or TargetTimeDeriver()
        self.cooldown_seconds = int(cooldown_seconds)
        self.min_lead_seconds = int(min_lead_seconds)
        self._clock = clock
        self._stagger_logger = StaggerLogger()

    @classmethod
    def from_config(
        cls,
        adapter: EventRegistryAdapter,
        state_store: StaggerStateStore,
        config: AnchorCronConfig,
        *,
        clock: Callable[[], float] = time.time,
    ) -> StaggerScheduler:
        scheduler = cls(adapter, state_store, clock=clock)
        scheduler.apply_settings(config.stagger, config.site)
        return scheduler

    @property
    def site_identity(self) -> str:
        return self.state_store.site_identity

    def now(self) -> int:
        return int(self._clock())

    def apply_settings(self, stagger: StaggerConfig, site: SiteConfig | None = None) -> None:
        """Apply cooldown, slot and marker settings from configuration."""
        self.cooldown_seconds = stagger.cooldown_seconds
        self.min_lead_seconds = stagger.min_lead_seconds
        self.classifier = EventClassifier(
            subsystem_marker=stagger.subsystem_marker,
            short_code=stagger.short_code,
            scan_marker=stagger.scan_marker,
        )
        self.deriver = TargetTimeDeriver(
            timezone_name=site.timezone if site is not None else self.deriver.timezone_name,
            spread_minutes=stagger.spread_minutes,
            base_hour=stagger.base_hour,
        )
        logger.info(
            "Applied stagger settings cooldown_seconds=%s spread_minutes=%s base_hour=%s timezone=%s",
            self.cooldown_seconds,
            self.deriver.spread_minutes,
            self.deriver.base_hour,
            self.deriver.timezone_name,
        )

    def compute_target(self, now: int | None = None) -> int:
        """Derived slot for this site, rolled forward when it is (nearly) due."""
        now_ts = self.now() if now is None else int(now)
        target = self.deriver.derive_target(self.site_identity, now_ts)
        return roll_forward(target, now_ts, self.min_lead_seconds)

    def detect(self) -> list[ClassifiedEvent]:
        """Classify the current registry snapshot."""
        return self.classifier.classify(self.adapter.list_all())

    def cooldown_remaining(self, last_reschedule_at: int, now: int) -> int:
        if last_reschedule_at <= 0:
            return 0
        return max(0, self.cooldown_seconds - (now - last_reschedule_at))

    def run(self, force: bool = False) -> StaggerResult:
        """Run one staggering pass.

        Args:
            force: Skip the cooldown check (the enabled flag still applies).

        Returns:
            StaggerResult describing whether and how the registry changed.
        """
        now = self.now()
        state = self.state_store.load()
        if not state.enabled:
            self._stagger_logger.log_skip(self.site_identity, StaggerStatus.DISABLED)
            return StaggerResult(status=StaggerStatus.DISABLED, ran_at=now, forced=force)

        events = self.detect()
        if not events:
            self._stagger_logger.log_skip(self.site_identity, StaggerStatus.NO_EVENTS)
            return StaggerResult(status=StaggerStatus.NO_EVENTS, ran_at=now, forced=force)

        if not force and self.cooldown_remaining(state.last_reschedule_at, now) > 0:
            self._stagger_logger.log_skip(
                self.site_identity,
                StaggerStatus.COOLDOWN,
                f"last_reschedule_at={state.last_reschedule_at}",
            )
            return StaggerResult(status=StaggerStatus.COOLDOWN, ran_at=now, forced=force)

        target = self.compute_target(now)
        result = StaggerResult(status=StaggerStatus.RESCHEDULED, ran_at=now, forced=force, target=target)
        for kind, args in retained_arguments(events).items():
            removed = self.adapter.remove_all_instances(kind)
            result.kinds.append(kind)
            result.removed[kind] = removed
            if self.adapter.insert_once(kind, target, args):
                self._stagger_logger.log_kind_rescheduled(kind, removed, target)
            else:
                result.failed_inserts.append(kind)
                self._stagger_logger.log_insert_failed(kind, target)

        self.state_store.mark_rescheduled(now)
        self._stagger_logger.log_rescheduled(self.site_identity, target, result.kinds, force)
        return result
