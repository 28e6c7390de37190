"""Scan-job staggering: classifier, target time, state, scheduler, reporter."""

from anchorcron.stagger.classifier import ClassifiedEvent, EventClassifier, is_stagger_target
from anchorcron.stagger.reporter import StaggerReport, StatusReporter
from anchorcron.stagger.scheduler import (
    DEFAULT_COOLDOWN_SECONDS,
    StaggerResult,
    StaggerScheduler,
    StaggerStatus,
    retained_arguments,
)
from anchorcron.stagger.state import StaggerState, StaggerStateStore
from anchorcron.stagger.target_time import (
    DAY_SECONDS,
    TargetTimeDeriver,
    roll_forward,
    site_offset_minutes,
)

__all__ = [
    "ClassifiedEvent",
    "DAY_SECONDS",
    "DEFAULT_COOLDOWN_SECONDS",
    "EventClassifier",
    "StaggerReport",
    "StaggerResult",
    "StaggerScheduler",
    "StaggerState",
    "StaggerStateStore",
    "StaggerStatus",
    "StatusReporter",
    "TargetTimeDeriver",
    "is_stagger_target",
    "retained_arguments",
    "roll_forward",
    "site_offset_minutes",
]
