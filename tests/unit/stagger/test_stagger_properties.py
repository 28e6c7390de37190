from __future__ import annotations

from datetime import datetime, timezone

from hypothesis import given, settings
from hypothesis import strategies as st

from anchorcron.options import InMemoryOptionsStore
from anchorcron.registry import EventRegistryAdapter, InMemoryTaskRegistry, ScheduledTask
from anchorcron.stagger import StaggerScheduler, StaggerStateStore

NOW = int(datetime(2026, 10, 19, 12, tzinfo=timezone.utc).timestamp())

_KINDS = st.sampled_from(
    [
        "wordfence_scan_start",
        "wf_scan_check",
        "wordfence_start_scheduled_scan",
        "wordfence_core_update",
        "cleanup_job",
        "wp_scheduled_delete",
    ]
)
_TASKS = st.lists(
    st.builds(
        ScheduledTask,
        kind=_KINDS,
        due_at=st.integers(min_value=NOW - 86400, max_value=NOW + 7 * 86400),
        recurrence=st.sampled_from([None, "hourly", "daily"]),
        args=st.lists(st.integers(min_value=0, max_value=5), max_size=2).map(tuple),
    ),
    max_size=12,
)


def _scheduler(tasks: list[ScheduledTask]) -> tuple[StaggerScheduler, InMemoryTaskRegistry]:
    registry = InMemoryTaskRegistry(tasks)
    store = StaggerStateStore(InMemoryOptionsStore(), "https://example.org")
    return StaggerScheduler(EventRegistryAdapter(registry), store, clock=lambda: NOW), registry


@given(tasks=_TASKS)
@settings(max_examples=60, deadline=None)
def test_property_forced_run_is_idempotent(tasks: list[ScheduledTask]) -> None:
    scheduler, registry = _scheduler(tasks)

    scheduler.run(force=True)
    once = registry.list_all()
    scheduler.run(force=True)

    assert registry.list_all() == once


@given(tasks=_TASKS)
@settings(max_examples=60, deadline=None)
def test_property_exactly_one_instance_per_detected_kind(tasks: list[ScheduledTask]) -> None:
    scheduler, registry = _scheduler(tasks)
    detected = {event.kind for event in scheduler.detect()}
    untouched = [task for task in registry.list_all() if task.kind not in detected]

    result = scheduler.run(force=True)

    for kind in detected:
        instances = [task for task in registry.list_all() if task.kind == kind]
        assert len(instances) == 1
        assert instances[0].due_at == result.target
        assert instances[0].recurrence is None
    assert [task for task in registry.list_all() if task.kind not in detected] == untouched
