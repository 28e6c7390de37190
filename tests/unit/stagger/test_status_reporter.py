from __future__ import annotations

import json

from anchorcron.stagger import StatusReporter

HOUR = 3600


def test_report_lists_detected_events_and_target(scheduler, registry, clock) -> None:
    registry.insert_once("wordfence_scan_start", clock.now + 2 * HOUR, ["a"])
    registry.insert_once("wf_scan_check", clock.now + HOUR, [])
    registry.insert_once("cleanup_job", clock.now + HOUR, [])

    report = StatusReporter(scheduler).report()

    assert report.enabled is True
    assert report.site_identity == scheduler.site_identity
    assert [event.kind for event in report.events] == ["wf_scan_check", "wordfence_scan_start"]
    assert report.target == scheduler.compute_target(clock.now)
    assert report.last_reschedule_at == 0
    assert report.next_eligible_at is None


def test_report_has_no_side_effects(scheduler, registry, options, state_store, clock) -> None:
    registry.insert_once("wf_scan_check", clock.now + HOUR, [])
    before = registry.list_all()

    reporter = StatusReporter(scheduler)
    reporter.report()
    reporter.report()

    assert registry.list_all() == before
    assert state_store.exists() is False


def test_report_reflects_cooldown_state(scheduler, state_store, clock) -> None:
    state_store.mark_rescheduled(clock.now - HOUR)
    state_store.set_enabled(False)

    report = StatusReporter(scheduler).report()

    assert report.enabled is False
    assert report.last_reschedule_at == clock.now - HOUR
    assert report.next_eligible_at == clock.now - HOUR + 20 * HOUR
    assert report.events == []


def test_report_to_dict_is_json_serializable(scheduler, registry, clock) -> None:
    registry.insert_once("wf_scan_check", clock.now + HOUR, [{"nested": True}])

    data = StatusReporter(scheduler).report().to_dict()

    decoded = json.loads(json.dumps(data))
    assert decoded["events"][0]["kind"] == "wf_scan_check"
    assert decoded["events"][0]["args"] == [{"nested": True}]
    assert decoded["cooldown_seconds"] == 20 * HOUR
