from __future__ import annotations

import zlib
from collections import Counter
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest
from hypothesis import given
from hypothesis import strategies as st

from anchorcron.stagger import DAY_SECONDS, TargetTimeDeriver, roll_forward, site_offset_minutes

SITE = "https://example.org"


def _utc(*args: int) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp())


def test_target_is_tomorrow_three_am_plus_crc_offset() -> None:
    now = _utc(2026, 10, 19, 12, 0)
    expected_offset = zlib.crc32(SITE.encode("utf-8")) % 360

    target = TargetTimeDeriver().derive_target(SITE, now)

    assert target == _utc(2026, 10, 20, 3, 0) + expected_offset * 60


def test_target_is_stable_within_a_calendar_day() -> None:
    deriver = TargetTimeDeriver()

    early = deriver.derive_target(SITE, _utc(2026, 10, 19, 0, 5))
    late = deriver.derive_target(SITE, _utc(2026, 10, 19, 23, 55))

    assert early == late
    assert deriver.derive_target(SITE, _utc(2026, 10, 19, 12)) == early


def test_target_moves_one_day_with_the_calendar() -> None:
    deriver = TargetTimeDeriver()

    today = deriver.derive_target(SITE, _utc(2026, 10, 19, 12))
    tomorrow = deriver.derive_target(SITE, _utc(2026, 10, 20, 12))

    assert tomorrow - today == DAY_SECONDS


def test_target_uses_site_time_zone() -> None:
    try:
        zone = ZoneInfo("America/New_York")
    except ZoneInfoNotFoundError:
        pytest.skip("time zone database not available")
    deriver = TargetTimeDeriver(timezone_name="America/New_York", spread_minutes=1)

    target = deriver.derive_target(SITE, _utc(2026, 10, 19, 12))

    assert target == int(datetime(2026, 10, 20, 3, 0, tzinfo=zone).timestamp())


def test_unknown_time_zone_falls_back_to_now_plus_one_day() -> None:
    now = _utc(2026, 10, 19, 12)
    deriver = TargetTimeDeriver(timezone_name="Not/A_Zone")

    target = deriver.derive_target(SITE, now)

    assert target == now + DAY_SECONDS + deriver.offset_minutes(SITE) * 60


def test_custom_base_hour_and_spread() -> None:
    deriver = TargetTimeDeriver(spread_minutes=1, base_hour=5)

    assert deriver.derive_target(SITE, _utc(2026, 10, 19, 12)) == _utc(2026, 10, 20, 5, 0)


def test_invalid_parameters_are_rejected() -> None:
    with pytest.raises(ValueError):
        TargetTimeDeriver(spread_minutes=0)
    with pytest.raises(ValueError):
        TargetTimeDeriver(base_hour=24)
    with pytest.raises(ValueError):
        site_offset_minutes(SITE, 0)


def test_roll_forward_pushes_near_or_past_targets_one_day() -> None:
    now = 1_000_000

    assert roll_forward(now + 10, now) == now + 10 + DAY_SECONDS
    assert roll_forward(now + 60, now) == now + 60 + DAY_SECONDS
    assert roll_forward(now - 3600, now) == now - 3600 + DAY_SECONDS
    assert roll_forward(now + 61, now) == now + 61


def test_offsets_spread_across_the_window() -> None:
    identities = [f"https://customer-{index}.example.com" for index in range(3600)]

    buckets = Counter(site_offset_minutes(identity) // 60 for identity in identities)

    assert set(buckets) == set(range(6))
    assert min(buckets.values()) > 400


@given(identity=st.text(min_size=1, max_size=80))
def test_property_offset_within_spread_window(identity: str) -> None:
    offset = site_offset_minutes(identity)
    assert 0 <= offset < 360
    assert site_offset_minutes(identity) == offset


@given(
    identity=st.text(min_size=1, max_size=40),
    seconds_into_day=st.integers(min_value=0, max_value=DAY_SECONDS - 1),
)
def test_property_target_deterministic_per_day(identity: str, seconds_into_day: int) -> None:
    deriver = TargetTimeDeriver()
    midnight = _utc(2026, 10, 19)

    assert deriver.derive_target(identity, midnight + seconds_into_day) == deriver.derive_target(identity, midnight)
