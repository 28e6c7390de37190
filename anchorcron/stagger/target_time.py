"""Deterministic per-site target time derivation."""

from __future__ import annotations

import logging
import time
import zlib
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DAY_SECONDS = 86400
DEFAULT_SPREAD_MINUTES = 360
DEFAULT_BASE_HOUR = 3
DEFAULT_MIN_LEAD_SECONDS = 60


def site_offset_minutes(site_identity: str, spread_minutes: int = DEFAULT_SPREAD_MINUTES) -> int:
    """Map a site identity onto [0, spread_minutes) using CRC32."""
    if spread_minutes < 1:
        raise ValueError("spread_minutes must be >= 1")
    return zlib.crc32(site_identity.encode("utf-8")) % spread_minutes


def roll_forward(target: int, now: int, min_lead_seconds: int = DEFAULT_MIN_LEAD_SECONDS) -> int:
    """Push a target that is due within *min_lead_seconds* (or past) one day later."""
    if target <= now + min_lead_seconds:
        return target + DAY_SECONDS
    return target


class TargetTimeDeriver:
    """Compute the site's stagger slot: tomorrow at ``base_hour`` plus a hashed offset.

    Sites sharing a host each land somewhere in a ``spread_minutes`` window
    without coordinating; the slot depends only on the identity and the
    calendar day in the site time zone.
    """

    def __init__(
        self,
        timezone_name: str = "UTC",
        spread_minutes: int = DEFAULT_SPREAD_MINUTES,
        base_hour: int = DEFAULT_BASE_HOUR,
    ) -> None:
        if not 0 <= base_hour <= 23:
            raise ValueError("base_hour must be between 0 and 23")
        if spread_minutes < 1:
            raise ValueError("spread_minutes must be >= 1")
        self.timezone_name = timezone_name
        self.spread_minutes = spread_minutes
        self.base_hour = base_hour

    def _zone(self) -> tzinfo:
        if self.timezone_name.strip().upper() in {"UTC", "Z"}:
            return timezone.utc
        return ZoneInfo(self.timezone_name.strip())

    def next_base(self, now: int) -> int:
        """Return tomorrow's ``base_hour``:00 in the site time zone as a Unix time."""
        zone = self._zone()
        tomorrow = datetime.fromtimestamp(now, zone).date() + timedelta(days=1)
        base = datetime(tomorrow.year, tomorrow.month, tomorrow.day, self.base_hour, tzinfo=zone)
        return int(base.timestamp())

    def offset_minutes(self, site_identity: str) -> int:
        return site_offset_minutes(site_identity, self.spread_minutes)

    def derive_target(self, site_identity: str, now: int | None = None) -> int:
        """Return the stagger slot for *site_identity*.

        Falls back to ``now + 24h`` as the base when the site-local base time
        cannot be computed (unknown time zone, out-of-range timestamp).
        """
        now_ts = int(time.time() if now is None else now)
        try:
            base = self.next_base(now_ts)
        except (ZoneInfoNotFoundError, ValueError, OverflowError, OSError) as exc:
            logger.debug("target_base_fallback timezone=%s error=%s", self.timezone_name, exc)
            base = now_ts + DAY_SECONDS
        return base + self.offset_minutes(site_identity) * 60
