"""Persisted stagger state kept in the options store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from anchorcron.options.protocols import OptionsStore

logger = logging.getLogger(__name__)

STATE_KEY_PREFIX = "stagger_state:"
_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off", ""})


def _coerce_flag(value: Any, default: bool) -> bool:
    """Read a stored flag; hosts may persist it as a bool, 0/1 or a string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    logger.warning("stagger_flag_unrecognized value=%r default=%s", value, default)
    return default


@dataclass(frozen=True)
class StaggerState:
    """Feature flag plus the time of the last rescheduling pass."""

    enabled: bool = True
    last_reschedule_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "last_reschedule_at": self.last_reschedule_at}


class StaggerStateStore:
    """Read and write one site's :class:`StaggerState`.

    The record is never deleted, so a deactivate/reactivate cycle keeps both
    the operator's enabled choice and the cooldown clock.
    """

    def __init__(self, options: OptionsStore, site_identity: str, *, default_enabled: bool = True) -> None:
        if not isinstance(site_identity, str) or not site_identity.strip():
            raise ValueError("site_identity must be a non-empty string")
        self.options = options
        self.site_identity = site_identity.strip()
        self.default_enabled = default_enabled

    @property
    def key(self) -> str:
        return f"{STATE_KEY_PREFIX}{self.site_identity}"

    def exists(self) -> bool:
        return self.options.get(self.key) is not None

    def load(self) -> StaggerState:
        raw = self.options.get(self.key)
        if raw is None:
            return StaggerState(enabled=self.default_enabled)
        if not isinstance(raw, dict):
            logger.warning("stagger_state_malformed key=%s type=%s", self.key, type(raw).__name__)
            return StaggerState(enabled=self.default_enabled)
        try:
            last = max(0, int(raw.get("last_reschedule_at", 0) or 0))
        except (TypeError, ValueError):
            last = 0
        enabled = _coerce_flag(raw.get("enabled", self.default_enabled), self.default_enabled)
        return StaggerState(enabled=enabled, last_reschedule_at=last)

    def save(self, state: StaggerState) -> None:
        self.options.set(self.key, state.to_dict())

    def ensure_defaults(self) -> bool:
        """Write the default record unless one exists; True when written."""
        if self.exists():
            return False
        self.save(StaggerState(enabled=self.default_enabled))
        return True

    def set_enabled(self, enabled: bool) -> StaggerState:
        current = self.load()
        updated = StaggerState(enabled=bool(enabled), last_reschedule_at=current.last_reschedule_at)
        self.save(updated)
        return updated

    def mark_rescheduled(self, now: int) -> StaggerState:
        """Record a completed pass; the timestamp never moves backwards."""
        current = self.load()
        updated = StaggerState(
            enabled=current.enabled,
            last_reschedule_at=max(current.last_reschedule_at, int(now)),
        )
        self.save(updated)
        return updated
