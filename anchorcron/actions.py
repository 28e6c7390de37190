"""Named admin actions routed to the stagger scheduler."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from anchorcron.stagger.scheduler import StaggerScheduler, StaggerStatus

logger = logging.getLogger(__name__)

TOGGLE_STAGGER = "toggle_wf_stagger"
RESCHEDULE_NOW = "wf_reschedule_now"


class UnknownActionError(ValueError):
    """Raised when an action name has no registered handler."""


@dataclass
class ActionResult:
    """Outcome of a dispatched admin action."""

    action: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)


class AdminActionDispatcher:
    """Dispatch admin actions by name.

    Callers are expected to have authenticated and authorized the request;
    this layer only maps names to scheduler operations.
    """

    def __init__(self, scheduler: StaggerScheduler) -> None:
        self.scheduler = scheduler
        self._handlers: dict[str, Callable[[], ActionResult]] = {
            TOGGLE_STAGGER: self._toggle_stagger,
            RESCHEDULE_NOW: self._reschedule_now,
        }

    @property
    def actions(self) -> list[str]:
        return sorted(self._handlers)

    def dispatch(self, action: str) -> ActionResult:
        name = action.strip() if isinstance(action, str) else ""
        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownActionError(f"Unknown admin action: '{action}'")
        result = handler()
        logger.info("admin_action action=%s message=%s", name, result.message)
        return result

    def _toggle_stagger(self) -> ActionResult:
        store = self.scheduler.state_store
        state = store.set_enabled(not store.load().enabled)
        verb = "enabled" if state.enabled else "disabled"
        return ActionResult(
            action=TOGGLE_STAGGER,
            message=f"Scan staggering {verb}.",
            data={"enabled": state.enabled},
        )

    def _reschedule_now(self) -> ActionResult:
        outcome = self.scheduler.run(force=True)
        if outcome.rescheduled:
            message = f"Rescheduled {len(outcome.kinds)} scan job kind(s) to {outcome.target}."
        elif outcome.status is StaggerStatus.DISABLED:
            message = "Scan staggering is disabled; nothing rescheduled."
        else:
            message = "No scan jobs detected; nothing rescheduled."
        return ActionResult(action=RESCHEDULE_NOW, message=message, data=outcome.to_dict())
