"""anchorcron application facade: wires configuration, stores and scheduler."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from anchorcron.actions import ActionResult, AdminActionDispatcher
from anchorcron.config import AnchorCronConfig, ConfigManager, register_scheduler_reload_listener
from anchorcron.db import create_session_factory, get_engine, init_schema, resolve_database_url
from anchorcron.options.protocols import OptionsStore
from anchorcron.registry.adapter import EventRegistryAdapter
from anchorcron.registry.protocols import TaskRegistry
from anchorcron.stagger.reporter import StaggerReport, StatusReporter
from anchorcron.stagger.scheduler import StaggerResult, StaggerScheduler
from anchorcron.stagger.state import StaggerStateStore

logger = logging.getLogger(__name__)


class AnchorCron:
    """One site's staggering runtime.

    Stores default to the SQL backends on ``config.database.url`` (falling
    back to ``ANCHORCRON_DATABASE_URL``, then a local SQLite file); pass
    ``registry``/``options`` to plug in the host's own task table and
    settings store instead.
    """

    def __init__(
        self,
        config: AnchorCronConfig | None = None,
        *,
        registry: TaskRegistry | None = None,
        options: OptionsStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or AnchorCronConfig()
        site_identity = self.config.site.identity.strip()
        self.database_url: str | None = None
        if registry is None or options is None:
            registry, options = self._build_sql_stores(site_identity, registry, options)
        self._clock = clock
        self.adapter = EventRegistryAdapter(registry)
        self.state_store = StaggerStateStore(
            options,
            site_identity,
            default_enabled=self.config.stagger.enabled,
        )
        self.scheduler = StaggerScheduler.from_config(self.adapter, self.state_store, self.config, clock=clock)
        self.reporter = StatusReporter(self.scheduler)
        self.actions = AdminActionDispatcher(self.scheduler)

    @classmethod
    def from_config_file(
        cls,
        config_path: str | None = None,
        overrides: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> AnchorCron:
        """Load configuration through ConfigManager and follow its hot reloads."""
        manager = ConfigManager.load(config_path=config_path, overrides=overrides)
        app = cls(manager.get(), **kwargs)
        register_scheduler_reload_listener(app.scheduler, manager)
        return app

    def _build_sql_stores(
        self,
        site_identity: str,
        registry: TaskRegistry | None,
        options: OptionsStore | None,
    ) -> tuple[TaskRegistry, OptionsStore]:
        from anchorcron.options.sql import SQLOptionsStore
        from anchorcron.registry.sql import SQLTaskRegistry

        # Runtimes on the same URL share one cached engine and pool.
        self.database_url = resolve_database_url(self.config.database.url)
        engine = get_engine(self.database_url, echo=self.config.database.echo)
        init_schema(engine)
        factory = create_session_factory(engine)
        return (
            registry if registry is not None else SQLTaskRegistry(factory, site_id=site_identity),
            options if options is not None else SQLOptionsStore(factory, site_id=site_identity),
        )

    def on_request(self) -> StaggerResult:
        """Per-request hook: cheap cooldown-gated staggering pass."""
        return self.scheduler.run(force=False)

    def activate(self) -> bool:
        """Write default state (never overwriting) and schedule the maintenance hook.

        Returns True when the stagger state was created by this call.
        """
        created = self.state_store.ensure_defaults()
        stagger_cfg = self.config.stagger
        self.adapter.ensure_recurring(
            stagger_cfg.maintenance_hook,
            stagger_cfg.maintenance_recurrence,
            int(self._clock()),
        )
        logger.info("anchorcron_activated site=%s state_created=%s", self.state_store.site_identity, created)
        return created

    def deactivate(self) -> bool:
        """Unschedule the maintenance hook; stagger state is deliberately kept."""
        removed = self.adapter.unschedule_next(self.config.stagger.maintenance_hook)
        logger.info("anchorcron_deactivated site=%s hook_removed=%s", self.state_store.site_identity, removed)
        return removed

    def status(self) -> StaggerReport:
        return self.reporter.report()

    def dispatch(self, action: str) -> ActionResult:
        return self.actions.dispatch(action)
