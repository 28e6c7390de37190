"""Configuration change listener helpers for runtime components."""

from __future__ import annotations

from anchorcron.config.manager import ConfigManager
from anchorcron.config.models import AnchorCronConfig
from anchorcron.stagger.scheduler import StaggerScheduler


def register_scheduler_reload_listener(
    scheduler: StaggerScheduler,
    manager: ConfigManager | None = None,
) -> None:
    """Re-apply stagger settings to *scheduler* whenever configuration changes."""
    cfg_manager = manager or ConfigManager.instance()

    def _on_change(old_cfg: AnchorCronConfig, new_cfg: AnchorCronConfig) -> None:
        if old_cfg.stagger == new_cfg.stagger and old_cfg.site.timezone == new_cfg.site.timezone:
            return
        scheduler.apply_settings(new_cfg.stagger, new_cfg.site)

    cfg_manager.on_change(_on_change)
