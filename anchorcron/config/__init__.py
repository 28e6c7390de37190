"""Unified configuration system for anchorcron."""

from anchorcron.config.listeners import register_scheduler_reload_listener
from anchorcron.config.loader import ConfigLoadError, load_config_dict, resolve_config_path
from anchorcron.config.manager import ConfigManager, ReloadResult
from anchorcron.config.models import (
    AnchorCronConfig,
    DatabaseConfig,
    SiteConfig,
    StaggerConfig,
)

__all__ = [
    "AnchorCronConfig",
    "ConfigLoadError",
    "ConfigManager",
    "DatabaseConfig",
    "ReloadResult",
    "SiteConfig",
    "StaggerConfig",
    "load_config_dict",
    "register_scheduler_reload_listener",
    "resolve_config_path",
]
