"""Configuration manager for anchorcron.

Settings are layered: model defaults, then the YAML file, then ``ANCHORCRON_*``
environment variables, then runtime overrides. ``reload()`` re-reads the same
layers but only swaps in the sections a running scheduler can absorb.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, ClassVar

from anchorcron.config.loader import load_config_dict
from anchorcron.config.models import AnchorCronConfig

ConfigListener = Callable[[AnchorCronConfig, AnchorCronConfig], None]

ENV_PREFIX = "ANCHORCRON_"
# Flat variables that name a settings path directly.
ENV_ALIASES: dict[str, str] = {"ANCHORCRON_DATABASE_URL": "database.url"}
HOT_RELOADABLE: tuple[str, ...] = ("stagger.", "site.timezone")


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            target[key] = _merge_into(dict(current), value)
        else:
            target[key] = value
    return target


def _set_path(target: dict[str, Any], path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    cursor = target
    for part in parents:
        child = cursor.get(part)
        if not isinstance(child, dict):
            child = cursor[part] = {}
        cursor = child
    cursor[leaf] = value


def _iter_leaves(data: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    for key, value in data.items():
        path = f"{prefix}{key}"
        if isinstance(value, Mapping):
            yield from _iter_leaves(value, f"{path}.")
        else:
            yield path, value


def _parse_env_value(raw: str) -> Any:
    """Interpret booleans, nulls and JSON containers; leave the rest to pydantic."""
    text = raw.strip()
    keyword = text.lower()
    if keyword in ("true", "false"):
        return keyword == "true"
    if keyword in ("null", "none"):
        return None
    if text.startswith(("[", "{")):
        try:
            return json.loads(text)
        except ValueError:
            return text
    return text


def _env_path(name: str) -> str | None:
    if name in ENV_ALIASES:
        return ENV_ALIASES[name]
    if not name.startswith(ENV_PREFIX):
        return None
    parts = [part.strip().lower() for part in name[len(ENV_PREFIX) :].split("__") if part.strip()]
    # Single-segment names (ANCHORCRON_CONFIG) are not settings paths.
    return ".".join(parts) if len(parts) >= 2 else None


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Nested override mapping built from ``ANCHORCRON_SECTION__FIELD`` variables."""
    overrides: dict[str, Any] = {}
    for name, raw in sorted((environ if environ is not None else os.environ).items()):
        path = _env_path(name)
        if path is not None:
            _set_path(overrides, path, _parse_env_value(raw))
    return overrides


@dataclass(frozen=True)
class ConfigSources:
    """Where a configuration snapshot comes from."""

    config_path: str | None = None
    overrides: dict[str, Any] = field(default_factory=dict)

    def build(self) -> AnchorCronConfig:
        data: dict[str, Any] = {}
        for layer in (load_config_dict(self.config_path), env_overrides(), self.overrides):
            _merge_into(data, layer)
        return AnchorCronConfig.model_validate(data)


@dataclass(frozen=True)
class ReloadResult:
    """Changes detected by a hot reload, split by whether they took effect."""

    applied: dict[str, Any]
    skipped: dict[str, Any]


def classify_changes(old: AnchorCronConfig, new: AnchorCronConfig) -> ReloadResult:
    """Diff two snapshots by dotted path and split out the hot-reloadable paths."""
    before = dict(_iter_leaves(old.model_dump(mode="python")))
    applied: dict[str, Any] = {}
    skipped: dict[str, Any] = {}
    for path, value in _iter_leaves(new.model_dump(mode="python")):
        if before.get(path) == value:
            continue
        bucket = applied if path.startswith(HOT_RELOADABLE) else skipped
        bucket[path] = value
    return ReloadResult(applied=applied, skipped=skipped)


class ConfigManager:
    """Process-wide holder of the current configuration snapshot."""

    _instance: ClassVar[ConfigManager | None] = None
    _class_lock: ClassVar[Lock] = Lock()

    def __init__(self) -> None:
        self._lock = Lock()
        self._sources = ConfigSources()
        self._config = AnchorCronConfig.model_validate({})
        self._listeners: list[ConfigListener] = []

    @classmethod
    def instance(cls) -> ConfigManager:
        with cls._class_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def _reset_for_tests(cls) -> None:
        with cls._class_lock:
            cls._instance = None

    @classmethod
    def load(
        cls,
        config_path: str | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> ConfigManager:
        """Replace the snapshot with a fresh build of every layer."""
        manager = cls.instance()
        sources = ConfigSources(config_path=config_path, overrides=dict(overrides or {}))
        manager._swap(sources, sources.build())
        return manager

    def get(self) -> AnchorCronConfig:
        with self._lock:
            return self._config

    def on_change(self, callback: ConfigListener) -> None:
        with self._lock:
            self._listeners.append(callback)

    def reload(self, config_path: str | None = None) -> ReloadResult:
        """Re-read configuration and apply only the hot-reloadable changes.

        Site identity and database settings need a restart: the identity
        seeds the persisted state key and the stores are bound at startup.
        """
        with self._lock:
            current = self._config
            sources = self._sources
        if config_path is not None:
            sources = ConfigSources(config_path=config_path, overrides=sources.overrides)

        result = classify_changes(current, sources.build())
        if not result.applied:
            with self._lock:
                self._sources = sources
            return result

        patched = current.model_dump(mode="python")
        for path, value in result.applied.items():
            _set_path(patched, path, value)
        self._swap(sources, AnchorCronConfig.model_validate(patched))
        return result

    def _swap(self, sources: ConfigSources, new_config: AnchorCronConfig) -> None:
        with self._lock:
            old = self._config
            self._sources = sources
            self._config = new_config
            listeners = list(self._listeners)
        for callback in listeners:
            callback(old, new_config)
