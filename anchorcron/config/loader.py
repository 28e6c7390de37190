"""YAML configuration loading and default template rendering."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

CONFIG_ENV_VAR = "ANCHORCRON_CONFIG"
DEFAULT_FILENAME = "anchorcron.yaml"
# A shared hosting config may nest our settings under this key.
NAMESPACE_KEY = "anchorcron"


class ConfigLoadError(ValueError):
    """Raised when configuration YAML cannot be parsed."""


def resolve_config_path(cli_path: str | None = None) -> Path:
    """Pick the config file: $ANCHORCRON_CONFIG, then the CLI path, then ./anchorcron.yaml."""
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path)
    if cli_path and cli_path.strip():
        return Path(cli_path.strip())
    return Path.cwd() / DEFAULT_FILENAME


def load_config_dict(path: str | Path | None = None) -> dict[str, Any]:
    """Read the YAML mapping at *path*.

    A missing or blank file is an empty mapping. When the document holds a
    top-level ``anchorcron`` mapping, only that section is returned.
    """
    target = Path(path) if path is not None else resolve_config_path()
    if not target.is_file():
        return {}
    text = target.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        where = f"{target}:{mark.line + 1}:{mark.column + 1}" if mark is not None else str(target)
        raise ConfigLoadError(f"Invalid YAML at {where}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Config root must be mapping: {target}")
    nested = data.get(NAMESPACE_KEY)
    if nested is not None:
        if not isinstance(nested, dict):
            raise ConfigLoadError(f"'{NAMESPACE_KEY}' section must be mapping: {target}")
        return nested
    return data


def render_default_yaml(defaults: dict[str, Any]) -> str:
    """Serialize a defaults mapping as the commented config template."""
    header = (
        "# anchorcron configuration\n"
        "# Environment variables override these values, e.g. ANCHORCRON_SITE__IDENTITY.\n"
    )
    return header + yaml.safe_dump(defaults, sort_keys=False, default_flow_style=False)
