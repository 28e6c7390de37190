"""Config template initialization command."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from anchorcron.config.loader import DEFAULT_FILENAME, render_default_yaml
from anchorcron.config.models import AnchorCronConfig

console = Console()


def init_config_command(path: str = ".", force: bool = False, identity: str = "") -> Path:
    """Write anchorcron.yaml with default settings into *path*."""
    target_dir = Path(path).resolve()
    target_dir.mkdir(parents=True, exist_ok=True)
    output_path = target_dir / DEFAULT_FILENAME
    if output_path.exists() and not force:
        raise FileExistsError(f"Config already exists: {output_path}")
    defaults = AnchorCronConfig.model_validate({}).model_dump(mode="json")
    if identity.strip():
        defaults["site"]["identity"] = identity.strip()
    output_path.write_text(render_default_yaml(defaults), encoding="utf-8")
    console.print(f"[green]Created[/green] {output_path}")
    return output_path
