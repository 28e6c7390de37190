"""Config reload command implementation."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.table import Table

from anchorcron.config import ConfigManager, ReloadResult

console = Console()


def _render(result: ReloadResult) -> Table:
    table = Table(title="Reload Result")
    table.add_column("Setting")
    table.add_column("New value")
    table.add_column("Effect")
    for key, value in sorted(result.applied.items()):
        table.add_row(key, repr(value), "[green]applied[/green]")
    for key, value in sorted(result.skipped.items()):
        table.add_row(key, repr(value), "[yellow]requires restart[/yellow]")
    return table


def reload_config_command(config: str | None = None) -> ReloadResult:
    """Reload configuration and show which changes took effect."""
    result = ConfigManager.instance().reload(config_path=config)
    if not result.applied and not result.skipped:
        console.print("No configuration changes detected.")
    else:
        console.print(_render(result))
    if config is not None and not Path(config).exists():
        console.print(f"[yellow]Note:[/yellow] config file not found, defaults/env/overrides were used: {config}")
    return result
