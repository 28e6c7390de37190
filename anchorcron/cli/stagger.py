"""anchorcron stagger — run, status, enable, disable, toggle."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import typer
from rich.console import Console
from rich.table import Table

from anchorcron.actions import TOGGLE_STAGGER
from anchorcron.app import AnchorCron
from anchorcron.stagger.reporter import StaggerReport

console = Console()

stagger_app = typer.Typer(
    name="stagger",
    help="Detect and reschedule security-scanner scan jobs.",
)

_CONFIG_OPTION = typer.Option("", "--config", "-c", help="Config file path (default: ./anchorcron.yaml)")


def build_app(config: str = "") -> AnchorCron:
    """Build the runtime from configuration; tests patch this to inject stores."""
    return AnchorCron.from_config_file(config_path=config or None)


def _format_ts(value: int | None) -> str:
    if not value:
        return "never"
    return datetime.fromtimestamp(value, timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _print_report(report: StaggerReport) -> None:
    console.print(f"[bold]Site:[/bold] {report.site_identity}")
    console.print(f"Enabled: {'yes' if report.enabled else 'no'}")
    console.print(f"Target: {_format_ts(report.target)}")
    console.print(f"Last reschedule: {_format_ts(report.last_reschedule_at)}")
    next_eligible = report.next_eligible_at
    console.print(f"Next eligible run: {_format_ts(next_eligible) if next_eligible else 'now'}")
    table = Table(title=f"Detected scan jobs ({len(report.events)})")
    table.add_column("Kind")
    table.add_column("Due")
    table.add_column("Recurrence")
    table.add_column("Args")
    for event in report.events:
        table.add_row(
            event.kind,
            _format_ts(event.due_at),
            event.task.recurrence or "once",
            json.dumps(list(event.args), default=str),
        )
    console.print(table)


@stagger_app.command("run")
def run_command(
    force: bool = typer.Option(False, "--force", "-f", help="Ignore the cooldown window"),
    config: str = _CONFIG_OPTION,
) -> None:
    """Run one staggering pass."""
    result = build_app(config).scheduler.run(force=force)
    if result.rescheduled:
        console.print(
            f"[green]Rescheduled[/green] {', '.join(result.kinds)} to {_format_ts(result.target)}"
        )
        for kind in result.failed_inserts:
            console.print(f"[yellow]Insert failed:[/yellow] {kind}")
    else:
        console.print(f"Nothing rescheduled ({result.status.value}).")


@stagger_app.command("status")
def status_command(
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    config: str = _CONFIG_OPTION,
) -> None:
    """Show detected scan jobs, the derived target and the cooldown state."""
    report = build_app(config).status()
    if json_output:
        typer.echo(json.dumps(report.to_dict(), default=str))
        return
    _print_report(report)


def _set_enabled(config: str, enabled: bool) -> None:
    state = build_app(config).state_store.set_enabled(enabled)
    console.print(f"Scan staggering {'enabled' if state.enabled else 'disabled'}.")


@stagger_app.command("enable")
def enable_command(config: str = _CONFIG_OPTION) -> None:
    """Enable scan staggering."""
    _set_enabled(config, True)


@stagger_app.command("disable")
def disable_command(config: str = _CONFIG_OPTION) -> None:
    """Disable scan staggering; the cooldown clock is kept."""
    _set_enabled(config, False)


@stagger_app.command("toggle")
def toggle_command(config: str = _CONFIG_OPTION) -> None:
    """Flip the enabled flag."""
    result = build_app(config).dispatch(TOGGLE_STAGGER)
    console.print(result.message)
