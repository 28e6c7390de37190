"""CLI tools — anchorcron init, reload, stagger, action."""

import sys
from importlib import metadata

import typer

from anchorcron.actions import UnknownActionError
from anchorcron.cli import stagger as stagger_cli
from anchorcron.cli.init_config import init_config_command
from anchorcron.cli.reload_config import reload_config_command
from anchorcron.cli.stagger import stagger_app

app = typer.Typer(
    name="anchorcron",
    help="anchorcron — stagger security-scanner cron jobs across shared-host sites.",
)
app.add_typer(stagger_app, name="stagger")


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        version = metadata.version("anchorcron")
    except metadata.PackageNotFoundError:
        version = "unknown"
    typer.echo(f"anchorcron {version}")
    raise typer.Exit(0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """anchorcron command line."""


@app.command("init")
def init_command(
    path: str = typer.Option(".", "--path", help="Output directory"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing anchorcron.yaml"),
    identity: str = typer.Option("", "--identity", help="Site base URL to write as site.identity"),
) -> None:
    """Generate default anchorcron.yaml in target directory."""
    try:
        init_config_command(path=path, force=force, identity=identity)
    except FileExistsError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


@app.command("reload")
def reload_command(
    config: str = typer.Option("", "--config", help="Optional config file path"),
) -> None:
    """Reload configuration and print applied/skipped changes."""
    reload_config_command(config=config or None)


@app.command("action")
def action_command(
    name: str = typer.Argument(..., help="Admin action: toggle_wf_stagger or wf_reschedule_now"),
    config: str = typer.Option("", "--config", "-c", help="Config file path"),
) -> None:
    """Dispatch a named admin action."""
    runtime = stagger_cli.build_app(config)
    try:
        result = runtime.dispatch(name)
    except UnknownActionError as exc:
        typer.echo(f"{exc}. Known actions: {', '.join(runtime.actions.actions)}", err=True)
        raise typer.Exit(2) from exc
    typer.echo(result.message)


def main() -> None:
    """CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(130)
