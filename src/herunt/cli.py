"""CLI entrypoint.

Commands:
- herunt deploy ...
- herunt doctor ...

CONTRACT
- Inputs: Command line arguments (parsed by Typer), optional herunt.yaml
- Outputs (required):
  - Exit code 0 on success, 1 on a failed deployment, 2 on failed doctor checks
  - Console output rendering the deployment trace as it happens
- Invariants:
  - Command-line values override herunt.yaml values
  - Pipeline work is delegated to herunt.pipeline
- Failure:
  - Invalid configuration raises typer.BadParameter
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import (
    DeploymentConfig,
    DeploymentContext,
    ToolSettings,
    build_context,
    find_config_file,
    load_config_file,
    merge_overrides,
)
from .doctor import doctor_report
from .pipeline import run_pipeline
from .report import write_report
from .steps import default_steps
from .tools import Toolchain
from .trace import Trace, TraceEntry
from .util.events import EventLog, new_deploy_id

app = typer.Typer(add_completion=False, help="Deploy an app folder to Heroku via a git working copy.")

console = Console()


def _version_callback(value: bool):
    if value:
        console.print(f"herunt version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version."
    )
):
    pass


_SRC_OPTION = typer.Option(None, "--src", help="App folder to deploy.")
_DEST_OPTION = typer.Option(None, "--dest", help="Deployment working copy (created if missing).")
_REGION_OPTION = typer.Option(
    None, "--region", help="Region for a newly created Heroku app (e.g. eu)."
)
_EXCLUDE_OPTION = typer.Option(
    None, "--exclude", "-x", help="Extra rsync exclude pattern (repeatable)."
)
_CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="herunt.yaml (default: ./herunt.yaml if present)."
)
_VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Log every command run.")


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _config_path(config: Path | None, src: Path | None, dest: Path | None) -> Path | None:
    if config is not None:
        if not config.is_file():
            raise typer.BadParameter(f"Config file not found: {config}")
        return config
    # ./herunt.yaml is only consulted when the command line leaves a gap.
    return find_config_file(Path.cwd()) if src is None or dest is None else None


def _resolve_context(
    src: Path | None,
    dest: Path | None,
    region: str | None,
    exclude: list[str] | None,
    config: Path | None,
) -> DeploymentContext:
    file_cfg: DeploymentConfig | None = None
    path = _config_path(config, src, dest)
    try:
        if path is not None:
            file_cfg = load_config_file(path)
        cfg = merge_overrides(
            file_cfg,
            src=src,
            dest=dest,
            new_app_region=region,
            exclude=tuple(exclude or ()),
        )
        return build_context(cfg)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def render_entry(entry: TraceEntry) -> None:
    if entry.event == "start":
        console.print(f"[bold]>[/bold] {escape(entry.text)}")
    elif entry.event == "ok":
        detail = f" [cyan]{escape(entry.text)}[/cyan]" if entry.text else ""
        console.print(f"  [green]OK[/green]{detail}")
    elif entry.event == "fail":
        console.print("  [red]ERROR[/red]")
        console.print(entry.text, style="red", markup=False, highlight=False)
    elif entry.event == "note":
        console.print(f"  {entry.text}", style="dim", markup=False, highlight=False)
    else:
        console.print(entry.text, end="", markup=False, highlight=False, soft_wrap=True)


@app.command()
def deploy(
    src: Path | None = _SRC_OPTION,
    dest: Path | None = _DEST_OPTION,
    region: str | None = _REGION_OPTION,
    exclude: list[str] | None = _EXCLUDE_OPTION,
    config: Path | None = _CONFIG_OPTION,
    report: Path | None = typer.Option(None, "--report", help="Write a JSON report here."),
    events: Path | None = typer.Option(None, "--events", help="Append JSONL step events here."),
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Validate, sync, commit and push src to Heroku through dest."""
    _configure_logging(verbose)
    ctx = _resolve_context(src, dest, region, exclude, config)

    trace = Trace()
    trace.add_sink(render_entry)
    outcome = run_pipeline(
        ctx,
        default_steps(),
        tools=Toolchain(settings=ctx.tools),
        trace=trace,
        events=EventLog(events, deploy_id=new_deploy_id()) if events else None,
    )
    if report:
        write_report(report, ctx, outcome)
        console.print(f"Report: {report}")
    if outcome.ok:
        console.print(outcome.describe(), style="bold green")
    else:
        console.print("[bold red]Deployment failed.[/bold red]")
        console.print(outcome.describe(), markup=False, highlight=False)
        raise typer.Exit(code=1)


@app.command()
def doctor(
    src: Path | None = _SRC_OPTION,
    dest: Path | None = _DEST_OPTION,
    config: Path | None = _CONFIG_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Preflight checks; changes nothing. src/dest are checked only when known."""
    _configure_logging(verbose)
    settings = ToolSettings()
    path = _config_path(config, src, dest)
    if path is not None:
        try:
            file_cfg = load_config_file(path)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e
        src, dest, settings = src or file_cfg.src, dest or file_cfg.dest, file_cfg.tools
    report = doctor_report(settings, src=src, dest=dest)
    table = Table(title="herunt doctor")
    table.add_column("Check", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Details")
    for item in report.items:
        table.add_row(item.name, item.status, escape(item.details))
    console.print(table)
    if report.ok:
        console.print("[green]OK[/green]")
    else:
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
