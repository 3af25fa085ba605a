"""Batch apply CLI command driven by optdl.yml."""
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from optdl.core.errors import OptdlError
from optdl.models.config import ConfigValidationError

# Module-level console instance (will be set by register function)
console: Console = Console()


def apply(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Config file path"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only report what would change"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    mock: bool = typer.Option(False, "--mock", help="Use the mock host instead of the OS"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Converge every optical disk declared in optdl.yml."""
    from optdl.cli_support import (
        build_resource,
        confirm_action,
        find_config,
        handle_cli_error,
        is_mock,
        print_error,
        print_info,
        print_success,
        setup_file_logging,
    )
    from optdl.config.loader import ResourceConfigLoader
    from optdl.core.applicator import ApplyStatus, apply_resources, summarize_outcomes

    setup_file_logging(log_file=log_file, verbose=verbose)

    config_file = find_config(config)
    try:
        desired_states = ResourceConfigLoader(config_file).load()
        resource = build_resource(mock=mock)
    except (ConfigValidationError, FileNotFoundError, OptdlError) as e:
        handle_cli_error(e, console, verbose)
        return

    print_info(console, f"Loaded {len(desired_states)} optical disk resource(s) from {config_file}")

    if not dry_run and not confirm_action(
        "Apply drive letter changes?", yes_flag=yes, mock=mock or is_mock()
    ):
        print_info(console, "Cancelled")
        raise typer.Exit(1)

    outcomes = apply_resources(resource, desired_states, dry_run=dry_run)

    status_labels = {
        ApplyStatus.IN_DESIRED_STATE: "[green]in desired state[/green]",
        ApplyStatus.CHANGED: "[cyan]changed[/cyan]",
        ApplyStatus.WOULD_CHANGE: "[yellow]would change[/yellow]",
        ApplyStatus.FAILED: "[red]failed[/red]",
    }

    table = Table(title="Optical disk drive letters", show_header=True, header_style="bold cyan")
    table.add_column("Disk", justify="right")
    table.add_column("Drive letter")
    table.add_column("Ensure")
    table.add_column("Result")
    table.add_column("Details", overflow="fold")
    for outcome in outcomes:
        table.add_row(
            outcome.desired.disk_id,
            outcome.desired.drive_letter,
            outcome.desired.ensure.value,
            status_labels.get(outcome.status, outcome.status),
            outcome.message,
        )
    console.print(table)

    counts = summarize_outcomes(outcomes)
    failed = counts.get(ApplyStatus.FAILED, 0)
    if failed:
        print_error(console, f"{failed} optical disk resource(s) failed")
        raise typer.Exit(1)

    if dry_run:
        print_info(console, f"DRY RUN - {counts.get(ApplyStatus.WOULD_CHANGE, 0)} change(s) pending")
    else:
        print_success(console, f"{counts.get(ApplyStatus.CHANGED, 0)} change(s) applied")


def register_apply_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register the apply command with the main Typer app."""
    global console
    console = shared_console

    app.command(name="apply")(apply)
