"""Resource CLI commands - get, test, set, list."""
import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from optdl.core.errors import OptdlError
from optdl.models.disk import DiagnosticSeverity

# Module-level console instance (will be set by register function)
console: Console = Console()

# Exit code for `optdl test` when the disk is not in the desired state
EXIT_NOT_IN_DESIRED_STATE = 2


def get(
    disk_id: str = typer.Argument(..., help="1-based optical disk number"),
    drive_letter: Optional[str] = typer.Option(None, "--drive-letter", "-d", help="Drive letter (validated only)"),
    as_json: bool = typer.Option(False, "--json", help="Print state as JSON"),
    mock: bool = typer.Option(False, "--mock", help="Use the mock host instead of the OS"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Show the current drive letter state of an optical disk."""
    from optdl.cli_support import build_resource, handle_cli_error, print_warning, setup_file_logging

    setup_file_logging(log_file=log_file, verbose=verbose)

    try:
        state = build_resource(mock=mock).get_state(disk_id, drive_letter)
    except (OptdlError, FileNotFoundError) as e:
        handle_cli_error(e, console, verbose)
        return

    if as_json:
        console.print_json(json.dumps(state.to_dict()))
        return

    table = Table(title=f"Optical disk {state.disk_id}", show_header=True, header_style="bold cyan")
    table.add_column("Disk")
    table.add_column("Drive letter")
    table.add_column("Ensure")
    ensure_style = "green" if state.drive_letter else "yellow"
    table.add_row(
        state.disk_id,
        state.drive_letter or "[dim]-[/dim]",
        f"[{ensure_style}]{state.ensure.value}[/{ensure_style}]",
    )
    console.print(table)

    for diagnostic in state.diagnostics:
        if diagnostic.severity == DiagnosticSeverity.WARNING:
            print_warning(console, diagnostic.message)


def check_state(
    disk_id: str = typer.Argument(..., help="1-based optical disk number"),
    drive_letter: str = typer.Argument(..., help="Desired drive letter, e.g. X or X:"),
    ensure: str = typer.Option("Present", "--ensure", "-e", help="Present or Absent"),
    mock: bool = typer.Option(False, "--mock", help="Use the mock host instead of the OS"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Check whether an optical disk is in the desired state.

    Exits 0 when in the desired state, 2 when a change is needed, 1 on error.
    """
    from optdl.cli_support import (
        build_resource,
        handle_cli_error,
        print_success,
        print_warning,
        setup_file_logging,
    )

    setup_file_logging(log_file=log_file, verbose=verbose)

    try:
        in_state = build_resource(mock=mock).test_state(disk_id, drive_letter, ensure)
    except (OptdlError, FileNotFoundError) as e:
        handle_cli_error(e, console, verbose)
        return

    if in_state:
        print_success(console, f"Optical disk {disk_id} is in the desired state")
        return

    print_warning(console, f"Optical disk {disk_id} is not in the desired state")
    raise typer.Exit(EXIT_NOT_IN_DESIRED_STATE)


def set_(
    disk_id: str = typer.Argument(..., help="1-based optical disk number"),
    drive_letter: str = typer.Argument(..., help="Desired drive letter, e.g. X or X:"),
    ensure: str = typer.Option("Present", "--ensure", "-e", help="Present or Absent"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    mock: bool = typer.Option(False, "--mock", help="Use the mock host instead of the OS"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Converge an optical disk to the desired drive letter state.

    Runs the same checks as `optdl test` first, so a missing disk or a
    letter owned by another volume is reported before anything changes.
    """
    from optdl.cli_support import (
        build_resource,
        confirm_action,
        handle_cli_error,
        is_mock,
        print_info,
        print_success,
        setup_file_logging,
    )

    setup_file_logging(log_file=log_file, verbose=verbose)

    try:
        resource = build_resource(mock=mock)
        if resource.test_state(disk_id, drive_letter, ensure):
            print_info(console, f"Optical disk {disk_id} is already in the desired state")
            return

        action = (
            f"remove the drive letter of optical disk {disk_id}"
            if ensure.strip().lower() == "absent"
            else f"assign drive letter {drive_letter.upper().rstrip(':')}: to optical disk {disk_id}"
        )
        if not confirm_action(f"About to {action}. Continue?", yes_flag=yes, mock=mock or is_mock()):
            print_info(console, "Cancelled")
            raise typer.Exit(1)

        resource.set_state(disk_id, drive_letter, ensure)
    except (OptdlError, FileNotFoundError) as e:
        handle_cli_error(e, console, verbose)
        return

    print_success(console, f"Applied: {action}")


def list_drives(
    mock: bool = typer.Option(False, "--mock", help="Use the mock host instead of the OS"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """List optical drives and whether optdl manages them."""
    from optdl.cli_support import build_resource, handle_cli_error, print_info, setup_file_logging

    setup_file_logging(log_file=log_file, verbose=verbose)

    try:
        decisions = build_resource(mock=mock).list_drives()
    except (OptdlError, FileNotFoundError) as e:
        handle_cli_error(e, console, verbose)
        return

    if not decisions:
        print_info(console, "No optical drives found")
        return

    reasons = {
        "mounted-image": "mounted disk image",
        "volume-not-found": "no volume found",
    }

    table = Table(title="Optical drives", show_header=True, header_style="bold cyan")
    table.add_column("Disk id", justify="right")
    table.add_column("Drive", overflow="fold")
    table.add_column("Caption", overflow="fold")
    table.add_column("Managed")

    disk_number = 0
    for decision in decisions:
        if decision.manageable:
            disk_number += 1
            managed = "[green]yes[/green]"
            disk_label = str(disk_number)
        else:
            managed = f"[yellow]no[/yellow] ({reasons.get(decision.reason, decision.reason)})"
            disk_label = "-"
        table.add_row(disk_label, decision.record.drive, decision.record.caption, managed)

    console.print(table)


def register_resource_commands(app: typer.Typer, shared_console: Console) -> None:
    """Register resource commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command(name="get")(get)
    app.command(name="test")(check_state)
    app.command(name="set")(set_)
    app.command(name="list")(list_drives)
