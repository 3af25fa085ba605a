#!/usr/bin/env python3
"""optdl CLI - Declarative drive letters for optical disk drives."""

import typer
from rich.console import Console

from optdl.cli_apply_commands import register_apply_commands
from optdl.cli_resource_commands import register_resource_commands
from optdl.core.logger import get_logger

app = typer.Typer(
    name="optdl",
    help="""optdl - Declarative drive letters for optical disk drives

Optical disks are numbered from 1 in OS enumeration order. Drives that
expose a mounted ISO/VHD image are skipped and never renumbered in.

Quick start:
  optdl list                 # Which drives are managed
  optdl test 1 X             # Is disk 1 mounted as X:?
  optdl set 1 X              # Make it so
  optdl apply -c optdl.yml   # Converge everything in a config file
""",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

# Attach modular subcommands
register_resource_commands(app, console)
register_apply_commands(app, console)


def main():
    app()


if __name__ == "__main__":
    main()
