"""Console rendering of resolved arguments and outcome panels."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from winsvc_installer.cli.arguments import InstallerArguments

logger = logging.getLogger(__name__)


def argument_rows(args: InstallerArguments) -> list[tuple[str, str]]:
    operation = args.operation.value if args.operation is not None else ""
    return [
        ("ServiceName", args.service_name),
        ("DisplayName", args.display_name),
        ("FilePath", args.file_path),
        ("Description", args.description),
        ("Operation", operation),
    ]


def build_argument_table(args: InstallerArguments) -> Table:
    """Property/value table of the arguments that will be used."""
    table = Table(title="Arguments", show_header=True, header_style="bold")
    table.add_column("Property", style="bold green")
    table.add_column("Value")
    for name, value in argument_rows(args):
        table.add_row(name, value or "[dim]-[/dim]")
    return table


def log_argument_values(args: InstallerArguments) -> None:
    logger.info("The following arguments have been provided:")
    for name, value in argument_rows(args):
        logger.info("'%s' is set to '%s'.", name, value)


def elevation_declined_panel() -> Panel:
    return Panel(
        "[bold yellow]Administrator privileges are required.[/bold yellow]\n\n"
        "Confirm the elevation prompt, pass [cyan]--yes[/cyan], or open a terminal\n"
        "as Administrator and run the command again.",
        title="[bold yellow]Admin Required[/bold yellow]",
        border_style="yellow",
        padding=(1, 2),
    )


def relaunch_failed_panel() -> Panel:
    return Panel(
        "[bold red]Could not start the elevated process.[/bold red]\n\n"
        "The elevation request was rejected or the child could not be awaited.\n"
        "See the log for details.",
        title="[bold red]Elevation Failed[/bold red]",
        border_style="red",
        padding=(1, 2),
    )
