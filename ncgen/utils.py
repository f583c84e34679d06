"""Shared console helpers for the Nextcloud Docker Generator.

Rich-based status messages, summary tables and the post-generation usage
instructions shown by the CLI.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_usage_instructions(script_name: str = "deploy.sh") -> None:
    """Explain how to run a generated script on the target server."""
    steps = "\n".join(
        [
            "1. Copy the script to your server",
            f"2. Save it to a file: [cyan]nano {script_name}[/cyan]",
            f"3. Make it executable: [cyan]chmod +x {script_name}[/cyan]",
            f"4. Run it: [cyan]./{script_name}[/cyan]",
        ]
    )
    console.print(Panel(steps, title="How to use", border_style="green"))


def write_raw(text: str) -> None:
    """Write *text* to stdout untouched (no markup, no wrapping)."""
    sys.stdout.write(text)
    sys.stdout.flush()
