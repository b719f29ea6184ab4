"""Reminder commands — due check for an external scheduler, listing."""

import click
from rich.console import Console
from rich.table import Table

from cli.utils import get_components

console = Console()


@click.group()
def reminders():
    """Reminders requested in chat."""
    pass


@reminders.command("due")
def reminders_due():
    """Print reminders that are due now and mark them done.

    Meant to be run periodically (cron, systemd timer); nothing runs in the background.
    """
    from inventory.assistant import format_reminders

    c = get_components(skip_oracle=True)
    due = c["engine"].due_reminders()
    if not due:
        console.print("[dim]No reminders due.[/]")
        return
    for line in format_reminders(due):
        console.print(line, markup=False)


@reminders.command("list")
@click.option("--user", "-u", "requester_id", default=None, help="Only this requester")
def reminders_list(requester_id: str | None):
    """List open reminders."""
    c = get_components(skip_oracle=True)
    open_reminders = c["engine"].open_reminders(requester_id)
    if not open_reminders:
        console.print("[dim]No open reminders.[/]")
        return

    table = Table(show_header=True)
    table.add_column("Id", style="dim")
    table.add_column("For", style="cyan")
    table.add_column("When", style="green")
    table.add_column("Text")
    table.add_column("Created", style="dim")
    for r in open_reminders:
        table.add_row(r.id, r.requester_id, r.when, r.text, f"{r.created_at:%Y-%m-%d %H:%M}")
    console.print(table)
