"""Inventory commands — message, status, predict, clarifications."""

import sys

import click
from rich.console import Console
from rich.table import Table

from cli.utils import get_components

console = Console()


@click.command()
@click.argument("text")
@click.option("--user", "-u", "requester_id", default="cli", help="Requester id")
def message(text: str, requester_id: str):
    """Process one chat message as if it was posted in the supply channel."""
    c = get_components()

    with console.status("Thinking..."):
        reply = c["assistant"].process_message(text, requester_id)

    if reply is None:
        console.print("[dim](no reply)[/]")
        return
    console.print(reply, markup=False)


@click.command()
def status():
    """Show the current inventory report."""
    from inventory import ReconciliationError

    c = get_components(skip_oracle=True)
    try:
        doc = c["engine"].load_inventory()
    except ReconciliationError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)
    max_predictions = c["config"].inventory.max_predictions
    console.print(c["reporter"].render(doc, max_predictions=max_predictions), markup=False)


@click.command()
def predict():
    """List items due for restocking based on history."""
    from inventory import ReconciliationError

    c = get_components(skip_oracle=True)
    try:
        doc = c["engine"].load_inventory()
    except ReconciliationError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    due = c["reporter"].predictions(doc)
    if not due:
        console.print("[green]Nothing due for restocking.[/]")
        return

    table = Table(show_header=True, title="Restock predictions")
    table.add_column("Item", style="cyan")
    table.add_column("Every ~days", justify="right")
    table.add_column("Since last", justify="right")
    table.add_column("Urgent")
    for p in due:
        table.add_row(
            p.item,
            str(p.avg_interval_days),
            str(p.days_since_last_restock),
            "[red]yes[/]" if p.urgent else "[yellow]soon[/]",
        )
    console.print(table)


@click.group()
def clarifications():
    """Inspect or clear open clarification questions."""
    pass


@clarifications.command("show")
@click.option("--user", "-u", "requester_id", required=True, help="Requester id")
def clarifications_show(requester_id: str):
    """Show the open question for a requester."""
    c = get_components(skip_oracle=True)
    pending = c["engine"].pending_clarification(requester_id)
    if not pending:
        console.print("[green]No open question.[/]")
        return
    console.print(f"[bold]{pending.question}[/]")
    console.print(f"[dim]Asked about '{pending.raw_phrase}' at {pending.created_at:%Y-%m-%d %H:%M}[/]")
    for option in pending.options:
        console.print(f"  • {option}")


@clarifications.command("clear")
@click.option("--user", "-u", "requester_id", required=True, help="Requester id")
def clarifications_clear(requester_id: str):
    """Drop the open question for a requester."""
    c = get_components(skip_oracle=True)
    removed = c["engine"].resolve_clarification(requester_id)
    if removed:
        console.print(f"[green]Cleared:[/] {removed.question}")
    else:
        console.print("[yellow]Nothing to clear.[/]")
