"""Order commands — id issuing and order summaries."""

import sys

import click
from pydantic import ValidationError
from rich.console import Console

from cli.utils import get_components

console = Console()


@click.command("order-id")
@click.argument("kind", type=click.Choice(["preorder", "wholesale"]))
def order_id(kind: str):
    """Issue the next order id for today (PRE-MMDD-NNN / WHO-MMDD-NNN)."""
    c = get_components(skip_oracle=True)
    console.print(c["orders"].next_id(kind))


def _print_order(order, order_id: str):
    console.print(f"[bold]{order.title(order_id)}[/]")
    console.print(order.describe(order_id), markup=False)


@click.command()
@click.option("--customer", required=True, help="Customer name")
@click.option("--items", required=True, help="What was ordered")
@click.option("--paid", required=True, help="Payment status, e.g. 'paid in full'")
@click.option("--phone", default="", help="Contact number")
@click.option("--pickup", default="", help="Pickup date/time")
@click.option("--by", "submitted_by", default="", help="Staff member taking the order")
def preorder(customer, items, paid, phone, pickup, submitted_by):
    """Record a customer pre-order and print its summary."""
    from orders import Preorder

    try:
        order = Preorder(
            customer=customer,
            items=items,
            paid=paid,
            phone=phone,
            pickup=pickup,
            submitted_by=submitted_by,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid order:[/] {e}")
        sys.exit(1)

    c = get_components(skip_oracle=True)
    _print_order(order, c["orders"].next_id("preorder"))


@click.command()
@click.option("--business", required=True, help="Wholesale customer")
@click.option(
    "--kitchen",
    type=click.Choice(["TOVA", "LUMIERE", "BOTH"], case_sensitive=False),
    required=True,
)
@click.option("--delivery", required=True, help="Delivery date/time")
@click.option("--items", default="", help="Items (single kitchen)")
@click.option("--items-tova", default="", help="TOVA items (kitchen BOTH)")
@click.option("--items-lumiere", default="", help="LUMIERE items (kitchen BOTH)")
@click.option("--notes", default="")
@click.option("--by", "submitted_by", default="", help="Staff member taking the order")
def wholesale(business, kitchen, delivery, items, items_tova, items_lumiere, notes, submitted_by):
    """Record a wholesale order and print its summary."""
    from orders import WholesaleOrder

    try:
        order = WholesaleOrder(
            business=business,
            kitchen=kitchen.upper(),
            delivery=delivery,
            items=items,
            items_tova=items_tova,
            items_lumiere=items_lumiere,
            notes=notes,
            submitted_by=submitted_by,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid order:[/] {e}")
        sys.exit(1)

    c = get_components(skip_oracle=True)
    _print_order(order, c["orders"].next_id("wholesale"))
