import logging

import click

from purchasing.infrastructure.cli.order_commands import orders_list
from purchasing.infrastructure.cli.po_commands import (
    po_cancel,
    po_create,
    po_list,
    po_mark_ordered,
    po_receive,
    po_show,
    po_update,
)
from purchasing.infrastructure.cli.supplier_commands import supplier_performance
from purchasing.infrastructure.config import Config


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Purchasing: consolidate garment orders and receive deliveries"""
    _setup_logging(verbose)
    if ctx.obj is None:
        ctx.obj = Config()


@cli.group()
def po() -> None:
    """Manage purchase orders."""


@cli.group()
def orders() -> None:
    """Browse quotes and jobs."""


@cli.group()
def supplier() -> None:
    """Supplier reports."""


# Register subcommands
po.add_command(po_cancel)
po.add_command(po_create)
po.add_command(po_list)
po.add_command(po_mark_ordered)
po.add_command(po_receive)
po.add_command(po_show)
po.add_command(po_update)
orders.add_command(orders_list)
supplier.add_command(supplier_performance)
