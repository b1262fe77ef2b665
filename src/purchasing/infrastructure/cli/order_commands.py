"""CLI commands for browsing the quotes/jobs available to purchasing."""

from __future__ import annotations

import click

from purchasing.application.list_source_orders import ListSourceOrdersHandler
from purchasing.infrastructure.bootstrap import source_order_repository
from purchasing.infrastructure.config import Config


@click.command("list")
@click.pass_obj
def orders_list(config: Config) -> None:
    """List quotes and jobs that can be put on a purchase order."""
    handler = ListSourceOrdersHandler(source_repo=source_order_repository(config))
    lines = handler.handle()

    if not lines:
        click.echo("No quotes or jobs found.")
        return

    click.echo(f"{'Kind':<6} {'ID':<14} {'Number':<12} {'Customer':<24} {'Lines':>6} {'Units':>6}")
    click.echo("-" * 73)
    for line in lines:
        click.echo(
            f"{line.kind:<6} {line.id:<14} {line.number:<12} {line.customer_name:<24} "
            f"{line.line_count:>6} {line.units:>6}"
        )
