"""CLI commands for supplier reporting."""

from __future__ import annotations

from datetime import date, timedelta

import click

from purchasing.application.supplier_report import SupplierPerformanceHandler
from purchasing.domain.exceptions import DomainException
from purchasing.domain.service.supplier_performance import COMBINED
from purchasing.infrastructure.bootstrap import purchase_order_repository
from purchasing.infrastructure.config import Config


@click.command("performance")
@click.option("--supplier", default=COMBINED, help="Supplier ID (default: all suppliers).")
@click.option(
    "--days",
    type=click.IntRange(min=1),
    default=None,
    help="Only orders placed in the last N days (default: all time).",
)
@click.pass_obj
def supplier_performance(config: Config, supplier: str, days: int | None) -> None:
    """Show delivery, accuracy and spend metrics for sent purchase orders."""
    handler = SupplierPerformanceHandler(po_repo=purchase_order_repository(config))
    since = date.today() - timedelta(days=days) if days else None

    try:
        dto = handler.handle(supplier, since=since)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    period = f"last {days} day(s)" if days else "all time"
    click.echo(f"Supplier:          {dto.supplier} ({period})")
    click.echo(f"Orders:            {dto.total_orders}")
    click.echo(f"Avg delivery:      {dto.avg_delivery_days} day(s)")
    click.echo(f"On-time rate:      {dto.on_time_rate}%")
    click.echo(f"Avg accuracy:      {dto.avg_accuracy}%")
    click.echo(f"Total spent:       {dto.total_spent}")
    click.echo(f"Avg order value:   {dto.avg_order_value}")
    click.echo(f"Quality issues:    {dto.issue_count}")
    for issue in dto.recent_issues:
        click.echo(f"  - {issue}")
