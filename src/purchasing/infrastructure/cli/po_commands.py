"""CLI commands for the PurchaseOrder aggregate."""

from __future__ import annotations

from datetime import date, datetime, timezone

import click

from purchasing.application.cancel_purchase_order import CancelPurchaseOrderHandler
from purchasing.application.create_purchase_order import CreatePurchaseOrderHandler
from purchasing.application.dto import (
    LineReceivingSpec,
    PurchaseOrderDTO,
    SourceOrderSelection,
)
from purchasing.application.list_purchase_orders import ListPurchaseOrdersHandler
from purchasing.application.mark_ordered import MarkOrderedHandler
from purchasing.application.receive_inventory import ReceiveInventoryHandler
from purchasing.application.show_purchase_order import ShowPurchaseOrderHandler
from purchasing.application.update_purchase_order import UpdatePurchaseOrderHandler
from purchasing.domain.exceptions import DomainException
from purchasing.infrastructure.bootstrap import (
    id_generator,
    purchase_order_repository,
    reconciliation_committer,
    source_order_repository,
)
from purchasing.infrastructure.config import Config

DATE = click.DateTime(formats=["%Y-%m-%d"])


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_date(value: datetime | None) -> date | None:
    return value.date() if value is not None else None


# --- Parsing -----------------------------------------------------------------


def _parse_selections(raw: str) -> list[SourceOrderSelection]:
    """Parse 'quote:Q-1001,job:J-2002' into SourceOrderSelection list."""
    selections: list[SourceOrderSelection] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid order format '{pair}'. Expected 'quote:ID' or 'job:ID'."
            )
        kind, order_id = pair.split(":", 1)
        selections.append(SourceOrderSelection(kind=kind.strip(), id=order_id.strip()))
    return selections


def _split_line_ref(raw: str, expected: str) -> tuple[str, str]:
    if ":" not in raw:
        raise click.BadParameter(f"Invalid format '{raw}'. Expected '{expected}'.")
    line, rest = raw.split(":", 1)
    return line.strip(), rest.strip()


def _parse_sizes(raw: str) -> dict[str, int]:
    """Parse 'M=10,L=5' into {size: qty}."""
    sizes: dict[str, int] = {}
    for pair in raw.split(","):
        pair = pair.strip()
        if "=" not in pair:
            raise click.BadParameter(f"Invalid size format '{pair}'. Expected 'SIZE=QTY'.")
        size, qty_str = pair.split("=", 1)
        try:
            sizes[size.strip().upper()] = int(qty_str)
        except ValueError:
            raise click.BadParameter(f"Invalid quantity '{qty_str}' for size '{size}'.")
    return sizes


def _build_line_specs(
    line_sizes: tuple[str, ...],
    fill_remaining: tuple[str, ...],
    quick_fill: tuple[str, ...],
    assign: tuple[str, ...],
) -> list[LineReceivingSpec]:
    """Group the repeatable receiving options by line, in first-mentioned order."""
    specs: dict[str, dict] = {}

    def spec_for(line: str) -> dict:
        return specs.setdefault(line, {"line": line, "sizes": {}})

    for raw in quick_fill:
        line, order = _split_line_ref(raw, "LINE:ORDER")
        spec_for(line)["quick_fill_from"] = order
    for line in fill_remaining:
        spec_for(line.strip())["fill_remaining"] = True
    for raw in line_sizes:
        line, sizes = _split_line_ref(raw, "LINE:SIZE=QTY,...")
        spec_for(line)["sizes"].update(_parse_sizes(sizes))
    for raw in assign:
        line, order = _split_line_ref(raw, "LINE:ORDER")
        spec_for(line)["assign_to"] = order

    return [LineReceivingSpec(**fields) for fields in specs.values()]


# --- Display -----------------------------------------------------------------


def _display_po(dto: PurchaseOrderDTO) -> None:
    """Shared formatting for displaying a purchase order."""
    click.echo(f"{dto.po_number}  (status={dto.status})  id={dto.id}")
    click.echo(f"Supplier: {dto.supplier}")
    click.echo(f"Ordered:  {dto.order_date}")
    if dto.expected_delivery_date:
        click.echo(f"Expected: {dto.expected_delivery_date}")
    if dto.actual_delivery_date:
        click.echo(f"Received: {dto.actual_delivery_date} by {dto.received_by}")
    if dto.tracking:
        click.echo(f"Tracking: {dto.tracking}")
    click.echo(
        f"Progress: {dto.total_received} / {dto.total_ordered} units ({dto.progress}%)"
        f" from {dto.associated_order_count} order(s)"
    )
    click.echo()

    click.echo(f"  {'#':<3} {'Style':<24} {'Color':<10} {'Ordered':>8} {'Recv':>6} {'Cost':>8} {'Total':>10}")
    click.echo(f"  {'-'*75}")
    for n, item in enumerate(dto.items, start=1):
        click.echo(
            f"  {n:<3} {item.style_name:<24} {item.color_name:<10} "
            f"{item.quantity_ordered:>8} {item.quantity_received:>6} "
            f"{item.unit_cost:>8} {item.line_total:>10}"
        )
        click.echo(f"      sizes: {item.sizes_ordered}   remaining: {item.remaining}")
        for order in item.associated_orders:
            click.echo(f"      <- {order.kind} {order.number} ({order.customer_name}): {order.sizes}")
        for receipt in item.receipts:
            target = f" -> {receipt.assigned_to}" if receipt.assigned_to else ""
            click.echo(
                f"      received {receipt.received_date} by {receipt.received_by}: "
                f"{receipt.sizes}{target}"
            )
    click.echo(f"  {'-'*75}")
    click.echo(f"  {'Subtotal':<27} {dto.subtotal:>47}")
    click.echo(f"  {'Shipping':<27} {dto.shipping:>47}")
    click.echo(f"  {'Tax':<27} {dto.tax:>47}")
    click.echo(f"  {'Total':<27} {dto.total:>47}")

    if dto.notes:
        click.echo()
        click.echo(f"Notes: {dto.notes}")
    for issue in dto.quality_issues:
        click.echo(f"Issue: {issue}")


# --- Commands ----------------------------------------------------------------


@click.command("create")
@click.option("--orders", required=True, help="Quotes/jobs as 'quote:ID,job:ID'.")
@click.option("--supplier", default=None, help="Supplier ID (e.g. ssactivewear, sanmar).")
@click.option("--order-date", type=DATE, default=None, help="Order date (default today).")
@click.option("--expected-delivery", type=DATE, default=None, help="Expected delivery date.")
@click.option("--shipping", default="0", help="Shipping amount (e.g. 12.50).")
@click.option("--tax", default="0", help="Tax amount.")
@click.option("--notes", default=None, help="Free-form notes.")
@click.option("--tracking", default=None, help="Tracking number.")
@click.pass_obj
def po_create(
    config: Config,
    orders: str,
    supplier: str | None,
    order_date: datetime | None,
    expected_delivery: datetime | None,
    shipping: str,
    tax: str,
    notes: str | None,
    tracking: str | None,
) -> None:
    """Consolidate quotes/jobs into a new draft purchase order."""
    selections = _parse_selections(orders)
    now = _now()

    handler = CreatePurchaseOrderHandler(
        po_repo=purchase_order_repository(config),
        source_repo=source_order_repository(config),
        id_generator=id_generator(),
    )

    try:
        dto = handler.handle(
            selections,
            supplier_id=supplier or config.default_supplier,
            order_date=_as_date(order_date) or now.date(),
            now=now,
            expected_delivery_date=_as_date(expected_delivery),
            shipping=shipping,
            tax=tax,
            notes=notes,
            tracking=tracking,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase Order {dto.po_number} created")
    click.echo()
    _display_po(dto)


@click.command("show")
@click.option("--id", "po_id", required=True, help="PO ID or PO number.")
@click.pass_obj
def po_show(config: Config, po_id: str) -> None:
    """Show a purchase order with its receiving history."""
    handler = ShowPurchaseOrderHandler(po_repo=purchase_order_repository(config))

    try:
        dto = handler.handle(po_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_po(dto)


@click.command("list")
@click.option("--status", default="all", help="Filter by status (draft, ordered, ...).")
@click.option("--search", default="", help="Search PO number, supplier, style or customer.")
@click.pass_obj
def po_list(config: Config, status: str, search: str) -> None:
    """List purchase orders."""
    handler = ListPurchaseOrdersHandler(po_repo=purchase_order_repository(config))

    try:
        result = handler.handle(search=search, status=status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("  ".join(f"{name} ({count})" for name, count in result.status_counts.items()))
    click.echo()

    if not result.purchase_orders:
        click.echo("No purchase orders found.")
        return

    click.echo(f"{'PO':<14} {'Supplier':<16} {'Status':<20} {'Units':>11} {'Total':>12}")
    click.echo("-" * 77)
    for dto in result.purchase_orders:
        units = f"{dto.total_received}/{dto.total_ordered}"
        click.echo(f"{dto.po_number:<14} {dto.supplier:<16} {dto.status:<20} {units:>11} {dto.total:>12}")


@click.command("mark-ordered")
@click.option("--id", "po_id", required=True, help="PO ID or PO number.")
@click.option("--tracking", default=None, help="Tracking number from the supplier.")
@click.pass_obj
def po_mark_ordered(config: Config, po_id: str, tracking: str | None) -> None:
    """Mark a draft purchase order as sent to the supplier."""
    handler = MarkOrderedHandler(po_repo=purchase_order_repository(config))

    try:
        handler.handle(po_id, now=_now(), tracking=tracking)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase order {po_id} marked as ordered.")


@click.command("update")
@click.option("--id", "po_id", required=True, help="PO ID or PO number.")
@click.option("--notes", default=None, help="Replace the notes (empty string clears them).")
@click.option("--tracking", default=None, help="Replace the tracking number.")
@click.option("--expected-delivery", type=DATE, default=None, help="New expected delivery date.")
@click.pass_obj
def po_update(
    config: Config,
    po_id: str,
    notes: str | None,
    tracking: str | None,
    expected_delivery: datetime | None,
) -> None:
    """Edit the notes, tracking number or expected delivery of a purchase order."""
    handler = UpdatePurchaseOrderHandler(po_repo=purchase_order_repository(config))

    try:
        dto = handler.handle(
            po_id,
            now=_now(),
            notes=notes,
            tracking=tracking,
            expected_delivery_date=_as_date(expected_delivery),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase order {dto.po_number} updated.")
    click.echo()
    _display_po(dto)


@click.command("cancel")
@click.option("--id", "po_id", required=True, help="PO ID or PO number.")
@click.pass_obj
def po_cancel(config: Config, po_id: str) -> None:
    """Cancel a purchase order (receipts already recorded are kept)."""
    handler = CancelPurchaseOrderHandler(po_repo=purchase_order_repository(config))

    try:
        handler.handle(po_id, now=_now())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Purchase order {po_id} cancelled.")


@click.command("receive")
@click.option("--id", "po_id", required=True, help="PO ID or PO number.")
@click.option("--received-by", required=True, help="Who received the delivery.")
@click.option("--date", "received_date", type=DATE, default=None, help="Delivery date (default today).")
@click.option("--line", "line_sizes", multiple=True, help="Quantities as 'LINE:M=10,L=5'.")
@click.option("--fill-remaining", multiple=True, help="Receive everything outstanding on LINE.")
@click.option("--quick-fill", multiple=True, help="Receive what ORDER asked for on a line: 'LINE:ORDER'.")
@click.option("--assign", multiple=True, help="Set a line aside for an order: 'LINE:ORDER' or 'LINE:none'.")
@click.option("--accuracy", type=int, default=None, help="Order accuracy rating, 0-100.")
@click.option("--delivery-rating", type=int, default=None, help="Delivery rating, 1-5.")
@click.option("--issue", "issues", multiple=True, help="Quality issue (repeatable).")
@click.pass_obj
def po_receive(
    config: Config,
    po_id: str,
    received_by: str,
    received_date: datetime | None,
    line_sizes: tuple[str, ...],
    fill_remaining: tuple[str, ...],
    quick_fill: tuple[str, ...],
    assign: tuple[str, ...],
    accuracy: int | None,
    delivery_rating: int | None,
    issues: tuple[str, ...],
) -> None:
    """Receive inventory against a purchase order.

    LINE is a line ID or the line's number as shown by 'po show'.
    """
    specs = _build_line_specs(line_sizes, fill_remaining, quick_fill, assign)
    now = _now()

    handler = ReceiveInventoryHandler(
        po_repo=purchase_order_repository(config),
        committer=reconciliation_committer(config),
    )

    try:
        dto = handler.handle(
            po_id,
            specs,
            received_by=received_by,
            received_date=_as_date(received_date) or now.date(),
            now=now,
            accuracy_rating=accuracy,
            delivery_rating=delivery_rating,
            quality_issues=list(issues) if issues else None,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory received for PO {dto.po_number} (status={dto.status})")
    click.echo(f"Progress: {dto.total_received} / {dto.total_ordered} units ({dto.progress}%)")
