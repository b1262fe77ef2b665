"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from purchasing.domain.model.purchase_order import (
    PurchaseOrder,
    PurchaseOrderLineItem,
    ReceiptRecord,
)


# --- Input -------------------------------------------------------------------


@dataclass(frozen=True)
class SourceOrderSelection:
    """Input: one quote or job picked for a purchase order."""

    kind: str  # "quote" | "job"
    id: str


@dataclass(frozen=True)
class LineReceivingSpec:
    """Input: what to receive on one PO line.

    ``line`` is a line item ID or its 1-based position on the PO.  Steps
    apply in order: quick-fill, fill-remaining, explicit sizes, assignment.
    ``assign_to`` takes an associated order ID or number, or "none" to clear.
    """

    line: str
    sizes: dict[str, int] = field(default_factory=dict)
    fill_remaining: bool = False
    quick_fill_from: str | None = None
    assign_to: str | None = None


# --- Output ------------------------------------------------------------------


@dataclass(frozen=True)
class AssociatedOrderDTO:
    kind: str
    id: str
    number: str
    customer_name: str
    sizes: str  # e.g. "M:10, L:10"


@dataclass(frozen=True)
class ReceiptDTO:
    received_date: str
    received_by: str
    sizes: str
    quantity: int
    assigned_to: str | None


@dataclass(frozen=True)
class PurchaseOrderLineDTO:
    """Output: a single consolidated line as displayed to the user."""

    id: str
    style_id: str
    style_name: str
    brand_name: str
    color_name: str
    sizes_ordered: str
    remaining: str
    quantity_ordered: int
    quantity_received: int
    unit_cost: str  # formatted, e.g. "$5.00"
    line_total: str
    associated_orders: list[AssociatedOrderDTO]
    receipts: list[ReceiptDTO]


@dataclass(frozen=True)
class PurchaseOrderDTO:
    """Output: a complete purchase order as displayed to the user."""

    id: str
    po_number: str
    supplier: str
    status: str
    order_date: str
    expected_delivery_date: str | None
    actual_delivery_date: str | None
    items: list[PurchaseOrderLineDTO]
    subtotal: str
    shipping: str
    tax: str
    total: str
    total_ordered: int
    total_received: int
    progress: int  # percent
    associated_order_count: int
    notes: str | None
    tracking: str | None
    received_by: str | None
    quality_issues: list[str]
    created_at: str
    updated_at: str


# --- Mapping -----------------------------------------------------------------


def purchase_order_to_dto(po: PurchaseOrder) -> PurchaseOrderDTO:
    return PurchaseOrderDTO(
        id=po.id,
        po_number=po.po_number,
        supplier=po.supplier_label,
        status=po.status.value,
        order_date=po.order_date.isoformat(),
        expected_delivery_date=_iso_or_none(po.expected_delivery_date),
        actual_delivery_date=_iso_or_none(po.actual_delivery_date),
        items=[_line_to_dto(item) for item in po.line_items],
        subtotal=str(po.subtotal),
        shipping=str(po.shipping),
        tax=str(po.tax),
        total=str(po.total),
        total_ordered=po.total_ordered,
        total_received=po.total_received,
        progress=po.receive_progress,
        associated_order_count=po.associated_order_count,
        notes=po.notes,
        tracking=po.tracking,
        received_by=po.received_by,
        quality_issues=list(po.quality_issues),
        created_at=po.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        updated_at=po.updated_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def _line_to_dto(item: PurchaseOrderLineItem) -> PurchaseOrderLineDTO:
    return PurchaseOrderLineDTO(
        id=item.id,
        style_id=item.style_id,
        style_name=item.style_name,
        brand_name=item.brand_name,
        color_name=item.color_name,
        sizes_ordered=str(item.sizes_ordered),
        remaining=str(item.remaining_sizes),
        quantity_ordered=item.quantity_ordered,
        quantity_received=item.quantity_received,
        unit_cost=str(item.unit_cost),
        line_total=str(item.line_total),
        associated_orders=[
            AssociatedOrderDTO(
                kind=order.kind.value,
                id=order.id,
                number=order.display_number,
                customer_name=order.customer_name,
                sizes=str(order.sizes),
            )
            for order in item.associated_orders
        ],
        receipts=[_receipt_to_dto(record) for record in item.received_items],
    )


def _receipt_to_dto(record: ReceiptRecord) -> ReceiptDTO:
    return ReceiptDTO(
        received_date=record.received_date.isoformat(),
        received_by=record.received_by,
        sizes=str(record.sizes),
        quantity=record.quantity,
        assigned_to=record.assigned_to.display_number if record.assigned_to else None,
    )


def _iso_or_none(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None
