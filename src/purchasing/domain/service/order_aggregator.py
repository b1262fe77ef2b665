"""Domain service: Order Aggregator.

Turns a selection of customer quotes/jobs into one supplier purchase
order.  Source line items that share a consolidation key (style name +
color) merge into a single PO line; every contributing line keeps its
own associated-order snapshot so receipts can be traced back to the
customer who asked for them.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from purchasing.domain.exceptions import EmptySelectionError
from purchasing.domain.model.purchase_order import (
    AssociatedOrderRef,
    PurchaseOrder,
    PurchaseOrderLineItem,
    PurchaseOrderStatus,
)
from purchasing.domain.model.source_order import SourceLineItem, SourceOrder
from purchasing.domain.model.value_objects import Money
from purchasing.domain.service.id_generator import IdGenerator

logger = logging.getLogger(__name__)

UNKNOWN_STYLE_ID = "UNKNOWN"


def derive_style_id(style_name: str) -> str:
    """Guess a supplier style ID from the first word of the style name.

    "Gildan G500 Heavy Cotton" -> "Gildan".  Styles sharing a first word
    collide; swap this for a catalog SKU lookup once one is available.
    """
    tokens = style_name.split()
    return tokens[0] if tokens else UNKNOWN_STYLE_ID


def po_number_for(now: datetime) -> str:
    """``PO-`` followed by the last 8 digits of the epoch milliseconds."""
    millis = int(now.timestamp() * 1000)
    return f"PO-{str(millis)[-8:]}"


class OrderAggregator:

    def __init__(self, id_generator: IdGenerator) -> None:
        self._ids = id_generator

    def consolidate(
        self,
        source_orders: list[SourceOrder],
        supplier_id: str,
        order_date: date,
        now: datetime,
        expected_delivery_date: date | None = None,
        shipping: Money | None = None,
        tax: Money | None = None,
        notes: str | None = None,
        tracking: str | None = None,
    ) -> PurchaseOrder:
        """Build a draft PurchaseOrder from the selected quotes/jobs."""
        if not source_orders:
            raise EmptySelectionError("Select at least one quote or job")

        line_items = self.consolidate_line_items(source_orders, supplier_id)

        purchase_order = PurchaseOrder(
            id=self._ids.next("po"),
            po_number=po_number_for(now),
            supplier_id=supplier_id,
            order_date=order_date,
            line_items=line_items,
            created_at=now,
            updated_at=now,
            status=PurchaseOrderStatus.DRAFT,
            shipping=shipping or Money.zero(),
            tax=tax or Money.zero(),
            expected_delivery_date=expected_delivery_date,
            notes=(notes or "").strip() or None,
            tracking=(tracking or "").strip() or None,
        )
        logger.info(
            "Consolidated %d order(s) into %s: %d line(s), %d unit(s), total %s",
            len(source_orders),
            purchase_order.po_number,
            len(line_items),
            purchase_order.total_ordered,
            purchase_order.total,
        )
        return purchase_order

    def consolidate_line_items(
        self,
        source_orders: list[SourceOrder],
        supplier_id: str,
    ) -> list[PurchaseOrderLineItem]:
        """Merge source line items by consolidation key, in first-seen order."""
        by_key: dict[tuple[str, str], PurchaseOrderLineItem] = {}

        for order in source_orders:
            for source_item in order.line_items:
                key = source_item.consolidation_key
                snapshot = self._snapshot(order, source_item)

                existing = by_key.get(key)
                if existing is None:
                    by_key[key] = self._new_line_item(source_item, supplier_id, snapshot)
                    continue

                existing.sizes_ordered = existing.sizes_ordered + source_item.sizes
                existing.associated_orders.append(snapshot)
                logger.debug(
                    "Merged %s %s into line %s (%d unit(s) now)",
                    order.kind.value,
                    order.display_number,
                    existing.id,
                    existing.quantity_ordered,
                )

        return list(by_key.values())

    # --- Internal helpers -----------------------------------------------------

    def _new_line_item(
        self,
        source_item: SourceLineItem,
        supplier_id: str,
        snapshot: AssociatedOrderRef,
    ) -> PurchaseOrderLineItem:
        style_name, color_name = source_item.consolidation_key
        return PurchaseOrderLineItem(
            id=self._ids.next("poli"),
            supplier_id=supplier_id,
            style_id=derive_style_id(style_name),
            style_name=style_name,
            brand_name=source_item.brand_or_type_label.upper(),
            color_name=color_name,
            sizes_ordered=source_item.sizes,
            unit_cost=source_item.unit_price,  # first contributor's price
            associated_orders=[snapshot],
        )

    @staticmethod
    def _snapshot(order: SourceOrder, source_item: SourceLineItem) -> AssociatedOrderRef:
        return AssociatedOrderRef(
            kind=order.kind,
            id=order.id,
            display_number=order.display_number,
            customer_name=order.customer_name,
            sizes=source_item.sizes,
        )
