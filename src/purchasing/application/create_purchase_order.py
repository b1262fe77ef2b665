"""Application service: Create Purchase Order use case.

Resolves the selected quotes/jobs, lets the OrderAggregator consolidate
them, and persists the resulting draft purchase order.
"""

from __future__ import annotations

from datetime import date, datetime

from purchasing.application.dto import (
    PurchaseOrderDTO,
    SourceOrderSelection,
    purchase_order_to_dto,
)
from purchasing.domain.exceptions import (
    EmptySelectionError,
    EntityNotFoundError,
    ValidationError,
)
from purchasing.domain.model.source_order import OrderKind, SourceOrder
from purchasing.domain.model.value_objects import Money
from purchasing.domain.repository.purchase_order_repository import (
    PurchaseOrderRepository,
)
from purchasing.domain.repository.source_order_repository import (
    SourceOrderRepository,
)
from purchasing.domain.service.id_generator import IdGenerator
from purchasing.domain.service.order_aggregator import OrderAggregator


class CreatePurchaseOrderHandler:

    def __init__(
        self,
        po_repo: PurchaseOrderRepository,
        source_repo: SourceOrderRepository,
        id_generator: IdGenerator,
    ) -> None:
        self._po_repo = po_repo
        self._source_repo = source_repo
        self._aggregator = OrderAggregator(id_generator)

    def handle(
        self,
        selections: list[SourceOrderSelection],
        supplier_id: str,
        order_date: date,
        now: datetime,
        expected_delivery_date: date | None = None,
        shipping: str = "0",
        tax: str = "0",
        notes: str | None = None,
        tracking: str | None = None,
    ) -> PurchaseOrderDTO:
        """Create a draft purchase order.

        Steps:
        1. Resolve each selection to a quote/job (fail if not found).
        2. Let the aggregator merge line items and build the order.
        3. Persist and return a DTO.
        """
        if not selections:
            raise EmptySelectionError("Select at least one quote or job")
        if not supplier_id or not supplier_id.strip():
            raise ValidationError("Supplier is required")

        source_orders = self._resolve(selections)

        purchase_order = self._aggregator.consolidate(
            source_orders,
            supplier_id=supplier_id.strip(),
            order_date=order_date,
            now=now,
            expected_delivery_date=expected_delivery_date,
            shipping=Money.of(shipping),
            tax=Money.of(tax),
            notes=notes,
            tracking=tracking,
        )
        self._po_repo.save(purchase_order)
        return purchase_order_to_dto(purchase_order)

    def _resolve(self, selections: list[SourceOrderSelection]) -> list[SourceOrder]:
        """Look up each selection once, keeping selection order."""
        seen: set[tuple[OrderKind, str]] = set()
        orders: list[SourceOrder] = []
        for selection in selections:
            kind = _parse_kind(selection.kind)
            if (kind, selection.id) in seen:
                continue
            seen.add((kind, selection.id))

            order = self._source_repo.get(kind, selection.id)
            if order is None:
                raise EntityNotFoundError(f"{kind.value.capitalize()} '{selection.id}' not found")
            orders.append(order)
        return orders


def _parse_kind(raw: str) -> OrderKind:
    try:
        return OrderKind(raw.strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown order kind '{raw}'. Expected 'quote' or 'job'.") from None
