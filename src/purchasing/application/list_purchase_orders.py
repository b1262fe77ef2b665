"""Application service: List Purchase Orders use case (query).

Free-text search across PO number, supplier, styles and the customers
whose orders fed each PO, plus an optional status filter.
"""

from __future__ import annotations

from dataclasses import dataclass

from purchasing.application.dto import PurchaseOrderDTO, purchase_order_to_dto
from purchasing.domain.exceptions import ValidationError
from purchasing.domain.model.purchase_order import PurchaseOrder, PurchaseOrderStatus
from purchasing.domain.repository.purchase_order_repository import (
    PurchaseOrderRepository,
)

ALL_STATUSES = "all"


@dataclass(frozen=True)
class PurchaseOrderListDTO:
    purchase_orders: list[PurchaseOrderDTO]
    status_counts: dict[str, int]  # over every PO, ignoring filters


class ListPurchaseOrdersHandler:

    def __init__(self, po_repo: PurchaseOrderRepository) -> None:
        self._po_repo = po_repo

    def handle(self, search: str = "", status: str = ALL_STATUSES) -> PurchaseOrderListDTO:
        wanted = _parse_status(status)
        query = search.strip().lower()

        all_orders = self._po_repo.list_all()
        matching = [
            po
            for po in all_orders
            if (wanted is None or po.status == wanted) and _matches(po, query)
        ]

        counts = {ALL_STATUSES: len(all_orders)}
        for s in PurchaseOrderStatus:
            counts[s.value] = sum(1 for po in all_orders if po.status == s)

        return PurchaseOrderListDTO(
            purchase_orders=[purchase_order_to_dto(po) for po in matching],
            status_counts=counts,
        )


def _matches(po: PurchaseOrder, query: str) -> bool:
    if not query:
        return True
    haystack = [po.po_number, po.supplier_id, po.supplier_label]
    for item in po.line_items:
        haystack.extend([item.style_name, item.brand_name])
        for order in item.associated_orders:
            haystack.extend([order.display_number, order.customer_name])
    return any(query in text.lower() for text in haystack)


def _parse_status(raw: str | None) -> PurchaseOrderStatus | None:
    if raw is None or raw == ALL_STATUSES:
        return None
    try:
        return PurchaseOrderStatus(raw)
    except ValueError:
        choices = ", ".join([ALL_STATUSES] + [s.value for s in PurchaseOrderStatus])
        raise ValidationError(f"Unknown status '{raw}'. Expected one of: {choices}") from None
