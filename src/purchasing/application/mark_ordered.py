"""Application service: Mark Ordered use case (PO sent to the supplier)."""

from __future__ import annotations

from datetime import datetime

from purchasing.domain.exceptions import EntityNotFoundError
from purchasing.domain.repository.purchase_order_repository import (
    PurchaseOrderRepository,
)


class MarkOrderedHandler:

    def __init__(self, po_repo: PurchaseOrderRepository) -> None:
        self._po_repo = po_repo

    def handle(self, po_id: str, now: datetime, tracking: str | None = None) -> None:
        purchase_order = self._po_repo.get_by_id(po_id)
        if purchase_order is None:
            raise EntityNotFoundError(f"Purchase order '{po_id}' not found")

        purchase_order.mark_ordered(now)
        if tracking is not None:
            purchase_order.update_details(now, tracking=tracking)
        self._po_repo.save(purchase_order)
