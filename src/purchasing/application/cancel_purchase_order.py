"""Application service: Cancel Purchase Order use case.

Cancelling is terminal.  Receipts already on the ledger are kept as a
historical record; no further receiving is accepted.
"""

from __future__ import annotations

from datetime import datetime

from purchasing.domain.exceptions import EntityNotFoundError
from purchasing.domain.repository.purchase_order_repository import (
    PurchaseOrderRepository,
)


class CancelPurchaseOrderHandler:

    def __init__(self, po_repo: PurchaseOrderRepository) -> None:
        self._po_repo = po_repo

    def handle(self, po_id: str, now: datetime) -> None:
        purchase_order = self._po_repo.get_by_id(po_id)
        if purchase_order is None:
            raise EntityNotFoundError(f"Purchase order '{po_id}' not found")

        purchase_order.cancel(now)
        self._po_repo.save(purchase_order)
