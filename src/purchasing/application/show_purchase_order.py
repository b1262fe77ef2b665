"""Application service: Show Purchase Order use case (query)."""

from __future__ import annotations

from purchasing.application.dto import PurchaseOrderDTO, purchase_order_to_dto
from purchasing.domain.exceptions import EntityNotFoundError
from purchasing.domain.repository.purchase_order_repository import (
    PurchaseOrderRepository,
)


class ShowPurchaseOrderHandler:

    def __init__(self, po_repo: PurchaseOrderRepository) -> None:
        self._po_repo = po_repo

    def handle(self, po_id: str) -> PurchaseOrderDTO:
        purchase_order = self._po_repo.get_by_id(po_id)
        if purchase_order is None:
            raise EntityNotFoundError(f"Purchase order '{po_id}' not found")
        return purchase_order_to_dto(purchase_order)
