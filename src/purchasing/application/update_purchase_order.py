"""Application service: Update Purchase Order details use case.

Only the free-form fields change here (notes, tracking number, expected
delivery date).  Lines, costs and the receipt ledger are never edited.
"""

from __future__ import annotations

from datetime import date, datetime

from purchasing.application.dto import PurchaseOrderDTO, purchase_order_to_dto
from purchasing.domain.exceptions import EntityNotFoundError, ValidationError
from purchasing.domain.repository.purchase_order_repository import (
    PurchaseOrderRepository,
)


class UpdatePurchaseOrderHandler:

    def __init__(self, po_repo: PurchaseOrderRepository) -> None:
        self._po_repo = po_repo

    def handle(
        self,
        po_id: str,
        now: datetime,
        notes: str | None = None,
        tracking: str | None = None,
        expected_delivery_date: date | None = None,
    ) -> PurchaseOrderDTO:
        if notes is None and tracking is None and expected_delivery_date is None:
            raise ValidationError("Nothing to update: give notes, tracking or an expected delivery date")

        purchase_order = self._po_repo.get_by_id(po_id)
        if purchase_order is None:
            raise EntityNotFoundError(f"Purchase order '{po_id}' not found")

        purchase_order.update_details(
            now,
            notes=notes,
            tracking=tracking,
            expected_delivery_date=expected_delivery_date,
        )
        self._po_repo.save(purchase_order)
        return purchase_order_to_dto(purchase_order)
